"""Per-request viewer identity.

The browser keeps three cookies: the serialized user record, the bare user
id sent to the backend as ``X-User-Id``, and the pact the user last joined.
Every route receives either an ``Identity`` or an ``Anonymous`` value and
passes it down to the backend client explicitly.
"""
import base64
import json
import logging
from dataclasses import dataclass

from fastapi import Depends, Request, Response
from pydantic import ValidationError

from pactweb.core.config import settings
from pactweb.schemas.user import User

logger = logging.getLogger("pactweb.identity")

COOKIE_USER = "user"
COOKIE_USER_ID = "userId"
COOKIE_CURRENT_PACT_ID = "currentPactId"
LOGIN_PATH = "/login"


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: str
    user: User | None = None
    current_pact_id: str | None = None


@dataclass(frozen=True, slots=True)
class Anonymous:
    current_pact_id: str | None = None


Viewer = Identity | Anonymous


class IdentityRequired(Exception):
    """Raised when an action needs a signed-in user; handled as a redirect to the login page."""

    def __init__(self, redirect_to: str = LOGIN_PATH) -> None:
        super().__init__(redirect_to)
        self.redirect_to = redirect_to


def _encode_user(user: User) -> str:
    raw = json.dumps(user.model_dump(mode="json"), separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def _decode_user(value: str | None) -> User | None:
    if not value:
        return None
    try:
        raw = base64.urlsafe_b64decode(value.encode("ascii")).decode("utf-8")
        return User.model_validate(json.loads(raw))
    except (ValueError, ValidationError):
        return None


def read_viewer(cookies: dict[str, str]) -> Viewer:
    current_pact_id = cookies.get(COOKIE_CURRENT_PACT_ID) or None
    user_id = (cookies.get(COOKIE_USER_ID) or "").strip()
    if not user_id:
        return Anonymous(current_pact_id=current_pact_id)
    return Identity(
        user_id=user_id,
        user=_decode_user(cookies.get(COOKIE_USER)),
        current_pact_id=current_pact_id,
    )


async def get_viewer(request: Request) -> Viewer:
    return read_viewer(request.cookies)


async def require_identity(viewer: Viewer = Depends(get_viewer)) -> Identity:
    if isinstance(viewer, Identity):
        return viewer
    raise IdentityRequired()


def _set(response: Response, key: str, value: str) -> None:
    response.set_cookie(key, value, httponly=True, samesite="lax", secure=settings.cookie_secure)


def remember_user(response: Response, user: User) -> None:
    _set(response, COOKIE_USER, _encode_user(user))
    _set(response, COOKIE_USER_ID, user.id)
    logger.info("identity stored for user %s", user.id)


def remember_current_pact(response: Response, pact_id: str) -> None:
    _set(response, COOKIE_CURRENT_PACT_ID, pact_id)


def forget_identity(response: Response) -> None:
    response.delete_cookie(COOKIE_USER)
    response.delete_cookie(COOKIE_USER_ID)
