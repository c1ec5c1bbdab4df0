import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Literal

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from pactweb.core.identity import IdentityRequired
from pactweb.schemas.common import PageError
from pactweb.services.backend_client import BackendError

logger = logging.getLogger("pactweb.errors")

GENERIC_FAILURE = "Something went wrong. Please try again."

FIELD_MESSAGES: dict[str, dict[tuple[str, str], str]] = {
    "signup": {
        ("name", "string_too_short"): "Name must be at least 2 characters",
        ("email", "string_pattern_mismatch"): "Please enter a valid email address",
        ("email", "string_too_short"): "Please enter a valid email address",
        ("phone", "string_too_short"): "Please enter a valid phone number",
    },
    "pact": {
        ("title", "string_too_short"): "Title must be at least 3 characters",
        ("title", "string_too_long"): "Title must be less than 100 characters",
        ("minDaysPerWeek", "greater_than_equal"): "Minimum days per week must be at least 1",
        ("minDaysPerWeek", "less_than_equal"): "Minimum days per week cannot exceed 7",
        ("maxActivitiesPerUser", "greater_than_equal"): "Max activities per user must be at least 1",
        ("skipFine", "greater_than_equal"): "Skip fine must be 0 or greater",
        ("leaveFine", "greater_than_equal"): "Leave fine must be 0 or greater",
    },
    "activity": {
        ("name", "missing"): "Activity name is required",
        ("name", "string_too_short"): "Activity name is required",
        ("numberOfDays", "greater_than_equal"): "Number of days must be at least 1",
        ("numberOfDays", "less_than_equal"): "Number of days cannot exceed 7",
    },
    "log": {
        ("activityId", "missing"): "Select an activity",
        ("activityId", "string_too_short"): "Select an activity",
    },
}


class PageFailure(Exception):
    """A backend failure seen from a specific page, carrying that page's fallback text."""

    def __init__(
        self,
        error: BackendError,
        fallback: str,
        presentation: Literal["inline", "alert"] = "inline",
        use_server_message: bool = True,
    ) -> None:
        super().__init__(fallback)
        self.error = error
        self.fallback = fallback
        self.presentation = presentation
        self.use_server_message = use_server_message

    @property
    def detail(self) -> str:
        if self.use_server_message and self.error.message:
            return self.error.message
        return self.fallback


@contextmanager
def page_errors(
    fallback: str,
    presentation: Literal["inline", "alert"] = "inline",
    use_server_message: bool = True,
) -> Iterator[None]:
    try:
        yield
    except BackendError as exc:
        raise PageFailure(exc, fallback, presentation, use_server_message) from exc


def _status_for(error: BackendError) -> int:
    if error.kind == "http" and error.status_code and error.status_code >= 400:
        return error.status_code
    return status.HTTP_502_BAD_GATEWAY


def _form_for_path(path: str) -> str | None:
    if path == "/login":
        return "signup"
    if path == "/pacts":
        return "pact"
    if path.endswith("/activities"):
        return "activity"
    if path.endswith("/logs"):
        return "log"
    return None


def field_errors(exc: RequestValidationError, path: str) -> dict[str, str]:
    messages = FIELD_MESSAGES.get(_form_for_path(path) or "", {})
    out: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = loc[0] if loc else "body"
        if field in out:
            continue
        out[field] = messages.get((field, err.get("type", "")), err.get("msg", "Invalid value"))
    return out


async def identity_required_handler(_: Request, exc: IdentityRequired) -> RedirectResponse:
    return RedirectResponse(exc.redirect_to, status_code=status.HTTP_303_SEE_OTHER)


async def page_failure_handler(_: Request, exc: PageFailure) -> JSONResponse:
    body = PageError(detail=exc.detail, kind=exc.error.kind, presentation=exc.presentation)
    return JSONResponse(status_code=_status_for(exc.error), content=body.model_dump())


async def backend_error_handler(_: Request, exc: BackendError) -> JSONResponse:
    body = PageError(detail=exc.message or GENERIC_FAILURE, kind=exc.kind)
    return JSONResponse(status_code=_status_for(exc), content=body.model_dump())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"errors": field_errors(exc, request.url.path)},
    )
