"""Typed client for the pacts REST backend.

Every call takes the viewer explicitly; signed-in viewers are sent as the
``X-User-Id`` header. Responses are parsed into schema models here, and any
failure leaves this module as a ``BackendError`` tagged with its kind.
"""
import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

import httpx
from pydantic import TypeAdapter, ValidationError

from pactweb.core.config import settings
from pactweb.core.identity import Identity, Viewer
from pactweb.schemas.activity import Activity, ActivityCreatePayload
from pactweb.schemas.activity_log import ActivityLog, ActivityLogDetail, UserLogsByPact, UserProgress
from pactweb.schemas.common import BackendErrorBody
from pactweb.schemas.pact import JoinPactRequest, Pact, PactCreateRequest
from pactweb.schemas.user import User, UserCreate
from pactweb.services.query_cache import CacheTag, QueryCache

logger = logging.getLogger("pactweb.backend")

USER_ID_HEADER = "X-User-Id"

_PACT_LIST = TypeAdapter(list[Pact])
_ACTIVITY_LIST = TypeAdapter(list[Activity])


class BackendError(RuntimeError):
    def __init__(
        self,
        kind: Literal["transport", "http"],
        message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message or f"backend {kind} error")
        self.kind = kind
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class UploadPart:
    filename: str
    content: bytes
    content_type: str


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = BackendErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        text = response.text.strip()
        return text or None
    if isinstance(body.message, list):
        return "; ".join(str(m) for m in body.message) or None
    return body.message or None


def _headers(viewer: Viewer | None) -> dict[str, str]:
    if isinstance(viewer, Identity):
        return {USER_ID_HEADER: viewer.user_id}
    return {}


def _viewer_key(viewer: Viewer | None) -> str | None:
    return viewer.user_id if isinstance(viewer, Identity) else None


class PactBackendClient:
    def __init__(self, http: httpx.AsyncClient, cache: QueryCache | None = None) -> None:
        self._http = http
        self.cache = cache if cache is not None else QueryCache()

    @classmethod
    def from_settings(cls, transport: httpx.AsyncBaseTransport | None = None) -> "PactBackendClient":
        http = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout_seconds,
            transport=transport,
        )
        return cls(http)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        viewer: Viewer | None = None,
        params: dict[str, str] | None = None,
        json: Any = None,
        files: list[tuple[str, tuple[str | None, Any] | tuple[str, bytes, str]]] | None = None,
    ) -> Any:
        try:
            response = await self._http.request(
                method,
                path,
                params=params,
                json=json,
                files=files,
                headers=_headers(viewer),
            )
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise BackendError("transport", str(exc) or None) from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if response.is_error:
            message = _error_message(response)
            logger.warning("%s %s returned %s: %s", method, path, response.status_code, message)
            raise BackendError("http", message, status_code=response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError("http", "Backend returned a malformed response", response.status_code) from exc

    async def _cached(
        self,
        key: Hashable,
        ttl: float,
        tags: Sequence[CacheTag],
        fetch,
    ) -> Any:
        hit, value = self.cache.get(key)
        if hit:
            return value
        value = await fetch()
        self.cache.put(key, value, ttl, tags)
        return value

    @staticmethod
    def _parse(adapter_or_model, data: Any) -> Any:
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(data)
            return adapter_or_model.model_validate(data)
        except ValidationError as exc:
            raise BackendError("http", "Backend returned an unexpected payload") from exc

    # users

    async def create_user(self, payload: UserCreate) -> User:
        data = await self._request("POST", "/user", json=payload.model_dump(by_alias=True))
        return self._parse(User, data)

    async def join_pact(self, viewer: Identity, pact_id: str, activity_ids: list[str]) -> None:
        body = JoinPactRequest(user_id=viewer.user_id, pact_id=pact_id, activity_ids=activity_ids)
        await self._request("POST", "/user/join-pact", viewer=viewer, json=body.model_dump(by_alias=True))
        self.cache.invalidate(CacheTag("Pact"), CacheTag("User", viewer.user_id))

    # pacts

    async def list_active_pacts(self, viewer: Viewer | None = None) -> list[Pact]:
        async def fetch() -> list[Pact]:
            return self._parse(_PACT_LIST, await self._request("GET", "/pact/active", viewer=viewer))

        return await self._cached(
            ("pact-active", _viewer_key(viewer)),
            settings.active_pacts_cache_seconds,
            [CacheTag("Pact")],
            fetch,
        )

    async def get_pact(self, viewer: Viewer | None, pact_id: str) -> Pact:
        async def fetch() -> Pact:
            return self._parse(Pact, await self._request("GET", f"/pact/{pact_id}", viewer=viewer))

        return await self._cached(
            ("pact", pact_id, _viewer_key(viewer)),
            settings.query_cache_seconds,
            [CacheTag("Pact", pact_id)],
            fetch,
        )

    async def create_pact(self, viewer: Viewer | None, payload: PactCreateRequest) -> Pact:
        body = payload.model_dump(by_alias=True, exclude_none=True)
        data = await self._request("POST", "/pact", viewer=viewer, json=body)
        self.cache.invalidate(CacheTag("Pact"))
        return self._parse(Pact, data)

    # activities

    async def list_activities(self, viewer: Viewer | None, pact_id: str, user_id: str | None = None) -> list[Activity]:
        params = {"pactId": pact_id}
        tag = CacheTag("Activity", f"LIST-{pact_id}")
        if user_id is not None:
            params["userId"] = user_id
            tag = CacheTag("Activity", f"USER-{pact_id}")

        async def fetch() -> list[Activity]:
            return self._parse(_ACTIVITY_LIST, await self._request("GET", "/activity", viewer=viewer, params=params))

        return await self._cached(
            ("activity", pact_id, user_id, _viewer_key(viewer)),
            settings.query_cache_seconds,
            [tag],
            fetch,
        )

    async def list_user_activities(self, viewer: Identity, pact_id: str) -> list[Activity]:
        return await self.list_activities(viewer, pact_id, user_id=viewer.user_id)

    async def create_activity(self, viewer: Identity, payload: ActivityCreatePayload) -> Activity:
        body = payload.model_dump(by_alias=True, exclude_none=True)
        data = await self._request("POST", "/activity", viewer=viewer, json=body)
        self.cache.invalidate(
            CacheTag("Activity", f"LIST-{payload.pact_id}"),
            CacheTag("Activity", f"USER-{payload.pact_id}"),
        )
        return self._parse(Activity, data)

    # activity logs

    async def create_activity_log(
        self,
        viewer: Identity,
        pact_id: str,
        activity_id: str,
        files: Sequence[UploadPart],
        notes: str | None = None,
    ) -> ActivityLog:
        fields: list[tuple[str, Any]] = [("files", (f.filename, f.content, f.content_type)) for f in files]
        fields += [
            ("pactId", (None, pact_id)),
            ("activityId", (None, activity_id)),
            ("userId", (None, viewer.user_id)),
        ]
        if notes:
            fields.append(("notes", (None, notes)))

        data = await self._request("POST", "/activity-logs", viewer=viewer, files=fields)
        self.cache.invalidate(
            CacheTag("Activity", f"LIST-{pact_id}"),
            CacheTag("Activity", f"USER-{pact_id}"),
            CacheTag("Activity", f"PROGRESS-{viewer.user_id}"),
        )
        return self._parse(ActivityLog, data)

    async def get_progress(self, viewer: Identity) -> UserProgress:
        async def fetch() -> UserProgress:
            data = await self._request(
                "GET",
                "/activity-logs/progress/by-user",
                viewer=viewer,
                params={"userId": viewer.user_id},
            )
            return self._parse(UserProgress, data)

        return await self._cached(
            ("progress", viewer.user_id),
            settings.query_cache_seconds,
            [CacheTag("Activity", f"PROGRESS-{viewer.user_id}")],
            fetch,
        )

    async def get_user_logs(self, viewer: Identity, pact_id: str) -> UserLogsByPact:
        # Logs change from other devices; always go to the backend.
        data = await self._request(
            "GET",
            "/activity-logs/user-logs",
            viewer=viewer,
            params={"pactId": pact_id, "userId": viewer.user_id},
        )
        return self._parse(UserLogsByPact, data)

    async def get_activity_log(self, viewer: Viewer | None, log_id: str) -> ActivityLogDetail:
        async def fetch() -> ActivityLogDetail:
            return self._parse(ActivityLogDetail, await self._request("GET", f"/activity-logs/{log_id}", viewer=viewer))

        return await self._cached(
            ("log", log_id, _viewer_key(viewer)),
            settings.query_cache_seconds,
            [CacheTag("Activity", f"LOG-{log_id}")],
            fetch,
        )
