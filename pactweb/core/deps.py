from datetime import tzinfo

from fastapi import Request

from pactweb.core.config import settings
from pactweb.core.tz import resolve_tz
from pactweb.services.backend_client import PactBackendClient


def get_backend(request: Request) -> PactBackendClient:
    return request.app.state.backend


def get_display_tz() -> tzinfo:
    return resolve_tz(settings.display_timezone)
