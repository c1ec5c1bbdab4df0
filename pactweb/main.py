from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from pactweb.api.errors import (
    PageFailure,
    backend_error_handler,
    identity_required_handler,
    page_failure_handler,
    validation_error_handler,
)
from pactweb.api.routes_activity import router as activity_router
from pactweb.api.routes_log import router as log_router
from pactweb.api.routes_pact import router as pact_router
from pactweb.api.routes_user import router as user_router
from pactweb.api.routes_week import router as week_router
from pactweb.core.config import settings
from pactweb.core.identity import IdentityRequired
from pactweb.core.log import configure_logging
from pactweb.services.backend_client import BackendError, PactBackendClient


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    backend = getattr(app.state, "backend", None)
    owns_backend = backend is None
    if owns_backend:
        app.state.backend = PactBackendClient.from_settings()
    yield
    if owns_backend:
        await app.state.backend.aclose()
        app.state.backend = None


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(IdentityRequired, identity_required_handler)
app.add_exception_handler(PageFailure, page_failure_handler)
app.add_exception_handler(BackendError, backend_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

app.include_router(user_router)
app.include_router(pact_router)
app.include_router(activity_router)
app.include_router(log_router)
app.include_router(week_router)


class HealthResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    message: str
    api_base_url: str


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    # Request Example:
    # GET /health
    #
    # Response Example:
    # 200
    # {"message":"Pact Web","api_base_url":"http://localhost:3000"}
    return HealthResponse(message=settings.app_name, api_base_url=settings.api_base_url)

