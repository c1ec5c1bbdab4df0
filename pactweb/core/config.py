import os
from dataclasses import dataclass, field


def _to_bool(value: str, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _to_list(value: str) -> list[str]:
    return [x.strip() for x in (value or "").split(",") if x.strip()]


@dataclass(slots=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "Pact Web")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    api_base_url: str = os.getenv("PACT_API_BASE_URL", "http://localhost:3000")
    api_timeout_seconds: float = float(os.getenv("PACT_API_TIMEOUT_SECONDS", "10"))

    # "local" resolves to the machine timezone; IANA names and fixed offsets also work.
    display_timezone: str = os.getenv("DISPLAY_TIMEZONE", "local")

    active_pacts_cache_seconds: float = float(os.getenv("ACTIVE_PACTS_CACHE_SECONDS", "30"))
    query_cache_seconds: float = float(os.getenv("QUERY_CACHE_SECONDS", "60"))

    wide_viewport_min_width: int = int(os.getenv("WIDE_VIEWPORT_MIN_WIDTH", "1024"))

    cookie_secure: bool = _to_bool(os.getenv("COOKIE_SECURE", "0"), False)
    cors_origins: list[str] = field(
        default_factory=lambda: _to_list(
            os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
        )
    )


settings = Settings()
