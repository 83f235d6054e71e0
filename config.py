"""Application configuration settings.

Values come from the environment, with a ``.env`` file in the working
directory loaded first when present.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


class Settings(BaseModel):
    """Runtime settings for the web front.

    Attributes:
        api_base_url: Base URL of the backend API gateway.
        api_timeout: Backend request timeout in seconds.
        api_retry_enabled: Retry transient backend failures.
        api_max_retries: Maximum retries when retry is enabled.
        use_mock_auth: Answer auth screens from hardcoded credentials
            instead of the auth service.
        mock_auth_latency: Simulated latency of mock auth calls, in seconds.
        cookie_secure: Mark cookies ``Secure``.
        app_env: "development" or "production".
        default_locale: Locale used when none can be negotiated.
        log_level: Level for the app's own loggers.
        log_file: Optional path of a rotating log file.
    """

    api_base_url: str = "http://localhost:8000"
    api_timeout: float = Field(30.0, gt=0)
    api_retry_enabled: bool = False
    api_max_retries: int = Field(3, ge=0)
    use_mock_auth: bool = False
    mock_auth_latency: float = Field(1.0, ge=0)
    cookie_secure: bool = False
    app_env: str = "development"
    default_locale: str = "vi"
    log_level: str = "INFO"
    log_file: str | None = None

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        app_env = os.getenv("APP_ENV", "development")
        return cls(
            api_base_url=os.getenv("API_BASE_URL", "http://localhost:8000"),
            api_timeout=float(os.getenv("API_TIMEOUT", "30")),
            api_retry_enabled=_env_bool("API_RETRY_ENABLED"),
            api_max_retries=int(os.getenv("API_MAX_RETRIES", "3")),
            use_mock_auth=_env_bool("USE_MOCK_AUTH"),
            mock_auth_latency=float(os.getenv("MOCK_AUTH_LATENCY", "1.0")),
            # Secure cookies are on by default in production
            cookie_secure=_env_bool(
                "COOKIE_SECURE", "true" if app_env == "production" else "false"
            ),
            app_env=app_env,
            default_locale=os.getenv("DEFAULT_LOCALE", "vi"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings.from_env()
