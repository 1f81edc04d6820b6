import os
from typing import List, Optional
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DEFAULT_AUTH_ENDPOINTS = ["/auth/login", "/auth/register", "/auth/me"]


def _default_session_path() -> str:
    return os.path.join(os.path.expanduser("~"), ".hrms_portal", "session.json")


class Settings(BaseSettings):
    # Allow comma-separated env vars for list fields like AUTH_ENDPOINTS
    model_config = SettingsConfigDict(env_file=".env", env_parse_delimiter=",", extra="ignore")
    PROJECT_NAME: str = "HRMS Portal"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Backend origin; the versioned base path is appended by `api_url`
    API_BASE_URL: str = Field(
        default="http://localhost:5001",
        validation_alias=AliasChoices("API_BASE_URL", "HRMS_API_URL"),
    )
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Endpoints whose 401 responses are reported inline instead of forcing a logout.
    # NOTE: accepts a JSON array or a comma-separated string, normalized below.
    AUTH_ENDPOINTS: List[str] | str = Field(default_factory=lambda: list(_DEFAULT_AUTH_ENDPOINTS))

    # "Local storage" for the token and user record
    SESSION_STORAGE_PATH: str = Field(
        default_factory=_default_session_path,
        validation_alias=AliasChoices("SESSION_STORAGE_PATH", "HRMS_SESSION_PATH"),
    )

    # UI behaviour
    NOTIFICATION_TIMEOUT_MS: int = 4000
    MAX_UPLOAD_SIZE_MB: int = 5
    EXPORT_DIR: str = "./exports"

    # Logging overrides (derived from DEBUG / ENVIRONMENT when unset)
    LOG_LEVEL: Optional[str] = None
    JSON_LOGS: Optional[bool] = None

    @computed_field
    @property
    def api_url(self) -> str:
        """Full base URL every API call is resolved against."""
        return self.API_BASE_URL.rstrip("/") + self.API_V1_STR

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def model_post_init(self, __context):
        """
        Validate configuration on startup. In production, fail hard on settings
        that would leak the bearer token or verbose logs.
        """
        is_prod = self.ENVIRONMENT.lower() == "production"
        errors = []

        scheme = urlsplit(self.API_BASE_URL).scheme
        if scheme not in ("http", "https"):
            errors.append(f"API_BASE_URL must be an http(s) URL, got {self.API_BASE_URL!r}.")
        elif is_prod and scheme != "https":
            errors.append("API_BASE_URL must use https in production.")

        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            errors.append("REQUEST_TIMEOUT_SECONDS must be positive.")

        if self.NOTIFICATION_TIMEOUT_MS <= 0:
            errors.append("NOTIFICATION_TIMEOUT_MS must be positive.")

        # In production, DEBUG must be disabled
        if is_prod and self.DEBUG:
            errors.append("DEBUG must be False in production.")

        # Fail hard with all errors at once for easier debugging
        if errors:
            error_msg = "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            raise ValueError(error_msg)

    @field_validator("AUTH_ENDPOINTS", mode="before")
    @classmethod
    def _split_endpoints(cls, value):
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


settings = Settings()
