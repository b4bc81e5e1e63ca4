"""
Configuration for hubexport

Credentials, hub scope and transport settings are read from the environment
(or a local .env file) with Pydantic validation. Command-line flags can
override individual values via ``ExportConfig.with_overrides``.
"""

from enum import Enum
from typing import Optional, Dict, Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.amplience.net/v2/content"
DEFAULT_AUTH_URL = "https://auth.amplience.net/oauth/token"


class LogLevel(str, Enum):
    """Log level enumeration"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ExportConfig(BaseSettings):
    """Settings for talking to the content-delivery management API."""

    # ============================================================
    # Account scope and credentials
    # ============================================================
    client_id: Optional[str] = Field(
        default=None,
        alias="DC_CLIENT_ID",
        description="OAuth client id"
    )
    client_secret: Optional[SecretStr] = Field(
        default=None,
        alias="DC_CLIENT_SECRET",
        description="OAuth client secret"
    )
    hub_id: Optional[str] = Field(
        default=None,
        alias="DC_HUB_ID",
        description="Hub to export from"
    )

    # ============================================================
    # Transport
    # ============================================================
    api_url: str = Field(
        default=DEFAULT_API_URL,
        alias="DC_API_URL",
        description="Management API base URL"
    )
    auth_url: str = Field(
        default=DEFAULT_AUTH_URL,
        alias="DC_AUTH_URL",
        description="OAuth token endpoint"
    )
    timeout: float = Field(
        default=30.0,
        alias="DC_TIMEOUT",
        description="Request timeout in seconds"
    )
    max_attempts: int = Field(
        default=3,
        alias="DC_MAX_ATTEMPTS",
        description="Attempts per request before a transport error is raised"
    )

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        alias="LOG_LEVEL",
        description="Logging level"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("api_url", "auth_url", mode="before")
    @classmethod
    def _normalize_url(cls, v):
        # Normalize endpoint: strip spaces, remove trailing slashes
        if isinstance(v, str):
            v = v.strip().rstrip("/")
        return v

    @field_validator("max_attempts")
    @classmethod
    def _at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DC_MAX_ATTEMPTS must be at least 1")
        return v

    def validate_config(self) -> Dict[str, str]:
        """
        Validate configuration and return any errors.

        Returns:
            Dictionary of field names to error messages
        """
        errors = {}
        if not self.client_id:
            errors["client_id"] = "DC_CLIENT_ID (or --client-id) is required"
        if not self.client_secret or not self.client_secret.get_secret_value():
            errors["client_secret"] = "DC_CLIENT_SECRET (or --client-secret) is required"
        if not self.hub_id:
            errors["hub_id"] = "DC_HUB_ID (or --hub-id) is required"
        return errors

    def with_overrides(self, **overrides: Any) -> "ExportConfig":
        """Return a copy with every non-None override applied."""
        update = {k: v for k, v in overrides.items() if v is not None}
        if "client_secret" in update and not isinstance(update["client_secret"], SecretStr):
            update["client_secret"] = SecretStr(update["client_secret"])
        return self.model_copy(update=update)


_config: Optional[ExportConfig] = None


def get_config() -> ExportConfig:
    """Get the process-wide configuration instance."""
    global _config
    if _config is None:
        _config = ExportConfig()
    return _config


def reset_config() -> None:
    """Drop the cached instance so the next get_config() re-reads the environment."""
    global _config
    _config = None
