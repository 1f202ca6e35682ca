"""Configuration Management for cf-terraforming

Settings are read from ``CLOUDFLARE_*`` environment variables with
pydantic-settings. CLI options are applied on top with ``Settings.merged``.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import raise_configuration_error

DEFAULT_API_HOSTNAME = "api.cloudflare.com"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["console", "json"]


class Settings(BaseSettings):
    """Configuration for cf-terraforming."""

    api_token: Optional[str] = None
    email: Optional[str] = None
    api_key: Optional[str] = None
    api_user_service_key: Optional[str] = None

    account_id: Optional[str] = None
    zone_id: Optional[str] = None

    api_hostname: str = DEFAULT_API_HOSTNAME
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    max_workers: int = 4

    log_level: str = "WARNING"
    log_format: str = "console"

    model_config = SettingsConfigDict(env_prefix="CLOUDFLARE_", frozen=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in VALID_LOG_FORMATS:
            raise ValueError(f"Invalid log format: {v}")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v):
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    @property
    def api_base_url(self) -> str:
        return f"https://{self.api_hostname}/client/v4"

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_token or (self.email and self.api_key))

    def merged(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-``None`` override applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        return self.model_validate({**self.model_dump(), **updates})

    def require_credentials(self) -> None:
        """Fail fast when neither a token nor an email/key pair is configured."""
        if self.has_credentials:
            return
        if self.email or self.api_key:
            raise_configuration_error(
                "api_key",
                "partial",
                "both CLOUDFLARE_EMAIL and CLOUDFLARE_API_KEY",
            )
        raise_configuration_error("api_token", None, "an API token or an email/key pair")

    def validate_settings(self) -> List[str]:
        """Return human readable problems with the current settings."""
        errors = []
        if not self.has_credentials:
            errors.append("No Cloudflare credentials configured")
        if self.api_token and self.api_key:
            errors.append("Both an API token and an API key are set; the token wins")
        if self.max_workers > 64:
            errors.append("max_workers > 64 may trip API rate limits")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Return settings with secrets masked."""
        data = self.model_dump()
        for secret in ("api_token", "api_key", "api_user_service_key"):
            if data.get(secret):
                data[secret] = "****"
        return data

    def __str__(self) -> str:
        return f"Settings(api_hostname={self.api_hostname}, max_workers={self.max_workers})"


# Global configuration instance
_global_config: Optional[Settings] = None


def get_config() -> Settings:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = Settings()
    return _global_config


def set_config(config: Settings):
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config():
    """Reset the global configuration to default."""
    global _global_config
    _global_config = None
