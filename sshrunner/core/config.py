"""Core configuration module."""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for sshrunner."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_format: str | None = None  # "json", "console", or None (auto-detect based on environment)

    # SSH sessions
    ssh_connect_timeout: float = 10.0
    ssh_command_timeout: float | None = None
    ssh_keepalive_interval: float = 30.0
    ssh_strict_host_verify: bool = True
    ssh_known_hosts_path: str | None = None

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept any standard logging level name, case-insensitively."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level '{value}'")
        return level

    @field_validator("log_format", mode="before")
    @classmethod
    def validate_log_format(cls, value):
        if value is None or value == "":
            return None
        value = str(value).lower()
        if value not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return value

    @field_validator("ssh_command_timeout", mode="before")
    @classmethod
    def parse_command_timeout(cls, value):
        """Treat an empty value as "no timeout"."""
        if value == "":
            return None
        return value

    @field_validator("ssh_connect_timeout", "ssh_command_timeout")
    @classmethod
    def require_positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("SSH timeouts must be greater than zero")
        return value

    @field_validator("ssh_known_hosts_path", mode="before")
    @classmethod
    def parse_known_hosts_path(cls, value):
        if value == "":
            return None
        return value


settings = Settings()
