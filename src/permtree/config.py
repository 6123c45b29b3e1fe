"""Configuration contract for permtree.

This module provides the Pydantic-validated configuration model used by
callers that embed the selection engine (permission editors, admin tools).

All settings come through ``SelectionConfig``. Direct os.environ/os.getenv
usage is limited to ``load_config_from_env``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .selection.modes import SelectionMode


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SelectionConfig(BaseModel):
    """Configuration for the selection engine and its edit sessions."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Selection
    selection_mode: SelectionMode = Field(
        default=SelectionMode.SMART,
        description="Selection semantics for permission editing: smart or legacy",
    )

    # Identification
    service_name: Optional[str] = Field(
        default=None,
        description="Name used as the package logger name when set (e.g. 'permissions-admin')",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("selection_mode", mode="before")
    @classmethod
    def validate_selection_mode(cls, v: str | SelectionMode) -> SelectionMode:
        """Accept mode names case-insensitively."""
        if isinstance(v, SelectionMode):
            return v
        if isinstance(v, str):
            try:
                return SelectionMode(v.strip().lower())
            except ValueError:
                raise ValueError(
                    f"Invalid selection mode: {v}. Must be one of {[m.value for m in SelectionMode]}"
                )
        raise ValueError(f"Selection mode must be string or SelectionMode enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",  # Prevent accidental extra fields
    }


def load_config_from_env() -> SelectionConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed for permtree settings.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SELECTION_MODE: smart | legacy (default: smart)
    - SERVICE_NAME: Service name for logger identification

    Returns:
        SelectionConfig instance with values from environment or defaults.

    Raises:
        ConfigurationError: A variable holds a value the model rejects.
    """
    import os

    try:
        return SelectionConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
            selection_mode=os.getenv("SELECTION_MODE", SelectionMode.SMART.value),
            service_name=os.getenv("SERVICE_NAME"),
        )
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid environment configuration: {exc.error_count()} error(s)",
            fields=[".".join(str(part) for part in error["loc"]) for error in exc.errors()],
        ) from exc


__all__ = [
    "LogLevel",
    "SelectionConfig",
    "load_config_from_env",
]
