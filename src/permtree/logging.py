"""Logging utilities for permtree.

This module provides:
- Logging configuration from SelectionConfig
- Safe, bounded previews of node-id sets for log lines
- Structured (JSON) or plain formatting with edit-session context
- A logger adapter that carries role_id / session_id automatically
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import LogLevel, SelectionConfig

# LogRecord attributes that are never copied into structured output
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "role_id", "session_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a length-bounded, single-line preview of a value for logging.

    Sets and frozensets are rendered sorted so that log lines for the same
    selection are stable between runs.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (set, frozenset)):
        s = json.dumps(sorted(value, key=str), default=str, ensure_ascii=False)
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    # Normalize whitespace
    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class SelectionFormatter(logging.Formatter):
    """Formatter that includes edit-session context.

    This formatter:
    - Extracts role_id and session_id from log records (if available)
    - Formats logs as JSON or plain text
    - Previews extra fields safely
    """

    def __init__(
        self,
        include_context: bool = True,
        json_format: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_context = include_context
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        role_id = getattr(record, "role_id", None)
        session_id = getattr(record, "session_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            if role_id:
                log_data["role_id"] = str(role_id)
            if session_id:
                log_data["session_id"] = str(session_id)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if self.include_context and role_id:
            parts.append(f"role_id={log_data['role_id']}")
        if self.include_context and session_id:
            parts.append(f"session_id={log_data['session_id']}")
        parts.append(f": {log_data['message']}")
        if "exception" in log_data:
            parts.append("\n" + log_data["exception"])
        return " ".join(parts)


class SessionLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds role_id and session_id to log records.

    Usage:
        logger = get_session_logger(__name__, role_id="editor")
        logger.info("Permissions confirmed", session_id=session.session_id)
    """

    def __init__(
        self,
        logger: logging.Logger,
        role_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.role_id = role_id
        self.session_id = session_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        role_id = kwargs.pop("role_id", self.role_id)
        session_id = kwargs.pop("session_id", self.session_id)

        extra = dict(kwargs.get("extra") or {})
        if role_id:
            extra["role_id"] = role_id
        if session_id:
            extra["session_id"] = session_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[SelectionConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure logging for an application that embeds permtree.

    This function:
    - Sets the root logging level from SelectionConfig
    - Installs a single console handler with SelectionFormatter
    - Aligns the ``service_name`` logger level when configured

    Args:
        config: SelectionConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json`` when given
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)
    use_json = config.log_json if json_format is None else json_format

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(SelectionFormatter(json_format=use_json))
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_session_logger(
    name: str,
    role_id: Optional[str] = None,
    session_id: Optional[str] = None,
) -> SessionLoggerAdapter:
    """Get a logger adapter bound to an edit session.

    Args:
        name: Logger name (typically __name__)
        role_id: Optional role id to include in all logs
        session_id: Optional session id to include in all logs

    Returns:
        SessionLoggerAdapter instance
    """
    return SessionLoggerAdapter(logging.getLogger(name), role_id=role_id, session_id=session_id)


__all__ = [
    "safe_preview",
    "SelectionFormatter",
    "SessionLoggerAdapter",
    "setup_logging",
    "get_session_logger",
]
