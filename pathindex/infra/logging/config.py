"""Logging configuration setup.

Builds a dictConfig with every handler on the root logger; package loggers
propagate up. Console output goes to stderr so CLI command output on stdout
stays machine readable.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathindex.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from pathindex.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    *,
    json_logs: bool = False,
    console_enabled: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    include_context: bool = True,
    capture_warnings: bool = True,
    service_name: str = "pathindex",
) -> dict[str, Any]:
    """Configure root logging via dictConfig.

    Args:
        log_level: Root logger level.
        json_logs: Use JSONL formatter instead of key=value text.
        console_enabled: Attach a stderr handler.
        file_path: Rotating log file; None disables file logging.
        file_max_bytes: Max file size before rotation.
        file_backup_count: Number of rotated files to keep.
        include_context: Attach ContextInjectingFilter to handlers.
        capture_warnings: Forward Python warnings to logging.
        service_name: Static "service" field in JSON records.

    Returns:
        The dictConfig mapping that was applied.
    """
    if capture_warnings:
        logging.captureWarnings(True)

    formatter_name = "json" if json_logs else "text"
    handler_filters = ["context"] if include_context else []

    handlers: dict[str, Any] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": formatter_name,
            "filters": handler_filters,
            "level": log_level,
        }
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(path),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
            "formatter": "json",
            "filters": handler_filters,
            "level": log_level,
        }
    if not handlers:
        handlers["null"] = {"class": "logging.NullHandler"}

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "context": {"()": "pathindex.infra.logging.context.ContextInjectingFilter"},
        },
        "formatters": {
            "json": {
                "()": "pathindex.infra.logging.formatters.JSONFormatter",
                "static": {"service": service_name},
            },
            "text": {"()": "pathindex.infra.logging.formatters.KeyValueFormatter"},
        },
        "handlers": handlers,
        "root": {"level": log_level, "handlers": list(handlers)},
        "loggers": {
            # SQL echo is controlled by DB_ECHO, keep the engine quiet otherwise
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }

    logging.config.dictConfig(config)
    logger.debug("Logging configured", extra={"handlers": sorted(handlers)})
    return config


__all__ = ["configure_logging", "setup_logging"]
