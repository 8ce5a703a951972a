"""Logging infrastructure.

Basic usage:
    import logging

    from pathindex.infra.logging import get_lazy_logger, set_log_context, setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Processing request")  # record includes request_id

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Expensive: {describe()}")  # only runs at DEBUG
"""

from pathindex.infra.logging.config import configure_logging, setup_logging
from pathindex.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
)
from pathindex.infra.logging.formatters import JSONFormatter, KeyValueFormatter
from pathindex.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "KeyValueFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "log_context",
    "set_log_context",
    "setup_logging",
]
