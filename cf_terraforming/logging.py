"""
Structured Logging for cf-terraforming

structlog is layered over the standard library so that third-party loggers
(httpx in particular) share one handler. Logs always go to stderr because
stdout carries the generated Terraform configuration.
"""

import logging
import sys
import time
from functools import wraps
from typing import Optional

import structlog

from .config import Settings, get_config


def setup_logging(config: Optional[Settings] = None):
    """Setup structured logging for cf-terraforming."""
    config = config or get_config()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if config.log_format == "json"
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(logging.WARNING, root_logger.level))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def trace_operation(operation_name: str):
    """Decorator to log start, completion and failure of an operation."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(f"cf_terraforming.trace.{func.__module__}")
            start_time = time.monotonic()

            logger.debug("operation started", operation=operation_name)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "operation failed",
                    operation=operation_name,
                    duration_seconds=round(time.monotonic() - start_time, 3),
                    error=str(e),
                )
                raise

            logger.debug(
                "operation completed",
                operation=operation_name,
                duration_seconds=round(time.monotonic() - start_time, 3),
            )
            return result

        return wrapper

    return decorator
