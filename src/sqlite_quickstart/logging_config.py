"""Logging configuration for structured logging.

This module provides structured logging configuration with proper log levels,
request/response logging middleware for the studio, and helpers for logging
database operations with context information.
"""

import json
import logging
import logging.config
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import Settings

LOGGER_NAMESPACE = "sqlite_quickstart"

_RESERVED_RECORD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
    "message",
}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging.

    This formatter outputs log records as JSON objects with consistent
    structure including timestamp, level, message, and additional context.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str, ensure_ascii=False)


def setup_logging(settings: Settings) -> None:
    """Setup logging configuration based on settings.

    Output goes to stderr so that the example script's stdout carries only
    its results.

    Args:
        settings: Application settings containing logging configuration
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    formatter = "simple" if settings.debug else "json"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": JSONFormatter,
            },
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": formatter,
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            LOGGER_NAMESPACE: {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            # Migration tooling
            "alembic": {"level": "INFO", "handlers": ["console"], "propagate": False},
            # Studio server
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {
                "level": "INFO" if settings.debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            # Database loggers
            "sqlalchemy.engine": {
                "level": "INFO" if settings.debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "aiosqlite": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }

    logging.config.dictConfig(logging_config)

    logging.getLogger(LOGGER_NAMESPACE).debug(
        "Logging configured",
        extra={
            "log_level": settings.log_level,
            "debug_mode": settings.debug,
            "formatter": formatter,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Logger name (prefixed with 'sqlite_quickstart.' when missing)

    Returns:
        Logger instance
    """
    if not name.startswith(f"{LOGGER_NAMESPACE}."):
        name = f"{LOGGER_NAMESPACE}.{name}"

    return logging.getLogger(name)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for studio request/response logging.

    Logs incoming requests and outgoing responses with timing information
    and tags every response with an ``X-Request-ID`` header.
    """

    def __init__(self, app: ASGIApp, logger_name: str = "sqlite_quickstart.studio") -> None:
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        client_ip = request.client.host if request.client else None
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            self.logger.error(
                f"Request failed: {request.method} {request.url.path} - {type(exc).__name__}",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "process_time": round(time.perf_counter() - start_time, 4),
                    "client_ip": client_ip,
                    "event_type": "request_failed",
                },
            )
            raise

        self.logger.info(
            f"Request completed: {request.method} {request.url.path} - {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time": round(time.perf_counter() - start_time, 4),
                "client_ip": client_ip,
                "event_type": "request_completed",
            },
        )
        response.headers["X-Request-ID"] = request_id
        return response


def log_database_operation(
    operation: str,
    table: str,
    success: bool = True,
    duration: float | None = None,
    error: str | None = None,
    **kwargs: Any,
) -> None:
    """Log database operation.

    Args:
        operation: Type of operation (SELECT, INSERT)
        table: Database table name
        success: Whether operation was successful
        duration: Operation duration in seconds
        error: Error message (if applicable)
        **kwargs: Additional context data
    """
    logger = get_logger("database")
    level = logging.DEBUG if success else logging.ERROR
    message = f"Database {operation} on {table}"

    if not success and error:
        message += f" failed: {error}"

    extra_data = {
        "event_type": "database_operation",
        "operation": operation,
        "table": table,
        "success": success,
        "duration": round(duration, 6) if duration is not None else None,
    }

    if error:
        extra_data["error"] = error

    extra_data.update(kwargs)

    logger.log(level, message, extra=extra_data)
