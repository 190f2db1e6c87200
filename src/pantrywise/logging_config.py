"""Structured logging configuration for the pantrywise application.

Request-scoped values (request id, user id) live in context variables so
every log line emitted while handling a request carries them, whichever
module logs it.
"""

import json
import logging
import logging.config
import os
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_ctx,
    "user_id": user_id_ctx,
}

# Third-party loggers that are too chatty at the application level
QUIET_LOGGERS: dict[str, str] = {
    "asyncpg": "WARNING",
    "httpx": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "WARNING",
}


def current_log_context() -> dict[str, str]:
    """The context values that are currently set."""
    context = {}
    for name, var in _CONTEXT_VARS.items():
        value = var.get()
        if value:
            context[name] = value
    return context


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


# =============================================================================
# Formatters
# =============================================================================


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in production."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **current_log_context(),
            "location": {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            },
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextualFormatter(logging.Formatter):
    """Pipe-separated lines for reading in a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        context = current_log_context()
        labels = []
        if "request_id" in context:
            labels.append(f"req={context['request_id'][:8]}")
        if "user_id" in context:
            labels.append(f"user={context['user_id']}")

        source = record.name
        if labels:
            source += f" [{', '.join(labels)}]"

        line = " | ".join(
            [
                _record_time(record).strftime("%Y-%m-%d %H:%M:%S"),
                f"{record.levelname:<8}",
                source,
                record.getMessage(),
            ]
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# =============================================================================
# Loggers
# =============================================================================


class ContextLogger(logging.LoggerAdapter):
    """Adapter that attaches the current request context as ``extra``."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**current_log_context(), **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), {})


def _use_json(environment: str) -> bool:
    requested = os.getenv("LOG_FORMAT", "").lower()
    if requested:
        return requested == "json"
    return environment.lower() == "production" and not sys.stdout.isatty()


def configure_logging(
    log_level: str = "INFO",
    json_format: bool | None = None,
    environment: str = "development",
) -> None:
    """
    Configure root logging for the application.

    Args:
        log_level: Minimum level for pantrywise loggers.
        json_format: Force JSON output on or off. When None, ``LOG_FORMAT``
            decides, falling back to JSON for non-interactive production runs.
        environment: Deployment environment name from settings.
    """
    if json_format is None:
        json_format = _use_json(environment)
    level = log_level.upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    formatter_class = StructuredJsonFormatter if json_format else ContextualFormatter
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"()": formatter_class}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "default",
                },
            },
            "loggers": {
                "pantrywise": {"level": level},
                **{name: {"level": lvl} for name, lvl in QUIET_LOGGERS.items()},
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )

    get_logger(__name__).info(
        f"Logging configured: level={level}, format={'json' if json_format else 'text'}"
    )


class LoggingContext:
    """
    Set request context for the duration of a ``with`` block.

    Values left as None keep whatever an enclosing block set.
    """

    def __init__(self, request_id: str | None = None, user_id: str | None = None):
        self._values = {"request_id": request_id, "user_id": user_id}
        self._tokens: list[tuple[ContextVar[str | None], Token]] = []

    def __enter__(self) -> "LoggingContext":
        for name, value in self._values.items():
            if value is not None:
                var = _CONTEXT_VARS[name]
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *exc_info: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
