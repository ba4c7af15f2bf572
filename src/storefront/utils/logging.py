"""Storefront logging.

Records flow through structlog and end in standard library handlers: the
console, ``storefront.log`` and ``storefront_error.log`` under ``LOG_DIR``.
Production and staging render one JSON object per line; every other
environment gets Rich console output.

Each HTTP request binds its identity with :func:`bind_request`, and the
:func:`add_request_context` processor stamps ``request_id`` and ``user_id`` on
every record, so log lines from domain handlers can be joined back to the
request (and shopper) that caused them. Records emitted outside a request
carry both keys as ``None``.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

REQUEST_CONTEXT_KEYS = ("request_id", "user_id")

LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Libraries that are chatty below WARNING.
QUIET_LOGGERS = ("urllib3", "asyncio", "protean", "sqlalchemy.engine")

ROTATE_BYTES = 10 * 1024 * 1024
ROTATE_COUNT = 5

_configured = False


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, otherwise the level for the running environment."""
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENVIRONMENT.get(_environment(), "INFO"))


def renders_json() -> bool:
    return _environment() in ("production", "staging")


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=ROTATE_BYTES, backupCount=ROTATE_COUNT, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def _install_handlers(level: str) -> None:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_handler(log_dir / "storefront.log", level),
        _rotating_handler(log_dir / "storefront_error.log", logging.ERROR),
    ]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def add_request_context(logger, method_name, event_dict):
    """Make sure ``request_id`` and ``user_id`` are present on every record.

    Runs after :func:`structlog.contextvars.merge_contextvars`, so values bound
    for the current request are already in ``event_dict``; explicit values
    passed to the log call win over the bound ones.
    """
    bound = structlog.contextvars.get_contextvars()
    for key in REQUEST_CONTEXT_KEYS:
        event_dict.setdefault(key, bound.get(key))
    return event_dict


def _renderer():
    if renders_json():
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4),
    )


def processor_chain() -> list:
    """Processors applied to every storefront record, renderer last."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        add_request_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        _renderer(),
    ]


def configure_logging(force: bool = False) -> None:
    """Install handlers and structlog processors, once per process unless forced."""
    global _configured
    if _configured and not force:
        return

    _install_handlers(get_log_level())
    structlog.configure(
        processors=processor_chain(),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request(request_id: str, path: str, user_id: str | None) -> None:
    """Start a fresh logging context for one HTTP request."""
    clear_context()
    add_context(request_id=request_id, path=path, user_id=user_id)


def add_context(**kwargs: Any) -> None:
    """Bind extra keys onto the current request's records."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
