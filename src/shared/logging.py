"""Logging configuration shared by the Storefront and Checkout domains.

Both domains call ``configure_logging()`` at import time; only the first call
has an effect. Output goes to stdout and to rotating files under ``LOG_DIR``
(default ``logs/``), with errors also copied to a separate file so failed
sweeps can be found without grepping the full log.

Level: ``LOG_LEVEL`` if set, otherwise derived from the environment name
(``ENVIRONMENT`` or ``PROTEAN_ENV``). Production and staging render JSON
lines; everything else renders coloured console output.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_JSON_ENVS = ("production", "staging")

_MAX_BYTES = 10 * 1024 * 1024
_BACKUPS = 5

_configured = False


def current_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(current_environment(), "INFO")).upper()


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_level: str) -> None:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = [
        console,
        _rotating_file(log_dir / "storefront.log", log_level),
        _rotating_file(log_dir / "storefront_error.log", logging.ERROR),
    ]

    # Framework and transport chatter
    for name in ("protean", "urllib3", "asyncio", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer():
    if current_environment() in _JSON_ENVS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(force: bool = False) -> None:
    global _configured
    if _configured and not force:
        return
    setup_stdlib_logging(get_log_level())
    setup_structlog()
    _configured = True


def add_context(**kwargs: Any) -> None:
    """Bind key-values to every log line emitted from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
