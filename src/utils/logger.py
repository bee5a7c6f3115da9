"""Structured logging setup using structlog and rich.

``setup_logging()`` is called once by the CLI entry point.  Modules obtain
their logger with ``get_logger(__name__, component=...)``; records go to the
terminal through rich and to a rotating JSON-lines file under
``data/logs`` (override with ``RESTOCK_LOG_DIR``).
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

_LOGGING_CONFIGURED: bool = False
_HANDLERS: list[logging.Handler] = []

_DEFAULT_LOG_DIR = Path(__file__).resolve().parents[2] / "data" / "logs"
_LOG_FILE_NAME = "restock.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_level: str = "INFO", log_dir: str | Path | None = None) -> None:
    """Configure structlog, the stdlib root logger and both handlers.

    Handlers are installed once; a later call only re-applies *log_level*,
    so the entry point can raise or lower the level set by an earlier
    default call.

    Parameters
    ----------
    log_level:
        Root log level as a string (``DEBUG``, ``INFO``, ...).
    log_dir:
        Directory for the rotating log file.  Defaults to
        ``RESTOCK_LOG_DIR`` or ``<project>/data/logs``.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    if _LOGGING_CONFIGURED:
        _apply_level(numeric_level)
        return

    directory = Path(log_dir or os.environ.get("RESTOCK_LOG_DIR", str(_DEFAULT_LOG_DIR)))
    directory.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    shared = _shared_processors()

    rich_handler = RichHandler(
        console=Console(stderr=True, width=120),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setLevel(numeric_level)
    rich_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=shared,
        ),
    )
    root_logger.addHandler(rich_handler)
    _HANDLERS.append(rich_handler)

    file_handler = RotatingFileHandler(
        filename=str(directory / _LOG_FILE_NAME),
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=shared,
        ),
    )
    root_logger.addHandler(file_handler)
    _HANDLERS.append(file_handler)

    # httpx logs every request at INFO; keep it to warnings.
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True


def _apply_level(numeric_level: int) -> None:
    logging.getLogger().setLevel(numeric_level)
    for handler in _HANDLERS:
        handler.setLevel(numeric_level)
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str, **initial_binds: Any) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger for *name* with *initial_binds* attached."""
    if not _LOGGING_CONFIGURED:
        setup_logging()
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    if initial_binds:
        logger = logger.bind(**initial_binds)
    return logger
