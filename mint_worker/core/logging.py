"""
Structured logging for the minting worker.

structlog renders events; the stdlib root logger decides where they go.
"""

import sys
import logging
from typing import List, Optional
from pathlib import Path

import structlog
from rich.console import Console
from rich.logging import RichHandler

from .config import Settings

NOISY_LOGGERS = ("asyncio", "sqlalchemy.engine", "sqlalchemy.pool", "httpx", "httpcore", "solana")


def _app_context(settings: Settings):
    """Processor stamping every event with the app name and environment."""
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("app", settings.app_name)
        event_dict.setdefault("env", settings.environment)
        return event_dict

    return processor


def _handlers(settings: Settings, level: int, log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if settings.is_development and settings.log_format != "json":
        handlers.append(RichHandler(
            console=Console(file=sys.stderr),
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        ))
    else:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(_formatter(settings))
        handlers.append(stream_handler)

    path = log_file or settings.log_file
    if path:
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(_formatter(settings))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def setup_logging(settings: Settings, log_file: Optional[str] = None) -> None:
    """
    Configure structured logging for the worker.

    Args:
        settings: Loaded application settings
        log_file: Optional path to log file, overrides LOG_FILE
    """
    level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.is_development)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _app_context(settings),
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, handlers=_handlers(settings, level, log_file), force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def _formatter(settings: Settings) -> logging.Formatter:
    if settings.log_format == "json":
        return logging.Formatter("%(message)s")
    return logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Structured logger for a module."""
    return structlog.get_logger(name)
