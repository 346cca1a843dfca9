"""
nexusqr.api.logging.logging_config

Purpose:
    Central logging configuration for the API.
    Ensures request_id is present in logs (including uvicorn.access and uvicorn.error).

Created:
    2026-02-15
"""

from __future__ import annotations

import logging

from nexusqr.api.logging.request_context_filter import RequestContextFilter
from nexusqr.api.logging.structured import JsonFormatter, StructuredFormatter

_HANDLER_NAME = "nexusqr"

# Config-level names (pino style) -> stdlib levels.
LOG_LEVELS: dict[str, int] = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


def resolve_level(name: str) -> int:
    try:
        return LOG_LEVELS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {name!r}") from None


def _make_handler(level: int, json_output: bool) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_output else StructuredFormatter())
    handler.addFilter(RequestContextFilter())
    return handler


def _configure_logger(logger_name: str, handler: logging.Handler, level: int, *, clear_handlers: bool) -> None:
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    if clear_handlers:
        logger.handlers.clear()

    logger.addHandler(handler)
    logger.propagate = False


def configure_logging(level: str = "info", json_output: bool = False) -> None:
    numeric = resolve_level(level)
    handler = _make_handler(numeric, json_output)

    # Root/app logs: replace only our own handler so repeated create_app() calls don't stack.
    root = logging.getLogger()
    root.setLevel(numeric)
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)

    # Uvicorn uses these loggers; clear their handlers so our formatter/filter wins.
    _configure_logger("uvicorn", handler, numeric, clear_handlers=True)
    _configure_logger("uvicorn.error", handler, numeric, clear_handlers=True)
    _configure_logger("uvicorn.access", handler, numeric, clear_handlers=True)
