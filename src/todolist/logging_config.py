"""
Structured logging setup (structlog on top of stdlib logging).

Module loggers wrap stdlib loggers under the 'todolist' namespace, so an
application that never calls setup_logging gets the stdlib defaults: nothing
below WARNING, and nothing ever on stdout.

setup_logging (called by the CLI) sends diagnostics to stderr:
- default: console rendering
- TODO_LOG_JSON=true: one JSON object per line
"""
from __future__ import annotations

import logging
import sys

import structlog

ROOT_LOGGER_NAME = "todolist"


# PUBLIC_INTERFACE
def get_logger(name: str = ROOT_LOGGER_NAME):
    """Return a structlog logger bound to the stdlib logger `name`."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


# PUBLIC_INTERFACE
def setup_logging(level: str = "WARNING", json_logs: bool = False) -> None:
    """Configure structlog and the 'todolist' stdlib logger for the whole process."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    shared_processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False
