"""
Structured logging configuration using structlog wrapping stdlib.

Engine modules only call get_logger() and never configure logging
themselves; a library host decides where records go. The `vibecal` CLI
calls setup_logging() once per invocation, passing its --log-level flag
(falling back to VIBECAL_LOG_LEVEL, then INFO). Records go to stderr so
command output on stdout stays machine-readable: JSON lines when
VIBECAL_LOG_FORMAT=json, colored console lines on a terminal otherwise.

Event names are snake_case verbs in the past tense with key/value context,
e.g. event_added, event_rejected, reminder_emitted, reminder_runner_stopped.

Usage:
    from vibecal.logging_config import get_logger, setup_logging
    setup_logging()
    logger = get_logger(__name__)
    logger.info("event_added", event_id="abc123")
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    if level is None:
        level = os.environ.get("VIBECAL_LOG_LEVEL", "INFO")

    if json_output is None:
        json_output = os.environ.get("VIBECAL_LOG_FORMAT", "").lower() == "json"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["get_logger", "setup_logging"]
