"""Structured logging configuration: structlog on top of the ``repograph`` stdlib logger.

Library code only calls ``structlog.get_logger``. ``setup_logging()`` is for
applications embedding repograph that want its events rendered; it touches
the ``repograph`` logger only and leaves the root logger alone.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

LOGGER_NAME = "repograph"


def setup_logging() -> None:
    """Configure structlog and attach one stdout handler to the ``repograph`` logger.

    Reads from environment variables:
        REPOGRAPH_LOG_LEVEL  — log level (default: INFO)
        REPOGRAPH_LOG_FORMAT — console | json (default: console)

    Calling it again replaces the handler instead of adding another.
    """
    log_level = os.environ.get("REPOGRAPH_LOG_LEVEL", "INFO").upper()
    log_format = os.environ.get("REPOGRAPH_LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers[:] = [handler]
    logger.setLevel(log_level)
    logger.propagate = False
