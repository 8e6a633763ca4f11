"""Structured logging configuration using structlog.

Engine events (failed attempts, budget denials, loop terminations) are
logged through structlog and routed to stderr so they never mix with the
reporter stream the host writes "Nth try" messages to. CI runs get one
JSON object per line; local runs get the colored console renderer.
"""

import logging
import sys
from typing import Optional, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

MACHINE_READABLE_ENVIRONMENTS = ("production", "ci")


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every event with the emitting application."""
    event_dict["app"] = "retry-runner"
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    stream: Optional[TextIO] = None,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        log_level: Level name; unknown names fall back to INFO
        environment: "production" or "ci" render JSON, anything else the console
        stream: Destination, stderr when omitted
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    json_output = environment.lower() in MACHINE_READABLE_ENVIRONMENTS

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]
    if json_output:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        # ConsoleRenderer formats exc_info itself
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.get_logger(__name__).debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        environment=environment,
        renderer="json" if json_output else "console",
    )
