"""
clueai/core/logging.py

Structured logging setup using structlog.

- In production: outputs newline-delimited JSON, one object per event.
- In development: outputs coloured, human-readable console lines with timestamps.

Usage:
    from clueai.core.logging import get_logger
    logger = get_logger(__name__)
    logger.info("hint_request", subject_mode="cs", code_length=120)

Never use print() anywhere in the application; always use a logger.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor


def _drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    """Remove the `color_message` key injected by uvicorn's ColourizedFormatter
    when structlog intercepts its log records, avoiding duplication in JSON output."""
    event_dict.pop("color_message", None)
    return event_dict


def setup_logging(environment: str = "development") -> None:
    """Configure structlog and stdlib logging.

    Called once by the API lifespan handler. Programs that only use the
    client core call it themselves before ``create_session``.

    Args:
        environment: "development" | "production". Determines output format.
    """
    is_production = environment == "production"

    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _drop_color_message_key,
    ]

    if is_production:
        processors: list[Processor] = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if is_production else logging.DEBUG
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Route stdlib logging (uvicorn, httpx, langchain) to the same stream.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.INFO,
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
    # httpx logs every request line at INFO; the client already logs its own calls.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog bound logger for the given module name."""
    return structlog.get_logger(name)
