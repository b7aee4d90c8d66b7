import logging
import sys

import structlog
from structlog.stdlib import add_log_level, add_logger_name

LOG_FORMATS = ("console", "json")


def setup_logging(
    level: int = logging.INFO, colors: bool = True, log_format: str = "console"
) -> None:
    """
    Configure structlog and standard logging with the given level.

    Records go to stderr so a map printed on stdout can be piped cleanly.
    ``log_format="json"`` emits one JSON object per event.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format}")
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def parse_level(name: str) -> int:
    """Map a level name such as ``"debug"`` onto its :mod:`logging` constant."""
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level
