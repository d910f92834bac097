import logging
import sys

import structlog
from structlog.stdlib import add_log_level, add_logger_name


def resolve_level(level: int | str | None, default: int = logging.WARNING) -> int:
    """Accept a numeric level or a name such as ``"debug"``."""
    if level is None or level == "":
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


def setup_logging(level: int | str | None = logging.INFO, colors: bool | None = None) -> None:
    """Configure structlog and standard logging with the given level.

    Output goes to stderr; stdout carries the console frames.  Colors
    default to on when stderr is a terminal.
    """
    numeric_level = resolve_level(level, default=logging.INFO)
    if colors is None:
        colors = sys.stderr.isatty()
    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
