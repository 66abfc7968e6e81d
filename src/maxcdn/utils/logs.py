"""Logging setup."""
import logging
import sys
from typing import TextIO

import structlog

ROOT_LOGGER = "maxcdn"


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a bound logger on top of the stdlib logger of the same name.
    Nothing is printed until the application configures logging.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )
    return logger


def configure_logging(verbose: bool = False, output: TextIO | None = None) -> None:
    """
    Route the package's log events to the console, stderr by default.
    Only warnings are shown unless verbose is set.
    """
    output = output or sys.stderr
    level = logging.DEBUG if verbose else logging.WARNING

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=output.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(output)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False
