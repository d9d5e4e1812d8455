"""
fileman - structlog configuration.

Centralised structlog setup. Log records always go to stderr so that
command output on stdout stays clean for piping.

Usage:
    from fileman.config.logging import configure_logging

    # Once, at CLI startup
    configure_logging(level="INFO", json_format=False)

    # In modules
    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("dedupe_started", root_dir=str(root))
"""

import logging
import os
import sys

import structlog
from structlog.types import EventDict, WrappedLogger

APP_NAME = "fileman"


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add application context to every record.

    Adds:
    - app: "fileman"
    - pid: current process id (several CLI runs may share one log sink)
    """
    event_dict["app"] = APP_NAME
    event_dict["pid"] = os.getpid()
    return event_dict


def resolve_level(verbosity: int, default: str = "WARNING") -> str:
    """
    Map a -v count onto a log level name.

    0 keeps ``default``, 1 gives INFO, 2 or more gives DEBUG.
    """
    if verbosity >= 2:
        return "DEBUG"
    if verbosity == 1:
        return "INFO"
    return default.upper()


def configure_logging(
    level: str = "WARNING",
    json_format: bool = False,
    enable_colors: bool = False,
) -> None:
    """
    Configure structlog for fileman.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, render records as JSON. If False, human-readable
        enable_colors: If True, colorize console records (interactive terminals)

    Example:
        >>> configure_logging(level="DEBUG", json_format=False, enable_colors=True)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=enable_colors))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
