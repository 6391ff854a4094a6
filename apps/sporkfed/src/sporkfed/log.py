"""Logging configuration with structlog.

Decision points log a stable event name (``ignore_no_changes``,
``source_path_not_found``, ...) as the structlog event, with the context as
key/value pairs. Those names are what log-based alerting matches on.
"""

import logging
import sys
from typing import Any

import structlog


def verbosity_level(verbose: int) -> int:
    return logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING


def configure_logging(verbose: int = 0, *, json_logs: bool = False) -> None:
    """
    Configure structlog and standard logging.

    Args:
        verbose: Verbosity count (-v INFO, -vv DEBUG, WARNING otherwise)
        json_logs: Render one JSON object per line instead of console output
    """
    logging.basicConfig(
        level=verbosity_level(verbose),
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
        format="%(message)s",  # structlog handles formatting
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer(default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger for the given module name."""
    return structlog.get_logger(name)
