"""Structured logging setup for the pagewright CLI.

Library modules only emit events through ``structlog.get_logger(__name__)``;
configuring handlers and renderers is left to the entry point.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOG_FORMATS = ("console", "json")


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Route structlog events through the standard library root logger.

    Parameters
    ----------
    level : str, optional
        Standard logging level name, such as ``"DEBUG"`` or ``"WARNING"``.
    fmt : str, optional
        ``"console"`` for human-readable output or ``"json"`` for one JSON
        object per event.

    Raises
    ------
    ValueError
        If ``level`` or ``fmt`` is not recognized.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        msg = f"Unknown log level '{level}'."
        raise ValueError(msg)
    if fmt not in LOG_FORMATS:
        msg = f"Unknown log format '{fmt}'; expected one of {LOG_FORMATS}."
        raise ValueError(msg)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ]
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)


__all__ = ["LOG_FORMATS", "configure_logging"]
