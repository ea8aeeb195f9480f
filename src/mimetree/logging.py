"""structlog setup for the command-line tool."""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(*, json: bool = False, level: str = "WARNING") -> None:
    """Send log events to stderr, keeping stdout free for the tree."""
    if json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )
