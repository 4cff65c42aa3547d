"""
Structured Logging

DESIGN DECISION: Every store mutation and every schema decision is logged
as a structured event (snake_case event name + keyword context).

The logger:
- Is configured once from LoggingSettings
- Renders JSON by default, console output when asked
- Never raises into the caller
"""

import logging
import sys
from typing import Optional

import structlog

from expense_ledger.config import LoggingSettings


_configured = False


def configure_logging(
    settings: Optional[LoggingSettings] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog on top of the stdlib logging module.

    Safe to call more than once; only the first call takes effect
    unless `force` is set.
    """
    global _configured
    if _configured and not force:
        return

    settings = settings or LoggingSettings()

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=settings.level_number,
        force=force,
    )
    logging.getLogger().setLevel(settings.level_number)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to the given name."""
    return structlog.get_logger(name)
