"""
Structured logging setup.

Every module logs through structlog with an event name plus keyword context,
e.g. ``logger.warning("remote_load_failed", key=key, error=str(e))``.
configure_logging() is called by the server app and by the client wiring.
Each call sets the stdlib root level; the renderer applies to loggers that
have not logged yet, since bound loggers are cached on first use.
"""

import logging
import sys

import structlog


def configure_logging(json_logs: bool = True, level: int = logging.INFO) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        json_logs: Render JSON lines when True, human-readable console output otherwise
        level: Minimum stdlib log level
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

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
