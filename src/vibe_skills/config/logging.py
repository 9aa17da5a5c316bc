"""
Structured logging for the vibe-skills CLI.

structlog renders through the standard library so third-party loggers
(httpx in particular) end up in the same stream. Everything goes to stderr
so log lines never mix with command output.
"""

import logging
import sys

import structlog

from .model import LogFormat, LoggingConfig

_logging_configured = False


def configure_structlog(config: LoggingConfig) -> None:
    """Configure structlog and the root stdlib logger from ``config``."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=config.colors and sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(config.level)

    # httpx logs every request at INFO; only show it when debugging
    logging.getLogger("httpx").setLevel(logging.DEBUG if config.level == "DEBUG" else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging once per process."""
    global _logging_configured
    if _logging_configured:
        return

    configure_structlog(config or LoggingConfig())
    _logging_configured = True


def reset_logging_configuration() -> None:
    global _logging_configured
    _logging_configured = False
    structlog.reset_defaults()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
