"""structlog configuration for blogcore.

Library modules log through stdlib ``logging.getLogger(__name__)``. This
module installs one stderr handler whose ``ProcessorFormatter`` renders both
those records and native structlog events the same way:

- Human (default): console renderer, colored on a TTY
- JSON (``log_json=True``): one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from blogcore.config.settings import BlogSettings

# Third-party loggers held at WARNING regardless of verbosity.
QUIET_LOGGERS: tuple[str, ...] = ("sqlalchemy",)


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors applied to structlog events and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog and route all log output to stderr.

    Args:
        verbose: DEBUG level for the ``blogcore`` logger. Otherwise WARNING.
        log_json: Use the JSON renderer instead of the console renderer.
    """
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("blogcore").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_from_settings(settings: BlogSettings) -> None:
    """Apply the ``verbose``/``log_json`` flags of *settings*."""
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
