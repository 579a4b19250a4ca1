"""structlog configuration for momentval.

Evaluation code logs through stdlib ``logging.getLogger(__name__)``;
structlog's ProcessorFormatter renders those records to stderr, either for
a terminal or as JSON lines (``--log-json``).  Timestamps are UTC so that
log lines line up with the UTC instants momentval reports.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "momentval"

# Libraries whose debug chatter never helps when diagnosing an evaluation.
_QUIET_LOGGERS = ("dateutil", "pydantic", "pydantic_settings")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
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
    """Route momentval logging to stderr through structlog.

    Safe to call repeatedly; each call replaces the root handler.

    Args:
        verbose: Show momentval DEBUG records (clamping, failed rules).
            Otherwise only warnings such as inverted bounds are shown.
        log_json: One JSON object per line instead of console output.
    """
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
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

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
