"""structlog setup for the centrematch CLI and for embedding services."""

import logging
import os
import sys

import structlog

# Event names are snake_case with key/value context (index_build_done,
# centre_record_skipped, resolve_done); none use positional arguments.
_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def configure_logging(level: str | None = None, json_output: bool = False) -> None:
    """Route centrematch events through stdlib logging on stderr.

    stdout stays free for the CLI's result tables. The level comes from
    `level`, then LOG_LEVEL, then INFO; per-query resolve events only show
    at DEBUG. `json_output` emits one JSON object per event for services
    that ship logs.
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.INFO),
    )

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
