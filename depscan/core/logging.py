"""Structured logging configuration: structlog rendered through stdlib logging."""

from __future__ import annotations

import logging
import os
import sys

import structlog


def _level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(os.environ.get("DEPSCAN_LOG_LEVEL", "WARNING").upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(verbose: bool = False) -> None:
    """Send structlog events and library records to stderr.

    Reads from environment variables:
        DEPSCAN_LOG_LEVEL   log level (default: WARNING, DEBUG when verbose)
        DEPSCAN_LOG_FORMAT  console | json (default: console)

    stdout is reserved for the report.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if os.environ.get("DEPSCAN_LOG_FORMAT", "console").lower() == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=pre_chain,
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(_level(verbose))
    # httpx logs every webhook request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
