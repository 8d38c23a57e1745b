"""
Structured logging setup for the batch client.

The package only emits events through structlog; applications call
setup_logging() once (or pass configure_logging=True to Server.from_config)
to decide how those events are rendered.
"""

import logging
import sys
from typing import Optional

import structlog

from arango_batch.config import BatchConfig, get_config

PACKAGE_LOGGER = "arango_batch"


def build_processors(json_format: bool) -> list:
    """Processor chain ending in a JSON or console renderer."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if json_format
        else structlog.dev.ConsoleRenderer(),
    ]


def setup_logging(
    config: Optional[BatchConfig] = None,
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """
    Configure structured logging.

    Args:
        config: Batch configuration; its log_level and log_json are the defaults
        level: Overrides config.log_level
        json_format: Overrides config.log_json
    """
    config = config or get_config()
    level = (level or config.log_level).upper()
    json_format = config.log_json if json_format is None else json_format

    structlog.configure(
        processors=build_processors(json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger(PACKAGE_LOGGER).setLevel(getattr(logging, level))
