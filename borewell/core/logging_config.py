# borewell/core/logging_config.py
import logging
import sys
from typing import Optional

import structlog

from borewell.core.settings import get_settings


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog on top of standard logging.
    JSON to stdout by default; console renderer for local development.
    """
    s = get_settings()
    level_name = (level or s.log_level).upper()
    as_json = s.log_json if json_logs is None else json_logs

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if as_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
