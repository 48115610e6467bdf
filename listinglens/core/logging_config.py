"""Structured logging configuration.

Two modes, selected by LOG_FORMAT:
- "json": one JSON object per line, with the request ID attached
- "text": human-readable lines for local development
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from listinglens.middleware.request_id import get_request_id

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIDFilter(logging.Filter):
    """Inject request_id into every log record."""

    def filter(self, record):
        record.request_id = get_request_id()
        return True


class HttpxNoiseFilter(logging.Filter):
    """Drop httpx's per-request INFO lines.

    Every strategy attempt makes at least one request, so these would
    outnumber the resolver's own log lines several times over.
    """

    def filter(self, record):
        return not (record.name.startswith("httpx") and record.levelno <= logging.INFO)


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s %(request_id)s",
            rename_fields={
                "levelname": "level",
                "name": "logger",
                "asctime": "timestamp",
            },
        )
    return logging.Formatter(_TEXT_FORMAT)


def configure_logging(log_format: str = "json", log_level: str = "INFO"):
    """Configure the root logger.

    Args:
        log_format: "json" or "text"
        log_level: Python log level name
    """
    root = logging.getLogger()
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())
    handler.addFilter(HttpxNoiseFilter())
    handler.setFormatter(build_formatter(log_format))

    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    logging.getLogger("httpcore").setLevel(logging.WARNING)
