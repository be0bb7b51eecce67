"""Logging configuration for the API process and the worker."""

import logging
import sys

from agentflow.core.config import get_settings
from agentflow.shared.context import get_correlation_id


class CorrelationIdFilter(logging.Filter):
    """Attach the current correlation id (or "-") to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def setup_logging() -> None:
    """Configure root logging once per process.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout with the correlation id in each line.
    """
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s",
        handlers=[handler],
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually __name__)."""
    return logging.getLogger(name)
