"""Observability module: structured logging and correlation IDs."""

from .logging_config import configure_logging, JSONFormatter, CorrelationIDFilter
from .correlation import (
    correlation_id_var,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    # Logging
    "configure_logging",
    "JSONFormatter",
    "CorrelationIDFilter",
    # Correlation
    "correlation_id_var",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
