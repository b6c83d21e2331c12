"""Correlation ID management for log correlation.

Callers (an API layer, a worker) set a correlation id once per logical
operation; every log record emitted by the stores while it is set carries it.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

# Context variable for correlation_id (async-safe)
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    """Generate a new unique correlation ID (UUID v4)."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Get current correlation ID from context.

    Returns:
        str: Current correlation ID or "no-correlation-id" if not set
    """
    return correlation_id_var.get() or "no-correlation-id"


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID in current context."""
    correlation_id_var.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Generator[str, None, None]:
    """Bind a correlation ID for the duration of a block.

    Usage:
        with correlation_scope() as cid:
            service.messages.move(actor, message_id, target_id)
    """
    token = correlation_id_var.set(correlation_id or generate_correlation_id())
    try:
        yield correlation_id_var.get()
    finally:
        correlation_id_var.reset(token)
