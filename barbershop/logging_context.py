"""Correlation ID logging context for tracing a booking attempt.

Provides an attempt_id-aware logger that attaches the booking attempt's
idempotency key to every log record, so the provider call and the backend
sync of one attempt can be matched up in the logs.

Usage:
    from barbershop.logging_context import get_booking_logger, reset_attempt_id, set_attempt_id

    token = set_attempt_id("5f0c...")
    logger = get_booking_logger(__name__)
    logger.info("Creating booking")  # record.attempt_id == "5f0c..."
    reset_attempt_id(token)
"""

import logging
from contextvars import ContextVar, Token

_attempt_id: ContextVar[str] = ContextVar("attempt_id", default="NO_ATTEMPT_ID")


def set_attempt_id(attempt_id: str) -> Token:
    """Set the correlation ID for the current async context.

    Returns the token to hand to ``reset_attempt_id`` once the attempt ends.
    """
    return _attempt_id.set(attempt_id)


def reset_attempt_id(token: Token) -> None:
    """Restore the correlation ID that was active before ``set_attempt_id``."""
    _attempt_id.reset(token)


def get_attempt_id() -> str:
    """Retrieve the current correlation ID."""
    return _attempt_id.get()


class AttemptIdFilter(logging.Filter):
    """Injects attempt_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.attempt_id = _attempt_id.get()  # type: ignore[attr-defined]
        return True


def get_booking_logger(name: str) -> logging.Logger:
    """Return a logger with the AttemptIdFilter attached.

    The filter adds ``attempt_id`` to each record so formatters can
    include ``%(attempt_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, AttemptIdFilter) for f in logger.filters):
        logger.addFilter(AttemptIdFilter())
    return logger
