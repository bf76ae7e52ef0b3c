"""Correlation ID logging context for tracing requests across modules.

Every inbound tool call or onboarding webhook sets a correlation ID
(the tool-call ID or the client ID). A filter attached to the root
handlers stamps it on each record, so a single request can be followed
from the HTTP route through the dispatcher into the collaborators.

Usage:
    from src.logging_context import set_correlation_id

    set_correlation_id("client_1700000000000_ab12cd34ef56")
    logger.info("Provisioning")  # -> [client_1700000000000_ab12cd34ef56] Provisioning
"""

import logging
from contextvars import ContextVar

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="-")


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str:
    """Retrieve the current correlation ID."""
    return _correlation_id.get()


class CorrelationIdFilter(logging.Filter):
    """Injects correlation_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get()  # type: ignore[attr-defined]
        return True


def install_correlation_filter() -> None:
    """Attach the filter to every root handler that lacks it.

    Handler-level filters also see records propagated from library
    loggers, so formatters can always use ``%(correlation_id)s``.
    """
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, CorrelationIdFilter) for f in handler.filters):
            handler.addFilter(CorrelationIdFilter())
