"""
Correlation ID Middleware
Tags every request with an X-Request-ID so import runs can be traced through the logs
"""

from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

__all__ = ["CorrelationIdMiddleware", "REQUEST_ID_HEADER", "get_correlation_id"]


def get_correlation_id() -> str:
    """
    Correlation ID of the current request.

    Bound into import and sequence-repair log entries so a failed import can
    be matched to the client call that triggered it.

    Returns:
        str: The correlation ID or 'none' outside a request
    """
    return correlation_id.get() or 'none'
