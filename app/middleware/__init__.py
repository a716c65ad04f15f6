"""
Middleware Module
ASGI middleware for request processing
"""

from app.middleware.correlation_id import CorrelationIdMiddleware, REQUEST_ID_HEADER, get_correlation_id

__all__ = ["CorrelationIdMiddleware", "REQUEST_ID_HEADER", "get_correlation_id"]
