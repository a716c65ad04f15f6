"""
Monitoring Module
Structured logging setup
"""

from app.services.monitoring.logging import setup_logging, CorrelationJsonFormatter, SERVICE_NAME

__all__ = [
    "setup_logging",
    "CorrelationJsonFormatter",
    "SERVICE_NAME",
]
