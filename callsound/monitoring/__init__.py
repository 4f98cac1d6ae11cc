"""
Monitoring - Structured event logging for store mutations.
"""

from callsound.monitoring.logging import (
    LogLevel,
    StructuredLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "LogLevel",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]
