"""
Monitoring Layer

Structured logging for the integration engine (JSON formatting, operation context).
"""

from .logging import (
    JSONFormatter,
    ContextFilter,
    StructuredLogger,
    configure_logging,
    configure_from_preset,
    get_logger,
    operation_context,
    get_operation,
    get_template_key,
    LOGGING_PRESETS,
)

__all__ = [
    "JSONFormatter",
    "ContextFilter",
    "StructuredLogger",
    "configure_logging",
    "configure_from_preset",
    "get_logger",
    "operation_context",
    "get_operation",
    "get_template_key",
    "LOGGING_PRESETS",
]
