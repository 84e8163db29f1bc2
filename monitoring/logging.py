"""
Structured Logging - Monitoring Layer

Every log line emitted while the engine works carries the engine operation
(startup, load_settings, save_settings, render) and, while rendering, the
export template key. Both come from context variables scoped with
operation_context(); formatters and filters read them back.

Output always goes to stderr: stdout belongs to the CLI, which may be
writing a rendered artifact there.

@.architecture
Incoming: app.py, core/integrations/engine.py, data/storage/settings_store.py --- {str log_level, str format_type, str operation/template_key, keyword fields}
Processing: operation_context(), configure_logging(), JSONFormatter.format(), ContextFilter.filter() --- {4 jobs: context_scoping, context_injection, formatting, log_configuration}
Outgoing: sys.stderr --- {text or JSON log lines, StructuredLogger instances}
"""

import json
import logging
import sys
import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, TextIO

operation_ctx: ContextVar[Optional[str]] = ContextVar('operation', default=None)
template_key_ctx: ContextVar[Optional[str]] = ContextVar('template_key', default=None)

# Record attribute -> context variable
ENGINE_CONTEXT: Dict[str, ContextVar] = {
    'operation': operation_ctx,
    'template_key': template_key_ctx,
}

TEXT_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-30s | [%(operation)s %(template_key)s] | %(message)s'
TEXT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_operation() -> Optional[str]:
    return operation_ctx.get()


def get_template_key() -> Optional[str]:
    return template_key_ctx.get()


@contextmanager
def operation_context(operation: str, template_key: Optional[str] = None) -> Iterator[None]:
    """Tag log lines inside the block; the outer operation comes back on exit."""
    operation_token = operation_ctx.set(operation)
    template_token = template_key_ctx.set(template_key)
    try:
        yield
    finally:
        template_key_ctx.reset(template_token)
        operation_ctx.reset(operation_token)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Context fields are only present while set; keyword fields passed through
    StructuredLogger land under ``extra``.
    """

    def __init__(self, include_traceback: bool = True):
        super().__init__()
        self.include_traceback = include_traceback

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'source': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        for field, var in ENGINE_CONTEXT.items():
            value = var.get()
            if value:
                entry[field] = value

        if record.exc_info and self.include_traceback:
            exc_type, exc_value, _ = record.exc_info
            entry['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': traceback.format_exception(*record.exc_info),
            }

        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            entry['extra'] = extra_fields

        return json.dumps(entry, default=str, ensure_ascii=False)


class ContextFilter(logging.Filter):
    """Copies the engine context onto the record for the text format ('-' when unset)."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field, var in ENGINE_CONTEXT.items():
            setattr(record, field, var.get() or '-')
        return True


class StructuredLogger:
    """
    Logger accepting keyword fields alongside the message.

        logger.debug("Created engine", environment="test", registry_version="1")
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def log(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        extra = {'extra_fields': fields} if fields else None
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, exc_info=True, **fields)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)


def configure_logging(
    level: str = "INFO",
    format_type: str = "text",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Replace the root handlers with a single stream handler.

    Args:
        level: Root log level name; unknown names fall back to INFO
        format_type: "json" or "text"
        stream: Destination (defaults to sys.stderr)
    """
    if format_type == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = [handler]


# Keyed by preset name; values are configure_logging() arguments
LOGGING_PRESETS = {
    'development': {'level': 'INFO', 'format_type': 'text'},
    'production': {'level': 'INFO', 'format_type': 'json'},
    'testing': {'level': 'WARNING', 'format_type': 'text'},
}


def configure_from_preset(preset: str = 'development', **overrides: Any) -> None:
    """
    Configure logging from a named preset.

    Raises:
        ValueError: If the preset is unknown
    """
    if preset not in LOGGING_PRESETS:
        raise ValueError(f"Unknown preset: {preset}. Available: {list(LOGGING_PRESETS.keys())}")

    configure_logging(**{**LOGGING_PRESETS[preset], **overrides})
