"""Structured logging: lazy messages, extra levels, context binding."""
from .config import bootstrap_logging, shutdown_logging
from .context import bind, context, cycle_context, get_context, unbind
from .levels import LogLevel
from .logger import StructuredLogger, get_logger, traceable

__all__ = [
    'bootstrap_logging',
    'shutdown_logging',
    'bind',
    'context',
    'cycle_context',
    'get_context',
    'unbind',
    'LogLevel',
    'StructuredLogger',
    'get_logger',
    'traceable',
]
