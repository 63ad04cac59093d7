"""Cursor Drivers for MongoCursor."""
from .cursor import RetryableCursor
from .loggable import LoggableCursor
from .events import LOG_EVENT_SCHEMA, make_event, event_operation

__all__ = (
    'RetryableCursor',
    'LoggableCursor',
    'LOG_EVENT_SCHEMA',
    'make_event',
    'event_operation',
)
