"""Logger callables for Loggable Cursors.
"""
from typing import Any, Union
from collections.abc import Callable, Mapping
import logging
from bson import json_util
from ..drivers.events import event_operation


def logger_callable(
    logger: Union[logging.Logger, str, None] = None,
    level: int = logging.DEBUG
) -> Callable[[Mapping[str, Any]], None]:
    """logger_callable.

    Returns a logger callable that writes every cursor event
    on a standard logger, as extended JSON.
    """
    if logger is None:
        logger = logging.getLogger("MongoCursor.Events")
    elif isinstance(logger, str):
        logger = logging.getLogger(logger)

    def _log_event(event: Mapping[str, Any]) -> None:
        if not logger.isEnabledFor(level):
            return
        operation = event_operation(event) or "event"
        logger.log(level, f"{operation}: {json_util.dumps(event)}")

    return _log_event
