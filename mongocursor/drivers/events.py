"""Log Events.

Shape of the events given to a Cursor logger callable.

Every event carries the original ``query`` and ``fields`` of the cursor,
a ``True`` flag named after the operation and, when the operation takes
an argument, the argument under the key below:

======== ==============
hint     ``keyPattern``
limit    ``limitNum``
skip     ``skipNum``
snapshot
sort     ``sortFields``
======== ==============
"""
from typing import Any, Optional
from collections.abc import Mapping


LOG_EVENT_SCHEMA: dict[str, Optional[str]] = {
    "hint": "keyPattern",
    "limit": "limitNum",
    "skip": "skipNum",
    "snapshot": None,
    "sort": "sortFields",
}

LOGGED_OPERATIONS = tuple(LOG_EVENT_SCHEMA)


def make_event(operation: str, *args: Any) -> dict:
    """Build the operation part of a log event.

    Raises ValueError for operations outside the schema, or when the
    number of arguments does not match the operation.
    """
    try:
        key = LOG_EVENT_SCHEMA[operation]
    except KeyError as e:
        raise ValueError(
            f"Unknown cursor operation for logging: {operation}"
        ) from e
    expected = 0 if key is None else 1
    if len(args) != expected:
        raise ValueError(
            f"Operation {operation} takes {expected} argument(s), got {len(args)}"
        )
    event = {operation: True}
    if key is not None:
        event[key] = args[0]
    return event


def event_operation(event: Mapping[str, Any]) -> Optional[str]:
    """Name of the operation described by event, if any."""
    for operation in LOGGED_OPERATIONS:
        if event.get(operation) is True:
            return operation
    return None
