from typing import Any, Optional, Union
from collections.abc import Callable, Iterable, Mapping
import logging
from .drivers import LoggableCursor, RetryableCursor
from .exceptions import DriverError, InvalidConfiguration


def find(
    collection: Any,
    query: Optional[Mapping[str, Any]] = None,
    fields: Union[Mapping[str, Any], Iterable[str], None] = None,
    *,
    connection: Any = None,
    num_retries: int = 0,
    logger_callable: Optional[Callable[[dict], Any]] = None,
    **kwargs
) -> Union[RetryableCursor, LoggableCursor]:
    """find.

    Open a Cursor over collection (a pymongo Collection),
    loggable when a logger callable is given.
    """
    if logger_callable is not None and not callable(logger_callable):
        raise InvalidConfiguration(
            "logger_callable must be a valid callback"
        )
    if collection is None:
        raise DriverError("A collection is required to open a Cursor.")
    try:
        cursor = collection.find(query or {}, fields or None)
    except (TypeError, AttributeError) as err:
        logging.exception(err)
        raise DriverError(
            message=f"Cannot open a Cursor on {collection!r}: {err}"
        ) from err
    if logger_callable is not None:
        return LoggableCursor(
            connection,
            collection,
            cursor,
            logger_callable,
            query,
            fields,
            num_retries,
            **kwargs
        )
    return RetryableCursor(
        connection,
        collection,
        cursor,
        query,
        fields,
        num_retries,
        **kwargs
    )
