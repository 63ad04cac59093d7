from typing import Any, Optional, Union
from collections.abc import Callable, Iterable, Mapping
from functools import wraps
import inspect
from ..exceptions import InvalidConfiguration
from ..interfaces.cursors import CursorMutators, Query
from .cursor import RetryableCursor
from .events import make_event


class LoggableCursor(CursorMutators):
    """
    LoggableCursor.

    Cursor with logging functionality: before every mutator call
    (hint, limit, skip, snapshot, sort) an event is given to the
    logger callable, with the original query and fields of the cursor.

    Any other call goes straight to the wrapped cursor.

    Parameters:
    -----------
    connection : pymongo.MongoClient
        Connection used to create this Cursor.
    collection : pymongo.collection.Collection
        Collection used to create this Cursor.
    cursor : pymongo.cursor.Cursor | CursorMutators
        Driver Cursor being wrapped, or any Cursor implementing CursorMutators.
    logger_callable : Callable[[dict], Any]
        Logger callable, receives one event per mutator call.
    query : dict, optional
        Query criteria.
    fields : dict, optional
        Selected fields (projection).
    num_retries : int
        Number of times to retry queries.
    """

    def __init__(
        self,
        connection: Any,
        collection: Any,
        cursor: Any,
        logger_callable: Callable[[dict], Any],
        query: Optional[Mapping[str, Any]] = None,
        fields: Union[Mapping[str, Any], Iterable[str], None] = None,
        num_retries: int = 0,
        **kwargs
    ) -> None:
        if not callable(logger_callable):
            raise InvalidConfiguration(
                "logger_callable must be a valid callback"
            )
        if not isinstance(cursor, CursorMutators):
            cursor = RetryableCursor(
                connection,
                collection,
                cursor,
                query,
                fields,
                num_retries,
                **kwargs
            )
        self._cursor: CursorMutators = cursor
        self._query = Query.capture(cursor.query, cursor.fields)
        self._logger_callable = logger_callable

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} wrapping {self._cursor!r}>"

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._cursor, name)
        if not inspect.ismethod(attr):
            return attr

        @wraps(attr)
        def _delegate(*args, **kwargs):
            return self._chain(attr(*args, **kwargs))

        return _delegate

    @property
    def logger_callable(self) -> Callable[[dict], Any]:
        return self._logger_callable

    @property
    def query(self) -> dict:
        return self._query.as_dict()

    @property
    def fields(self) -> dict:
        return self._query.projection()

    @property
    def wrapped(self) -> CursorMutators:
        return self._cursor

    def log(self, data: Mapping[str, Any]) -> None:
        """Log something using the configured logger callable."""
        event = dict(data)
        event["query"] = self._query.as_dict()
        event["fields"] = self._query.projection()
        self._logger_callable(event)

    def _chain(self, result: Any) -> Any:
        return self if result is self._cursor else result

    def hint(self, key_pattern: Any) -> "LoggableCursor":
        self.log(make_event("hint", key_pattern))
        return self._chain(self._cursor.hint(key_pattern))

    def limit(self, num: int) -> "LoggableCursor":
        self.log(make_event("limit", num))
        return self._chain(self._cursor.limit(num))

    def skip(self, num: int) -> "LoggableCursor":
        self.log(make_event("skip", num))
        return self._chain(self._cursor.skip(num))

    def snapshot(self) -> "LoggableCursor":
        self.log(make_event("snapshot"))
        return self._chain(self._cursor.snapshot())

    def sort(self, fields: Any) -> "LoggableCursor":
        self.log(make_event("sort", fields))
        return self._chain(self._cursor.sort(fields))

    ### not logged.
    def batch_size(self, num: int) -> "LoggableCursor":
        return self._chain(self._cursor.batch_size(num))

    def max_time_ms(self, max_time_ms: Optional[int]) -> "LoggableCursor":
        return self._chain(self._cursor.max_time_ms(max_time_ms))

    def rewind(self) -> "LoggableCursor":
        return self._chain(self._cursor.rewind())

    reset = rewind

    def __iter__(self) -> "LoggableCursor":
        return self

    def __next__(self) -> Any:
        return next(self._cursor)

    next = __next__

    def __enter__(self) -> "LoggableCursor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
