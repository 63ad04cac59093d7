from typing import Any, Optional, Union
from collections.abc import Callable, Iterable, Mapping
import logging
import time
from pymongo.errors import ConnectionFailure, CursorNotFound
from ..exceptions import InvalidConfiguration, NotSupported, QueryExecutionFailed
from ..interfaces.cursors import CursorMutators, Query


# replacement of $snapshot for servers and drivers without it.
SNAPSHOT_HINT = [("_id", 1)]


class RetryableCursor(CursorMutators):
    """
    RetryableCursor.

    Wrapper for a Driver Cursor (pymongo.cursor.Cursor) that retries
    the execution of the query on transient failures.

    Parameters:
    -----------
    connection : pymongo.MongoClient
        Connection used to create this Cursor.
    collection : pymongo.collection.Collection
        Collection used to create this Cursor, required for recreating it.
    cursor : pymongo.cursor.Cursor
        Driver Cursor being wrapped.
    query : dict, optional
        Query criteria.
    fields : dict, optional
        Selected fields (projection).
    num_retries : int
        Number of times to retry the query after a transient failure.
    kwargs : dict
        retry_delay: seconds to wait between attempts (default 0).
        transient_errors: exception classes considered transient.
    """

    transient_errors: tuple = (ConnectionFailure, CursorNotFound)

    def __init__(
        self,
        connection: Any,
        collection: Any,
        cursor: Any,
        query: Optional[Mapping[str, Any]] = None,
        fields: Union[Mapping[str, Any], Iterable[str], None] = None,
        num_retries: int = 0,
        **kwargs
    ) -> None:
        if isinstance(num_retries, bool) or not isinstance(num_retries, int):
            raise InvalidConfiguration(
                f"num_retries must be an integer, got {num_retries!r}"
            )
        if num_retries < 0:
            raise InvalidConfiguration(
                f"num_retries cannot be negative, got {num_retries}"
            )
        retry_delay = kwargs.get("retry_delay", 0)
        if isinstance(retry_delay, bool) or not isinstance(retry_delay, (int, float)) or retry_delay < 0:
            raise InvalidConfiguration(
                f"retry_delay must be a non-negative number, got {retry_delay!r}"
            )
        if "transient_errors" in kwargs:
            self.transient_errors = tuple(kwargs["transient_errors"])
        self._cursor = cursor
        # pymongo Collection and Database do not support truth value testing.
        if collection is None:
            collection = getattr(cursor, "collection", None)
        if connection is None and collection is not None:
            database = getattr(collection, "database", None)
            if database is not None:
                connection = getattr(database, "client", None)
        self._connection = connection
        self._collection = collection
        self._query = Query.capture(query, fields)
        self._num_retries: int = num_retries
        self._retry_delay: float = retry_delay
        self._options: dict[str, tuple] = {}
        self._position: int = 0
        self._logger = logging.getLogger(f"MongoCursor.{self.__class__.__name__}")

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} query={dict(self._query.criteria)!r} "
            f"fields={dict(self._query.fields)!r} num_retries={self._num_retries}>"
        )

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def query(self) -> dict:
        return self._query.as_dict()

    @property
    def fields(self) -> dict:
        return self._query.projection()

    @property
    def num_retries(self) -> int:
        return self._num_retries

    @property
    def retry_delay(self) -> float:
        return self._retry_delay

    @property
    def retrieved(self) -> int:
        """Number of documents returned since the last rewind."""
        return self._position

    def get_connection(self) -> Any:
        return self._connection

    connection = property(get_connection)

    def get_collection(self) -> Any:
        return self._collection

    collection = property(get_collection)

    def get_cursor(self) -> Any:
        """The Driver Cursor currently wrapped."""
        return self._cursor

    raw_cursor = property(get_cursor)

    ### Context Manager.
    def __enter__(self) -> "RetryableCursor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        close = getattr(self._cursor, "close", None)
        if close is not None:
            close()

    ### Mutators.
    @staticmethod
    def _call(cursor: Any, name: str, args: tuple) -> None:
        if name == "snapshot" and not hasattr(cursor, "snapshot"):
            cursor.hint(SNAPSHOT_HINT)
        else:
            getattr(cursor, name)(*args)

    def _apply(self, name: str, *args) -> "RetryableCursor":
        if name == "snapshot" and not hasattr(self._cursor, "snapshot"):
            # recorded as the hint it really is.
            name, args = "hint", (SNAPSHOT_HINT,)
        self._call(self._cursor, name, args)
        # replay follows the order of the last calls.
        self._options.pop(name, None)
        self._options[name] = args
        return self

    def hint(self, key_pattern: Any) -> "RetryableCursor":
        return self._apply("hint", key_pattern)

    def limit(self, num: int) -> "RetryableCursor":
        return self._apply("limit", num)

    def skip(self, num: int) -> "RetryableCursor":
        return self._apply("skip", num)

    def snapshot(self) -> "RetryableCursor":
        return self._apply("snapshot")

    def sort(self, fields: Any) -> "RetryableCursor":
        return self._apply("sort", fields)

    def batch_size(self, num: int) -> "RetryableCursor":
        return self._apply("batch_size", num)

    def max_time_ms(self, max_time_ms: Optional[int]) -> "RetryableCursor":
        return self._apply("max_time_ms", max_time_ms)

    ### Retry.
    def is_transient(self, error: BaseException) -> bool:
        return isinstance(error, self.transient_errors)

    def _is_alive(self) -> bool:
        return bool(getattr(self._cursor, "alive", True))

    def _retry(
        self,
        operation: Callable[[], Any],
        recreate: bool = False,
        resume: bool = False
    ) -> Any:
        """Run operation, retrying it up to num_retries times on transient errors.

        When recreate is True, the Driver Cursor is recreated before
        every new attempt. With resume, the attempts continue on the
        same Driver Cursor, only while it is still alive.
        """
        attempts = self._num_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                if attempt > 1:
                    if self._retry_delay:
                        time.sleep(self._retry_delay)
                    if recreate:
                        self.recreate()
                return operation()
            except StopIteration:
                raise
            except Exception as err:
                if not self.is_transient(err):
                    raise QueryExecutionFailed(error=err, attempts=attempt) from err
                if attempt >= attempts:
                    self._logger.error(
                        f"Query {self.query!r} failed after {attempt} attempt(s): {err}"
                    )
                    raise QueryExecutionFailed(error=err, attempts=attempt) from err
                if resume and not self._is_alive():
                    # a killed cursor ends silently, results would be lost.
                    self._logger.error(
                        f"Cursor of query {self.query!r} died after {self._position} document(s): {err}"
                    )
                    raise QueryExecutionFailed(error=err, attempts=attempt) from err
                self._logger.warning(
                    f"Transient error on attempt {attempt}/{attempts} of query {self.query!r}: {err}"
                )

    def recreate(self) -> "RetryableCursor":
        """Replace the Driver Cursor by a new one with the same options.

        Without a collection, the current Driver Cursor is rewound instead.
        """
        if self._collection is not None:
            cursor = self._collection.find(
                self._query.as_dict(),
                self._query.projection() or None
            )
            for name, args in self._options.items():
                self._call(cursor, name, args)
            self._cursor = cursor
        elif hasattr(self._cursor, "rewind"):
            self._cursor.rewind()
        else:
            self._logger.debug(
                "Cursor cannot be recreated without a collection, retrying as is."
            )
        self._position = 0
        return self

    def rewind(self) -> "RetryableCursor":
        """Rewind the cursor to its unevaluated state."""
        if not hasattr(self._cursor, "rewind"):
            return self.recreate()
        self._cursor.rewind()
        self._position = 0
        return self

    reset = rewind

    ### Iteration.
    def __iter__(self) -> "RetryableCursor":
        return self

    def __next__(self) -> Any:
        # nothing consumed yet: the query itself can be sent again.
        started = self._position > 0
        document = self._retry(
            lambda: next(self._cursor),
            recreate=not started,
            resume=started
        )
        self._position += 1
        return document

    next = __next__

    def to_list(self) -> list:
        """All documents of the query, from the start."""
        self.rewind()
        documents = self._retry(lambda: list(self._cursor), recreate=True)
        self._position = len(documents)
        return documents

    def get_single_result(self) -> Optional[Any]:
        """First document of the query, or None.

        The limit of the cursor is restored afterwards.
        """
        original = self._options.get("limit")
        self.rewind()
        self._apply("limit", 1)
        try:
            documents = self.to_list()
        finally:
            self.rewind()
            if original is None:
                self._apply("limit", 0)
                del self._options["limit"]
            else:
                self._apply("limit", *original)
        return documents[0] if documents else None

    def count(self, found_only: bool = False) -> int:
        """Count the documents matching the query.

        With found_only, skip and limit of the cursor are applied.
        """
        if self._collection is None:
            raise NotSupported(
                "Cannot count documents of a cursor without a collection."
            )
        options = {}
        if "hint" in self._options:
            options["hint"] = self._options["hint"][0]
        if found_only:
            for name in ("skip", "limit"):
                if self._options.get(name) and self._options[name][0]:
                    options[name] = self._options[name][0]
        return self._retry(
            lambda: self._collection.count_documents(self._query.as_dict(), **options)
        )

    def explain(self) -> Any:
        return self._retry(lambda: self._cursor.explain())
