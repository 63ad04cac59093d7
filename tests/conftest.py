from typing import Any, Optional
import pytest
from pymongo.errors import AutoReconnect


class Failures:
    """Failure budget shared by a collection and its cursors."""

    def __init__(self, count: int = 0, error: Optional[Exception] = None):
        self.count = count
        self.error = error or AutoReconnect("connection reset by peer")
        self.raised = 0

    def check(self):
        if self.count > 0:
            self.count -= 1
            self.raised += 1
            raise self.error


class FakeCursor:
    """Driver Cursor with the pymongo surface, without snapshot support.

    As pymongo does, an error while fetching kills the cursor: it is
    no longer alive and next iterations end quietly.
    """

    kill_on_error: bool = True

    def __init__(self, documents: list = None, failures: Failures = None):
        self.documents = list(documents or [])
        self.failures = failures or Failures()
        self.calls: list = []
        self.closed = False
        self.killed = False
        self._index = 0
        self._limit = 0
        self._skip = 0

    def _record(self, name: str, *args) -> "FakeCursor":
        self.calls.append((name, *args))
        return self

    def hint(self, key_pattern: Any):
        return self._record("hint", key_pattern)

    def limit(self, num: int):
        self._limit = num
        return self._record("limit", num)

    def skip(self, num: int):
        self._skip = num
        return self._record("skip", num)

    def sort(self, fields: Any):
        return self._record("sort", fields)

    def batch_size(self, num: int):
        return self._record("batch_size", num)

    def max_time_ms(self, max_time_ms: int):
        return self._record("max_time_ms", max_time_ms)

    @property
    def alive(self) -> bool:
        return not self.killed

    def rewind(self):
        self._index = 0
        self.killed = False
        return self._record("rewind")

    def explain(self):
        self.failures.check()
        return {"queryPlanner": {"winningPlan": "COLLSCAN"}}

    def close(self):
        self.closed = True

    def _results(self) -> list:
        results = self.documents[self._skip:]
        if self._limit:
            results = results[:self._limit]
        return results

    def __iter__(self):
        return self

    def __next__(self):
        if self.killed:
            raise StopIteration
        try:
            self.failures.check()
        except Exception:
            self.killed = self.kill_on_error
            raise
        results = self._results()
        if self._index >= len(results):
            raise StopIteration
        document = results[self._index]
        self._index += 1
        return document


class ResumableCursor(FakeCursor):
    """Driver Cursor that survives fetch errors."""

    kill_on_error = False


class LegacyCursor(FakeCursor):
    """Driver Cursor of drivers still supporting snapshot mode."""

    def snapshot(self):
        return self._record("snapshot")


class FakeCollection:
    """Collection opening FakeCursors over a fixed list of documents."""

    def __init__(self, documents: list = None, failures: Failures = None):
        self.documents = list(documents or [])
        self.failures = failures or Failures()
        self.cursors: list = []
        self.counts: list = []
        self.database = None
        self.find_error: Optional[Exception] = None

    def find(self, query: dict = None, fields: dict = None):
        if self.find_error is not None:
            raise self.find_error
        cursor = FakeCursor(self.documents, self.failures)
        cursor.find_args = (query, fields)
        self.cursors.append(cursor)
        return cursor

    def count_documents(self, query: dict, **kwargs) -> int:
        self.counts.append((query, kwargs))
        self.failures.check()
        results = self.documents[kwargs.get("skip", 0):]
        if kwargs.get("limit"):
            results = results[:kwargs["limit"]]
        return len(results)


QUERY = {"status": "active", "age": {"$gt": 18}}
FIELDS = {"name": 1, "age": 1}
DOCUMENTS = [
    {"_id": 1, "name": "Alice", "age": 30},
    {"_id": 2, "name": "Bob", "age": 25},
    {"_id": 3, "name": "Charlie", "age": 28},
]


@pytest.fixture
def failures():
    return Failures()


@pytest.fixture
def collection(failures):
    return FakeCollection(DOCUMENTS, failures)


@pytest.fixture
def driver_cursor(collection):
    return collection.find(QUERY, FIELDS)


@pytest.fixture
def events():
    return []


@pytest.fixture
def sink(events):
    return events.append
