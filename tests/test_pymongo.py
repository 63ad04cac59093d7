import pytest
from pymongo import MongoClient
from pymongo.cursor import Cursor
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    CursorNotFound,
    NetworkTimeout,
    OperationFailure,
    ServerSelectionTimeoutError,
)
from mongocursor import find, LoggableCursor, RetryableCursor


DATABASE = "navigator"
COLLECTION = "cursors"


@pytest.fixture
def client():
    # connect=False: no server is contacted until a query is sent.
    client = MongoClient("mongodb://127.0.0.1:27017", connect=False)
    yield client
    client.close()


@pytest.fixture
def mongo_collection(client):
    return client[DATABASE][COLLECTION]


def test_wraps_pymongo_cursor(client, mongo_collection):
    cursor = find(mongo_collection, {"status": "active"}, {"name": 1}, num_retries=1)
    pytest.assume(isinstance(cursor.raw_cursor, Cursor))
    pytest.assume(cursor.connection is client)
    assert cursor.collection is mongo_collection


def test_collection_from_pymongo_cursor(client, mongo_collection):
    raw = mongo_collection.find({})
    cursor = RetryableCursor(None, None, raw)
    pytest.assume(cursor.collection == mongo_collection)
    assert cursor.connection is client


def test_mutators_on_pymongo_cursor(mongo_collection):
    events = []
    cursor = find(mongo_collection, {"age": {"$gt": 18}}, logger_callable=events.append)
    assert isinstance(cursor, LoggableCursor)
    result = (
        cursor.hint([("age", 1)])
        .sort([("name", -1)])
        .skip(5)
        .limit(10)
        .batch_size(50)
        .max_time_ms(1000)
    )
    assert result is cursor
    assert [event["query"] for event in events] == [{"age": {"$gt": 18}}] * 4


def test_snapshot_on_pymongo_cursor(mongo_collection):
    # pymongo 4 has no snapshot(), replaced by an _id hint.
    cursor = find(mongo_collection, {})
    assert cursor.snapshot() is cursor


def test_recreate_pymongo_cursor(mongo_collection):
    cursor = find(mongo_collection, {"status": "active"})
    original = cursor.raw_cursor
    cursor.limit(5).sort([("name", 1)])
    cursor.recreate()
    pytest.assume(cursor.raw_cursor is not original)
    assert isinstance(cursor.raw_cursor, Cursor)


@pytest.mark.parametrize("error, transient", [
    (AutoReconnect("connection closed"), True),
    (NetworkTimeout("timed out"), True),
    (ServerSelectionTimeoutError("no servers"), True),
    (ConnectionFailure("refused"), True),
    (CursorNotFound("cursor id not found", code=43), True),
    (OperationFailure("unknown operator: $foo", code=2), False),
    (ValueError("bad value"), False),
])
def test_transient_errors(mongo_collection, error, transient):
    cursor = find(mongo_collection, {})
    assert cursor.is_transient(error) is transient
