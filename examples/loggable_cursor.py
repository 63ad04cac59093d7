import os
import logging
from pymongo import MongoClient
from mongocursor import find
from mongocursor.utils import logger_callable

logging.basicConfig(level=logging.DEBUG)

params = {
    "host": os.environ.get("MONGO_HOST", "127.0.0.1"),
    "port": int(os.environ.get("MONGO_PORT", 27017)),
    "username": os.environ.get("MONGO_USER"),
    "password": os.environ.get("MONGO_PASSWORD"),
    "database": os.environ.get("MONGO_DATABASE", "navigator")
}


def check_cursor(params):
    client = MongoClient(
        host=params["host"],
        port=params["port"],
        username=params["username"],
        password=params["password"],
        serverSelectionTimeoutMS=5000
    )
    collection = client[params["database"]]["users"]
    cursor = find(
        collection,
        {"age": {"$gt": 18}},
        {"name": 1, "age": 1},
        num_retries=3,
        retry_delay=0.5,
        logger_callable=logger_callable()
    )
    with cursor:
        for document in cursor.sort([("age", -1)]).limit(10):
            print(document)
    print('COUNT: ', cursor.count())
    client.close()


if __name__ == '__main__':
    check_cursor(params)
