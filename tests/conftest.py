import os

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

# Never reach for a real database while tests import the app module
os.environ.pop("MONGO_URI", None)

from apps.blog.main import create_app
from apps.blog.models import COLLECTION_NAME, MongoBlogStore


class FailingCollection:
    """Collection double whose every operation fails like an unreachable server."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")
        return fail


@pytest.fixture
def collection():
    return mongomock.MongoClient(tz_aware=True)["blog_service_test"][COLLECTION_NAME]


@pytest.fixture
def store(collection):
    return MongoBlogStore(collection)


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))


@pytest.fixture
def failing_client():
    return TestClient(create_app(store=MongoBlogStore(FailingCollection())))


@pytest.fixture
def blog_payload():
    return {"title": "Hello", "content": "World", "author": "Ann"}
