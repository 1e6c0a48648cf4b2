"""
Blog database models.

Blogs are stored as documents in the `blogs` collection:
    {_id: ObjectId, title, content, author, createdAt}

BlogStore is the handle the API talks to. Every method is a single call
against the collection; pymongo failures are re-raised as StorageError.
"""
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol

from bson import ObjectId
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from apps.shared.database import check_db_connection
from apps.shared.errors import StorageError


COLLECTION_NAME = "blogs"


class InvalidBlogId(ValueError):
    """Raised when a path identifier is not a valid ObjectId."""


def parse_blog_id(value: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise InvalidBlogId(
            f'Cast to ObjectId failed for value "{value}" (type string) '
            f'at path "_id" for model "Blog"'
        )
    return ObjectId(value)


class BlogStore(Protocol):
    def find_all(self) -> list[dict[str, Any]]:
        ...

    def find_by_id(self, blog_id: ObjectId) -> Optional[dict[str, Any]]:
        ...

    def create(self, document: dict[str, Any]) -> dict[str, Any]:
        ...

    def update_by_id(self, blog_id: ObjectId, changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        ...

    def delete_by_id(self, blog_id: ObjectId) -> Optional[dict[str, Any]]:
        ...

    def database_status(self) -> str:
        ...

    def close(self) -> None:
        ...


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        raise StorageError(f"{operation} failed: {e}") from e


class MongoBlogStore:
    """BlogStore backed by a MongoDB collection."""

    def __init__(self, collection: Collection, client: Optional[MongoClient] = None):
        self.collection = collection
        # Only set when this store owns the connection and should close it
        self.client = client

    def find_all(self) -> list[dict[str, Any]]:
        with _storage_errors("find"):
            return list(self.collection.find())

    def find_by_id(self, blog_id: ObjectId) -> Optional[dict[str, Any]]:
        with _storage_errors("findById"):
            return self.collection.find_one({"_id": blog_id})

    def create(self, document: dict[str, Any]) -> dict[str, Any]:
        document = dict(document)
        with _storage_errors("insert"):
            result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    def update_by_id(self, blog_id: ObjectId, changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Apply changes and return the document as it is after the update."""
        with _storage_errors("findByIdAndUpdate"):
            if not changes:
                # An empty $set is rejected by the server
                return self.collection.find_one({"_id": blog_id})
            return self.collection.find_one_and_update(
                {"_id": blog_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

    def delete_by_id(self, blog_id: ObjectId) -> Optional[dict[str, Any]]:
        with _storage_errors("findByIdAndDelete"):
            return self.collection.find_one_and_delete({"_id": blog_id})

    def database_status(self) -> str:
        client = self.client if self.client is not None else self.collection.database.client
        return "connected" if check_db_connection(client) else "disconnected"

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


class UnconfiguredBlogStore:
    """Stand-in used when MONGO_URI is not set; every storage call fails."""

    message = "Database connection is not configured (MONGO_URI is not set)"

    def _fail(self, *args: Any, **kwargs: Any) -> Any:
        raise StorageError(self.message)

    find_all = _fail
    find_by_id = _fail
    create = _fail
    update_by_id = _fail
    delete_by_id = _fail

    def database_status(self) -> str:
        return "not configured"

    def close(self) -> None:
        pass
