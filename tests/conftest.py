"""
Pytest fixtures: an app wired to an in-memory contacts collection.

``FakeCollection`` implements the slice of the motor collection API the
routes use and enforces the unique ``contact_name`` index the real
store has.  It returns pymongo's own result objects so handlers see the
same attributes they would in production.
"""
import copy

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from contacts_api.core.config import Settings
from contacts_api.db.mongo import get_contacts_collection
from main import create_app


def _matches(doc, query):
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    async def to_list(self, length=None):
        docs = self._docs if length is None else self._docs[:length]
        return [copy.deepcopy(doc) for doc in docs]


class FakeCollection:
    def __init__(self):
        self.docs = []
        self.calls = []

    def _check_unique(self, name, ignore=None):
        for doc in self.docs:
            if doc is not ignore and doc.get("contact_name") == name:
                raise DuplicateKeyError("E11000 duplicate key error", code=11000)

    def find(self, query):
        self.calls.append("find")
        return FakeCursor([doc for doc in self.docs if _matches(doc, query)])

    async def find_one(self, query):
        self.calls.append("find_one")
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, document):
        self.calls.append("insert_one")
        self._check_unique(document.get("contact_name"))
        document["_id"] = ObjectId()
        self.docs.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], True)

    async def update_one(self, query, update):
        self.calls.append("update_one")
        changes = update["$set"]
        for doc in self.docs:
            if _matches(doc, query):
                if "contact_name" in changes:
                    self._check_unique(changes["contact_name"], ignore=doc)
                modified = any(doc.get(k) != v for k, v in changes.items())
                doc.update(changes)
                return UpdateResult({"n": 1, "nModified": int(modified), "ok": 1.0}, True)
        return UpdateResult({"n": 0, "nModified": 0, "ok": 1.0}, True)

    async def delete_one(self, query):
        self.calls.append("delete_one")
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return DeleteResult({"n": 1, "ok": 1.0}, True)
        return DeleteResult({"n": 0, "ok": 1.0}, True)

    def snapshot(self):
        return copy.deepcopy(self.docs)


class UnreachableCollection:
    """Every store call fails the way an unreachable server does."""

    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    find = find_one = _fail

    async def insert_one(self, *args, **kwargs):
        self._fail()

    async def update_one(self, *args, **kwargs):
        self._fail()

    async def delete_one(self, *args, **kwargs):
        self._fail()


@pytest.fixture
def settings():
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        db_name="contact_directory_test",
        collection="contacts",
    )


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def app(settings, collection):
    app = create_app(settings)
    app.dependency_overrides[get_contacts_collection] = lambda: collection
    return app


@pytest.fixture
def client(app):
    # Not used as a context manager: the lifespan would open a real client
    return TestClient(app)


@pytest.fixture
def broken_client(settings):
    app = create_app(settings)
    app.dependency_overrides[get_contacts_collection] = lambda: UnreachableCollection()
    return TestClient(app)


@pytest.fixture
def ana():
    return {
        "contact_name": "Ana",
        "phone_number": "555",
        "message": "hi",
        "image_url": "http://x/y.png",
    }
