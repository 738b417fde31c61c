"""Tests for MongoContactRepository. Container tests require Docker
(testcontainers) and are skipped when no Docker daemon is reachable; the
tests at the bottom run against a dict-backed collection."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from bson import ObjectId
from pymongo import MongoClient

from contactbook.application import (
    ContactService,
    GeneratedIdPolicy,
    NotFound,
    ObjectIdPolicy,
    StorageUnavailable,
)
from contactbook.application.ports import StorageUnavailableError
from contactbook.domain import Contact
from contactbook.infrastructure import MongoContactRepository
from contactbook.infrastructure.persistence.mongo_repository import connect


@pytest.fixture(scope="session")
def mongo_client():
    from testcontainers.mongodb import MongoDbContainer

    container = MongoDbContainer("mongo:7.0")
    try:
        container.start()
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"Docker not available: {exc}")
    client = MongoClient(container.get_connection_url(), tz_aware=True)
    try:
        yield client
    finally:
        client.close()
        container.stop()


@pytest.fixture
def collection(mongo_client):
    """Fresh collection per test so tests are independent."""
    coll = mongo_client["contacts_test"]["contacts"]
    coll.delete_many({})
    yield coll


@pytest.fixture
def repo(collection):
    return MongoContactRepository(collection)


def _new_id() -> str:
    return str(ObjectId())


def test_create_get_list(repo):
    contact_id = _new_id()
    created = repo.create(contact_id, {"name": "Ada", "email": "ada@example.com"})
    assert created.id == contact_id
    assert created.favorite is False
    assert created.created_at is not None
    assert created.updated_at == created.created_at

    assert repo.get_by_id(contact_id) == created
    assert repo.list_all() == [created]


def test_document_layout_and_hidden_fields(repo, collection):
    contact_id = _new_id()
    repo.create(contact_id, {"name": "Ada"})
    collection.update_one({"_id": ObjectId(contact_id)}, {"$set": {"__v": 3, "legacy": "x"}})

    doc = collection.find_one({"_id": ObjectId(contact_id)})
    assert isinstance(doc["_id"], ObjectId)
    assert doc["favorite"] is False
    assert "createdAt" in doc and "updatedAt" in doc

    found = repo.get_by_id(contact_id)
    assert not hasattr(found, "__v")
    assert found.name == "Ada"


def test_update_and_set_favorite(repo):
    contact_id = _new_id()
    created = repo.create(contact_id, {"name": "Ada", "phone": "555-0100"})

    updated = repo.update(contact_id, {"email": "ada@example.com"})
    assert updated.email == "ada@example.com"
    assert updated.phone == "555-0100"
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at

    fav = repo.set_favorite(contact_id, True)
    assert fav.favorite is True
    assert fav.email == "ada@example.com"
    assert repo.get_by_id(contact_id) == fav


def test_update_missing_does_not_upsert(repo, collection):
    assert repo.update(_new_id(), {"name": "Ghost"}) is None
    assert repo.set_favorite(_new_id(), True) is None
    assert collection.count_documents({}) == 0


def test_unknown_ids_read_as_absent(repo):
    assert repo.get_by_id("not-an-object-id") is None
    assert repo.update("123", {"name": "X"}) is None
    assert repo.delete("123") is None
    with pytest.raises(ValueError):
        repo.create("", {"name": "X"})


def test_generated_ids_are_stored_as_string_keys(repo, collection):
    service = ContactService(repo, GeneratedIdPolicy())
    created = service.create_contact({"name": "Ada"})
    assert isinstance(created, Contact)
    assert collection.find_one({"_id": created.id}) is not None
    assert service.get_contact(created.id) == created
    assert service.set_favorite(created.id, {"favorite": True}).favorite is True
    assert service.delete_contact(created.id).favorite is True
    assert isinstance(service.get_contact(created.id), NotFound)


def test_malformed_documents_are_storage_unavailable(repo, collection):
    missing_name = ObjectId()
    blank_name = ObjectId()
    collection.insert_many(
        [
            {"_id": missing_name, "email": "x@example.com"},
            {"_id": blank_name, "name": "", "favorite": "false"},
        ]
    )
    with pytest.raises(StorageUnavailableError):
        repo.get_by_id(str(missing_name))
    with pytest.raises(StorageUnavailableError):
        repo.list_all()
    service = ContactService(repo, ObjectIdPolicy())
    assert isinstance(service.get_contact(str(blank_name)), StorageUnavailable)
    assert isinstance(service.list_contacts(), StorageUnavailable)


def test_delete_returns_last_value(repo):
    contact_id = _new_id()
    repo.create(contact_id, {"name": "Ada"})
    last = repo.set_favorite(contact_id, True)
    assert repo.delete(contact_id) == last
    assert repo.get_by_id(contact_id) is None
    assert repo.delete(contact_id) is None


def test_concurrent_updates_on_different_ids(repo):
    ids = [_new_id() for _ in range(8)]
    for contact_id in ids:
        repo.create(contact_id, {"name": contact_id})
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda cid: repo.update(cid, {"phone": cid[-4:]}), ids))
    assert {c.id: c.phone for c in repo.list_all()} == {cid: cid[-4:] for cid in ids}


def test_service_with_object_ids(repo):
    service = ContactService(repo, ObjectIdPolicy())
    created = service.create_contact({"name": "Ada", "email": "ada@example.com"})
    assert ObjectId.is_valid(created.id)
    assert service.get_contact(created.id) == created
    assert isinstance(service.get_contact("nope"), NotFound)
    assert isinstance(service.get_contact(str(ObjectId())), NotFound)


def test_unreachable_server_is_storage_unavailable():
    client, collection = connect("mongodb://127.0.0.1:1", "contacts", "contacts", timeout_ms=200)
    try:
        repo = MongoContactRepository(collection)
        with pytest.raises(StorageUnavailableError):
            repo.list_all()
        with pytest.raises(StorageUnavailableError):
            repo.get_by_id(str(ObjectId()))
        service = ContactService(repo, ObjectIdPolicy())
        assert isinstance(service.delete_contact(str(ObjectId())), StorageUnavailable)
    finally:
        client.close()


class _DictCollection:
    """Just enough of a pymongo Collection for the repository, kept in a dict."""

    def __init__(self, docs=()) -> None:
        self.docs = {doc["_id"]: dict(doc) for doc in docs}

    def insert_one(self, doc):
        self.docs[doc["_id"]] = dict(doc)

    def find_one(self, query, projection=None):
        doc = self.docs.get(query["_id"])
        return dict(doc) if doc else None

    def find(self, query, projection=None):
        return _SortedDocs(list(self.docs.values()))

    def find_one_and_update(self, query, update, **kwargs):
        doc = self.docs.get(query["_id"])
        if doc is None:
            return None
        doc.update(update["$set"])
        return dict(doc)

    def find_one_and_delete(self, query, **kwargs):
        return self.docs.pop(query["_id"], None)


class _SortedDocs(list):
    def sort(self, key, direction):
        return [dict(doc) for doc in self]


def test_generated_id_policy_pairs_with_mongo_store_without_docker():
    collection = _DictCollection()
    service = ContactService(MongoContactRepository(collection), GeneratedIdPolicy())
    created = service.create_contact({"name": "Ada"})
    assert isinstance(created, Contact)
    assert created.id in collection.docs
    assert service.get_contact(created.id) == created
    assert service.update_contact(created.id, {"phone": "555"}).phone == "555"


def test_bad_documents_surface_as_storage_unavailable_without_docker():
    oid = ObjectId()
    service = ContactService(
        MongoContactRepository(_DictCollection([{"_id": oid, "email": "x@example.com"}])),
        ObjectIdPolicy(),
    )
    assert isinstance(service.get_contact(str(oid)), StorageUnavailable)
    assert isinstance(service.list_contacts(), StorageUnavailable)
    assert isinstance(service.delete_contact(str(oid)), StorageUnavailable)

    blank = MongoContactRepository(_DictCollection([{"_id": oid, "name": ""}]))
    with pytest.raises(StorageUnavailableError):
        blank.list_all()

    coerced = MongoContactRepository(
        _DictCollection([{"_id": oid, "name": "A", "favorite": "false"}])
    )
    with pytest.raises(StorageUnavailableError):
        coerced.get_by_id(str(oid))
