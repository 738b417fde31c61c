"""MongoDB implementation of ContactRepository.
One document per contact in a single collection:
{_id, name, email, phone, favorite, createdAt, updatedAt}.
_id is an ObjectId when the contact id is a well-formed ObjectId string, and the
plain string otherwise (generated ids), so any id policy can be paired with this store.
Each mutation is a single atomic driver call, so no in-process locking is needed;
concurrent writes to the same document are last-write-wins.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from contactbook.application.ports import StorageUnavailableError
from contactbook.domain import CONTACT_FIELDS, Contact

logger = logging.getLogger(__name__)

# Only these keys are read back; "__v" and anything else never leave the store.
_PROJECTION = {"name": 1, "email": 1, "phone": 1, "favorite": 1, "createdAt": 1, "updatedAt": 1}


def _now() -> datetime:
    # BSON dates keep milliseconds only; truncate so what create returns matches later reads.
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _as_utc(dt: datetime | None) -> datetime | None:
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)


def _to_key(contact_id: str) -> ObjectId | str | None:
    """Return the _id value for contact_id, or None if it cannot name a document."""
    if not isinstance(contact_id, str) or not contact_id:
        return None
    if ObjectId.is_valid(contact_id):
        return ObjectId(contact_id)
    return contact_id


def _doc_to_contact(doc: Mapping[str, Any]) -> Contact:
    """Map a stored document to a Contact. A malformed document means a corrupt store."""
    try:
        return Contact(
            id=str(doc["_id"]),
            name=doc["name"],
            email=doc.get("email"),
            phone=doc.get("phone"),
            favorite=doc.get("favorite", False),
            created_at=_as_utc(doc.get("createdAt")),
            updated_at=_as_utc(doc.get("updatedAt")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageUnavailableError(
            f"Corrupt contact document {doc.get('_id')!r}: {exc!r}"
        ) from exc


def connect(uri: str, database: str, collection: str, *, timeout_ms: int = 5000) -> tuple[MongoClient, Collection]:
    """Open a client and return it with the contacts collection. Caller closes the client."""
    client = MongoClient(uri, tz_aware=True, serverSelectionTimeoutMS=timeout_ms)
    return client, client[database][collection]


class MongoContactRepository:
    """Stores contacts as documents in one MongoDB collection."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def list_all(self) -> list[Contact]:
        try:
            docs = list(self._collection.find({}, _PROJECTION).sort("_id", ASCENDING))
        except PyMongoError as exc:
            raise StorageUnavailableError(str(exc)) from exc
        return [_doc_to_contact(doc) for doc in docs]

    def get_by_id(self, contact_id: str) -> Contact | None:
        key = _to_key(contact_id)
        if key is None:
            return None
        try:
            doc = self._collection.find_one({"_id": key}, _PROJECTION)
        except PyMongoError as exc:
            raise StorageUnavailableError(str(exc)) from exc
        return _doc_to_contact(doc) if doc else None

    def create(self, contact_id: str, fields: Mapping[str, Any]) -> Contact:
        key = _to_key(contact_id)
        if key is None:
            raise ValueError(f"{contact_id!r} is not a usable contact id.")
        now = _now()
        doc = {name: fields[name] for name in CONTACT_FIELDS if name in fields}
        doc.setdefault("favorite", False)
        doc.update({"_id": key, "createdAt": now, "updatedAt": now})
        contact = _doc_to_contact(doc)
        try:
            self._collection.insert_one(doc)
        except PyMongoError as exc:
            raise StorageUnavailableError(str(exc)) from exc
        logger.debug("Inserted contact %s", contact_id)
        return contact

    def update(self, contact_id: str, fields: Mapping[str, Any]) -> Contact | None:
        key = _to_key(contact_id)
        if key is None:
            return None
        changes = {name: fields[name] for name in CONTACT_FIELDS if name in fields}
        changes["updatedAt"] = _now()
        try:
            doc = self._collection.find_one_and_update(
                {"_id": key},
                {"$set": changes},
                projection=_PROJECTION,
                upsert=False,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StorageUnavailableError(str(exc)) from exc
        return _doc_to_contact(doc) if doc else None

    def set_favorite(self, contact_id: str, favorite: bool) -> Contact | None:
        return self.update(contact_id, {"favorite": favorite})

    def delete(self, contact_id: str) -> Contact | None:
        key = _to_key(contact_id)
        if key is None:
            return None
        try:
            doc = self._collection.find_one_and_delete({"_id": key}, projection=_PROJECTION)
        except PyMongoError as exc:
            raise StorageUnavailableError(str(exc)) from exc
        return _doc_to_contact(doc) if doc else None
