"""JSON-file implementation of ContactRepository.
The whole collection lives in one file holding a JSON array of contacts:
[{"id", "name", "email", "phone", "favorite", "createdAt", "updatedAt"}, ...].
Every mutation reads the file, changes the list and rewrites it in full.
"""

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from contactbook.application.ports import StorageUnavailableError
from contactbook.domain import CONTACT_FIELDS, Contact

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _datetime_to_iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _iso_to_datetime(s: str | None) -> datetime | None:
    if not s:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _row_to_contact(row: dict) -> Contact:
    return Contact(
        id=str(row["id"]),
        name=row["name"],
        email=row.get("email"),
        phone=row.get("phone"),
        favorite=row.get("favorite", False),
        created_at=_iso_to_datetime(row.get("createdAt")),
        updated_at=_iso_to_datetime(row.get("updatedAt")),
    )


def _contact_to_row(contact: Contact) -> dict:
    return {
        "id": contact.id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "favorite": contact.favorite,
        "createdAt": _datetime_to_iso(contact.created_at),
        "updatedAt": _datetime_to_iso(contact.updated_at),
    }


class JsonFileContactRepository:
    """Stores contacts in a single JSON file.

    Read-modify-write of the whole file is not safe for concurrent writers on
    its own: two overlapping mutations could both start from the same snapshot
    and each write back a list missing the other's change. All mutations are
    therefore serialized behind one lock. Use one instance per file per process.
    Writes go through a temp file and os.replace so readers never see a partial file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> list[Contact]:
        try:
            if not self._path.exists():
                return []
            data = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as exc:
            raise StorageUnavailableError(f"Cannot read {self._path}: {exc}") from exc
        if not isinstance(data, list):
            raise StorageUnavailableError(f"{self._path} does not hold a JSON array.")
        try:
            return [_row_to_contact(row) for row in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageUnavailableError(f"Corrupt contact row in {self._path}: {exc}") from exc

    def _write(self, contacts: list[Contact]) -> None:
        payload = json.dumps([_contact_to_row(c) for c in contacts], indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot write {self._path}: {exc}") from exc

    def _mutate(self, change: Callable[[list[Contact]], tuple[list[Contact] | None, T]]) -> T:
        """Run change(contacts) under the lock. change returns (new list or None, result).
        The file is rewritten only when a new list is returned.
        """
        with self._lock:
            contacts = self._read()
            new_contacts, result = change(contacts)
            if new_contacts is not None:
                self._write(new_contacts)
            return result

    def list_all(self) -> list[Contact]:
        return self._read()

    def get_by_id(self, contact_id: str) -> Contact | None:
        for contact in self._read():
            if contact.id == contact_id:
                return contact
        return None

    def create(self, contact_id: str, fields: Mapping[str, Any]) -> Contact:
        now = datetime.now(timezone.utc)
        data = {key: fields[key] for key in CONTACT_FIELDS if key in fields}
        contact = Contact(id=contact_id, created_at=now, updated_at=now, **data)

        def change(contacts: list[Contact]):
            if any(c.id == contact_id for c in contacts):
                raise ValueError(f"Contact id {contact_id!r} already exists.")
            return [*contacts, contact], contact

        created = self._mutate(change)
        logger.debug("Created contact %s in %s", contact_id, self._path)
        return created

    def update(self, contact_id: str, fields: Mapping[str, Any]) -> Contact | None:
        changes = {key: fields[key] for key in CONTACT_FIELDS if key in fields}

        def change(contacts: list[Contact]):
            for i, contact in enumerate(contacts):
                if contact.id == contact_id:
                    row = _contact_to_row(contact)
                    row.update(changes)
                    row["updatedAt"] = _datetime_to_iso(datetime.now(timezone.utc))
                    updated = _row_to_contact(row)
                    return [*contacts[:i], updated, *contacts[i + 1 :]], updated
            return None, None

        updated = self._mutate(change)
        if updated is not None:
            logger.debug("Updated contact %s in %s", contact_id, self._path)
        return updated

    def set_favorite(self, contact_id: str, favorite: bool) -> Contact | None:
        return self.update(contact_id, {"favorite": favorite})

    def delete(self, contact_id: str) -> Contact | None:
        def change(contacts: list[Contact]):
            for i, contact in enumerate(contacts):
                if contact.id == contact_id:
                    return [*contacts[:i], *contacts[i + 1 :]], contact
            return None, None

        removed = self._mutate(change)
        if removed is not None:
            logger.debug("Deleted contact %s from %s", contact_id, self._path)
        return removed
