"""In-memory implementation of ContactRepository (no DB)."""

from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from contactbook.domain import CONTACT_FIELDS, Contact


class InMemoryContactRepository:
    """Stores contacts in memory. Order preserved by insertion."""

    def __init__(self) -> None:
        self._by_id: dict[str, Contact] = {}

    def list_all(self) -> list[Contact]:
        return list(self._by_id.values())

    def get_by_id(self, contact_id: str) -> Contact | None:
        return self._by_id.get(contact_id)

    def create(self, contact_id: str, fields: Mapping[str, Any]) -> Contact:
        if contact_id in self._by_id:
            raise ValueError(f"Contact id {contact_id!r} already exists.")
        now = datetime.now(timezone.utc)
        data = {key: fields[key] for key in CONTACT_FIELDS if key in fields}
        contact = Contact(id=contact_id, created_at=now, updated_at=now, **data)
        self._by_id[contact_id] = contact
        return contact

    def update(self, contact_id: str, fields: Mapping[str, Any]) -> Contact | None:
        contact = self._by_id.get(contact_id)
        if contact is None:
            return None
        changes = {key: fields[key] for key in CONTACT_FIELDS if key in fields}
        updated = replace(contact, updated_at=datetime.now(timezone.utc), **changes)
        self._by_id[contact_id] = updated
        return updated

    def set_favorite(self, contact_id: str, favorite: bool) -> Contact | None:
        return self.update(contact_id, {"favorite": favorite})

    def delete(self, contact_id: str) -> Contact | None:
        return self._by_id.pop(contact_id, None)
