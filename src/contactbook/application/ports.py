"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Mapping
from typing import Any, Protocol

from contactbook.domain import Contact


class StorageUnavailableError(Exception):
    """Raised by a repository when its medium is unreachable or corrupt."""


class ContactRepository(Protocol):
    """Persists and queries Contact records.

    Adapters raise StorageUnavailableError on I/O failure; a missing id is
    never an error and is reported as None.
    """

    def list_all(self) -> list[Contact]:
        """Return all contacts in a stable order (empty list when there are none)."""
        ...

    def get_by_id(self, contact_id: str) -> Contact | None:
        """Return the contact with the given id, or None."""
        ...

    def create(self, contact_id: str, fields: Mapping[str, Any]) -> Contact:
        """Store a new contact under contact_id. Sets favorite default and timestamps."""
        ...

    def update(self, contact_id: str, fields: Mapping[str, Any]) -> Contact | None:
        """Merge fields into an existing contact. Returns the updated contact, or None. Never creates."""
        ...

    def set_favorite(self, contact_id: str, favorite: bool) -> Contact | None:
        """Set only the favorite flag. Returns the updated contact, or None."""
        ...

    def delete(self, contact_id: str) -> Contact | None:
        """Remove the contact. Returns its last stored value, or None if it did not exist."""
        ...
