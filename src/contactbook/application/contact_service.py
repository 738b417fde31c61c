"""Contact CRUD and favorite toggle. Stateless; one instance can serve every request."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from contactbook.application.dto import Invalid, NotFound, StorageUnavailable
from contactbook.application.identity import IdPolicy
from contactbook.application.ports import ContactRepository, StorageUnavailableError
from contactbook.application.validation import (
    validate_create,
    validate_favorite,
    validate_update,
)
from contactbook.domain import Contact

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContactService:
    """Core flow: check id -> validate body -> delegate to the repository -> shape the result.

    Bad input and missing records come back as Invalid / NotFound values;
    repository failures come back as StorageUnavailable. Nothing is raised.
    """

    def __init__(self, repository: ContactRepository, id_policy: IdPolicy) -> None:
        self._repo = repository
        self._ids = id_policy

    def _call_store(self, operation: str, call: Callable[[], T]) -> T | StorageUnavailable:
        try:
            return call()
        except StorageUnavailableError as exc:
            logger.exception("Contact store failed during %s", operation)
            return StorageUnavailable(reason=f"Storage unavailable: {exc}")

    def _found(self, contact_id: str, contact: Contact | StorageUnavailable | None):
        if contact is None:
            return NotFound(contact_id=contact_id)
        return contact

    def list_contacts(self) -> list[Contact] | StorageUnavailable:
        """Return all contacts (empty list when there are none)."""
        return self._call_store("list", self._repo.list_all)

    def get_contact(self, contact_id: str) -> Contact | NotFound | StorageUnavailable:
        """Return a contact by id. A malformed id is reported as NotFound."""
        if not self._ids.is_valid(contact_id):
            return NotFound(contact_id=contact_id)
        contact = self._call_store("get", lambda: self._repo.get_by_id(contact_id))
        return self._found(contact_id, contact)

    def create_contact(self, payload: Any) -> Contact | Invalid | StorageUnavailable:
        """Validate and store a new contact under a freshly minted id."""
        fields = validate_create(payload)
        if isinstance(fields, Invalid):
            return fields
        contact_id = self._ids.new_id()
        return self._call_store("create", lambda: self._repo.create(contact_id, fields))

    def update_contact(
        self, contact_id: str, payload: Any
    ) -> Contact | NotFound | Invalid | StorageUnavailable:
        """Merge the recognized fields of payload into an existing contact."""
        if not self._ids.is_valid(contact_id):
            return NotFound(contact_id=contact_id)
        fields = validate_update(payload)
        if isinstance(fields, Invalid):
            return fields
        contact = self._call_store("update", lambda: self._repo.update(contact_id, fields))
        return self._found(contact_id, contact)

    def set_favorite(
        self, contact_id: str, payload: Any
    ) -> Contact | NotFound | Invalid | StorageUnavailable:
        """Set the favorite flag from a {"favorite": bool} payload."""
        if not self._ids.is_valid(contact_id):
            return NotFound(contact_id=contact_id)
        favorite = validate_favorite(payload)
        if isinstance(favorite, Invalid):
            return favorite
        contact = self._call_store(
            "set_favorite", lambda: self._repo.set_favorite(contact_id, favorite)
        )
        return self._found(contact_id, contact)

    def delete_contact(self, contact_id: str) -> Contact | NotFound | StorageUnavailable:
        """Remove a contact and return what was stored."""
        if not self._ids.is_valid(contact_id):
            return NotFound(contact_id=contact_id)
        contact = self._call_store("delete", lambda: self._repo.delete(contact_id))
        return self._found(contact_id, contact)
