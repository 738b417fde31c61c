"""Identifier policies: how contact ids are minted and what a well-formed id looks like."""

import secrets
from typing import Protocol

from bson import ObjectId

# 16 random bytes, 22 URL-safe characters.
GENERATED_ID_BYTES = 16


class IdPolicy(Protocol):
    name: str

    def new_id(self) -> str:
        """Return a fresh id for a contact about to be created."""
        ...

    def is_valid(self, contact_id: str) -> bool:
        """Return True if contact_id is syntactically acceptable for this policy."""
        ...


class GeneratedIdPolicy:
    """Short random opaque ids. Any non-empty string is well-formed."""

    name = "generated"

    def __init__(self, nbytes: int = GENERATED_ID_BYTES) -> None:
        self._nbytes = nbytes

    def new_id(self) -> str:
        return secrets.token_urlsafe(self._nbytes)

    def is_valid(self, contact_id: str) -> bool:
        return isinstance(contact_id, str) and bool(contact_id)


class ObjectIdPolicy:
    """BSON ObjectIds, as assigned by MongoDB drivers. Only 24-char hex strings are well-formed."""

    name = "objectid"

    def new_id(self) -> str:
        return str(ObjectId())

    def is_valid(self, contact_id: str) -> bool:
        return isinstance(contact_id, str) and ObjectId.is_valid(contact_id)


_POLICIES = {
    GeneratedIdPolicy.name: GeneratedIdPolicy,
    ObjectIdPolicy.name: ObjectIdPolicy,
}


def id_policy_from_name(name: str) -> IdPolicy:
    """Build a policy from its config name ("generated" or "objectid")."""
    key = (name or "").strip().lower()
    if key not in _POLICIES:
        raise ValueError(
            f"Unknown id policy {name!r}; expected one of {', '.join(sorted(_POLICIES))}."
        )
    return _POLICIES[key]()
