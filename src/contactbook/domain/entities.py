"""Domain entity: Contact."""

from dataclasses import dataclass, field
from datetime import datetime

# Client-settable attributes; everything else is owned by the store.
CONTACT_FIELDS = ("name", "email", "phone", "favorite")


@dataclass(frozen=True)
class Contact:
    """
    Represents a person in the address book.
    A Contact is identified by an id that never changes after creation.
    """

    id: str
    name: str = field(default="")
    email: str | None = None
    phone: str | None = None
    favorite: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Contact id must be non-empty.")
        if not self.name or not self.name.strip():
            raise ValueError("Contact name must be non-empty.")
        if not isinstance(self.favorite, bool):
            raise ValueError("Contact favorite must be a boolean.")
