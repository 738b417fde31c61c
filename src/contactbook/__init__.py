"""
Contactbook core: clean-architecture layout.

- domain: the Contact entity. No outer dependencies.
- application: use cases (ContactService), ports (ContactRepository), validation, id policies, DTOs.
- infrastructure: adapters (InMemoryContactRepository, JsonFileContactRepository, MongoContactRepository).
"""

from contactbook.application import (
    ContactRepository,
    ContactService,
    ErrorKind,
    GeneratedIdPolicy,
    Invalid,
    NotFound,
    ObjectIdPolicy,
    StorageUnavailable,
    StorageUnavailableError,
)
from contactbook.domain import Contact
from contactbook.infrastructure import (
    InMemoryContactRepository,
    JsonFileContactRepository,
    MongoContactRepository,
)

__all__ = [
    "Contact",
    "ContactRepository",
    "ContactService",
    "ErrorKind",
    "GeneratedIdPolicy",
    "InMemoryContactRepository",
    "Invalid",
    "JsonFileContactRepository",
    "MongoContactRepository",
    "NotFound",
    "ObjectIdPolicy",
    "StorageUnavailable",
    "StorageUnavailableError",
]
