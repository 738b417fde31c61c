"""Infrastructure layer: concrete implementations of application ports."""

from contactbook.infrastructure.memory_repository import InMemoryContactRepository
from contactbook.infrastructure.persistence.json_file_repository import JsonFileContactRepository
from contactbook.infrastructure.persistence.mongo_repository import MongoContactRepository

__all__ = [
    "InMemoryContactRepository",
    "JsonFileContactRepository",
    "MongoContactRepository",
]
