"""Results returned by ContactService instead of raising."""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"


@dataclass(frozen=True)
class Invalid:
    """Payload failed a validation rule. reason describes the first violation."""

    reason: str

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.VALIDATION

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class NotFound:
    """No contact with this id, or the id is not well-formed for the backend.

    Both cases look the same to callers.
    """

    contact_id: str

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.NOT_FOUND

    @property
    def message(self) -> str:
        return "Not found"


@dataclass(frozen=True)
class StorageUnavailable:
    """The backing file or database could not be read or written."""

    reason: str = "Storage unavailable"

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.STORAGE_UNAVAILABLE

    @property
    def message(self) -> str:
        return self.reason


ServiceError = Invalid | NotFound | StorageUnavailable
