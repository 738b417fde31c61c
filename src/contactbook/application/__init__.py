"""Application layer: use cases, ports, validation, id policies and DTOs. Depends only on domain."""

from contactbook.application.contact_service import ContactService
from contactbook.application.dto import (
    ErrorKind,
    Invalid,
    NotFound,
    ServiceError,
    StorageUnavailable,
)
from contactbook.application.identity import (
    GeneratedIdPolicy,
    IdPolicy,
    ObjectIdPolicy,
    id_policy_from_name,
)
from contactbook.application.ports import ContactRepository, StorageUnavailableError
from contactbook.application.validation import (
    validate_create,
    validate_favorite,
    validate_update,
)

__all__ = [
    "ContactRepository",
    "ContactService",
    "ErrorKind",
    "GeneratedIdPolicy",
    "IdPolicy",
    "Invalid",
    "NotFound",
    "ObjectIdPolicy",
    "ServiceError",
    "StorageUnavailable",
    "StorageUnavailableError",
    "id_policy_from_name",
    "validate_create",
    "validate_favorite",
    "validate_update",
]
