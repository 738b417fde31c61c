"""Domain layer: entities. No dependencies on outer layers."""

from contactbook.domain.entities import CONTACT_FIELDS, Contact

__all__ = ["CONTACT_FIELDS", "Contact"]
