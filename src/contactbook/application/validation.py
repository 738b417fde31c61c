"""Validation rules for create, update and favorite-toggle payloads.

Each rule returns either a new dict holding only the recognized fields, or
Invalid with a message for the first violated constraint. Input is never
mutated and no exception escapes for bad input.
"""

from collections.abc import Mapping
from typing import Any

from contactbook.application.dto import Invalid
from contactbook.domain import CONTACT_FIELDS

_STRING_FIELDS = ("name", "email", "phone")

EMPTY_UPDATE_REASON = "Body must have at least one field"
NOT_AN_OBJECT_REASON = "Body must be a JSON object"


def _check_field(key: str, value: Any) -> Invalid | None:
    if key in _STRING_FIELDS:
        if not isinstance(value, str):
            return Invalid(reason=f'"{key}" must be a string')
        if key == "name" and not value.strip():
            return Invalid(reason='"name" is not allowed to be empty')
    elif key == "favorite" and not isinstance(value, bool):
        return Invalid(reason='"favorite" must be a boolean')
    return None


def _known_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {key: payload[key] for key in CONTACT_FIELDS if key in payload}


def validate_create(payload: Any) -> dict[str, Any] | Invalid:
    """name is required; email, phone, favorite optional. Unknown keys are dropped."""
    if not isinstance(payload, Mapping):
        return Invalid(reason=NOT_AN_OBJECT_REASON)
    if "name" not in payload:
        return Invalid(reason='"name" is required')
    fields = _known_fields(payload)
    for key, value in fields.items():
        problem = _check_field(key, value)
        if problem is not None:
            return problem
    return fields


def validate_update(payload: Any) -> dict[str, Any] | Invalid:
    """All fields optional, but at least one recognized field must be present."""
    if not isinstance(payload, Mapping):
        return Invalid(reason=NOT_AN_OBJECT_REASON)
    fields = _known_fields(payload)
    if not fields:
        return Invalid(reason=EMPTY_UPDATE_REASON)
    for key, value in fields.items():
        problem = _check_field(key, value)
        if problem is not None:
            return problem
    return fields


def validate_favorite(payload: Any) -> bool | Invalid:
    """Return the favorite flag. It must be present and a real boolean."""
    if not isinstance(payload, Mapping):
        return Invalid(reason=NOT_AN_OBJECT_REASON)
    if "favorite" not in payload:
        return Invalid(reason='"favorite" is required')
    favorite = payload["favorite"]
    if not isinstance(favorite, bool):
        return Invalid(reason='"favorite" must be a boolean')
    return favorite
