"""Field descriptors for record forms."""

from typing import Mapping, Optional

from certdesk.domain.entities import FieldDescriptor, FieldKind
from certdesk.domain.errors import (
    ValidationError,
    required_field_missing,
    unknown_field,
)


# Order matters: it is also the positional column order for bulk import.
STUDENT_FIELDS: tuple[FieldDescriptor, ...] = (
    FieldDescriptor("candidate_name", "Candidate Name", FieldKind.TEXT, required=True),
    FieldDescriptor("relation", "Relation"),
    FieldDescriptor("parent_name", "Parent Name"),
    FieldDescriptor("institute", "Institute"),
    FieldDescriptor("course", "Course"),
    FieldDescriptor("division", "Division"),
    FieldDescriptor("marks_obtained", "Marks Obtained", FieldKind.NUMBER),
    FieldDescriptor("marks_total", "Total Marks", FieldKind.NUMBER),
    FieldDescriptor("date", "Date", FieldKind.DATE),
    FieldDescriptor("place", "Place"),
)

STUDENT_FIELD_KEYS: tuple[str, ...] = tuple(f.key for f in STUDENT_FIELDS)


def get_field(key: str) -> Optional[FieldDescriptor]:
    """Look up a student field descriptor by key."""
    for descriptor in STUDENT_FIELDS:
        if descriptor.key == key:
            return descriptor
    return None


def validate_student_values(
    values: Mapping[str, Optional[str]], partial: bool = False
) -> dict[str, str]:
    """Validate and normalize student form values.

    Args:
        values: Field values keyed by field name
        partial: If True, only the supplied fields are validated (updates)

    Returns:
        Dict of trimmed values. For full validation every field is present,
        missing ones as empty strings.

    Raises:
        ValidationError: If a key is unknown or a required field is blank
    """
    for key in values:
        if get_field(key) is None:
            raise ValidationError(unknown_field(key))

    cleaned: dict[str, str] = {}
    for descriptor in STUDENT_FIELDS:
        if partial and descriptor.key not in values:
            continue
        raw = values.get(descriptor.key)
        value = raw.strip() if raw else ""
        if descriptor.required and not value:
            raise ValidationError(required_field_missing(descriptor.label))
        cleaned[descriptor.key] = value

    return cleaned
