"""Mapper functions between domain entities and backend representations.

JSON mappers convert the remote service's wire format (Mongo-style ``_id``,
camelCase timestamps) and ORM mappers convert the local SQLAlchemy models.
Keeping both here isolates the domain layer from either schema.
"""

from datetime import UTC, datetime
from typing import Any, Optional

from certdesk.domain import entities as domain
from certdesk.domain.fields import STUDENT_FIELD_KEYS
from certdesk.backend.models import (
    Certificate as ORMCertificate,
    Student as ORMStudent,
)
from certdesk.utils.date_parser import parse_timestamp


def _text(value: Any) -> str:
    """Coerce a JSON scalar to the string form used by student fields."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back out
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def student_from_json(data: dict[str, Any]) -> domain.Student:
    """Convert a remote student document to a domain Student."""
    record_id = data.get("_id", data.get("id"))
    return domain.Student(
        id=str(record_id) if record_id is not None else None,
        created_at=parse_timestamp(data.get("createdAt")),
        updated_at=parse_timestamp(data.get("updatedAt")),
        **{key: _text(data.get(key)) for key in STUDENT_FIELD_KEYS},
    )


def student_to_payload(values: dict[str, str]) -> dict[str, str]:
    """Build a request body from student field values.

    Identifier and timestamps are owned by the service and never sent.
    """
    return {key: values[key] for key in STUDENT_FIELD_KEYS if key in values}


def certificate_from_json(data: dict[str, Any]) -> domain.Certificate:
    """Convert a remote certificate call record to a domain Certificate."""
    key_details = data.get("key_details")
    signature_match = data.get("signature_match")
    return domain.Certificate(
        id=_text(data.get("_id", data.get("id"))),
        timestamp=parse_timestamp(data.get("timestamp")),
        is_legitimate=bool(data.get("is_legitimate")),
        candidate_name=data.get("candidate_name"),
        institute=data.get("institute"),
        course=data.get("course"),
        signature_similarity_score=_optional_float(
            data.get("signature_similarity_score")
        ),
        signature_match=None if signature_match is None else bool(signature_match),
        authenticity_check=data.get("authenticity_check"),
        key_details=dict(key_details) if isinstance(key_details, dict) else {},
    )


def certificate_page_from_json(payload: dict[str, Any]) -> domain.CertificatePage:
    """Convert the ``{data, total?}`` listing envelope to a CertificatePage.

    Raises:
        ValueError: If the envelope or one of its records is malformed
    """
    items = payload.get("data") or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValueError("Certificate listing data must be a list of objects")
    total = payload.get("total")
    return domain.CertificatePage(
        records=tuple(certificate_from_json(item) for item in items),
        total=int(total) if total is not None else None,
    )


def student_to_domain(orm_student: ORMStudent) -> domain.Student:
    """Convert SQLAlchemy Student model to domain Student entity."""
    return domain.Student(
        id=orm_student.id,
        created_at=_as_utc(orm_student.created_at),
        updated_at=_as_utc(orm_student.updated_at),
        **{key: getattr(orm_student, key) or "" for key in STUDENT_FIELD_KEYS},
    )


def certificate_to_domain(orm_certificate: ORMCertificate) -> domain.Certificate:
    """Convert SQLAlchemy Certificate model to domain Certificate entity."""
    return domain.Certificate(
        id=orm_certificate.id,
        timestamp=_as_utc(orm_certificate.timestamp),
        is_legitimate=bool(orm_certificate.is_legitimate),
        candidate_name=orm_certificate.candidate_name,
        institute=orm_certificate.institute,
        course=orm_certificate.course,
        signature_similarity_score=orm_certificate.signature_similarity_score,
        signature_match=orm_certificate.signature_match,
        authenticity_check=orm_certificate.authenticity_check,
        key_details=dict(orm_certificate.key_details or {}),
    )
