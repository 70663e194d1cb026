"""SQLAlchemy implementation of the record backend.

Serves the same contract as the remote service from a local database. With the
default in-memory URL nothing outlives the process.
"""

from datetime import UTC
from typing import Any, Optional
from sqlalchemy.orm import Session

from certdesk.backend.base import RecordBackend
from certdesk.backend.models import (
    Certificate,
    Student,
    create_session_factory,
)
from certdesk.backend.mappers import (
    certificate_to_domain,
    student_to_domain,
    student_to_payload,
)
from certdesk.domain.entities import (
    CertificatePage,
    Student as DomainStudent,
)
from certdesk.domain.errors import NotFoundError, student_not_found
from certdesk.utils.date_parser import parse_timestamp


class SQLAlchemyRecordBackend(RecordBackend):
    """SQLAlchemy-based implementation of RecordBackend interface."""

    def __init__(self, database_url: str = "sqlite://"):
        """Initialize SQLAlchemy backend.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite://' for an
                in-memory store, 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _require_student(self, session: Session, student_id: str) -> Student:
        student = session.get(Student, student_id)
        if student is None:
            raise NotFoundError(student_not_found(student_id))
        return student

    # Student operations
    def list_students(self) -> list[DomainStudent]:
        """List all students in insertion order."""
        session = self._get_session()
        # Unordered scan returns rows in rowid (insertion) order
        students = session.query(Student).all()
        return [student_to_domain(s) for s in students]

    def get_student(self, student_id: str) -> Optional[DomainStudent]:
        """Get student by ID."""
        session = self._get_session()
        student = session.get(Student, student_id)
        if student is None:
            return None
        return student_to_domain(student)

    def create_student(self, values: dict[str, str]) -> DomainStudent:
        """Create a student. Returns the stored record with its assigned ID."""
        session = self._get_session()
        student = Student(**student_to_payload(values))
        session.add(student)
        session.commit()
        return student_to_domain(student)

    def update_student(self, student_id: str, values: dict[str, str]) -> DomainStudent:
        """Update some fields of a student. Returns the updated record."""
        session = self._get_session()
        student = self._require_student(session, student_id)
        for key, value in student_to_payload(values).items():
            setattr(student, key, value)
        session.commit()
        return student_to_domain(student)

    def delete_student(self, student_id: str) -> None:
        """Delete a student."""
        session = self._get_session()
        student = self._require_student(session, student_id)
        session.delete(student)
        session.commit()

    # Certificate operations
    def list_certificates(self) -> CertificatePage:
        """List certificate records in timestamp order."""
        session = self._get_session()
        certificates = session.query(Certificate).order_by(Certificate.timestamp).all()
        records = tuple(certificate_to_domain(c) for c in certificates)
        return CertificatePage(records=records, total=len(records))

    def add_certificate(self, data: dict[str, Any]) -> str:
        """Store a certificate record given in the remote JSON shape.

        Certificates are produced by the verification service, so this only
        exists to seed the local store. Returns the record ID.
        """
        session = self._get_session()
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = parse_timestamp(timestamp)
        if timestamp is not None and timestamp.tzinfo is not None:
            # Stored naive, read back as UTC
            timestamp = timestamp.astimezone(UTC).replace(tzinfo=None)
        certificate = Certificate(
            timestamp=timestamp,
            candidate_name=data.get("candidate_name"),
            institute=data.get("institute"),
            course=data.get("course"),
            signature_similarity_score=data.get("signature_similarity_score"),
            signature_match=data.get("signature_match"),
            is_legitimate=bool(data.get("is_legitimate")),
            authenticity_check=data.get("authenticity_check"),
            key_details=dict(data.get("key_details") or {}),
        )
        if data.get("_id"):
            certificate.id = str(data["_id"])
        session.add(certificate)
        session.commit()
        return certificate.id
