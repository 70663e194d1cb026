"""Abstract record backend interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from certdesk.domain.entities import CertificatePage, Student


class RecordBackend(ABC):
    """Abstract interface to the service that owns student and certificate records."""

    @abstractmethod
    def connect(self) -> None:
        """Open the backend connection."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the backend connection."""
        pass

    # Student operations
    @abstractmethod
    def list_students(self) -> list[Student]:
        """List all students."""
        pass

    @abstractmethod
    def get_student(self, student_id: str) -> Optional[Student]:
        """Get student by ID."""
        pass

    @abstractmethod
    def create_student(self, values: dict[str, str]) -> Student:
        """Create a student. Returns the stored record with its assigned ID."""
        pass

    @abstractmethod
    def update_student(self, student_id: str, values: dict[str, str]) -> Student:
        """Update some fields of a student. Returns the updated record."""
        pass

    @abstractmethod
    def delete_student(self, student_id: str) -> None:
        """Delete a student."""
        pass

    # Certificate operations
    @abstractmethod
    def list_certificates(self) -> CertificatePage:
        """List certificate verification records."""
        pass
