"""Student domain service."""

import logging
from typing import Mapping, Optional, Sequence

from certdesk.backend.base import RecordBackend
from certdesk.domain.entities import Student
from certdesk.domain.errors import (
    NotFoundError,
    RemoteServiceError,
    student_not_found,
)
from certdesk.domain.fields import validate_student_values

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("candidate_name", "course", "institute")


def filter_students(students: Sequence[Student], query: str) -> list[Student]:
    """Return students whose name, course or institute contains the query.

    Matching is case-insensitive. An empty query keeps every student.
    """
    needle = query.lower()
    if not needle:
        return list(students)
    return [
        student
        for student in students
        if any(needle in getattr(student, name).lower() for name in SEARCH_FIELDS)
    ]


class StudentService:
    """Service for managing student records.

    Holds the collection fetched from the backend for the current session and
    keeps it in step with every successful create, update and delete.
    """

    def __init__(self, backend: RecordBackend):
        """Initialize student service.

        Args:
            backend: Record backend instance
        """
        self.backend = backend
        self.students: list[Student] = []

    def refresh(self) -> bool:
        """Reload the collection from the backend.

        Returns:
            True on success. On failure the error is logged, the previously
            loaded collection is kept and False is returned.
        """
        try:
            students = self.backend.list_students()
        except RemoteServiceError as e:
            logger.error("Error fetching students: %s", e)
            return False
        self.students = students
        return True

    def list_students(self, query: str = "") -> list[Student]:
        """List loaded students, optionally filtered by a search query."""
        return filter_students(self.students, query)

    def get_student(self, student_id: str) -> Optional[Student]:
        """Get a student by ID, preferring the loaded collection.

        Args:
            student_id: Student ID

        Returns:
            Student entity or None if not found
        """
        for student in self.students:
            if student.id == student_id:
                return student
        return self.backend.get_student(student_id)

    def create_student(self, values: Mapping[str, Optional[str]]) -> Student:
        """Create a student and append it to the collection.

        Args:
            values: Field values keyed by field name

        Returns:
            The created student, with the ID assigned by the backend

        Raises:
            ValidationError: If the values fail validation (no remote call is made)
            RemoteServiceError: If the backend rejects the request
        """
        cleaned = validate_student_values(values)
        try:
            created = self.backend.create_student(cleaned)
        except RemoteServiceError as e:
            logger.error("Error saving student: %s", e)
            raise
        self.students.append(created)
        return created

    def update_student(
        self, student_id: str, values: Mapping[str, Optional[str]]
    ) -> Student:
        """Update a student and replace it in the collection by ID.

        Args:
            student_id: Student ID
            values: Changed field values keyed by field name

        Returns:
            The updated student

        Raises:
            ValidationError: If the values fail validation
            NotFoundError: If the student does not exist
            RemoteServiceError: If the backend rejects the request
        """
        cleaned = validate_student_values(values, partial=True)
        try:
            updated = self.backend.update_student(student_id, cleaned)
        except RemoteServiceError as e:
            logger.error("Error saving student: %s", e)
            raise
        self.students = [
            updated if student.id == student_id else student
            for student in self.students
        ]
        return updated

    def delete_student(self, student_id: str) -> None:
        """Delete a student and remove it from the collection.

        Raises:
            NotFoundError: If the student does not exist
            RemoteServiceError: If the backend rejects the request
        """
        if not student_id:
            raise NotFoundError(student_not_found(student_id))
        try:
            self.backend.delete_student(student_id)
        except RemoteServiceError as e:
            logger.error("Error deleting student: %s", e)
            raise
        self.students = [s for s in self.students if s.id != student_id]
