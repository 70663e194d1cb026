"""Bulk student import domain service."""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from certdesk.domain.errors import (
    INVALID_UPLOAD,
    NO_VALID_RECORDS,
    DomainError,
    ValidationError,
)
from certdesk.domain.fields import STUDENT_FIELD_KEYS
from certdesk.domain.student import StudentService

logger = logging.getLogger(__name__)

FIELD_COUNT = len(STUDENT_FIELD_KEYS)
CSV_CONTENT_TYPE = "text/csv"


def _strip_quotes(value: str) -> str:
    """Remove one surrounding double quote from each end of a field."""
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def parse_line(line: str, strip_quotes: bool = False) -> Optional[dict[str, str]]:
    """Map one comma-separated line onto the positional student fields.

    Returns:
        Field values keyed by field name, or None when the line has fewer
        fields than the record schema
    """
    fields = [field.strip() for field in line.split(",")]
    if len(fields) < FIELD_COUNT:
        return None
    if strip_quotes:
        fields = [_strip_quotes(field) for field in fields]
    return dict(zip(STUDENT_FIELD_KEYS, fields))


def parse_delimited_text(text: str) -> list[dict[str, str]]:
    """Parse typed or pasted comma-separated text into candidate records.

    Blank lines and lines with too few fields are dropped.
    """
    candidates = []
    for line in text.splitlines():
        if not line.strip():
            continue
        candidate = parse_line(line)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def parse_csv_text(text: str) -> list[dict[str, str]]:
    """Parse CSV file content into candidate records.

    The first line is a header and is always discarded. Fields additionally
    lose their surrounding quotes.
    """
    candidates = []
    for line in text.splitlines()[1:]:
        if not line.strip():
            continue
        candidate = parse_line(line, strip_quotes=True)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def is_csv_upload(path: Path, content_type: Optional[str] = None) -> bool:
    """Check that an upload declares the CSV type or has a .csv name."""
    if content_type is not None and content_type.split(";")[0].strip() == CSV_CONTENT_TYPE:
        return True
    return path.name.lower().endswith(".csv")


def read_upload(file_path: str, content_type: Optional[str] = None) -> str:
    """Read an uploaded CSV file.

    Args:
        file_path: Path to the uploaded file
        content_type: Declared MIME type of the upload, if known

    Returns:
        File content

    Raises:
        ValidationError: If the upload is not a CSV file
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(file_path)
    if not is_csv_upload(path, content_type):
        raise ValidationError(INVALID_UPLOAD)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    return path.read_text(encoding="utf-8-sig")


class BulkImportService:
    """Service for importing many students from one block of text."""

    def __init__(self, student_service: StudentService):
        """Initialize bulk import service.

        Args:
            student_service: Student service whose collection receives the records
        """
        self.student_service = student_service

    def import_records(self, candidates: Sequence[dict[str, str]]) -> dict[str, Any]:
        """Submit candidate records one at a time.

        A failed candidate is logged and skipped; the rest are still submitted.

        Args:
            candidates: Parsed candidate records

        Returns:
            Dict with import statistics:
            - imported: number of records the backend acknowledged
            - failed: number of candidates that were rejected
            - errors: list of error messages
            - records: the acknowledged students

        Raises:
            ValidationError: If there are no candidates
        """
        if not candidates:
            raise ValidationError(NO_VALID_RECORDS)

        imported = []
        errors = []

        for row_num, candidate in enumerate(candidates, start=1):
            try:
                imported.append(self.student_service.create_student(candidate))
            except DomainError as e:
                logger.warning("Failed to import record %d: %s", row_num, e)
                errors.append(f"Record {row_num}: {e}")
                continue

        logger.info("Imported %d of %d records", len(imported), len(candidates))
        return {
            "imported": len(imported),
            "failed": len(errors),
            "errors": errors,
            "records": imported,
        }

    def import_text(self, text: str, csv_mode: bool = False) -> dict[str, Any]:
        """Parse delimited text and import the resulting records."""
        candidates = parse_csv_text(text) if csv_mode else parse_delimited_text(text)
        return self.import_records(candidates)

    def import_file(
        self, file_path: str, content_type: Optional[str] = None
    ) -> dict[str, Any]:
        """Read an uploaded CSV file and import its records."""
        text = read_upload(file_path, content_type)
        return self.import_records(parse_csv_text(text))
