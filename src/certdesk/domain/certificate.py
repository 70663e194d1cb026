"""Certificate domain service."""

import csv
import logging
from typing import Optional, Sequence, TextIO

from certdesk.backend.base import RecordBackend
from certdesk.domain.entities import (
    Certificate,
    FilterState,
    LegitimacyFilter,
)
from certdesk.domain.errors import RemoteServiceError
from certdesk.utils.date_parser import calendar_date

logger = logging.getLogger(__name__)

UNKNOWN_YEAR = "Unknown"

EXPORT_HEADERS = (
    "Name",
    "Course",
    "College",
    "Completion Year",
    "Registration No",
    "CS No",
    "Is Legitimate",
    "Timestamp",
    "Signature Score",
    "Division",
)


def completion_year(record: Certificate) -> str:
    """Return the record's completion year, or 'Unknown' when absent."""
    year = record.detail("completion_year")
    return str(year) if year is not None else UNKNOWN_YEAR


def search_text(record: Certificate) -> str:
    """Build the lower-cased text that free-text queries match against."""
    parts = [
        record.detail("name"),
        record.detail("college"),
        record.detail("course"),
        record.detail("registration_no"),
        record.detail("cs_no"),
        record.candidate_name,
    ]
    return " ".join(str(part) for part in parts if part).lower()


def matches_filter(record: Certificate, state: FilterState) -> bool:
    """Evaluate every active predicate of a filter state against one record."""
    if state.year != "all" and completion_year(record) != state.year:
        return False
    if state.legitimacy is LegitimacyFilter.LEGIT and not record.is_legitimate:
        return False
    if state.legitimacy is LegitimacyFilter.NOT and record.is_legitimate:
        return False
    query = state.query.strip().lower()
    if not query:
        return True
    return query in search_text(record)


def filter_certificates(
    records: Sequence[Certificate], state: FilterState
) -> list[Certificate]:
    """Return the records that pass every predicate of the filter state."""
    return [record for record in records if matches_filter(record, state)]


def available_years(records: Sequence[Certificate]) -> list[str]:
    """Return the year filter choices: 'all' then known years, newest first."""
    years = {completion_year(record) for record in records}
    years.discard(UNKNOWN_YEAR)
    return ["all", *sorted(years, reverse=True)]


def _format_score(score: Optional[float]) -> str:
    # A zero score is exported blank, like a missing one; whole scores drop ".0"
    if not score:
        return ""
    if float(score).is_integer():
        return str(int(score))
    return str(score)


def export_row(record: Certificate) -> list[str]:
    """Build the export columns for one record."""
    return [
        record.display_name,
        record.display_course,
        str(record.detail("college") or ""),
        str(record.detail("completion_year") or ""),
        str(record.detail("registration_no") or ""),
        str(record.detail("cs_no") or ""),
        "Yes" if record.is_legitimate else "No",
        calendar_date(record.timestamp).isoformat() if record.timestamp else "",
        _format_score(record.signature_similarity_score),
        str(record.detail("division") or ""),
    ]


def export_certificates_csv(records: Sequence[Certificate], stream: TextIO) -> int:
    """Write records as a fully quoted CSV summary.

    Args:
        records: Records to export, typically the filtered subset
        stream: Text stream to write to

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for record in records:
        writer.writerow(export_row(record))
    return len(records)


class CertificateService:
    """Service for loading and querying certificate verification records."""

    def __init__(self, backend: RecordBackend):
        """Initialize certificate service.

        Args:
            backend: Record backend instance
        """
        self.backend = backend
        self.records: list[Certificate] = []
        self.total: Optional[int] = None

    def refresh(self) -> bool:
        """Reload records from the backend.

        Returns:
            True on success. On failure the error is logged, previously
            loaded records are kept and False is returned.
        """
        try:
            page = self.backend.list_certificates()
        except RemoteServiceError as e:
            logger.error("Failed to fetch calls: %s", e)
            return False
        self.records = list(page.records)
        self.total = page.total
        return True

    def filter(self, state: FilterState) -> list[Certificate]:
        """Filter the loaded records."""
        return filter_certificates(self.records, state)

    def years(self) -> list[str]:
        """Year filter choices for the loaded records."""
        return available_years(self.records)
