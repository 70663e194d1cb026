"""Domain model entities for certdesk.

These are pure data classes representing the records served by the remote
service, independent of the JSON wire format and of the local database
schema. Backends convert to and from these types in their mapper modules.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class Student:
    """Student record domain entity."""

    id: Optional[str]
    candidate_name: str
    relation: str = ""
    parent_name: str = ""
    institute: str = ""
    course: str = ""
    division: str = ""
    marks_obtained: str = ""
    marks_total: str = ""
    date: str = ""
    place: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def values(self) -> dict[str, str]:
        """Return the editable fields keyed by field name."""
        return {
            "candidate_name": self.candidate_name,
            "relation": self.relation,
            "parent_name": self.parent_name,
            "institute": self.institute,
            "course": self.course,
            "division": self.division,
            "marks_obtained": self.marks_obtained,
            "marks_total": self.marks_total,
            "date": self.date,
            "place": self.place,
        }


def _as_text(value: Any) -> str:
    # Key details are free-form JSON, so names may arrive as numbers
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Certificate:
    """Certificate verification record domain entity."""

    id: str
    timestamp: Optional[datetime]
    is_legitimate: bool = False
    candidate_name: Optional[str] = None
    institute: Optional[str] = None
    course: Optional[str] = None
    signature_similarity_score: Optional[float] = None
    signature_match: Optional[bool] = None
    authenticity_check: Optional[str] = None
    key_details: dict[str, Any] = field(default_factory=dict)

    def detail(self, key: str) -> Any:
        """Return a key detail value, or None when absent or blank."""
        value = self.key_details.get(key)
        if value == "":
            return None
        return value

    @property
    def display_name(self) -> str:
        return _as_text(self.detail("name") or self.candidate_name)

    @property
    def display_course(self) -> str:
        return _as_text(self.detail("course") or self.course)


@dataclass(frozen=True)
class CertificatePage:
    """Envelope returned by the certificate listing endpoint."""

    records: tuple[Certificate, ...]
    total: Optional[int] = None


class LegitimacyFilter(Enum):
    """Legitimacy predicate for certificate filtering."""

    ALL = "all"
    LEGIT = "legit"
    NOT = "not"


class CompareBy(Enum):
    """Grouping field for certificate comparison charts."""

    COMPLETION_YEAR = "completion_year"
    COURSE = "course"
    COLLEGE = "college"


@dataclass(frozen=True)
class FilterState:
    """Certificate filter predicates, combined with logical AND."""

    query: str = ""
    year: str = "all"
    legitimacy: LegitimacyFilter = LegitimacyFilter.ALL


class FieldKind(Enum):
    """Input kind for a form field."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class FieldDescriptor:
    """Static description of one form field."""

    key: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False


@dataclass(frozen=True)
class GroupCount:
    """One aggregation bucket."""

    name: str
    value: int


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Per-date certificate counts."""

    date: str
    legitimate: int
    suspicious: int
    total: int


@dataclass(frozen=True)
class CertificateStats:
    """Summary statistics over a certificate collection."""

    total: int
    legitimate: int
    suspicious: int
    recent_week: int
    legitimacy_rate: int
    avg_signature_score: float
