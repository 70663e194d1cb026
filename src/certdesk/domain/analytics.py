"""Certificate analytics domain service."""

import math
from collections import defaultdict
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Any, Callable, Optional, Sequence

from certdesk.domain.entities import (
    Certificate,
    CertificateStats,
    CompareBy,
    GroupCount,
    TimeSeriesPoint,
)
from certdesk.utils.date_parser import calendar_date

UNKNOWN_GROUP = "Unknown"
COMPARISON_LIMIT = 10
TIME_SERIES_LIMIT = 30
RECENT_WINDOW = timedelta(days=7)


def group_by(
    records: Sequence[Certificate], key_fn: Callable[[Certificate], Any]
) -> list[GroupCount]:
    """Count records per key, largest group first.

    Missing keys count towards 'Unknown'. Ties keep first-seen order.
    """
    counts: dict[str, int] = defaultdict(int)
    for record in records:
        key = key_fn(record)
        if key is None or key == "":
            key = UNKNOWN_GROUP
        counts[str(key)] += 1

    return sorted(
        (GroupCount(name=name, value=value) for name, value in counts.items()),
        key=lambda group: -group.value,
    )


def comparison_key(compare_by: CompareBy) -> Callable[[Certificate], Any]:
    """Return the key function for a comparison field."""
    if compare_by is CompareBy.COMPLETION_YEAR:
        return lambda r: r.detail("completion_year")
    if compare_by is CompareBy.COURSE:
        return lambda r: r.detail("course") or r.course
    return lambda r: r.detail("college")


def comparison_data(
    records: Sequence[Certificate],
    compare_by: CompareBy,
    only_legitimate: bool = False,
    limit: int = COMPARISON_LIMIT,
) -> list[GroupCount]:
    """Top groups of records by a comparison field."""
    if only_legitimate:
        records = [r for r in records if r.is_legitimate]
    return group_by(records, comparison_key(compare_by))[:limit]


def time_series(
    records: Sequence[Certificate],
    limit: int = TIME_SERIES_LIMIT,
    tz: Optional[tzinfo] = None,
    chronological: bool = False,
) -> list[TimeSeriesPoint]:
    """Bucket records per calendar date.

    Dates are ISO keys in the given zone (UTC by default). Buckets keep the
    order in which their date was first seen unless chronological is set, and
    only the last `limit` buckets are returned. Records without a timestamp
    are skipped.
    """
    buckets: dict[str, dict[str, int]] = {}
    for record in records:
        if record.timestamp is None:
            continue
        key = calendar_date(record.timestamp, tz).isoformat()
        bucket = buckets.setdefault(key, {"legitimate": 0, "suspicious": 0, "total": 0})
        if record.is_legitimate:
            bucket["legitimate"] += 1
        else:
            bucket["suspicious"] += 1
        bucket["total"] += 1

    keys = sorted(buckets) if chronological else list(buckets)
    points = [TimeSeriesPoint(date=key, **buckets[key]) for key in keys]
    if limit <= 0:
        return []
    return points[-limit:]


def compute_stats(
    records: Sequence[Certificate], now: Optional[datetime] = None
) -> CertificateStats:
    """Summary statistics over a certificate collection."""
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    total = len(records)
    legitimate = sum(1 for r in records if r.is_legitimate)
    cutoff = now - RECENT_WINDOW
    recent_week = sum(
        1 for r in records if r.timestamp is not None and r.timestamp > cutoff
    )
    score_sum = sum(r.signature_similarity_score or 0 for r in records)

    return CertificateStats(
        total=total,
        legitimate=legitimate,
        suspicious=total - legitimate,
        recent_week=recent_week,
        legitimacy_rate=math.floor(legitimate / total * 100 + 0.5) if total > 0 else 0,
        avg_signature_score=score_sum / (total or 1),
    )


def legitimacy_breakdown(stats: CertificateStats) -> list[GroupCount]:
    """Legitimate versus suspicious counts."""
    return [
        GroupCount(name="Legitimate", value=stats.legitimate),
        GroupCount(name="Suspicious", value=stats.suspicious),
    ]


class AnalyticsService:
    """Service for building analytics views over loaded certificates."""

    def __init__(self, records: Sequence[Certificate]):
        """Initialize analytics service.

        Args:
            records: Certificate collection to analyze
        """
        self.records = list(records)

    def stats(self, now: Optional[datetime] = None) -> CertificateStats:
        return compute_stats(self.records, now=now)

    def breakdown(self) -> list[GroupCount]:
        return legitimacy_breakdown(self.stats())

    def compare(
        self, compare_by: CompareBy, only_legitimate: bool = False
    ) -> list[GroupCount]:
        return comparison_data(self.records, compare_by, only_legitimate)

    def trends(
        self,
        limit: int = TIME_SERIES_LIMIT,
        tz: Optional[tzinfo] = None,
        chronological: bool = False,
    ) -> list[TimeSeriesPoint]:
        return time_series(self.records, limit=limit, tz=tz, chronological=chronological)
