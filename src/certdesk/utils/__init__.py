"""Utility functions for certdesk."""

from certdesk.utils.date_parser import parse_timestamp, calendar_date
from certdesk.utils.percentage import get_percentage, grade_band

__all__ = ["parse_timestamp", "calendar_date", "get_percentage", "grade_band"]
