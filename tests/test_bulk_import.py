"""Tests for bulk import parsing and submission."""

import pytest

from certdesk.domain.bulk_import import (
    BulkImportService,
    is_csv_upload,
    parse_csv_text,
    parse_delimited_text,
    read_upload,
)
from certdesk.domain.errors import RemoteServiceError, ValidationError
from certdesk.domain.student import StudentService
from certdesk.utils.percentage import get_percentage

LINE = "A,R,P,I,C,D,50,100,2024-01-01,Place"


def test_parse_single_line():
    """A ten-field line maps positionally onto the student fields."""
    candidates = parse_delimited_text(LINE)

    assert candidates == [
        {
            "candidate_name": "A",
            "relation": "R",
            "parent_name": "P",
            "institute": "I",
            "course": "C",
            "division": "D",
            "marks_obtained": "50",
            "marks_total": "100",
            "date": "2024-01-01",
            "place": "Place",
        }
    ]
    assert get_percentage(candidates[0]["marks_obtained"], candidates[0]["marks_total"]) == 50


def test_parse_trims_fields_and_skips_blank_lines():
    text = "\n  A , R,P,I,C,D,50,100,2024-01-01, Place  \n\n   \n"

    candidates = parse_delimited_text(text)

    assert len(candidates) == 1
    assert candidates[0]["candidate_name"] == "A"
    assert candidates[0]["place"] == "Place"


def test_parse_drops_short_lines():
    """Lines with fewer than ten fields yield no candidate."""
    text = "A,R,P,I,C,D,50,100,2024-01-01\nB,R,P\n" + LINE.replace("A,", "Z,", 1)

    candidates = parse_delimited_text(text)

    assert [c["candidate_name"] for c in candidates] == ["Z"]


def test_parse_ignores_extra_fields():
    candidates = parse_delimited_text(LINE + ",extra,more")

    assert len(candidates) == 1
    assert candidates[0]["place"] == "Place"


def test_parse_keeps_header_in_text_mode():
    """Delimited-text mode has no header handling."""
    text = "h1,h2,h3,h4,h5,h6,h7,h8,h9,h10\n" + LINE

    assert len(parse_delimited_text(text)) == 2


def test_csv_mode_discards_first_line():
    """CSV mode drops exactly the first line even when it is a valid record."""
    text = LINE + "\n" + LINE.replace("A,", "B,", 1)

    candidates = parse_csv_text(text)

    assert [c["candidate_name"] for c in candidates] == ["B"]


def test_csv_mode_strips_quotes():
    text = 'header\n"A","R","P","I","C","D","50","100","2024-01-01","Place"'

    candidates = parse_csv_text(text)

    assert candidates[0]["candidate_name"] == "A"
    assert candidates[0]["marks_total"] == "100"
    assert candidates[0]["place"] == "Place"


def test_csv_mode_header_only():
    assert parse_csv_text("name,relation\n") == []


def test_csv_mode_handles_crlf():
    text = "header\r\n" + LINE + "\r\n"

    candidates = parse_csv_text(text)

    assert candidates[0]["place"] == "Place"


@pytest.mark.parametrize(
    "name,content_type,expected",
    [
        ("students.csv", None, True),
        ("STUDENTS.CSV", None, True),
        ("students.txt", "text/csv", True),
        ("upload", "text/csv; charset=utf-8", True),
        ("students.txt", None, False),
        ("students.xlsx", "application/vnd.ms-excel", False),
    ],
)
def test_is_csv_upload(tmp_path, name, content_type, expected):
    assert is_csv_upload(tmp_path / name, content_type) is expected


def test_read_upload_rejects_non_csv(tmp_path):
    """Non-CSV uploads are rejected before the content is read."""
    path = tmp_path / "students.txt"
    path.write_text(LINE, encoding="utf-8")

    with pytest.raises(ValidationError) as excinfo:
        read_upload(str(path))

    assert "valid CSV" in str(excinfo.value)


def test_read_upload_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_upload(str(tmp_path / "missing.csv"))


def test_import_records_empty_raises(student_service):
    service = BulkImportService(student_service)

    with pytest.raises(ValidationError) as excinfo:
        service.import_records([])

    assert str(excinfo.value) == "No valid records found"


def test_import_text_no_valid_lines_raises(student_service, backend):
    service = BulkImportService(student_service)

    with pytest.raises(ValidationError):
        service.import_text("A,B,C\n\n")

    assert backend.list_students() == []


def test_import_text_creates_records(student_service, backend):
    service = BulkImportService(student_service)

    result = service.import_text(LINE)

    assert result["imported"] == 1
    assert result["failed"] == 0
    assert result["errors"] == []
    stored = backend.list_students()
    assert len(stored) == 1
    assert stored[0].marks_obtained == "50"
    assert stored[0].marks_total == "100"
    assert student_service.students == result["records"]


def test_import_file(student_service, backend, fixtures_dir):
    service = BulkImportService(student_service)

    result = service.import_file(str(fixtures_dir / "students.csv"))

    assert result["imported"] == 3
    names = [s.candidate_name for s in backend.list_students()]
    assert names == ["Asha Rao", "Vikram Singh", "Meera Nair"]


def test_import_continues_after_failure(backend, caplog):
    """A rejected candidate is logged and the rest are still submitted."""

    class FlakyBackend:
        def __init__(self, inner):
            self.inner = inner
            self.calls = []

        def create_student(self, values):
            self.calls.append(values["candidate_name"])
            if values["candidate_name"] == "B":
                raise RemoteServiceError("POST /users failed with status 500")
            return self.inner.create_student(values)

    flaky = FlakyBackend(backend)
    student_service = StudentService(flaky)
    service = BulkImportService(student_service)
    text = "\n".join(LINE.replace("A,", f"{name},", 1) for name in ["A", "B", "C"])

    with caplog.at_level("WARNING"):
        result = service.import_text(text)

    assert flaky.calls == ["A", "B", "C"]
    assert result["imported"] == 2
    assert result["failed"] == 1
    assert result["errors"][0].startswith("Record 2:")
    assert [s.candidate_name for s in student_service.students] == ["A", "C"]
    assert "Failed to import record 2" in caplog.text


def test_import_blank_name_counts_as_failure(student_service):
    service = BulkImportService(student_service)
    text = LINE + "\n" + LINE.replace("A,", " ,", 1)

    result = service.import_text(text)

    assert result["imported"] == 1
    assert result["failed"] == 1
    assert "Candidate Name is required" in result["errors"][0]
