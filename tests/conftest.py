"""Shared pytest fixtures for certdesk tests."""

from datetime import UTC, datetime
from pathlib import Path
import pytest

from certdesk.backend.factories import create_local_backend
from certdesk.domain.auth import AuthSession, SessionStore
from certdesk.domain.certificate import CertificateService
from certdesk.domain.student import StudentService


@pytest.fixture
def backend():
    """Create an in-memory local backend for testing."""
    backend = create_local_backend(database_path=":memory:")
    backend.connect()

    yield backend

    backend.disconnect()


@pytest.fixture
def student_service(backend):
    """Create a StudentService over the test backend."""
    return StudentService(backend)


@pytest.fixture
def certificate_service(backend):
    """Create a CertificateService over the test backend."""
    return CertificateService(backend)


def _student_values(name: str, **overrides) -> dict[str, str]:
    """Build a complete set of student form values."""
    values = {
        "candidate_name": name,
        "relation": "S/O",
        "parent_name": "Parent",
        "institute": "MIT",
        "course": "B.Sc",
        "division": "First",
        "marks_obtained": "420",
        "marks_total": "500",
        "date": "2024-05-01",
        "place": "Pune",
    }
    values.update(overrides)
    return values


@pytest.fixture
def student_values():
    """Return a builder for complete student form values."""
    return _student_values


@pytest.fixture
def sample_students(backend):
    """Store three students and return them."""
    return [
        backend.create_student(_student_values("Asha Rao", course="B.Sc", institute="MIT")),
        backend.create_student(
            _student_values("Vikram Singh", course="B.Tech", institute="IIT Delhi")
        ),
        backend.create_student(
            _student_values("Meera Nair", course="M.Sc", institute="NIT Calicut")
        ),
    ]


NOW = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)


def _certificate_data(**overrides) -> dict:
    """Build a certificate record in the remote JSON shape."""
    data = {
        "timestamp": NOW.isoformat(),
        "candidate_name": None,
        "is_legitimate": True,
        "signature_similarity_score": 0.9,
        "key_details": {
            "name": "Asha Rao",
            "course": "B.Sc",
            "college": "MIT",
            "completion_year": "2023",
            "registration_no": "REG001",
            "cs_no": "CS001",
            "division": "First",
        },
    }
    details = overrides.pop("key_details", None)
    data.update(overrides)
    if details is not None:
        data["key_details"] = {**data["key_details"], **details}
    return data


@pytest.fixture
def certificate_data():
    """Return a builder for certificate records in the remote JSON shape."""
    return _certificate_data


@pytest.fixture
def now():
    """Reference time the sample certificates are arranged around."""
    return NOW


@pytest.fixture
def sample_certificates(backend):
    """Store five certificates spread over three days."""
    records = [
        _certificate_data(_id="c1", timestamp="2024-03-18T09:00:00Z"),
        _certificate_data(
            _id="c2",
            timestamp="2024-03-18T15:00:00Z",
            is_legitimate=False,
            signature_similarity_score=0.4,
            key_details={
                "name": "Vikram Singh",
                "course": "B.Tech",
                "college": "IIT Delhi",
                "completion_year": "2022",
                "registration_no": "REG002",
            },
        ),
        _certificate_data(
            _id="c3",
            timestamp="2024-03-19T10:00:00Z",
            key_details={"name": "Meera Nair", "course": "M.Sc", "completion_year": "2023"},
        ),
        _certificate_data(
            _id="c4",
            timestamp="2024-03-20T08:00:00Z",
            is_legitimate=False,
            signature_similarity_score=None,
            candidate_name="Ravi Kumar",
            key_details={"name": "", "completion_year": None, "college": "MIT"},
        ),
        _certificate_data(
            _id="c5",
            timestamp="2024-01-02T08:00:00Z",
            key_details={"name": "Old Record", "completion_year": "2021", "college": "MIT"},
        ),
    ]
    for data in records:
        backend.add_certificate(data)
    return backend.list_certificates().records


@pytest.fixture
def session_path(tmp_path):
    """Return a session file path inside a temporary directory."""
    return str(tmp_path / "session.json")


@pytest.fixture
def logged_in(session_path):
    """Store a logged-in session and return its path."""
    session = AuthSession()
    assert session.login("admin@gmail.com", "123456") is None
    SessionStore(session_path).save(session)
    return session_path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def run_cli(cli_runner, backend, session_path):
    """Invoke the CLI against the test backend and session file."""
    from certdesk.cli.main import cli

    def invoke(*args, input=None):
        return cli_runner.invoke(
            cli,
            ["--session-path", session_path, *args],
            obj={"backend": backend},
            input=input,
        )

    return invoke


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
