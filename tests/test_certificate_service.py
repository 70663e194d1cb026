"""Tests for certificate filtering and export."""

import io

from certdesk.domain.certificate import (
    EXPORT_HEADERS,
    CertificateService,
    available_years,
    export_certificates_csv,
    filter_certificates,
)
from certdesk.domain.entities import FilterState, LegitimacyFilter
from certdesk.domain.errors import RemoteServiceError


def _names(records):
    return [r.display_name for r in records]


def test_refresh_loads_records_and_total(certificate_service, sample_certificates):
    assert certificate_service.refresh() is True
    assert len(certificate_service.records) == 5
    assert certificate_service.total == 5


def test_refresh_failure_keeps_records(caplog):
    class FailingBackend:
        def list_certificates(self):
            raise RemoteServiceError("GET /calls failed: timed out")

    service = CertificateService(FailingBackend())
    service.records = ["previous"]

    with caplog.at_level("ERROR"):
        assert service.refresh() is False

    assert service.records == ["previous"]
    assert "Failed to fetch calls" in caplog.text


def test_default_filter_keeps_everything(sample_certificates):
    assert filter_certificates(sample_certificates, FilterState()) == list(sample_certificates)


def test_filter_by_year(sample_certificates):
    records = filter_certificates(sample_certificates, FilterState(year="2023"))

    assert _names(records) == ["Asha Rao", "Meera Nair"]


def test_filter_by_unknown_year(sample_certificates):
    """Records without a completion year match the 'Unknown' year."""
    records = filter_certificates(sample_certificates, FilterState(year="Unknown"))

    assert _names(records) == ["Ravi Kumar"]


def test_filter_by_legitimacy(sample_certificates):
    legit = filter_certificates(sample_certificates, FilterState(legitimacy=LegitimacyFilter.LEGIT))
    flagged = filter_certificates(sample_certificates, FilterState(legitimacy=LegitimacyFilter.NOT))

    assert all(r.is_legitimate for r in legit)
    assert not any(r.is_legitimate for r in flagged)
    assert len(legit) + len(flagged) == len(sample_certificates)


def test_filter_by_query_is_case_insensitive(sample_certificates):
    assert _names(filter_certificates(sample_certificates, FilterState(query="  IIT  "))) == [
        "Vikram Singh"
    ]
    assert _names(filter_certificates(sample_certificates, FilterState(query="reg002"))) == [
        "Vikram Singh"
    ]


def test_filter_query_matches_candidate_name(sample_certificates):
    records = filter_certificates(sample_certificates, FilterState(query="ravi"))

    assert _names(records) == ["Ravi Kumar"]


def test_filter_predicates_are_combined(sample_certificates):
    state = FilterState(query="b.sc", year="2023", legitimacy=LegitimacyFilter.LEGIT)

    assert _names(filter_certificates(sample_certificates, state)) == ["Asha Rao"]


def test_filter_is_idempotent_subset(sample_certificates):
    state = FilterState(query="a", legitimacy=LegitimacyFilter.LEGIT)
    once = filter_certificates(sample_certificates, state)

    assert filter_certificates(once, state) == once
    assert len(once) <= len(sample_certificates)
    assert all(r in sample_certificates for r in once)


def test_available_years(sample_certificates):
    assert available_years(sample_certificates) == ["all", "2023", "2022", "2021"]


def test_available_years_empty():
    assert available_years([]) == ["all"]


def test_export_writes_header_and_rows(sample_certificates):
    stream = io.StringIO()

    count = export_certificates_csv(sample_certificates, stream)

    lines = stream.getvalue().splitlines()
    assert count == 5
    assert len(lines) == 6
    assert lines[0] == ",".join(f'"{h}"' for h in EXPORT_HEADERS)


def test_export_row_values(sample_certificates):
    stream = io.StringIO()
    by_id = {r.id: r for r in sample_certificates}

    export_certificates_csv([by_id["c1"], by_id["c4"]], stream)

    lines = stream.getvalue().splitlines()
    assert lines[1] == (
        '"Asha Rao","B.Sc","MIT","2023","REG001","CS001","Yes","2024-03-18","0.9","First"'
    )
    # Falls back to candidate name; missing values are blank
    assert lines[2].startswith('"Ravi Kumar","B.Sc","MIT","","REG001","CS001","No","2024-03-20",""')


def test_export_escapes_quotes(certificate_data, backend):
    backend.add_certificate(certificate_data(key_details={"name": 'Asha "AR" Rao'}))
    stream = io.StringIO()

    export_certificates_csv(backend.list_certificates().records, stream)

    assert '"Asha ""AR"" Rao"' in stream.getvalue()


def test_export_whole_score_has_no_decimal(certificate_data, backend):
    backend.add_certificate(certificate_data(signature_similarity_score=1.0))
    stream = io.StringIO()

    export_certificates_csv(backend.list_certificates().records, stream)

    assert stream.getvalue().splitlines()[1].endswith('"2024-03-20","1","First"')


def test_display_values_of_numeric_details(certificate_data, backend):
    backend.add_certificate(certificate_data(key_details={"name": 12345, "course": 7}))

    record = backend.list_certificates().records[0]

    assert record.display_name == "12345"
    assert record.display_course == "7"
