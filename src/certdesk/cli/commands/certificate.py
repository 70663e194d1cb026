"""Certificate record commands."""

from pathlib import Path

import click
from certdesk.cli.error_handling import require_login
from certdesk.domain.certificate import (
    CertificateService,
    completion_year,
    export_certificates_csv,
)
from certdesk.domain.entities import FilterState, LegitimacyFilter

DEFAULT_EXPORT_NAME = "certificate_data.csv"


def _load_certificates(ctx) -> CertificateService:
    """Create a service with records loaded, or exit on failure."""
    service = CertificateService(ctx.obj["backend"])
    if not service.refresh():
        click.echo("Error: Could not load certificates from the record service.", err=True)
        ctx.exit(1)
    return service


def filter_options(f):
    """Add the shared certificate filter options."""
    f = click.option(
        "--legitimacy",
        type=click.Choice([choice.value for choice in LegitimacyFilter]),
        default=LegitimacyFilter.ALL.value,
        show_default=True,
        help="Only legitimate (legit) or only flagged (not) records",
    )(f)
    f = click.option("--year", default="all", show_default=True, help="Completion year")(f)
    f = click.option(
        "--query", default="", help="Search name, course, college, registration or CS number"
    )(f)
    return f


def _filter_state(query: str, year: str, legitimacy: str) -> FilterState:
    return FilterState(query=query, year=year, legitimacy=LegitimacyFilter(legitimacy))


@click.group()
def certificate_group():
    """Browse certificate verification records."""
    pass


@certificate_group.command("list")
@filter_options
@click.option("--verbose", "-v", is_flag=True, help="Show all key details per record")
@click.pass_context
@require_login
def list_certificates(ctx, query: str, year: str, legitimacy: str, verbose: bool):
    """List certificate records matching the filters."""
    service = _load_certificates(ctx)
    records = service.filter(_filter_state(query, year, legitimacy))

    click.echo(f"\nCertificate Records ({len(records):,})")
    click.echo(f"Showing {len(records)} of {len(service.records)} records")

    if not records:
        click.echo("No certificates found.")
        return

    if verbose:
        click.echo("=" * 100)
        for record in records:
            status = "Verified" if record.is_legitimate else "Flagged"
            click.echo(f"\nRecord ID: {record.id} [{status}]")
            click.echo(f"  Name: {record.display_name or 'Unknown'}")
            if record.timestamp is not None:
                click.echo(f"  Timestamp: {record.timestamp.isoformat()}")
            if record.signature_similarity_score is not None:
                click.echo(f"  Signature Score: {record.signature_similarity_score:.2f}")
            for key, value in record.key_details.items():
                if value not in (None, ""):
                    click.echo(f"  {key}: {value}")
            click.echo("-" * 100)
        return

    click.echo("-" * 100)
    click.echo(
        f"{'Status':<9} {'Name':<24} {'Course':<18} {'College':<22} {'Year':<8} {'Registration':<14}"
    )
    click.echo("-" * 100)
    for record in records:
        status = "Verified" if record.is_legitimate else "Flagged"
        college = str(record.detail("college") or "")
        registration = str(record.detail("registration_no") or "")
        name = record.display_name or "Unknown"
        year_value = completion_year(record)
        click.echo(
            f"{status:<9} {name[:24]:<24} {record.display_course[:18]:<18} "
            f"{college[:22]:<22} {year_value:<8} {registration[:14]:<14}"
        )


@certificate_group.command("years")
@click.pass_context
@require_login
def list_years(ctx):
    """List completion years available as filters."""
    service = _load_certificates(ctx)
    for year in service.years():
        click.echo("All Years" if year == "all" else year)


@certificate_group.command("export")
@filter_options
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=DEFAULT_EXPORT_NAME,
    show_default=True,
    help="Output file (always written with a .csv suffix)",
)
@click.pass_context
@require_login
def export_certificates(ctx, query: str, year: str, legitimacy: str, output: str):
    """Export filtered certificate records to CSV."""
    service = _load_certificates(ctx)
    records = service.filter(_filter_state(query, year, legitimacy))

    path = Path(output).with_suffix(".csv")
    with open(path, "w", encoding="utf-8", newline="") as f:
        count = export_certificates_csv(records, f)

    click.echo(f"Exported {count} records to {path}")


def register_commands(cli):
    """Register certificate commands with main CLI."""
    cli.add_command(certificate_group, name="certificate")
