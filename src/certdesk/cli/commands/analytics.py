"""Certificate analytics commands."""

import click
from certdesk.cli.error_handling import require_login
from certdesk.domain.analytics import AnalyticsService, TIME_SERIES_LIMIT
from certdesk.domain.certificate import CertificateService
from certdesk.domain.entities import CompareBy

BAR_WIDTH = 40


def _load_analytics(ctx) -> AnalyticsService:
    """Load certificates and wrap them for analysis, or exit on failure."""
    service = CertificateService(ctx.obj["backend"])
    if not service.refresh():
        click.echo("Error: Could not load certificates from the record service.", err=True)
        ctx.exit(1)
    return AnalyticsService(service.records)


def _bar(value: int, largest: int) -> str:
    if largest <= 0:
        return ""
    return "#" * max(1, round(value / largest * BAR_WIDTH)) if value else ""


@click.group()
def analytics_group():
    """Analyze certificate verification results."""
    pass


@analytics_group.command("stats")
@click.pass_context
@require_login
def show_stats(ctx):
    """Show summary statistics."""
    analytics = _load_analytics(ctx)
    stats = analytics.stats()

    click.echo("\nCertificate Summary:")
    click.echo("-" * 50)
    click.echo(f"{'Total Certificates':<30} {stats.total:>15,}")
    click.echo(f"{'Legitimate':<30} {stats.legitimate:>15,}")
    click.echo(f"{'Suspicious':<30} {stats.suspicious:>15,}")
    click.echo(f"{'This Week':<30} {stats.recent_week:>15,}")
    click.echo(f"{'Success Rate':<30} {str(stats.legitimacy_rate) + '%':>15}")
    click.echo(f"{'Avg Signature Score':<30} {stats.avg_signature_score:>15.2f}")

    breakdown = analytics.breakdown()
    largest = max(group.value for group in breakdown)
    click.echo("\nOverview:")
    for group in breakdown:
        click.echo(f"  {group.name:<12} {group.value:>6}  {_bar(group.value, largest)}")


@analytics_group.command("compare")
@click.option(
    "--by",
    "compare_by",
    type=click.Choice([choice.value for choice in CompareBy]),
    default=CompareBy.COMPLETION_YEAR.value,
    show_default=True,
    help="Field to group certificates by",
)
@click.option("--only-legitimate", is_flag=True, help="Only count legitimate certificates")
@click.pass_context
@require_login
def compare(ctx, compare_by: str, only_legitimate: bool):
    """Show the top groups of certificates by a field."""
    analytics = _load_analytics(ctx)
    groups = analytics.compare(CompareBy(compare_by), only_legitimate=only_legitimate)

    if not groups:
        click.echo("No certificates found.")
        return

    largest = groups[0].value
    label = compare_by.replace("_", " ").title()
    click.echo(f"\nComparison by {label}:")
    click.echo("-" * 80)
    for group in groups:
        click.echo(f"{group.name[:28]:<28} {group.value:>6}  {_bar(group.value, largest)}")


@analytics_group.command("trends")
@click.option(
    "--limit", type=int, default=TIME_SERIES_LIMIT, show_default=True, help="Number of dates to show"
)
@click.option("--chronological", is_flag=True, help="Sort dates instead of keeping first-seen order")
@click.pass_context
@require_login
def trends(ctx, limit: int, chronological: bool):
    """Show daily legitimate and suspicious counts."""
    analytics = _load_analytics(ctx)
    points = analytics.trends(limit=limit, chronological=chronological)

    if not points:
        click.echo("No certificates found.")
        return

    click.echo("\nDaily Trends:")
    click.echo("-" * 50)
    click.echo(f"{'Date':<12} {'Legitimate':>12} {'Suspicious':>12} {'Total':>10}")
    click.echo("-" * 50)
    for point in points:
        click.echo(
            f"{point.date:<12} {point.legitimate:>12} {point.suspicious:>12} {point.total:>10}"
        )


def register_commands(cli):
    """Register analytics commands with main CLI."""
    cli.add_command(analytics_group, name="analytics")
