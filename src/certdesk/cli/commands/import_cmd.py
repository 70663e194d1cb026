"""Bulk student import command."""

import click
from certdesk.cli.error_handling import require_login
from certdesk.domain.bulk_import import BulkImportService
from certdesk.domain.student import StudentService


@click.command("import")
@click.argument("csv_file", required=False, type=click.Path())
@click.option("--text", help="Records as comma-separated lines (one student per line)")
@click.option("--csv", "csv_mode", is_flag=True, help="Treat --text or stdin as CSV with a header line")
@click.option("--content-type", help="Declared MIME type of CSV_FILE (e.g. text/csv)")
@click.pass_context
@require_login
def import_students(
    ctx, csv_file: str | None, text: str | None, csv_mode: bool, content_type: str | None
):
    """Bulk-import students.

    Each record has ten fields in this order: candidate name, relation,
    parent name, institute, course, division, marks obtained, total marks,
    date, place. Lines with fewer fields are skipped.

    CSV_FILE must be a .csv file (or declare --content-type text/csv); its
    first line is treated as a header. Without CSV_FILE or --text, records
    are read from stdin.

    Examples:
        certdesk import students.csv
        certdesk import --text "Asha,D/O,Ravi,MIT,B.Sc,First,420,500,2024-05-01,Pune"
    """
    service = BulkImportService(StudentService(ctx.obj["backend"]))

    try:
        if csv_file is not None:
            result = service.import_file(csv_file, content_type=content_type)
        else:
            if text is None:
                text = click.get_text_stream("stdin").read()
            result = service.import_text(text, csv_mode=csv_mode)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} students")
    if result["errors"]:
        click.echo(f"  Failed: {result['failed']}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)
    click.echo(f"Successfully added {result['imported']} students")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_students)
