"""Student management commands."""

import click
from certdesk.cli.error_handling import handle_domain_error, require_login
from certdesk.cli.forms import collect_field_values, field_options, prompt_form
from certdesk.domain.errors import DomainError, student_not_found
from certdesk.domain.fields import STUDENT_FIELDS
from certdesk.domain.student import StudentService
from certdesk.utils.date_parser import format_timestamp
from certdesk.utils.percentage import get_percentage, grade_band


def _load_students(ctx) -> StudentService:
    """Create a service with the collection loaded, or exit on failure."""
    service = StudentService(ctx.obj["backend"])
    if not service.refresh():
        click.echo("Error: Could not load students from the record service.", err=True)
        ctx.exit(1)
    return service


def _echo_student(student) -> None:
    percentage = get_percentage(student.marks_obtained, student.marks_total)
    click.echo(f"\nStudent ID: {student.id}")
    for descriptor in STUDENT_FIELDS:
        value = getattr(student, descriptor.key)
        if value:
            click.echo(f"  {descriptor.label}: {value}")
    click.echo(f"  Percentage: {percentage}% ({grade_band(percentage)})")
    if student.created_at is not None:
        click.echo(f"  Created: {format_timestamp(student.created_at)}")
    if student.updated_at is not None:
        click.echo(f"  Updated: {format_timestamp(student.updated_at)}")


@click.group()
def student_group():
    """Manage student records."""
    pass


@student_group.command("list")
@click.option("--search", default="", help="Filter by name, course or institute")
@click.pass_context
@require_login
def list_students(ctx, search: str):
    """List students."""
    service = _load_students(ctx)
    students = service.list_students(query=search)

    if not students:
        click.echo("No students found.")
        return

    click.echo(f"\nStudents ({len(students)} of {len(service.students)}):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<26} {'Name':<22} {'Institute':<20} {'Course':<16} {'Marks':<10} {'%':>4}  {'Place':<12}"
    )
    click.echo("-" * 110)
    for s in students:
        marks = f"{s.marks_obtained}/{s.marks_total}"
        percentage = get_percentage(s.marks_obtained, s.marks_total)
        click.echo(
            f"{s.id or '':<26} {s.candidate_name[:22]:<22} {s.institute[:20]:<20} "
            f"{s.course[:16]:<16} {marks:<10} {percentage:>3}%  {s.place[:12]:<12}"
        )


@student_group.command("show")
@click.argument("student_id", metavar="STUDENT_ID")
@click.pass_context
@require_login
def show_student(ctx, student_id: str):
    """Show one student."""
    service = StudentService(ctx.obj["backend"])
    try:
        student = service.get_student(student_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if student is None:
        click.echo(f"Error: {student_not_found(student_id)}", err=True)
        ctx.exit(1)
    _echo_student(student)


@student_group.command("add")
@field_options(STUDENT_FIELDS)
@click.pass_context
@require_login
def add_student(ctx, **fields):
    """Add a student.

    Without any field options, prompts for each field in turn.

    Examples:
        certdesk student add --candidate-name "Asha Rao" --course "B.Sc" --marks-obtained 420 --marks-total 500
        certdesk student add
    """
    service = StudentService(ctx.obj["backend"])

    values = collect_field_values(STUDENT_FIELDS, fields)
    if not values:
        values = prompt_form(STUDENT_FIELDS)

    try:
        created = service.create_student(values)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created student '{created.candidate_name}' (ID: {created.id})")


@student_group.command("edit")
@click.argument("student_id", metavar="STUDENT_ID")
@field_options(STUDENT_FIELDS)
@click.pass_context
@require_login
def edit_student(ctx, student_id: str, **fields):
    """Edit a student.

    Only the given field options are changed. Without any, prompts for every
    field with the current values as defaults.

    Examples:
        certdesk student edit 64f1c2 --place "Pune"
    """
    service = _load_students(ctx)

    try:
        existing = service.get_student(student_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if existing is None:
        click.echo(f"Error: {student_not_found(student_id)}", err=True)
        ctx.exit(1)

    values = collect_field_values(STUDENT_FIELDS, fields)
    if not values:
        values = prompt_form(STUDENT_FIELDS, defaults=existing.values())

    try:
        updated = service.update_student(student_id, values)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated student '{updated.candidate_name}'")


@student_group.command("delete")
@click.argument("student_id", metavar="STUDENT_ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@require_login
def delete_student(ctx, student_id: str, yes: bool):
    """Delete a student."""
    service = StudentService(ctx.obj["backend"])

    if not yes and not click.confirm("Are you sure you want to delete this user?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_student(student_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted student {student_id}")


def register_commands(cli):
    """Register student commands with main CLI."""
    cli.add_command(student_group, name="student")
