"""CLI error handling helpers."""

import functools

import click

from certdesk.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def require_login(f):
    """Refuse to run a command unless the session is logged in.

    Apply below ``@click.pass_context``; the wrapped function receives the
    context as its first argument.
    """

    @functools.wraps(f)
    def wrapper(ctx: click.Context, *args, **kwargs):
        session = ctx.obj["session"]
        if not session.authenticated:
            click.echo("Error: Not logged in. Run 'certdesk login' first.", err=True)
            ctx.exit(1)
        return f(ctx, *args, **kwargs)

    return wrapper
