"""Main CLI entry point."""

import logging

import click
from certdesk.backend.factories import create_http_backend, create_local_backend
from certdesk.domain.auth import SessionStore

# Import and register all commands at module level
from certdesk.cli.commands import (
    auth,
    student,
    import_cmd,
    certificate,
    analytics,
)


@click.group()
@click.option(
    "--api-url",
    help="Record service URL (overrides CERTDESK_API_URL environment variable)",
    envvar="CERTDESK_API_URL",
)
@click.option(
    "--local-db",
    type=click.Path(),
    help="Use a local SQLite store instead of the record service (':memory:' for in-memory)",
    envvar="CERTDESK_LOCAL_DB",
)
@click.option(
    "--session-path",
    type=click.Path(),
    help="Path to session file (overrides CERTDESK_SESSION_PATH environment variable)",
    envvar="CERTDESK_SESSION_PATH",
)
@click.option(
    "--timeout",
    type=float,
    help="Request timeout in seconds",
    envvar="CERTDESK_TIMEOUT",
)
@click.option(
    "--retries",
    type=click.IntRange(min=0),
    help="Retries for failed reads from the record service",
    envvar="CERTDESK_RETRIES",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(
    ctx,
    api_url: str | None,
    local_db: str | None,
    session_path: str | None,
    timeout: float | None,
    retries: int | None,
    verbose: bool,
):
    """Certdesk - Student and certificate records console.

    Manage student records, bulk-import them from CSV, and analyze
    certificate verification results held by the record service.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize backend only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = SessionStore(session_path)
        ctx.obj["session_store"] = store
        ctx.obj["session"] = store.load()

        if "backend" not in ctx.obj:
            if local_db is not None:
                backend = create_local_backend(database_path=local_db)
            else:
                backend = create_http_backend(
                    api_url=api_url, timeout=timeout, max_retries=retries
                )
            backend.connect()
            ctx.obj["backend"] = backend
            ctx.call_on_close(backend.disconnect)


# Register all commands
auth.register_commands(cli)
student.register_commands(cli)
import_cmd.register_commands(cli)
certificate.register_commands(cli)
analytics.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
