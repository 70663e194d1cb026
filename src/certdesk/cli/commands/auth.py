"""Session commands."""

import click


@click.command("login")
@click.option("--email", prompt="Email Address", help="Account email")
@click.option("--password", prompt="Password", hide_input=True, help="Account password")
@click.pass_context
def login(ctx, email: str, password: str):
    """Log in to the console.

    Examples:
        certdesk login --email admin@gmail.com --password 123456
    """
    session = ctx.obj["session"]
    store = ctx.obj["session_store"]

    error = session.login(email, password)
    if error is not None:
        store.clear()
        click.echo(f"Error: {error}", err=True)
        ctx.exit(1)

    store.save(session)
    click.echo(f"Logged in as {session.email}")


@click.command("logout")
@click.pass_context
def logout(ctx):
    """Log out of the console."""
    session = ctx.obj["session"]
    session.logout()
    ctx.obj["session_store"].clear()
    click.echo("Logged out.")


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the logged-in account."""
    session = ctx.obj["session"]
    if session.authenticated:
        click.echo(f"Logged in as {session.email}")
    else:
        click.echo("Not logged in.")


def register_commands(cli):
    """Register session commands with main CLI."""
    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
