"""
Roster CLI - Command-line interface for organizations and invitations.

Usage:
    roster orgs             Manage organizations and members
    roster invites          Manage invite tokens and invitations
    roster migrate          Inspect and render database migrations
"""

import logging
from typing import Optional

import pydantic
import typer
from rich.console import Console
from rich.logging import RichHandler

from ..config import load_config
from .commands import invites, migrate, orgs

# Create the main Typer app
app = typer.Typer(
    name="roster",
    help="Organizations, memberships and invitations on Supabase",
    add_completion=False,
)

# Create a Rich console for pretty output
console = Console()

# Create orgs subcommand group
orgs_app = typer.Typer(help="Manage organizations")
orgs_app.command(name="create")(orgs.orgs_create_command)
orgs_app.command(name="list")(orgs.orgs_list_command)
orgs_app.command(name="get")(orgs.orgs_get_command)
orgs_app.command(name="members")(orgs.orgs_members_command)
orgs_app.command(name="remove-member")(orgs.orgs_remove_member_command)
app.add_typer(orgs_app, name="orgs")

# Add invites subcommand group
app.add_typer(invites.app, name="invites")

# Add migrate subcommand group
app.add_typer(migrate.app, name="migrate")


def configure_logging(debug: bool) -> None:
    """Route library logs through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def callback(
    debug: Optional[bool] = typer.Option(
        None,
        "--debug",
        help="Enable debug logging (defaults to ROSTER_DEBUG)",
    ),
) -> None:
    """
    Roster - organizations, memberships and invitations.
    """
    if debug is None:
        try:
            debug = load_config().debug
        except pydantic.ValidationError:
            # Configuration errors are reported by the command itself
            debug = False
    configure_logging(debug)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
