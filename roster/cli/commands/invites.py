"""
CLI commands for invite tokens and invitations.
"""

import asyncio
from typing import List, Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from ...client import Roster
from ...errors import RosterError

console = Console()
app = typer.Typer(help="Manage invite tokens and invitations")


@app.command("token")
def invites_token_command(
    org_id: UUID = typer.Option(..., "--org", "-o", help="Organization ID"),
) -> None:
    """Generate a shareable invite token (valid for one year)."""

    async def _token():
        roster = await Roster.create()
        try:
            token = await roster.tokens.generate(org_id)
            console.print("[green]✓[/green] Invite token created")
            console.print(f"  Token: {token}")
            console.print(f"  Link: {roster.tokens.build_link(token)}")
        except RosterError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        finally:
            await roster.close()

    asyncio.run(_token())


@app.command("send")
def invites_send_command(
    emails: List[str] = typer.Argument(..., help="Email addresses to invite"),
    org_id: UUID = typer.Option(..., "--org", "-o", help="Organization ID"),
    link: Optional[str] = typer.Option(None, "--link", "-l", help="Invite link carrying the token"),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Invite token (link is built from it)"),
) -> None:
    """Send invitations bound to an invite token."""
    if not link and not token:
        console.print("[red]Error:[/red] Pass --link or --token")
        raise typer.Exit(1)

    async def _send():
        roster = await Roster.create()
        try:
            invite_link = link or roster.tokens.build_link(token)
            invitations = await roster.invites.send(org_id, emails, invite_link)
            for invitation in invitations:
                console.print(f"[green]✓[/green] Invitation sent to {invitation.email}")
        except RosterError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        finally:
            await roster.close()

    asyncio.run(_send())


@app.command("redeem")
def invites_redeem_command(
    token: str = typer.Argument(..., help="Invite token"),
    user_id: UUID = typer.Option(..., "--user", "-u", help="User ID redeeming"),
) -> None:
    """Join an organization using an invite token."""

    async def _redeem():
        roster = await Roster.create()
        try:
            membership = await roster.invites.redeem(token, user_id)
            console.print("[green]✓[/green] Invitation redeemed")
            console.print(f"  Organization: {membership.organization_id}")
            console.print(f"  Role: {membership.role.value}")
        except RosterError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        finally:
            await roster.close()

    asyncio.run(_redeem())


@app.command("list")
def invites_list_command(
    org_id: UUID = typer.Option(..., "--org", "-o", help="Organization ID"),
    pending: bool = typer.Option(False, "--pending", "-p", help="Only never-redeemed invitations"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum results"),
) -> None:
    """List invitations for an organization."""

    async def _list():
        roster = await Roster.create()
        try:
            invitations = await roster.invites.list_by_organization(
                organization_id=org_id,
                pending_only=pending,
                limit=limit,
            )

            if not invitations:
                console.print("[yellow]No invitations found[/yellow]")
                return

            table = Table(title="Invitations")
            table.add_column("Email", style="cyan")
            table.add_column("Status", style="green")
            table.add_column("Sent", style="yellow")
            table.add_column("ID", style="dim")

            for invitation in invitations:
                table.add_row(
                    invitation.email,
                    "Accepted" if invitation.accepted_at else "Pending",
                    invitation.created_at.strftime("%Y-%m-%d"),
                    str(invitation.id)[:8],
                )

            console.print(table)
        except RosterError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        finally:
            await roster.close()

    asyncio.run(_list())
