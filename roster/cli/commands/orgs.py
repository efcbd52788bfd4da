"""
roster orgs command - Organization management CLI.

Create organizations, list them, and manage members via command line.
"""

import asyncio
import json
from typing import Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from ...client import Roster
from ...errors import RosterError

console = Console()


def orgs_create_command(
    name: str = typer.Argument(..., help="Organization name"),
    owner_id: UUID = typer.Option(..., "--owner", "-u", help="User ID of the owner"),
    attributes: Optional[str] = typer.Option(
        None,
        "--attributes",
        "-a",
        help="Extra attributes JSON (e.g., '{\"industry\": \"tech\", \"country\": \"DE\"}')",
    ),
) -> None:
    """
    Create a new organization; the owner becomes its admin.

    Example:
        $ roster orgs create "Acme Corp" --owner <user-id>
    """
    console.print("\n[bold cyan]Creating Organization[/bold cyan]\n")

    try:
        payload = json.loads(attributes) if attributes else {}
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON: {e}")
        raise typer.Exit(1)

    if not isinstance(payload, dict):
        console.print("[red]Error:[/red] Attributes must be a JSON object")
        raise typer.Exit(1)

    payload["name"] = name
    asyncio.run(_create_org(payload, owner_id))


async def _create_org(payload: dict, owner_id: UUID) -> None:
    """Internal async function to create an organization."""
    roster = await Roster.create()
    try:
        org = await roster.orgs.create(payload, owner_id=owner_id)

        console.print("[green]✓[/green] Organization created successfully!")
        console.print(f"\nID: [cyan]{org.id}[/cyan]")
        console.print(f"Name: [cyan]{org.name}[/cyan]")
        console.print(f"Owner: [cyan]{org.owner_id}[/cyan]")
        console.print(f"Created: [cyan]{org.created_at}[/cyan]\n")
    except RosterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        await roster.close()


def orgs_list_command(
    user_id: UUID = typer.Option(..., "--user", "-u", help="List organizations of this user"),
) -> None:
    """
    List the organizations a user belongs to.

    Example:
        $ roster orgs list --user <user-id>
    """
    asyncio.run(_list_orgs(user_id))


async def _list_orgs(user_id: UUID) -> None:
    """Internal async function to list organizations."""
    roster = await Roster.create()
    try:
        orgs = await roster.orgs.list_for_user(user_id)

        if not orgs:
            console.print("[yellow]No organizations found[/yellow]")
            return

        table = Table(title="Organizations")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Owner", style="green")
        table.add_column("Created", style="yellow")

        for org in orgs:
            table.add_row(
                str(org.id)[:8],
                org.name,
                "yes" if org.owner_id == user_id else "",
                org.created_at.strftime("%Y-%m-%d"),
            )

        console.print(table)
    except RosterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        await roster.close()


def orgs_get_command(
    org_id: UUID = typer.Argument(..., help="Organization ID"),
    user_id: UUID = typer.Option(..., "--user", "-u", help="Requesting user ID"),
) -> None:
    """
    Show an organization the user is a member of.

    Example:
        $ roster orgs get <org-id> --user <user-id>
    """
    asyncio.run(_get_org(org_id, user_id))


async def _get_org(org_id: UUID, user_id: UUID) -> None:
    """Internal async function to get an organization."""
    roster = await Roster.create()
    try:
        org = await roster.orgs.get_for_user(org_id, user_id)
        if org is None:
            console.print(f"[red]Error:[/red] Organization not found: {org_id}")
            raise typer.Exit(1)

        console.print(f"\n[bold cyan]{org.name}[/bold cyan]\n")
        for field in ("id", "owner_id", "description", "email", "industry", "type", "country", "state"):
            value = getattr(org, field)
            if value:
                console.print(f"{field}: [cyan]{value}[/cyan]")
        console.print()
    except RosterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        await roster.close()


def orgs_members_command(
    org_id: UUID = typer.Argument(..., help="Organization ID"),
) -> None:
    """
    List members of an organization.

    Example:
        $ roster orgs members <org-id>
    """
    asyncio.run(_list_members(org_id))


async def _list_members(org_id: UUID) -> None:
    """Internal async function to list members."""
    roster = await Roster.create()
    try:
        members = await roster.memberships.list_by_organization(org_id)

        if not members:
            console.print("[yellow]No members found[/yellow]")
            return

        table = Table(title="Members")
        table.add_column("User ID", style="cyan")
        table.add_column("Role", style="green")
        table.add_column("Joined", style="yellow")

        for member in members:
            table.add_row(
                str(member.user_id),
                member.role.value,
                member.created_at.strftime("%Y-%m-%d"),
            )

        console.print(table)
    except RosterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        await roster.close()


def orgs_remove_member_command(
    org_id: UUID = typer.Argument(..., help="Organization ID"),
    user_id: UUID = typer.Argument(..., help="User ID to remove"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """
    Remove a member from an organization.

    Example:
        $ roster orgs remove-member <org-id> <user-id>
    """
    if not force:
        typer.confirm(f"Remove user {user_id} from organization {org_id}?", abort=True)

    asyncio.run(_remove_member(org_id, user_id))


async def _remove_member(org_id: UUID, user_id: UUID) -> None:
    """Internal async function to remove a member."""
    roster = await Roster.create()
    try:
        removed = await roster.orgs.remove_member(org_id, user_id)
        if removed is None:
            console.print(f"[yellow]User {user_id} is not a member of {org_id}[/yellow]")
            raise typer.Exit(1)
        console.print(f"[green]✓[/green] Removed {removed.email}")
    except RosterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        await roster.close()
