"""
roster migrate command - Inspect and render database migrations.

PostgREST cannot execute DDL, so pending SQL is printed (or written to a
file) for you to apply with psql or the Supabase SQL editor.
"""

import asyncio
from pathlib import Path
from typing import Optional

import pydantic
import typer
from rich.console import Console
from rich.table import Table

from ...config import load_config
from ...migrations.manager import MigrationManager
from ...utils.supabase import RosterSupabaseClient

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="Inspect and render database migrations")


async def _manager() -> MigrationManager:
    try:
        config = load_config()
    except pydantic.ValidationError as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(1)

    client = await RosterSupabaseClient.create(config)
    return MigrationManager(client)


@app.command("status")
def migrate_status_command() -> None:
    """
    Show which migrations are applied and which are pending.

    Example:
        $ roster migrate status
    """

    async def _status():
        manager = await _manager()
        migrations = manager.discover_migrations()
        applied = set(await manager.get_applied_migrations())

        table = Table(title="Migration Status")
        table.add_column("Version", style="cyan")
        table.add_column("Name")
        table.add_column("Status", style="green")

        for migration in migrations:
            status = "[green]applied[/green]" if migration.version in applied else "[yellow]pending[/yellow]"
            table.add_row(migration.version, migration.name, status)

        console.print(table)

    asyncio.run(_status())


@app.command("sql")
def migrate_sql_command(
    target: Optional[str] = typer.Argument(
        None,
        help="Target migration version (default: latest)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the SQL to this file instead of stdout",
    ),
) -> None:
    """
    Render the SQL of pending migrations.

    Example:
        $ roster migrate sql > pending.sql
        $ psql "$DATABASE_URL" -f pending.sql
    """

    async def _sql():
        manager = await _manager()
        pending = await manager.pending_migrations(target=target)

        if not pending:
            err_console.print("[green]✓[/green] No pending migrations")
            return

        sql = manager.render_sql(pending)
        if output:
            output.write_text(sql)
            console.print(f"[green]✓[/green] Wrote {len(pending)} migration(s) to {output}")
        else:
            typer.echo(sql)

    asyncio.run(_sql())
