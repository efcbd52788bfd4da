"""
Migration manager for the Roster database schema.

Discovers the versioned SQL files shipped with Roster and compares them with
the versions recorded in roster_migrations. PostgREST cannot run DDL, so
pending SQL is rendered for the operator to apply with psql or the
Supabase SQL editor.
"""

import logging
from pathlib import Path
from typing import List, Optional

from postgrest.exceptions import APIError

from ..utils.supabase import RosterSupabaseClient

logger = logging.getLogger(__name__)


class Migration:
    """Represents a single database migration."""

    def __init__(self, version: str, name: str, path: Path) -> None:
        """
        Initialize a migration.

        Args:
            version: Migration version (e.g., "001")
            name: Migration name (e.g., "initial_schema")
            path: Path to the SQL file
        """
        self.version = version
        self.name = name
        self.path = path

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        """
        Create a Migration from a file path.

        Args:
            path: Path to migration file (e.g., "001_initial_schema.sql")

        Returns:
            Migration instance

        Example:
            >>> Migration.from_file(Path("001_initial_schema.sql"))
            Migration(version=001, name=initial_schema)
        """
        filename = path.stem
        parts = filename.split("_", 1)

        if len(parts) != 2 or not parts[0].isdigit():
            raise ValueError(f"Invalid migration filename: {path.name}. Expected format: 001_name.sql")

        version, name = parts
        return cls(version=version, name=name, path=path)

    def read_sql(self) -> str:
        """Read the SQL content of the migration."""
        return self.path.read_text()

    def __repr__(self) -> str:
        return f"Migration(version={self.version}, name={self.name})"


class MigrationManager:
    """
    Tracks database migrations for Roster.

    Example:
        ```python
        manager = MigrationManager(client)
        pending = await manager.pending_migrations()
        print(manager.render_sql(pending))
        ```
    """

    def __init__(
        self,
        client: RosterSupabaseClient,
        migrations_dir: Optional[Path] = None,
    ) -> None:
        """
        Initialize the migration manager.

        Args:
            client: Roster Supabase client
            migrations_dir: Directory holding NNN_name.sql files
        """
        self.client = client
        self.migrations_dir = migrations_dir or Path(__file__).parent / "versions"

    def discover_migrations(self) -> List[Migration]:
        """
        Discover all migration files in the versions directory.

        Returns:
            List of Migration objects, sorted by version
        """
        if not self.migrations_dir.exists():
            return []

        migrations = []
        for path in self.migrations_dir.glob("*.sql"):
            try:
                migrations.append(Migration.from_file(path))
            except ValueError as e:
                logger.warning("Skipping invalid migration file: %s", e)

        migrations.sort(key=lambda m: m.version)
        return migrations

    async def get_applied_migrations(self) -> List[str]:
        """
        Get list of already applied migration versions.

        Returns:
            List of applied migration versions (empty before the first migration)
        """
        try:
            result = await self.client.table("roster_migrations").select("version").execute()
        except APIError as e:
            # roster_migrations is created by the first migration
            logger.debug("Could not read roster_migrations: %s", e)
            return []
        return [row["version"] for row in result.data or []]

    async def pending_migrations(self, target: Optional[str] = None) -> List[Migration]:
        """
        Migrations not yet applied, optionally up to ``target``.

        Args:
            target: Last version to include (default: latest)

        Returns:
            Pending migrations in version order
        """
        applied = set(await self.get_applied_migrations())
        pending = [m for m in self.discover_migrations() if m.version not in applied]
        if target:
            pending = [m for m in pending if m.version <= target]
        return pending

    def render_sql(self, migrations: List[Migration]) -> str:
        """
        Concatenate migrations into one script, each wrapped in a transaction.

        Args:
            migrations: Migrations to render

        Returns:
            SQL script
        """
        chunks = []
        for migration in migrations:
            chunks.append(
                f"-- {migration.version}_{migration.name}\n"
                f"begin;\n{migration.read_sql().strip()}\ncommit;\n"
            )
        return "\n".join(chunks)
