"""
Supabase client wrapper for Roster.

Provides a thin wrapper around the Supabase AsyncClient with Roster-specific configuration.
"""

from typing import Any, Dict, Optional

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth import AsyncMemoryStorage

from ..config import RosterConfig


class RosterSupabaseClient:
    """
    Wrapper around Supabase AsyncClient with Roster-specific configuration.

    This class provides:
    1. Configured client with service role key
    2. Query builders for roster_* tables
    3. RPC calls for the SQL functions shipped in the migrations
    4. Proper schema configuration

    Example:
        ```python
        from roster.utils.supabase import RosterSupabaseClient
        from roster.config import RosterConfig

        config = RosterConfig()
        client = await RosterSupabaseClient.create(config)

        result = await client.table("roster_organizations").select("*").execute()
        ```
    """

    def __init__(self, config: RosterConfig, client: AsyncClient) -> None:
        """
        Initialize the Roster Supabase client.

        Args:
            config: Roster configuration
            client: Initialized Supabase AsyncClient

        Note:
            Use RosterSupabaseClient.create() instead of direct instantiation.
        """
        self.config = config
        self._client = client

    @classmethod
    async def create(cls, config: RosterConfig) -> "RosterSupabaseClient":
        """
        Create and initialize a RosterSupabaseClient.

        Args:
            config: Roster configuration with Supabase credentials

        Returns:
            Initialized RosterSupabaseClient
        """
        options = AsyncClientOptions(
            schema=config.db_schema,
            storage=AsyncMemoryStorage(),
            headers={
                "apikey": config.supabase_key,
                "Authorization": f"Bearer {config.supabase_key}",
            },
        )

        client = await acreate_client(
            supabase_url=config.supabase_url,
            supabase_key=config.supabase_key,
            options=options,
        )

        return cls(config=config, client=client)

    @property
    def db(self):
        """Access the PostgREST database client."""
        return self._client.postgrest

    def table(self, table_name: str):
        """
        Create a query builder for a specific table.

        Args:
            table_name: Name of the table (e.g., "roster_memberships")

        Returns:
            AsyncRequestBuilder for chaining queries

        Example:
            ```python
            result = await client.table("roster_memberships").select("*").eq(
                "user_id", str(user_id)
            ).execute()
            ```
        """
        return self._client.table(table_name)

    def rpc(self, fn: str, params: Optional[Dict[str, Any]] = None):
        """
        Call a Postgres function through PostgREST.

        Functions run in a single transaction, which is how Roster gets
        multi-row atomic writes.

        Args:
            fn: Function name (e.g., "roster_create_organization")
            params: Named function arguments

        Returns:
            Request builder; await ``.execute()`` to run it
        """
        return self._client.rpc(fn, params or {})

    async def close(self) -> None:
        """
        Close the client and cleanup resources.

        The Supabase client holds no sockets that need explicit closing, so
        this is a hook for symmetry with Roster.close().
        """
        pass

