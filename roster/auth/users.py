"""
User lookups for Roster.

Roster never creates users; registration happens elsewhere and lands in
roster_users. Redemption only needs to find users by id or email.
"""

from typing import Optional
from uuid import UUID

from ..errors import storage_errors
from .models import RosterUser, normalize_email


class UserManager:
    """
    Read-only access to the roster_users table.

    Example:
        ```python
        user = await roster.users.get(user_id)
        if user is None:
            ...  # not registered
        ```
    """

    def __init__(self, roster) -> None:
        """
        Initialize UserManager.

        Args:
            roster: Main Roster client instance
        """
        self.roster = roster
        self.client = roster.client

    async def get(self, user_id: UUID) -> Optional[RosterUser]:
        """
        Get a user by their Roster user ID.

        Args:
            user_id: User UUID

        Returns:
            RosterUser instance or None if not found
        """
        with storage_errors("Failed to fetch user"):
            result = await self.client.table("roster_users").select("*").eq(
                "id", str(user_id)
            ).execute()

        if not result.data:
            return None

        return RosterUser(**result.data[0])

    async def get_by_email(self, email: str) -> Optional[RosterUser]:
        """
        Get a user by their email address.

        The address is normalized before matching.

        Args:
            email: User email address

        Returns:
            RosterUser instance or None if not found
        """
        with storage_errors("Failed to fetch user"):
            result = await self.client.table("roster_users").select("*").eq(
                "email", normalize_email(email)
            ).execute()

        if not result.data:
            return None

        return RosterUser(**result.data[0])
