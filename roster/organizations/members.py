"""
Membership management for Roster.

Handles operations for user memberships in organizations (roster_memberships table).
The table carries a UNIQUE (user_id, organization_id) constraint; that
constraint, not application code, is what keeps concurrent joins from
creating duplicate rows.
"""

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from ..errors import InternalError, storage_errors
from .models import CreateMembershipRequest, MembershipRole, RosterMembership

if TYPE_CHECKING:
    from ..client import Roster


class MembershipManager:
    """
    Manager for organization membership operations.

    Works directly with the roster_memberships table via PostgREST.

    Example:
        ```python
        roster = await Roster.create()

        # Add user to organization
        membership = await roster.memberships.create(user_id, org_id)

        # List organization members
        members = await roster.memberships.list_by_organization(org_id)
        ```
    """

    def __init__(self, roster: "Roster") -> None:
        """
        Initialize MembershipManager.

        Args:
            roster: Roster client instance
        """
        self.roster = roster
        self.client = roster.client

    async def create(
        self,
        user_id: UUID,
        organization_id: UUID,
        role: MembershipRole = MembershipRole.USER,
    ) -> RosterMembership:
        """
        Create a new membership (add user to organization).

        Args:
            user_id: User UUID
            organization_id: Organization UUID
            role: Membership role (defaults to USER)

        Returns:
            Created RosterMembership

        Raises:
            ConflictError: If the user is already a member
            InternalError: If the insert fails

        Example:
            ```python
            membership = await roster.memberships.create(
                user_id=user_id,
                organization_id=org_id,
                role=MembershipRole.ADMIN,
            )
            ```
        """
        request = CreateMembershipRequest(
            user_id=user_id,
            organization_id=organization_id,
            role=role,
        )

        with storage_errors(
            "Failed to create membership",
            conflict_message="User is already a member of this organization",
        ):
            result = await self.client.table("roster_memberships").insert(
                {
                    "user_id": str(request.user_id),
                    "organization_id": str(request.organization_id),
                    "role": request.role.value,
                }
            ).execute()

        if not result.data:
            raise InternalError("Failed to create membership")

        return RosterMembership(**result.data[0])

    async def get_by_user_and_org(
        self,
        user_id: UUID,
        organization_id: UUID,
    ) -> Optional[RosterMembership]:
        """
        Get a user's membership in a specific organization.

        Args:
            user_id: User UUID
            organization_id: Organization UUID

        Returns:
            RosterMembership if found, None otherwise
        """
        with storage_errors("Failed to fetch membership"):
            result = await self.client.table("roster_memberships").select("*").eq(
                "user_id", str(user_id)
            ).eq("organization_id", str(organization_id)).execute()

        if not result.data:
            return None

        return RosterMembership(**result.data[0])

    async def list_by_organization(self, organization_id: UUID) -> List[RosterMembership]:
        """
        List all members of an organization.

        Args:
            organization_id: Organization UUID

        Returns:
            List of RosterMembership instances
        """
        with storage_errors("Failed to fetch memberships"):
            result = await self.client.table("roster_memberships").select("*").eq(
                "organization_id", str(organization_id)
            ).order("created_at").execute()

        return [RosterMembership(**m) for m in result.data or []]

    async def list_by_user(self, user_id: UUID) -> List[RosterMembership]:
        """
        List all memberships of a user.

        Args:
            user_id: User UUID

        Returns:
            List of RosterMembership instances
        """
        with storage_errors("Failed to fetch memberships"):
            result = await self.client.table("roster_memberships").select("*").eq(
                "user_id", str(user_id)
            ).order("created_at").execute()

        return [RosterMembership(**m) for m in result.data or []]

    async def delete_by_user_and_org(
        self,
        user_id: UUID,
        organization_id: UUID,
    ) -> Optional[RosterMembership]:
        """
        Remove a user from an organization.

        Args:
            user_id: User UUID
            organization_id: Organization UUID

        Returns:
            The deleted RosterMembership, or None if there was none
        """
        with storage_errors("Failed to remove user from organization"):
            result = await self.client.table("roster_memberships").delete().eq(
                "user_id", str(user_id)
            ).eq("organization_id", str(organization_id)).execute()

        if not result.data:
            return None

        return RosterMembership(**result.data[0])

    async def count_admins(self, organization_id: UUID) -> int:
        """
        Count ADMIN memberships in an organization.

        Args:
            organization_id: Organization UUID

        Returns:
            Number of admin members
        """
        with storage_errors("Failed to count memberships"):
            result = await self.client.table("roster_memberships").select(
                "id", count="exact"
            ).eq("organization_id", str(organization_id)).eq(
                "role", MembershipRole.ADMIN.value
            ).execute()

        return result.count or 0
