"""
Organization directory for Roster.

Creating an organization, finding the organizations a user belongs to, and
owner-initiated member removal. Member lists are always read from
roster_memberships; organizations carry no copy of their users.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union
from uuid import UUID

import pydantic
from postgrest.exceptions import APIError

from ..audit.models import AuditAction, ResourceType
from ..auth.models import RosterUser
from ..errors import (
    ConflictError,
    InternalError,
    ValidationError,
    describe_api_error,
    storage_errors,
)
from .models import CreateOrganizationRequest, MembershipRole, RosterOrganization

if TYPE_CHECKING:
    from ..client import Roster

logger = logging.getLogger(__name__)


def _first_row(data: Any) -> Optional[Dict[str, Any]]:
    # RPC functions returning a single row come back as an object, tables as a list
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


class OrganizationManager:
    """
    Manager for organization operations.

    Example:
        ```python
        roster = await Roster.create()

        org = await roster.orgs.create({"name": "Acme Corp"}, owner_id=user.id)

        # Every organization the user belongs to
        orgs = await roster.orgs.list_for_user(user.id)

        # Only visible to members
        org = await roster.orgs.get_for_user(org.id, user.id)
        ```
    """

    def __init__(self, roster: "Roster") -> None:
        """
        Initialize OrganizationManager.

        Args:
            roster: Roster client instance
        """
        self.roster = roster
        self.client = roster.client

    async def create(
        self,
        payload: Union[CreateOrganizationRequest, Dict[str, Any]],
        owner_id: UUID,
    ) -> RosterOrganization:
        """
        Create a new organization owned by ``owner_id``.

        The organization row and the owner's ADMIN membership are written by
        the roster_create_organization SQL function, so both land in one
        transaction or neither does.

        Args:
            payload: Organization attributes (request model or plain dict)
            owner_id: User creating the organization

        Returns:
            Created RosterOrganization

        Raises:
            ValidationError: If the payload is structurally invalid
            InternalError: If the database write fails

        Example:
            ```python
            org = await roster.orgs.create(
                {"name": "Acme Corp", "industry": "manufacturing"},
                owner_id=user.id,
            )
            ```
        """
        try:
            request = CreateOrganizationRequest.model_validate(payload)
        except pydantic.ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) or "payload" for err in e.errors())
            raise ValidationError(f"Invalid organization payload: {fields}") from e

        try:
            result = await self.client.rpc(
                "roster_create_organization",
                {
                    "payload": request.model_dump(mode="json", exclude_none=True),
                    "owner": str(owner_id),
                },
            ).execute()
        except APIError as e:
            # Callers get a generic message; the cause stays in the logs
            logger.error(
                "Failed to create organization for owner %s: %s",
                owner_id,
                describe_api_error(e),
                exc_info=True,
            )
            raise InternalError("Failed to create organization") from e

        org_data = _first_row(result.data)
        if org_data is None:
            raise InternalError("Failed to create organization")

        org = RosterOrganization(**org_data)
        logger.info("Organization %s created by %s", org.id, owner_id)

        await self.roster.audit.log(
            action=AuditAction.ORG_CREATED,
            user_id=owner_id,
            organization_id=org.id,
            resource_type=ResourceType.ORGANIZATION,
            resource_id=org.id,
            metadata={"name": org.name},
        )
        return org

    async def get(self, organization_id: UUID) -> Optional[RosterOrganization]:
        """
        Get an organization by ID, regardless of who is asking.

        Args:
            organization_id: Organization UUID

        Returns:
            RosterOrganization if found, None otherwise
        """
        with storage_errors("Failed to fetch organization"):
            result = await self.client.table("roster_organizations").select("*").eq(
                "id", str(organization_id)
            ).execute()

        if not result.data:
            return None

        return RosterOrganization(**result.data[0])

    async def get_with_memberships(self, organization_id: UUID) -> Optional[RosterOrganization]:
        """
        Get an organization with its full membership set loaded.

        Args:
            organization_id: Organization UUID

        Returns:
            RosterOrganization with ``memberships`` populated, or None
        """
        with storage_errors("Failed to fetch organization"):
            result = await self.client.table("roster_organizations").select(
                "*, memberships:roster_memberships(*)"
            ).eq("id", str(organization_id)).execute()

        if not result.data:
            return None

        return RosterOrganization(**result.data[0])

    async def list_for_user(self, user_id: UUID) -> List[RosterOrganization]:
        """
        List every organization the user holds a membership in.

        No ordering is guaranteed.

        Args:
            user_id: User UUID

        Returns:
            List of RosterOrganization instances
        """
        logger.debug("Fetching organizations for user %s", user_id)

        with storage_errors("Failed to fetch organizations"):
            result = await self.client.table("roster_memberships").select(
                "organization:roster_organizations(*)"
            ).eq("user_id", str(user_id)).execute()

        orgs = [
            RosterOrganization(**row["organization"])
            for row in result.data or []
            if row.get("organization")
        ]
        logger.debug("Organizations found for user %s: %d", user_id, len(orgs))
        return orgs

    async def get_for_user(
        self,
        organization_id: UUID,
        user_id: UUID,
    ) -> Optional[RosterOrganization]:
        """
        Get an organization as seen by a user.

        Non-members get None, exactly as if the organization did not exist.

        Args:
            organization_id: Organization UUID
            user_id: Requesting user UUID

        Returns:
            RosterOrganization if the user is a member, None otherwise
        """
        with storage_errors("Failed to fetch organization"):
            result = await self.client.table("roster_memberships").select(
                "organization:roster_organizations(*)"
            ).eq("user_id", str(user_id)).eq(
                "organization_id", str(organization_id)
            ).execute()

        if not result.data or not result.data[0].get("organization"):
            return None

        return RosterOrganization(**result.data[0]["organization"])

    async def remove_member(
        self,
        organization_id: UUID,
        user_id: UUID,
    ) -> Optional[RosterUser]:
        """
        Remove a user's membership from an organization.

        Removing the last admin is allowed unless ``protect_last_admin`` is
        enabled in the config.

        Args:
            organization_id: Organization UUID
            user_id: User to remove

        Returns:
            The removed RosterUser, or None when nothing was removed (the
            user was not a member, or the user itself no longer exists)

        Raises:
            ConflictError: If the user is the last admin and the config protects it
            InternalError: If the database write fails

        Example:
            ```python
            removed = await roster.orgs.remove_member(org.id, user.id)
            if removed is None:
                ...  # not a member
            ```
        """
        membership = await self.roster.memberships.get_by_user_and_org(user_id, organization_id)
        if membership is None:
            return None

        if (
            self.roster.config.protect_last_admin
            and membership.role == MembershipRole.ADMIN
            and await self.roster.memberships.count_admins(organization_id) <= 1
        ):
            raise ConflictError("Cannot remove the last admin of an organization")

        user = await self.roster.users.get(user_id)
        if user is None:
            # The user row is gone; its memberships cascade with it
            logger.warning("Membership %s belongs to unknown user %s", membership.id, user_id)
            return None

        deleted = await self.roster.memberships.delete_by_user_and_org(user_id, organization_id)
        if deleted is None:
            # Removed concurrently
            return None

        await self.roster.audit.log(
            action=AuditAction.MEMBER_REMOVED,
            user_id=user_id,
            organization_id=organization_id,
            resource_type=ResourceType.MEMBERSHIP,
            resource_id=deleted.id,
            metadata={"role": deleted.role.value},
        )
        return user
