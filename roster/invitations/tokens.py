"""
Invite token management for Roster.

An invite token is a random, organization-scoped string valid for one
calendar year. Owners share it as a link; invitations sent to specific
addresses are bound to it.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from ..audit.models import AuditAction, ResourceType
from ..errors import InternalError, NotFoundError, storage_errors
from ..utils.links import build_invite_link
from .models import RosterInviteToken

if TYPE_CHECKING:
    from ..client import Roster

logger = logging.getLogger(__name__)


def add_one_year(moment: datetime) -> datetime:
    """Same instant one calendar year later; Feb 29 maps to Feb 28."""
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        return moment.replace(year=moment.year + 1, day=28)


class InviteTokenManager:
    """
    Creates and looks up invite tokens (roster_invite_tokens table).

    Example:
        ```python
        token = await roster.tokens.generate(org.id)
        link = roster.tokens.build_link(token)
        ```
    """

    def __init__(self, roster: "Roster") -> None:
        """
        Initialize InviteTokenManager.

        Args:
            roster: Main Roster client instance
        """
        self.roster = roster
        self.client = roster.client

    def _generate_token(self, length: int = 32) -> str:
        """Generate a secure random token for invitations."""
        return secrets.token_urlsafe(length)

    async def generate(self, organization_id: UUID) -> str:
        """
        Mint a new invite token for an organization.

        The token expires exactly one calendar year after creation.

        Args:
            organization_id: Organization the token grants access to

        Returns:
            The raw token string, ready to embed in a link

        Raises:
            NotFoundError: If the organization does not exist
            InternalError: If the token cannot be stored
        """
        org = await self.roster.orgs.get(organization_id)
        if org is None:
            raise NotFoundError("Organization not found.")

        now = datetime.now(timezone.utc)
        token = self._generate_token()

        with storage_errors("Failed to create invite token"):
            result = await self.client.table("roster_invite_tokens").insert(
                {
                    "token": token,
                    "organization_id": str(organization_id),
                    "created_at": now.isoformat(),
                    "expires_at": add_one_year(now).isoformat(),
                }
            ).execute()

        if not result.data:
            raise InternalError("Failed to create invite token")

        invite_token = RosterInviteToken(**result.data[0])
        logger.info("Invite token %s created for organization %s", invite_token.id, organization_id)

        await self.roster.audit.log(
            action=AuditAction.INVITE_TOKEN_CREATED,
            organization_id=organization_id,
            resource_type=ResourceType.INVITE_TOKEN,
            resource_id=invite_token.id,
            metadata={"expires_at": invite_token.expires_at.isoformat()},
        )
        return token

    def build_link(self, token: str) -> str:
        """
        Build the shareable invite link for a token.

        Args:
            token: Raw invite token

        Returns:
            ``<invite_base_url>?token=<token>``
        """
        return build_invite_link(self.roster.config.invite_base_url, token)

    @staticmethod
    def is_live(invite_token: RosterInviteToken, now: Optional[datetime] = None) -> bool:
        """
        Check whether a token is still live.

        Args:
            invite_token: Token to check
            now: Reference instant (defaults to current UTC time)

        Returns:
            True if ``now < expires_at``
        """
        return invite_token.is_live(now)

    async def get(self, token: str) -> Optional[RosterInviteToken]:
        """
        Get an invite token by its value.

        Args:
            token: Raw invite token

        Returns:
            RosterInviteToken instance or None if not found
        """
        with storage_errors("Failed to fetch invite token"):
            result = await self.client.table("roster_invite_tokens").select("*").eq(
                "token", token
            ).execute()

        if not result.data:
            return None

        return RosterInviteToken(**result.data[0])

    async def get_for_organization(
        self,
        token: str,
        organization_id: UUID,
    ) -> Optional[RosterInviteToken]:
        """
        Get an invite token only if it belongs to the given organization.

        Args:
            token: Raw invite token
            organization_id: Organization UUID

        Returns:
            RosterInviteToken instance or None if not found
        """
        with storage_errors("Failed to fetch invite token"):
            result = await self.client.table("roster_invite_tokens").select("*").eq(
                "token", token
            ).eq("organization_id", str(organization_id)).execute()

        if not result.data:
            return None

        return RosterInviteToken(**result.data[0])

    async def list_by_organization(self, organization_id: UUID) -> List[RosterInviteToken]:
        """
        List an organization's invite tokens, newest first.

        Args:
            organization_id: Organization UUID

        Returns:
            List of RosterInviteToken instances
        """
        with storage_errors("Failed to fetch invite tokens"):
            result = await self.client.table("roster_invite_tokens").select("*").eq(
                "organization_id", str(organization_id)
            ).order("created_at", desc=True).execute()

        return [RosterInviteToken(**t) for t in result.data or []]
