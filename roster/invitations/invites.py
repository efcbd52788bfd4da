"""
Invitation management for Roster.

Issuing invitations against an invite token and redeeming them.

The invitation flow:
1. An owner mints an invite token (InviteTokenManager.generate)
2. ``send`` binds the token to each recipient email and queues an email
3. The recipient registers/signs in and calls ``redeem`` with the token
4. ``redeem`` matches the invitation by (token, user email) and creates a
   USER membership, unless the user already belongs to the organization

Emails are matched case-insensitively: they are stored and compared in
normalized (stripped, lowercased) form.
"""

import html
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional, Sequence
from uuid import UUID
from postgrest.exceptions import APIError

from ..audit.models import AuditAction, ResourceType
from ..auth.models import is_email_address, normalize_email
from ..errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    describe_api_error,
    storage_errors,
)
from ..mail.models import MailMessage
from ..organizations.models import MembershipRole, RosterMembership, RosterOrganization
from ..utils.links import extract_invite_token
from .models import RosterInvitation

if TYPE_CHECKING:
    from ..client import Roster

logger = logging.getLogger(__name__)

INVITE_SUBJECT = "Invitation to Join Organization"


class InvitationManager:
    """
    Manages organization invitation operations.

    Example:
        ```python
        token = await roster.tokens.generate(org.id)
        link = roster.tokens.build_link(token)

        await roster.invites.send(org.id, ["bob@example.com"], link)

        # Later, as bob
        membership = await roster.invites.redeem(token, bob.id)
        ```
    """

    def __init__(self, roster: "Roster") -> None:
        """
        Initialize InvitationManager.

        Args:
            roster: Main Roster client instance
        """
        self.roster = roster
        self.client = roster.client

    def _validate_emails(self, emails: Sequence[str]) -> List[str]:
        normalized = []
        for email in emails:
            candidate = normalize_email(email) if isinstance(email, str) else ""
            if not is_email_address(candidate):
                raise ValidationError(f"Invalid email address: {email!r}")
            normalized.append(candidate)
        return normalized

    def _build_message(self, org: RosterOrganization, email: str, invite_link: str) -> MailMessage:
        body = (
            f"<p>You have been invited to join {html.escape(org.name)} organization. "
            "Please use the following link to accept the invitation:</p>"
            f'<a href="{html.escape(invite_link, quote=True)}">Here</a>'
        )
        return MailMessage(
            recipient=email,
            subject=INVITE_SUBJECT,
            html_body=self.roster.templates.render(
                "custom-email",
                {"userName": "", "title": INVITE_SUBJECT, "body": body},
            ),
            sender=self.roster.config.from_email,
        )

    async def send(
        self,
        organization_id: UUID,
        emails: Sequence[str],
        invite_link: str,
    ) -> List[RosterInvitation]:
        """
        Invite a list of email addresses using an existing invite token.

        The token is read from the link's first query parameter. All
        invitation rows are written in a single insert, so either every
        recipient gets an invitation or none does. Emails are queued only
        after the insert succeeds; queueing problems are logged, never raised.
        Duplicate addresses are kept as separate invitations.

        Args:
            organization_id: Organization being joined
            emails: Recipient addresses, in the order to invite them
            invite_link: Link carrying the invite token

        Returns:
            Created RosterInvitation instances, in input order

        Raises:
            NotFoundError: If the organization or the token does not exist
            ValidationError: If the link has no token, an email is invalid,
                or the token has expired (when expiry is enforced).
                Emails only get a syntax check; reserved domains such as
                ``.local`` are accepted
            InternalError: If the invitations cannot be stored

        Example:
            ```python
            invitations = await roster.invites.send(
                org.id,
                ["a@example.com", "b@example.com"],
                "https://app.example.com/invite?token=abc123",
            )
            ```
        """
        org = await self.roster.orgs.get(organization_id)
        if org is None:
            raise NotFoundError("Organization not found.")

        token = extract_invite_token(invite_link)

        invite_token = await self.roster.tokens.get_for_organization(token, org.id)
        if invite_token is None:
            raise NotFoundError("Invite token not found.")

        if self.roster.config.enforce_token_expiry and not invite_token.is_live():
            raise ValidationError("Invite token has expired.")

        recipients = self._validate_emails(emails)
        if not recipients:
            return []

        now = datetime.now(timezone.utc).isoformat()
        rows = [
            {
                "token": token,
                "organization_id": str(org.id),
                "email": email,
                "invite_token_id": str(invite_token.id),
                "created_at": now,
            }
            for email in recipients
        ]

        with storage_errors("Failed to create invitations"):
            result = await self.client.table("roster_invitations").insert(rows).execute()

        if not result.data or len(result.data) != len(rows):
            raise InternalError("Failed to create invitations")

        invitations = [RosterInvitation(**row) for row in result.data]

        for invitation in invitations:
            try:
                self.roster.mail.enqueue(self._build_message(org, invitation.email, invite_link))
            except Exception:
                # Mail is a best-effort side channel - the invitation stands
                logger.warning("Failed to queue invitation email to %s", invitation.email, exc_info=True)

        logger.info("Sent %d invitation(s) for organization %s", len(invitations), org.id)

        await self.roster.audit.log(
            action=AuditAction.INVITE_SENT,
            organization_id=org.id,
            resource_type=ResourceType.INVITE_TOKEN,
            resource_id=invite_token.id,
            metadata={"emails": [i.email for i in invitations]},
        )
        return invitations

    async def get_by_token_and_email(self, token: str, email: str) -> Optional[RosterInvitation]:
        """
        Find the invitation issued for ``email`` under ``token``.

        Args:
            token: Raw invite token
            email: Recipient email (normalized before matching)

        Returns:
            RosterInvitation instance or None if not found
        """
        with storage_errors("Failed to fetch invitation"):
            result = await self.client.table("roster_invitations").select("*").eq(
                "token", token
            ).eq("email", normalize_email(email)).order("created_at").execute()

        if not result.data:
            return None

        return RosterInvitation(**result.data[0])

    async def redeem(self, token: str, user_id: UUID) -> RosterMembership:
        """
        Join an organization through an invitation.

        Checks run in a fixed order and the first failure wins:
        registered user, invitation for (token, user email), organization,
        existing membership. The membership insert relies on the
        (user_id, organization_id) unique constraint, so two concurrent
        redemptions cannot both succeed.

        The invitation is stamped with ``accepted_at``/``accepted_by`` but
        stays redeemable; only the membership check stops repeats.

        Args:
            token: Raw invite token
            user_id: User redeeming the invitation

        Returns:
            The new USER RosterMembership

        Raises:
            UnauthorizedError: If the user is not registered or the id is malformed
            NotFoundError: If no invitation matches, the token has expired
                (when expiry is enforced), or the organization is gone
            ConflictError: If the user is already a member
            InternalError: If the membership cannot be stored

        Example:
            ```python
            try:
                membership = await roster.invites.redeem(token, user.id)
            except ConflictError:
                ...  # already a member
            ```
        """
        try:
            user_id = UUID(str(user_id))
        except ValueError as e:
            # Not an id any registered user can have
            raise UnauthorizedError("Please register to join the organization.") from e

        user = await self.roster.users.get(user_id)
        if user is None:
            raise UnauthorizedError("Please register to join the organization.")

        invitation = await self.get_by_token_and_email(token, user.email)
        if invitation is None:
            raise NotFoundError("Invalid or expired invitation.")

        if self.roster.config.enforce_token_expiry:
            invite_token = await self.roster.tokens.get(invitation.token)
            if invite_token is None or not invite_token.is_live():
                raise NotFoundError("Invalid or expired invitation.")

        org = await self.roster.orgs.get_with_memberships(invitation.organization_id)
        if org is None:
            raise NotFoundError("Organization not found.")

        if any(m.user_id == user_id for m in org.memberships):
            raise ConflictError("You are already a member.")

        try:
            membership = await self.roster.memberships.create(
                user_id=user_id,
                organization_id=org.id,
                role=MembershipRole.USER,
            )
        except ConflictError as e:
            # Lost a race with a concurrent redemption
            raise ConflictError("You are already a member.") from e

        await self._mark_accepted(invitation, user_id)

        logger.info("User %s joined organization %s by invitation", user_id, org.id)

        await self.roster.audit.log(
            action=AuditAction.INVITE_ACCEPTED,
            user_id=user_id,
            organization_id=org.id,
            resource_type=ResourceType.INVITATION,
            resource_id=invitation.id,
            metadata={"email": invitation.email},
        )
        await self.roster.audit.log(
            action=AuditAction.MEMBER_ADDED,
            user_id=user_id,
            organization_id=org.id,
            resource_type=ResourceType.MEMBERSHIP,
            resource_id=membership.id,
            metadata={"role": membership.role.value},
        )
        return membership

    async def _mark_accepted(self, invitation: RosterInvitation, user_id: UUID) -> None:
        # Bookkeeping only; the membership already exists
        try:
            await self.client.table("roster_invitations").update(
                {
                    "accepted_at": datetime.now(timezone.utc).isoformat(),
                    "accepted_by": str(user_id),
                }
            ).eq("id", str(invitation.id)).execute()
        except APIError as e:
            logger.warning(
                "Failed to mark invitation %s accepted: %s",
                invitation.id,
                describe_api_error(e),
            )

    async def list_by_token(self, token: str) -> List[RosterInvitation]:
        """
        List invitations issued under a token, oldest first.

        Args:
            token: Raw invite token

        Returns:
            List of RosterInvitation instances
        """
        with storage_errors("Failed to fetch invitations"):
            result = await self.client.table("roster_invitations").select("*").eq(
                "token", token
            ).order("created_at").execute()

        return [RosterInvitation(**inv) for inv in result.data or []]

    async def list_by_organization(
        self,
        organization_id: UUID,
        pending_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[RosterInvitation]:
        """
        List invitations for an organization, newest first.

        Args:
            organization_id: Organization UUID
            pending_only: Only return invitations never redeemed
            limit: Maximum number of invitations to return
            offset: Number of invitations to skip

        Returns:
            List of RosterInvitation instances
        """
        query = self.client.table("roster_invitations").select("*").eq(
            "organization_id", str(organization_id)
        )

        if pending_only:
            query = query.is_("accepted_at", "null")

        with storage_errors("Failed to fetch invitations"):
            result = await query.order("created_at", desc=True).range(
                offset, offset + limit - 1
            ).execute()

        return [RosterInvitation(**inv) for inv in result.data or []]

    async def list_by_email(self, email: str) -> List[RosterInvitation]:
        """
        List invitations addressed to an email, newest first.

        Args:
            email: Recipient address (normalized before matching)

        Returns:
            List of RosterInvitation instances
        """
        with storage_errors("Failed to fetch invitations"):
            result = await self.client.table("roster_invitations").select("*").eq(
                "email", normalize_email(email)
            ).order("created_at", desc=True).execute()

        return [RosterInvitation(**inv) for inv in result.data or []]
