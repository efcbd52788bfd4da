"""
Roster - organizations, memberships and invitation-based onboarding on Supabase.

Example:
    ```python
    from roster import Roster

    roster = await Roster.create()

    # Owner creates an organization and becomes its admin
    org = await roster.orgs.create({"name": "Acme Corp"}, owner_id=owner.id)

    # Owner mints a shareable token and invites people with it
    token = await roster.tokens.generate(org.id)
    link = roster.tokens.build_link(token)
    await roster.invites.send(org.id, ["bob@example.com"], link)

    # Bob redeems the token and joins as a user
    membership = await roster.invites.redeem(token, bob.id)

    # Owner removes a member
    removed = await roster.orgs.remove_member(org.id, bob.id)
    ```
"""

from .audit import AuditAction, AuditLogEntry, AuditLogger, ResourceType
from .auth import RosterUser
from .client import Roster
from .config import RosterConfig, load_config
from .errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    RosterError,
    UnauthorizedError,
    ValidationError,
)
from .invitations import (
    InvitationManager,
    InviteTokenManager,
    RosterInvitation,
    RosterInviteToken,
)
from .mail import AsyncMailQueue, MailMessage, TemplateRenderer
from .organizations import (
    MembershipRole,
    RosterMembership,
    RosterOrganization,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "Roster",
    "RosterConfig",
    "load_config",
    # Errors
    "RosterError",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ConflictError",
    "InternalError",
    # Models
    "RosterUser",
    "RosterOrganization",
    "RosterMembership",
    "MembershipRole",
    "RosterInviteToken",
    "RosterInvitation",
    # Invitations
    "InvitationManager",
    "InviteTokenManager",
    # Mail
    "AsyncMailQueue",
    "MailMessage",
    "TemplateRenderer",
    # Audit logging
    "AuditLogger",
    "AuditLogEntry",
    "AuditAction",
    "ResourceType",
]
