"""
Roster invitations module.

Invite tokens, invitation issuance and redemption.
"""

from .invites import InvitationManager
from .models import (
    RosterInvitation,
    RosterInviteToken,
)
from .tokens import InviteTokenManager, add_one_year

__all__ = [
    "InvitationManager",
    "InviteTokenManager",
    "RosterInvitation",
    "RosterInviteToken",
    "add_one_year",
]
