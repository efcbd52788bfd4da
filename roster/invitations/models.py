"""
Roster invitation models.

Pydantic models for invite tokens and invitations in Roster.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from ..auth.models import NormalizedEmail


class RosterInviteToken(BaseModel):
    """
    Invite token model - a shareable, organization-scoped token.

    Stored in roster_invite_tokens. One token can back many invitations.
    Tokens are never modified after creation; they simply expire.
    """

    id: UUID
    token: str
    organization_id: UUID

    created_at: datetime
    expires_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "token": "Yx3b2Q9...",
                "organization_id": "456e7890-e89b-12d3-a456-426614174000",
                "created_at": "2024-01-01T00:00:00Z",
                "expires_at": "2025-01-01T00:00:00Z",
            }
        },
    }

    def is_live(self, now: Optional[datetime] = None) -> bool:
        """True while ``now`` is strictly before ``expires_at``."""
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now < expires_at


class RosterInvitation(BaseModel):
    """
    Invitation model - binds one invite token to one email address.

    ``accepted_at``/``accepted_by`` record the most recent redemption; they
    do not prevent the invitation from being redeemed again.
    """

    id: UUID
    token: str
    organization_id: UUID
    email: NormalizedEmail
    invite_token_id: UUID

    # Tracking
    accepted_at: Optional[datetime] = None
    accepted_by: Optional[UUID] = None

    created_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "token": "Yx3b2Q9...",
                "organization_id": "456e7890-e89b-12d3-a456-426614174000",
                "email": "bob@example.com",
                "invite_token_id": "789e0123-e89b-12d3-a456-426614174000",
                "accepted_at": None,
                "accepted_by": None,
                "created_at": "2024-01-01T00:00:00Z",
            }
        },
    }

