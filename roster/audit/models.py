"""
Roster audit log models.

Pydantic models for audit logging in Roster.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AuditAction(str, Enum):
    """Audit actions recorded by Roster."""

    # Organization actions
    ORG_CREATED = "org.created"

    # Membership actions
    MEMBER_ADDED = "member.added"
    MEMBER_REMOVED = "member.removed"

    # Invitation actions
    INVITE_TOKEN_CREATED = "invite_token.created"
    INVITE_SENT = "invite.sent"
    INVITE_ACCEPTED = "invite.accepted"

    # Custom action (for user-defined actions)
    CUSTOM = "custom"


class ResourceType(str, Enum):
    """Resource types that can be audited."""

    ORGANIZATION = "organization"
    MEMBERSHIP = "membership"
    INVITE_TOKEN = "invite_token"
    INVITATION = "invitation"
    CUSTOM = "custom"


class AuditLogEntry(BaseModel):
    """
    Audit log entry model - represents a single audit event.

    Stored in the roster_audit_log table.
    """

    id: UUID
    organization_id: Optional[UUID] = None
    user_id: Optional[UUID] = None

    # What happened
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[UUID] = None

    # Details
    metadata: Dict[str, Any] = Field(default_factory=dict)

    # Timestamp
    created_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "organization_id": "456e7890-e89b-12d3-a456-426614174000",
                "user_id": "789e0123-e89b-12d3-a456-426614174000",
                "action": "invite.accepted",
                "resource_type": "membership",
                "resource_id": "012e3456-e89b-12d3-a456-426614174000",
                "metadata": {"email": "user@example.com"},
                "created_at": "2024-01-01T00:00:00Z",
            }
        },
    }
