"""
Roster organizations models.

Pydantic models for organizations and memberships in Roster.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class MembershipRole(str, Enum):
    """Role a user holds inside an organization."""

    ADMIN = "admin"
    USER = "user"


class RosterMembership(BaseModel):
    """
    Roster membership model - represents a user's membership in an organization.

    At most one row exists per (user_id, organization_id).
    """

    id: UUID
    user_id: UUID
    organization_id: UUID
    role: MembershipRole = MembershipRole.USER

    # Timestamps
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e7890-e89b-12d3-a456-426614174000",
                "organization_id": "789e0123-e89b-12d3-a456-426614174000",
                "role": "admin",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }


class RosterOrganization(BaseModel):
    """
    Roster organization model - represents an organization in the roster_organizations table.

    ``owner_id`` is the user who created it. ``memberships`` is only
    populated when the query embeds roster_memberships.
    """

    id: UUID
    owner_id: UUID
    name: str
    description: Optional[str] = None
    email: Optional[str] = None
    industry: Optional[str] = None
    type: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None

    memberships: List[RosterMembership] = Field(default_factory=list)

    # Timestamps
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "owner_id": "456e7890-e89b-12d3-a456-426614174000",
                "name": "Acme Corp",
                "description": "Rockets and anvils",
                "email": "hello@acme.com",
                "industry": "manufacturing",
                "type": "company",
                "country": "US",
                "address": "1 Desert Road",
                "state": "AZ",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }


class CreateOrganizationRequest(BaseModel):
    """Request model for creating a new organization."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    email: Optional[EmailStr] = None
    industry: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=255)
    country: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    state: Optional[str] = Field(None, max_length=255)

    model_config = {"extra": "forbid"}


class CreateMembershipRequest(BaseModel):
    """Request model for creating a new membership."""

    user_id: UUID
    organization_id: UUID
    role: MembershipRole = MembershipRole.USER
