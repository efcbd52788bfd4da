"""
Roster organizations module.

Handles organizations and memberships.
"""

from .members import MembershipManager
from .models import (
    CreateMembershipRequest,
    CreateOrganizationRequest,
    MembershipRole,
    RosterMembership,
    RosterOrganization,
)
from .orgs import OrganizationManager

__all__ = [
    "OrganizationManager",
    "MembershipManager",
    "RosterOrganization",
    "RosterMembership",
    "MembershipRole",
    "CreateOrganizationRequest",
    "CreateMembershipRequest",
]
