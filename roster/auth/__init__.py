"""
Roster auth module.

Read-only user lookups.
"""

from .models import NormalizedEmail, RosterUser, is_email_address, normalize_email
from .users import UserManager

__all__ = [
    "UserManager",
    "RosterUser",
    "normalize_email",
    "is_email_address",
    "NormalizedEmail",
]
