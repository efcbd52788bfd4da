"""
Roster audit logging module.

Records organization, membership and invitation events.
"""

from .logger import AuditLogger
from .models import (
    AuditAction,
    AuditLogEntry,
    ResourceType,
)

__all__ = [
    "AuditLogger",
    "AuditLogEntry",
    "AuditAction",
    "ResourceType",
]
