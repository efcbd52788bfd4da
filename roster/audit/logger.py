"""
Audit logging for Roster.

Records organization, membership and invitation events in roster_audit_log.
Audit writes are a side channel: a failed write is logged and never fails
the operation that triggered it.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from postgrest.exceptions import APIError

from ..errors import describe_api_error, storage_errors
from .models import AuditAction, AuditLogEntry, ResourceType

if TYPE_CHECKING:
    from ..client import Roster

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Manages audit logging operations.

    Example:
        ```python
        await roster.audit.log(
            action=AuditAction.MEMBER_REMOVED,
            user_id=user.id,
            organization_id=org.id,
            resource_type=ResourceType.MEMBERSHIP,
            resource_id=membership.id,
        )

        entries = await roster.audit.list_by_organization(org.id)
        ```
    """

    def __init__(self, roster: "Roster") -> None:
        """
        Initialize AuditLogger.

        Args:
            roster: Main Roster client instance
        """
        self.roster = roster
        self.client = roster.client
        self._enabled = roster.config.enable_audit_log

    def disable(self) -> None:
        """Disable audit logging (useful for bulk operations)."""
        self._enabled = False

    def enable(self) -> None:
        """Enable audit logging."""
        self._enabled = True

    @property
    def is_enabled(self) -> bool:
        """Check if audit logging is enabled."""
        return self._enabled

    async def log(
        self,
        action: AuditAction | str,
        user_id: Optional[UUID] = None,
        organization_id: Optional[UUID] = None,
        resource_type: Optional[ResourceType | str] = None,
        resource_id: Optional[UUID] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLogEntry]:
        """
        Log an audit event.

        Args:
            action: The action being performed (from AuditAction enum or custom string)
            user_id: ID of user performing or affected by the action
            organization_id: Organization context
            resource_type: Type of resource being acted on
            resource_id: ID of the resource being acted on
            metadata: Additional details about the action

        Returns:
            AuditLogEntry, or None when disabled or the write failed
        """
        if not self._enabled:
            return None

        action_value = action.value if isinstance(action, AuditAction) else action
        entry_data = {
            "action": action_value,
            "user_id": str(user_id) if user_id else None,
            "organization_id": str(organization_id) if organization_id else None,
            "resource_type": (
                resource_type.value
                if isinstance(resource_type, ResourceType)
                else resource_type
            ),
            "resource_id": str(resource_id) if resource_id else None,
            "metadata": metadata or {},
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            result = await self.client.table("roster_audit_log").insert(entry_data).execute()
        except APIError as e:
            logger.warning("Failed to write audit entry %s: %s", action_value, describe_api_error(e))
            return None

        if not result.data:
            return None

        return AuditLogEntry(**result.data[0])

    async def list_by_organization(
        self,
        organization_id: UUID,
        action: Optional[AuditAction | str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditLogEntry]:
        """
        List audit entries for an organization, newest first.

        Args:
            organization_id: Organization UUID
            action: Optional action filter
            limit: Maximum number of entries to return
            offset: Number of entries to skip

        Returns:
            List of AuditLogEntry instances
        """
        query = self.client.table("roster_audit_log").select("*").eq(
            "organization_id", str(organization_id)
        )

        if action:
            query = query.eq(
                "action", action.value if isinstance(action, AuditAction) else action
            )

        with storage_errors("Failed to fetch audit log"):
            result = await query.order("created_at", desc=True).range(
                offset, offset + limit - 1
            ).execute()

        return [AuditLogEntry(**entry) for entry in result.data or []]
