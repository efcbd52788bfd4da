"""
Roster auth models.

Pydantic model for the users Roster looks up. Registration and sign-in live
outside this library.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field


def normalize_email(email: str) -> str:
    """Canonical form used to store and match invitation emails."""
    return email.strip().lower()


def is_email_address(email: str) -> bool:
    """
    Plain syntax check: one @, a non-empty local part and domain, no whitespace.

    Deliverability and reserved domains (.local, .test, ...) are not checked;
    intranet addresses are valid invitees.
    """
    local, at, domain = email.rpartition("@")
    if not (at and local and domain) or "@" in local:
        return False
    if any(c.isspace() for c in email):
        return False
    return not domain.startswith(".") and not domain.endswith(".")


# Stored addresses are trusted as written by registration, only normalized
NormalizedEmail = Annotated[str, AfterValidator(normalize_email)]


class RosterUser(BaseModel):
    """
    Roster user model - represents a registered user in the roster_users table.

    The email is the key invitations are matched against.
    """

    id: UUID
    email: NormalizedEmail
    display_name: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    # Status
    status: str = "active"

    # Timestamps
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "user@example.com",
                "display_name": "John Doe",
                "status": "active",
                "metadata": {},
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z",
            }
        },
    }
