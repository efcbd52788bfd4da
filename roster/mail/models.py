"""
Roster mail models.
"""

from typing import Optional

from pydantic import BaseModel


class MailMessage(BaseModel):
    """An outbound email handed to the mail queue."""

    recipient: str
    subject: str
    html_body: str
    sender: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "recipient": "bob@example.com",
                "subject": "Invitation to Join Organization",
                "html_body": "<p>You have been invited...</p>",
                "sender": "noreply@example.com",
            }
        },
    }
