"""
Roster configuration management.

Loads configuration from environment variables or .env file.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RosterConfig(BaseSettings):
    """
    Roster configuration settings.

    Can be loaded from:
    1. Environment variables (ROSTER_SUPABASE_URL, ROSTER_SUPABASE_KEY, etc.)
    2. .env file in project root
    3. Direct instantiation with kwargs

    Example:
        ```python
        # From environment
        config = RosterConfig()

        # Direct instantiation
        config = RosterConfig(
            supabase_url="https://xxx.supabase.co",
            supabase_key="your-key",
            invite_base_url="https://app.example.com/invite",
        )
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="ROSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Supabase connection
    supabase_url: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)",
    )

    supabase_key: str = Field(
        ...,
        description="Supabase service role key (for admin operations)",
    )

    # Database schema
    db_schema: str = Field(
        default="public",
        description="PostgreSQL schema where roster tables live",
        alias="schema",
    )

    enable_audit_log: bool = Field(
        default=True,
        description="Record organization and invitation events in roster_audit_log",
    )

    # Invitations
    invite_base_url: str = Field(
        default="http://localhost:3000/invite",
        description="Base URL of the page that accepts invite tokens",
    )

    enforce_token_expiry: bool = Field(
        default=True,
        description="Reject sending and redeeming invitations backed by an expired token",
    )

    protect_last_admin: bool = Field(
        default=False,
        description="Refuse to remove the last admin membership of an organization",
    )

    # Email settings (for invitations)
    from_email: Optional[str] = Field(
        default=None,
        description="From address for invitation emails",
    )

    mail_relay_url: Optional[str] = Field(
        default=None,
        description="HTTP endpoint that accepts outbound mail as JSON (logs only when unset)",
    )

    mail_relay_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent to the mail relay",
    )

    mail_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for a single mail relay request",
    )

    # Debug
    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Ensure Supabase URL is valid."""
        if not v.startswith("https://"):
            raise ValueError("supabase_url must start with https://")
        return v.rstrip("/")

    @field_validator("supabase_key")
    @classmethod
    def validate_supabase_key(cls, v: str) -> str:
        """Ensure Supabase key is not empty."""
        if not v or len(v) < 10:
            raise ValueError("supabase_key appears invalid (too short)")
        return v

    @field_validator("invite_base_url")
    @classmethod
    def validate_invite_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("invite_base_url must be an http(s) URL")
        return v


def load_config(**kwargs) -> RosterConfig:
    """
    Load Roster configuration.

    Priority order:
    1. Keyword arguments
    2. Environment variables (ROSTER_*)
    3. .env file

    Args:
        **kwargs: Override configuration values

    Returns:
        RosterConfig instance

    Raises:
        pydantic.ValidationError: If required fields are missing or invalid
    """
    return RosterConfig(**kwargs)
