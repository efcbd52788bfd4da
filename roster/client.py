"""
Main Roster client.

This is the primary interface users interact with.
"""

from typing import Optional

from .audit import AuditLogger
from .auth import UserManager
from .config import RosterConfig, load_config
from .invitations import InvitationManager, InviteTokenManager
from .mail import AsyncMailQueue, HttpMailSender, LoggingMailSender, MailQueue, TemplateRenderer
from .organizations import MembershipManager, OrganizationManager
from .utils.supabase import RosterSupabaseClient


def build_mail_queue(config: RosterConfig) -> AsyncMailQueue:
    """Mail queue delivering through the configured relay, or logging when there is none."""
    if config.mail_relay_url:
        sender = HttpMailSender(
            config.mail_relay_url,
            token=config.mail_relay_token,
            timeout=config.mail_timeout,
        )
    else:
        sender = LoggingMailSender()
    return AsyncMailQueue(sender)


class Roster:
    """
    Main Roster client for organizations, memberships and invitations.

    Example:
        ```python
        from roster import Roster

        async with await Roster.create() as roster:
            org = await roster.orgs.create({"name": "Acme Corp"}, owner_id=owner.id)

            token = await roster.tokens.generate(org.id)
            await roster.invites.send(org.id, ["bob@example.com"], roster.tokens.build_link(token))

            membership = await roster.invites.redeem(token, bob.id)
        ```
    """

    def __init__(
        self,
        config: RosterConfig,
        client: RosterSupabaseClient,
        mail: Optional[MailQueue] = None,
        templates: Optional[TemplateRenderer] = None,
    ) -> None:
        """
        Initialize Roster client.

        Args:
            config: Roster configuration
            client: Supabase client wrapper
            mail: Outbound mail queue (built from config when omitted)
            templates: Email template renderer

        Note:
            Use Roster.create() instead of direct instantiation.
        """
        self.config = config
        self.client = client
        self.mail = mail if mail is not None else build_mail_queue(config)
        self.templates = templates or TemplateRenderer()

        self.audit = AuditLogger(self)
        self.users = UserManager(self)
        self.orgs = OrganizationManager(self)
        self.memberships = MembershipManager(self)
        self.tokens = InviteTokenManager(self)
        self.invites = InvitationManager(self)

    @classmethod
    async def create(
        cls,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        mail: Optional[MailQueue] = None,
        **kwargs,
    ) -> "Roster":
        """
        Create and initialize a Roster client.

        Args:
            supabase_url: Supabase project URL (optional, loads from env)
            supabase_key: Supabase service role key (optional, loads from env)
            mail: Outbound mail queue (optional, built from config)
            **kwargs: Additional configuration options

        Returns:
            Initialized Roster client

        Raises:
            pydantic.ValidationError: If required configuration is missing or invalid
        """
        config_kwargs = kwargs.copy()
        if supabase_url:
            config_kwargs["supabase_url"] = supabase_url
        if supabase_key:
            config_kwargs["supabase_key"] = supabase_key

        config = load_config(**config_kwargs)
        client = await RosterSupabaseClient.create(config)

        return cls(config=config, client=client, mail=mail)

    async def close(self) -> None:
        """
        Close the Roster client and cleanup resources.

        Pending invitation emails are drained before the client closes.
        """
        close_mail = getattr(self.mail, "close", None)
        if close_mail is not None:
            await close_mail()
        await self.client.close()

    async def __aenter__(self) -> "Roster":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
