"""
Tests for roster.client module.
"""

import pytest
from unittest.mock import AsyncMock, patch

from roster.client import Roster, build_mail_queue
from roster.config import RosterConfig
from roster.mail.queue import AsyncMailQueue, HttpMailSender, LoggingMailSender


class TestRoster:
    """Tests for Roster client class."""

    @pytest.mark.asyncio
    async def test_roster_create_with_kwargs(self, mock_roster_supabase_client):
        """Test creating Roster instance with kwargs."""
        with patch("roster.client.RosterSupabaseClient.create", return_value=mock_roster_supabase_client):
            roster = await Roster.create(
                supabase_url="https://test.supabase.co",
                supabase_key="test-key-12345678901234567890",
                protect_last_admin=True,
                _env_file=None,
            )

        assert roster.config.supabase_url == "https://test.supabase.co"
        assert roster.config.protect_last_admin is True
        assert roster.client is mock_roster_supabase_client
        assert isinstance(roster.mail, AsyncMailQueue)

    def test_roster_initialization(self, roster):
        """Test every manager is wired up."""
        assert roster.audit is not None
        assert roster.users is not None
        assert roster.orgs is not None
        assert roster.memberships is not None
        assert roster.tokens is not None
        assert roster.invites is not None
        assert roster.templates is not None

    @pytest.mark.asyncio
    async def test_roster_context_manager(self, roster, mail_queue):
        """Test the async context manager closes mail and client."""
        roster.client.close = AsyncMock()

        async with roster as r:
            assert r is roster

        mail_queue.close.assert_awaited_once()
        roster.client.close.assert_awaited_once()


class TestBuildMailQueue:
    """Tests for build_mail_queue."""

    def test_without_relay_logs(self):
        config = RosterConfig(
            supabase_url="https://test.supabase.co",
            supabase_key="test-key-12345678901234567890",
            _env_file=None,
        )

        assert isinstance(build_mail_queue(config).sender, LoggingMailSender)

    def test_with_relay(self):
        config = RosterConfig(
            supabase_url="https://test.supabase.co",
            supabase_key="test-key-12345678901234567890",
            mail_relay_url="https://mail.example.com/send",
            mail_relay_token="relay-token",
            mail_timeout=2.5,
            _env_file=None,
        )

        sender = build_mail_queue(config).sender

        assert isinstance(sender, HttpMailSender)
        assert sender.url == "https://mail.example.com/send"
        assert sender.token == "relay-token"
        assert sender.timeout == 2.5
