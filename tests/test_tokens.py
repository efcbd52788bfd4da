"""
Tests for roster.invitations.tokens module.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

from roster.errors import NotFoundError
from roster.invitations.models import RosterInviteToken
from roster.invitations.tokens import InviteTokenManager, add_one_year


def _echo_inserted_row(builder):
    """Make execute() return whatever the last insert() received."""

    async def _execute():
        row = dict(builder.insert.call_args[0][0], id=str(uuid4()))
        return Mock(data=[row])

    builder.execute = AsyncMock(side_effect=_execute)


class TestAddOneYear:
    """Tests for add_one_year."""

    def test_regular_date(self):
        moment = datetime(2024, 3, 15, 12, 30, tzinfo=timezone.utc)
        assert add_one_year(moment) == datetime(2025, 3, 15, 12, 30, tzinfo=timezone.utc)

    def test_leap_day(self):
        moment = datetime(2024, 2, 29, 8, 0, tzinfo=timezone.utc)
        assert add_one_year(moment) == datetime(2025, 2, 28, 8, 0, tzinfo=timezone.utc)


class TestInviteTokenManager:
    """Tests for InviteTokenManager class."""

    @pytest.mark.asyncio
    async def test_generate_token(self, roster, table_mock, sample_org_id, sample_org_data):
        """Test minting a token stores it with a one-year expiry."""
        table_mock("roster_organizations", [sample_org_data])
        builder = roster.client.table("roster_invite_tokens")
        _echo_inserted_row(builder)

        token = await roster.tokens.generate(sample_org_id)

        row = builder.insert.call_args[0][0]
        assert row["token"] == token
        assert row["organization_id"] == str(sample_org_id)
        created_at = datetime.fromisoformat(row["created_at"])
        expires_at = datetime.fromisoformat(row["expires_at"])
        assert expires_at == add_one_year(created_at)

    @pytest.mark.asyncio
    async def test_generated_tokens_are_distinct(self, roster, table_mock, sample_org_id, sample_org_data):
        """Test two tokens for the same organization differ."""
        table_mock("roster_organizations", [sample_org_data])
        _echo_inserted_row(roster.client.table("roster_invite_tokens"))

        first = await roster.tokens.generate(sample_org_id)
        second = await roster.tokens.generate(sample_org_id)

        assert first != second
        assert len(first) >= 32

    @pytest.mark.asyncio
    async def test_generate_for_missing_organization(self, roster, sample_org_id):
        """Test minting a token for an unknown organization."""
        builder = roster.client.table("roster_invite_tokens")

        with pytest.raises(NotFoundError):
            await roster.tokens.generate(sample_org_id)

        builder.insert.assert_not_called()

    def test_build_link(self, roster):
        """Test links use the configured invite base URL."""
        assert roster.tokens.build_link("abc") == "https://app.example.com/invite?token=abc"

    def test_is_live(self, sample_token_data, expired_token_data):
        """Test liveness against the expiry instant."""
        live = RosterInviteToken(**sample_token_data)
        expired = RosterInviteToken(**expired_token_data)

        assert InviteTokenManager.is_live(live)
        assert not InviteTokenManager.is_live(expired)

    def test_is_live_boundary(self, sample_token_data):
        """Test a token is dead at exactly its expiry instant."""
        token = RosterInviteToken(**sample_token_data)

        assert token.is_live(token.expires_at - timedelta(seconds=1))
        assert not token.is_live(token.expires_at)

    def test_is_live_naive_timestamps(self, sample_token_data):
        """Test naive timestamps are treated as UTC."""
        token = RosterInviteToken(
            **dict(sample_token_data, expires_at=datetime(2030, 1, 1).isoformat())
        )

        assert token.is_live(datetime(2029, 12, 31, 23, 59))
        assert not token.is_live(datetime(2030, 1, 1, tzinfo=timezone.utc))

    @pytest.mark.asyncio
    async def test_get_for_organization(self, roster, table_mock, sample_org_id, sample_token_data):
        """Test tokens are scoped to their organization."""
        builder = table_mock("roster_invite_tokens", [sample_token_data])

        token = await roster.tokens.get_for_organization("test-token-123", sample_org_id)

        assert token.organization_id == sample_org_id
        builder.eq.assert_called_with("organization_id", str(sample_org_id))

    @pytest.mark.asyncio
    async def test_get_missing_token(self, roster):
        """Test looking up an unknown token."""
        assert await roster.tokens.get("nope") is None
