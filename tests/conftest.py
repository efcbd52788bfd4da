"""
Pytest configuration and fixtures for Roster tests.

Provides mock Supabase client and test fixtures.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from roster.client import Roster
from roster.config import RosterConfig
from roster.utils.supabase import RosterSupabaseClient


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _query_builder() -> Mock:
    query_builder = Mock()
    # Make all methods return self for chaining
    for method in (
        "select",
        "insert",
        "update",
        "delete",
        "eq",
        "in_",
        "is_",
        "limit",
        "offset",
        "order",
        "range",
        "lt",
        "gt",
    ):
        setattr(query_builder, method, Mock(return_value=query_builder))
    # Default execute returns empty result
    query_builder.execute = AsyncMock(return_value=Mock(data=[], count=0))
    return query_builder


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase AsyncClient."""
    client = Mock()

    # Store query builders by table / function name so tests can configure them
    query_builders = {}
    rpc_builders = {}

    def table_mock(table_name: str):
        if table_name not in query_builders:
            query_builders[table_name] = _query_builder()
        return query_builders[table_name]

    def rpc_mock(fn: str, params=None):
        if fn not in rpc_builders:
            rpc_builders[fn] = _query_builder()
        return rpc_builders[fn]

    client.table = Mock(side_effect=table_mock)
    client.rpc = Mock(side_effect=rpc_mock)
    client.postgrest = client
    client._query_builders = query_builders
    client._rpc_builders = rpc_builders

    return client


@pytest.fixture
def roster_config():
    """Create a test RosterConfig."""
    return RosterConfig(
        supabase_url="https://test.supabase.co",
        supabase_key="test-service-key-12345678901234567890",
        invite_base_url="https://app.example.com/invite",
        from_email="noreply@example.com",
        _env_file=None,
    )


@pytest.fixture
def mock_roster_supabase_client(mock_supabase_client, roster_config):
    """Create a RosterSupabaseClient around the mock."""
    return RosterSupabaseClient(config=roster_config, client=mock_supabase_client)


@pytest.fixture
def mail_queue():
    """Mail queue double recording enqueued messages."""
    queue = Mock()
    queue.enqueue = Mock()
    queue.close = AsyncMock()
    return queue


@pytest.fixture
def roster(mock_roster_supabase_client, roster_config, mail_queue):
    """Create a test Roster instance."""
    return Roster(config=roster_config, client=mock_roster_supabase_client, mail=mail_queue)


@pytest.fixture
def table_mock(roster):
    """
    Configure what a table's execute() returns.

    Pass one result for every call, or several to answer consecutive calls
    in order. Each result is the ``data`` list (or a ready Mock result).
    """

    def _setup(table_name, *results):
        query_builder = roster.client.table(table_name)
        wrapped = [r if isinstance(r, Mock) else Mock(data=r, count=len(r or [])) for r in results]
        if len(wrapped) == 1:
            query_builder.execute = AsyncMock(return_value=wrapped[0])
        else:
            query_builder.execute = AsyncMock(side_effect=wrapped)
        return query_builder

    return _setup


@pytest.fixture
def rpc_mock(roster):
    """Configure what an RPC function's execute() returns (or raises)."""

    def _setup(fn, data=None, error=None):
        builder = roster.client.rpc(fn)
        if error is not None:
            builder.execute = AsyncMock(side_effect=error)
        else:
            builder.execute = AsyncMock(return_value=Mock(data=data))
        return builder

    return _setup


@pytest.fixture
def sample_user_id():
    """Generate a sample user UUID."""
    return uuid4()


@pytest.fixture
def sample_org_id():
    """Generate a sample organization UUID."""
    return uuid4()


@pytest.fixture
def sample_user_data(sample_user_id):
    """Create sample user data."""
    return {
        "id": str(sample_user_id),
        "email": "bob@example.com",
        "display_name": "Bob",
        "metadata": {},
        "status": "active",
        "created_at": _now().isoformat(),
        "updated_at": _now().isoformat(),
    }


@pytest.fixture
def owner_id():
    """Generate the organization owner's UUID."""
    return uuid4()


@pytest.fixture
def sample_org_data(sample_org_id, owner_id):
    """Create sample organization data."""
    return {
        "id": str(sample_org_id),
        "owner_id": str(owner_id),
        "name": "Test Organization",
        "description": None,
        "email": None,
        "industry": None,
        "type": None,
        "country": None,
        "address": None,
        "state": None,
        "created_at": _now().isoformat(),
        "updated_at": _now().isoformat(),
    }


@pytest.fixture
def make_membership_data():
    """Factory for membership rows."""

    def _make(user_id, organization_id, role="user"):
        return {
            "id": str(uuid4()),
            "user_id": str(user_id),
            "organization_id": str(organization_id),
            "role": role,
            "created_at": _now().isoformat(),
            "updated_at": _now().isoformat(),
        }

    return _make


@pytest.fixture
def sample_token_data(sample_org_id):
    """Create sample (live) invite token data."""
    created_at = _now()
    return {
        "id": str(uuid4()),
        "token": "test-token-123",
        "organization_id": str(sample_org_id),
        "created_at": created_at.isoformat(),
        "expires_at": (created_at + timedelta(days=365)).isoformat(),
    }


@pytest.fixture
def expired_token_data(sample_token_data):
    """Create invite token data that expired yesterday."""
    data = sample_token_data.copy()
    data["created_at"] = (_now() - timedelta(days=366)).isoformat()
    data["expires_at"] = (_now() - timedelta(days=1)).isoformat()
    return data


@pytest.fixture
def make_invitation_data(sample_org_id, sample_token_data):
    """Factory for invitation rows bound to the sample token."""

    def _make(email, token="test-token-123"):
        return {
            "id": str(uuid4()),
            "token": token,
            "organization_id": str(sample_org_id),
            "email": email,
            "invite_token_id": sample_token_data["id"],
            "accepted_at": None,
            "accepted_by": None,
            "created_at": _now().isoformat(),
        }

    return _make


@pytest.fixture
def invite_link():
    """Invite link carrying the sample token."""
    return "https://app.example.com/invite?token=test-token-123"
