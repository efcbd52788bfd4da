"""
Tests for roster.organizations module.
"""

import pytest
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

from postgrest.exceptions import APIError

from roster.errors import ConflictError, InternalError, ValidationError
from roster.organizations.models import MembershipRole


class TestOrganizationCreate:
    """Tests for OrganizationManager.create."""

    @pytest.mark.asyncio
    async def test_create_organization(self, roster, rpc_mock, owner_id, sample_org_data):
        """Test the org and its owner membership are written by one RPC call."""
        builder = rpc_mock("roster_create_organization", data=sample_org_data)

        org = await roster.orgs.create(
            {"name": "Test Organization", "industry": "software"},
            owner_id=owner_id,
        )

        assert org.name == "Test Organization"
        assert org.owner_id == owner_id
        roster.client._client.rpc.assert_called_with(
            "roster_create_organization",
            {
                "payload": {"name": "Test Organization", "industry": "software"},
                "owner": str(owner_id),
            },
        )
        builder.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_accepts_list_result(self, roster, rpc_mock, owner_id, sample_org_data):
        """Test a single-row RPC result wrapped in a list."""
        rpc_mock("roster_create_organization", data=[sample_org_data])

        org = await roster.orgs.create({"name": "Test Organization"}, owner_id=owner_id)

        assert str(org.id) == sample_org_data["id"]

    @pytest.mark.asyncio
    async def test_create_writes_audit_entry(self, roster, rpc_mock, owner_id, sample_org_data):
        """Test org creation is audited."""
        rpc_mock("roster_create_organization", data=sample_org_data)
        audit_builder = roster.client.table("roster_audit_log")

        await roster.orgs.create({"name": "Test Organization"}, owner_id=owner_id)

        entry = audit_builder.insert.call_args[0][0]
        assert entry["action"] == "org.created"
        assert entry["user_id"] == str(owner_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"name": ""},
            {"name": "Acme", "email": "not-an-email"},
            {"name": "Acme", "unexpected": True},
        ],
    )
    async def test_create_invalid_payload(self, roster, owner_id, payload):
        """Test structurally invalid payloads never reach the database."""
        with pytest.raises(ValidationError):
            await roster.orgs.create(payload, owner_id=owner_id)

        roster.client._client.rpc.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_storage_failure_is_masked(self, roster, rpc_mock, owner_id):
        """Test storage failures surface as a generic InternalError."""
        error = APIError({"message": "relation does not exist", "code": "42P01", "hint": None, "details": None})
        rpc_mock("roster_create_organization", error=error)

        with pytest.raises(InternalError) as exc_info:
            await roster.orgs.create({"name": "Acme"}, owner_id=owner_id)

        assert str(exc_info.value) == "Failed to create organization"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_create_empty_result(self, roster, rpc_mock, owner_id):
        """Test an RPC returning nothing is an internal error."""
        rpc_mock("roster_create_organization", data=None)

        with pytest.raises(InternalError):
            await roster.orgs.create({"name": "Acme"}, owner_id=owner_id)


class TestOrganizationLookup:
    """Tests for organization read operations."""

    @pytest.mark.asyncio
    async def test_get_organization(self, roster, table_mock, sample_org_id, sample_org_data):
        """Test getting an organization by ID."""
        table_mock("roster_organizations", [sample_org_data])

        org = await roster.orgs.get(sample_org_id)

        assert org is not None
        assert org.id == sample_org_id
        assert org.memberships == []

    @pytest.mark.asyncio
    async def test_get_organization_not_found(self, roster, sample_org_id):
        """Test getting a missing organization."""
        assert await roster.orgs.get(sample_org_id) is None

    @pytest.mark.asyncio
    async def test_get_with_memberships(
        self, roster, table_mock, sample_org_id, owner_id, sample_org_data, make_membership_data
    ):
        """Test memberships are embedded in the organization."""
        data = dict(sample_org_data, memberships=[make_membership_data(owner_id, sample_org_id, "admin")])
        builder = table_mock("roster_organizations", [data])

        org = await roster.orgs.get_with_memberships(sample_org_id)

        builder.select.assert_called_with("*, memberships:roster_memberships(*)")
        assert len(org.memberships) == 1
        assert org.memberships[0].role == MembershipRole.ADMIN

    @pytest.mark.asyncio
    async def test_list_for_user(self, roster, table_mock, sample_user_id, sample_org_data):
        """Test listing every organization a user belongs to."""
        other_org = dict(sample_org_data, id=str(uuid4()), name="Other Org")
        builder = table_mock(
            "roster_memberships",
            [{"organization": sample_org_data}, {"organization": other_org}],
        )

        orgs = await roster.orgs.list_for_user(sample_user_id)

        assert {o.name for o in orgs} == {"Test Organization", "Other Org"}
        builder.eq.assert_called_with("user_id", str(sample_user_id))

    @pytest.mark.asyncio
    async def test_list_for_user_without_memberships(self, roster, sample_user_id):
        """Test a user with no memberships gets an empty list."""
        assert await roster.orgs.list_for_user(sample_user_id) == []

    @pytest.mark.asyncio
    async def test_get_for_user_member(
        self, roster, table_mock, sample_org_id, sample_user_id, sample_org_data
    ):
        """Test members can see the organization."""
        table_mock("roster_memberships", [{"organization": sample_org_data}])

        org = await roster.orgs.get_for_user(sample_org_id, sample_user_id)

        assert org is not None
        assert org.id == sample_org_id

    @pytest.mark.asyncio
    async def test_get_for_user_non_member(self, roster, sample_org_id, sample_user_id):
        """Test non-members see nothing, as if the org did not exist."""
        assert await roster.orgs.get_for_user(sample_org_id, sample_user_id) is None

    @pytest.mark.asyncio
    async def test_lookup_storage_failure(self, roster, sample_user_id):
        """Test read failures surface as InternalError."""
        builder = roster.client.table("roster_memberships")
        builder.execute = AsyncMock(side_effect=APIError({"message": "boom", "code": "XX000"}))

        with pytest.raises(InternalError) as exc_info:
            await roster.orgs.list_for_user(sample_user_id)

        assert str(exc_info.value) == "Failed to fetch organizations"


class TestRemoveMember:
    """Tests for OrganizationManager.remove_member."""

    @pytest.mark.asyncio
    async def test_remove_member(
        self,
        roster,
        table_mock,
        sample_org_id,
        sample_user_id,
        sample_user_data,
        make_membership_data,
    ):
        """Test removing a member returns the removed user."""
        membership = make_membership_data(sample_user_id, sample_org_id)
        builder = table_mock("roster_memberships", [membership], [membership])
        table_mock("roster_users", [sample_user_data])

        removed = await roster.orgs.remove_member(sample_org_id, sample_user_id)

        assert removed is not None
        assert removed.id == sample_user_id
        builder.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_remove_non_member(self, roster, sample_org_id, sample_user_id):
        """Test removing a non-member is a no-op returning None."""
        builder = roster.client.table("roster_memberships")

        assert await roster.orgs.remove_member(sample_org_id, sample_user_id) is None
        builder.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_remove_member_deleted_concurrently(
        self, roster, table_mock, sample_org_id, sample_user_id, sample_user_data, make_membership_data
    ):
        """Test a membership gone before the delete yields None."""
        membership = make_membership_data(sample_user_id, sample_org_id)
        table_mock("roster_memberships", [membership], [])
        table_mock("roster_users", [sample_user_data])

        assert await roster.orgs.remove_member(sample_org_id, sample_user_id) is None

    @pytest.mark.asyncio
    async def test_remove_last_admin_allowed_by_default(
        self, roster, table_mock, sample_org_id, owner_id, sample_user_data, make_membership_data
    ):
        """Test the last admin can be removed when protection is off."""
        membership = make_membership_data(owner_id, sample_org_id, "admin")
        builder = table_mock("roster_memberships", [membership], [membership])
        table_mock("roster_users", [dict(sample_user_data, id=str(owner_id))])

        removed = await roster.orgs.remove_member(sample_org_id, owner_id)

        assert removed.id == owner_id
        builder.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_remove_last_admin_protected(
        self, roster, table_mock, sample_org_id, owner_id, make_membership_data
    ):
        """Test protect_last_admin refuses to orphan the organization."""
        roster.config.protect_last_admin = True
        membership = make_membership_data(owner_id, sample_org_id, "admin")
        builder = table_mock(
            "roster_memberships",
            [membership],
            Mock(data=[{"id": membership["id"]}], count=1),
        )

        with pytest.raises(ConflictError):
            await roster.orgs.remove_member(sample_org_id, owner_id)

        builder.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_remove_admin_protected_with_other_admins(
        self, roster, table_mock, sample_org_id, owner_id, sample_user_data, make_membership_data
    ):
        """Test an admin can be removed while another admin remains."""
        roster.config.protect_last_admin = True
        membership = make_membership_data(owner_id, sample_org_id, "admin")
        table_mock(
            "roster_memberships",
            [membership],
            Mock(data=[{"id": "a"}, {"id": "b"}], count=2),
            [membership],
        )
        table_mock("roster_users", [dict(sample_user_data, id=str(owner_id))])

        removed = await roster.orgs.remove_member(sample_org_id, owner_id)

        assert removed.id == owner_id

    @pytest.mark.asyncio
    async def test_remove_member_of_missing_user(
        self, roster, table_mock, sample_org_id, sample_user_id, make_membership_data
    ):
        """Test None always means nothing was deleted."""
        builder = table_mock("roster_memberships", [make_membership_data(sample_user_id, sample_org_id)])
        table_mock("roster_users", [])

        assert await roster.orgs.remove_member(sample_org_id, sample_user_id) is None
        builder.delete.assert_not_called()
