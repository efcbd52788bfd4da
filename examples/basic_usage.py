"""
Basic Roster usage example.

Walks through the invitation-based onboarding flow:
- Create an organization (the owner becomes its admin)
- Mint an invite token and share the link
- Invite people by email
- Redeem the invitation as the invitee

Users are registered outside Roster; pass the IDs of two existing rows in
roster_users.

Run with:
    python examples/basic_usage.py <owner-user-id> <invitee-user-id>
"""

import asyncio
import logging
import sys
from uuid import UUID

from roster import ConflictError, Roster


async def main(owner_id: UUID, invitee_id: UUID):
    # Create Roster client (loads config from .env)
    roster = await Roster.create()

    try:
        # =================================================================
        # 1. Create Organization
        # =================================================================
        print("Creating organization...")

        org = await roster.orgs.create(
            {"name": "Acme Corporation", "industry": "manufacturing", "country": "DE"},
            owner_id=owner_id,
        )
        print(f"  Created org: {org.name} (ID: {org.id})")

        # =================================================================
        # 2. Mint an Invite Token
        # =================================================================
        print("\nMinting invite token...")

        token = await roster.tokens.generate(org.id)
        link = roster.tokens.build_link(token)
        print(f"  Invite link: {link}")

        # =================================================================
        # 3. Send Invitations
        # =================================================================
        invitee = await roster.users.get(invitee_id)
        if invitee is None:
            print(f"User {invitee_id} is not registered")
            return

        print("\nSending invitations...")
        invitations = await roster.invites.send(org.id, [invitee.email], link)
        for invitation in invitations:
            print(f"  Invited {invitation.email}")

        # =================================================================
        # 4. Redeem as the Invitee
        # =================================================================
        print("\nRedeeming invitation...")

        membership = await roster.invites.redeem(token, invitee.id)
        print(f"  {invitee.email} joined as {membership.role.value}")

        try:
            await roster.invites.redeem(token, invitee.id)
        except ConflictError as e:
            print(f"  Second redemption rejected: {e}")

        # =================================================================
        # 5. List Resources
        # =================================================================
        print("\nListing resources...")

        orgs = await roster.orgs.list_for_user(invitee.id)
        print(f"  {invitee.email} belongs to {len(orgs)} organization(s)")

        members = await roster.memberships.list_by_organization(org.id)
        print(f"  Members in {org.name}: {len(members)}")

        # =================================================================
        # 6. Remove the Member
        # =================================================================
        print("\nRemoving member...")

        removed = await roster.orgs.remove_member(org.id, invitee.id)
        print(f"  Removed: {removed.email if removed else 'nobody'}")

        print("\nDone!")

    finally:
        await roster.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) != 3:
        sys.exit(__doc__)
    asyncio.run(main(UUID(sys.argv[1]), UUID(sys.argv[2])))
