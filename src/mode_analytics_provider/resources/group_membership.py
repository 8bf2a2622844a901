"""``modeanalytics_group_membership`` resource."""

import logging
from typing import Optional

from ..models import GroupMembership
from ..utils.http import raise_for_unexpected
from .base import ResourceHandler, split_import_id

logger = logging.getLogger(__name__)


class GroupMembershipResource(ResourceHandler[GroupMembership]):
    """Manage the membership of one workspace member in a user group.

    Both attributes force replacement, so ``update`` has nothing to send.
    """

    type_suffix = "group_membership"

    def item_url(self, membership: GroupMembership) -> str:
        return self.url(
            "groups",
            membership.group_token,
            "memberships",
            membership.membership_token or "",
        )

    async def create(self, plan: GroupMembership) -> GroupMembership:
        response = await self.request_ok(
            "POST",
            self.url("groups", plan.group_token, "memberships"),
            "create group membership",
            plan.to_payload(),
        )
        created = response.parse(GroupMembership)
        logger.info(
            "Added member %s to group %s", plan.member_token, plan.group_token
        )
        return plan.model_copy(update={"membership_token": created.membership_token})

    async def read(self, state: GroupMembership) -> Optional[GroupMembership]:
        response = await self.request("GET", self.item_url(state))
        if response.is_not_found():
            return None
        raise_for_unexpected(response.response, "read group membership")
        current = response.parse(GroupMembership)
        return state.model_copy(
            update={
                "member_token": current.member_token or state.member_token,
                "membership_token": current.membership_token or state.membership_token,
            }
        )

    async def update(
        self, plan: GroupMembership, state: GroupMembership
    ) -> GroupMembership:
        return plan.model_copy(update={"membership_token": state.membership_token})

    async def delete(self, state: GroupMembership) -> None:
        await self.delete_and_verify(self.item_url(state), "delete group membership")

    async def import_state(self, import_id: str) -> GroupMembership:
        """Import from ``<group_token>/<membership_token>``."""
        group_token, membership_token = split_import_id(
            import_id, "group_token", "membership_token"
        )
        return GroupMembership(
            group_token=group_token, membership_token=membership_token
        )
