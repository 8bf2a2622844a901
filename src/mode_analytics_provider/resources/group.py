"""``modeanalytics_group`` resource."""

import logging
from typing import Optional

from ..models import Group
from ..utils.http import raise_for_unexpected
from .base import ResourceHandler

logger = logging.getLogger(__name__)


class GroupResource(ResourceHandler[Group]):
    """Manage a Mode user group."""

    type_suffix = "group"
    deletion_hint = (
        "If the name of the group matches one that was already deleted, its "
        "name needs to be changed before it can be deleted (API limitation)"
    )

    def item_url(self, group_token: Optional[str]) -> str:
        return self.url("groups", group_token or "")

    async def create(self, plan: Group) -> Group:
        response = await self.request_ok(
            "POST", self.url("groups"), "create group", plan.to_payload()
        )
        created = response.parse(Group)
        logger.info("Created group %s", created.group_token)
        return plan.model_copy(
            update={"group_token": created.group_token, "state": created.state}
        )

    async def read(self, state: Group) -> Optional[Group]:
        """Refresh the group; soft-deleted groups count as gone."""
        response = await self.request("GET", self.item_url(state.group_token))
        if response.is_not_found():
            return None
        raise_for_unexpected(response.response, "read group")
        current = response.parse(Group)
        if current.is_soft_deleted:
            return None
        return state.model_copy(update={"name": current.name, "state": current.state})

    async def update(self, plan: Group, state: Group) -> Group:
        response = await self.request_ok(
            "PATCH",
            self.item_url(state.group_token),
            "update group",
            plan.to_payload(),
        )
        updated = response.parse(Group)
        return plan.model_copy(
            update={
                "group_token": state.group_token,
                "name": updated.name,
                "state": updated.state,
            }
        )

    async def delete(self, state: Group) -> None:
        await self.delete_and_verify(self.item_url(state.group_token), "delete group")

    async def import_state(self, import_id: str) -> Group:
        return Group(group_token=import_id.strip())

