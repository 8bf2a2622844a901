"""``modeanalytics_collection`` resource."""

import logging
from typing import Optional

import httpx

from ..models import Collection
from ..utils.http import raise_for_unexpected
from .base import ResourceHandler

logger = logging.getLogger(__name__)


class CollectionResource(ResourceHandler[Collection]):
    """Manage a Mode collection (an API "space")."""

    type_suffix = "collection"

    def item_url(self, collection_token: Optional[str]) -> str:
        return self.url("spaces", collection_token or "")

    async def create(self, plan: Collection) -> Collection:
        """Create the collection and merge the computed fields into the plan.

        :param plan: Planned collection
        :type plan: Collection
        :return: State to store
        :rtype: Collection
        """
        response = await self.request_ok(
            "POST",
            self.url("spaces"),
            "create collection",
            plan.to_payload(creating=True),
        )
        created = response.parse(Collection)
        logger.info("Created collection %s", created.collection_token)
        return plan.model_copy(
            update={
                "collection_token": created.collection_token,
                "state": created.state,
                "id": created.id,
                "restricted": created.restricted,
                "free_default": created.free_default,
                "viewable": created.viewable,
                "default_access_level": created.default_access_level,
            }
        )

    async def read(self, state: Collection) -> Optional[Collection]:
        """Refresh the collection from the API.

        A freshly deleted collection may answer 403 instead of 404. When
        that happens the workspace listing is fetched: if it is readable,
        credentials are fine and the collection is treated as gone.

        :param state: Current state
        :type state: Collection
        :return: Refreshed state, or None if the collection no longer exists
        :rtype: Optional[Collection]
        """
        url = self.item_url(state.collection_token)
        response = await self.request("GET", url)

        if response.status_code == httpx.codes.OK:
            current = response.parse(Collection)
            if current.is_soft_deleted:
                logger.info("Collection %s is soft deleted", state.collection_token)
                return None
            return self._merge(state, current)

        if response.is_not_found():
            return None

        if response.status_code == httpx.codes.FORBIDDEN:
            listing = await self.request("GET", self.url("spaces?filter=all"))
            if listing.status_code == httpx.codes.OK:
                logger.info(
                    "Collection %s forbidden but listing readable, treating as gone",
                    state.collection_token,
                )
                return None

        raise_for_unexpected(response.response, "read collection")
        return None

    async def update(self, plan: Collection, state: Collection) -> Collection:
        url = self.item_url(state.collection_token)
        response = await self.request_ok(
            "PATCH", url, "update collection", plan.to_payload()
        )
        updated = response.parse(Collection)
        return self._merge(plan, updated).model_copy(
            update={"collection_token": state.collection_token, "id": state.id}
        )

    async def delete(self, state: Collection) -> None:
        await self.delete_and_verify(
            self.item_url(state.collection_token), "delete collection"
        )

    async def import_state(self, import_id: str) -> Collection:
        """Start from the collection token; the host then calls read."""
        return Collection(collection_token=import_id.strip())

    @staticmethod
    def _merge(base: Collection, current: Collection) -> Collection:
        return base.model_copy(
            update={
                "state": current.state,
                "name": current.name,
                "collection_type": current.collection_type,
                "description": current.description,
                "restricted": current.restricted,
                "free_default": current.free_default,
                "viewable": current.viewable,
                "default_access_level": current.default_access_level,
            }
        )
