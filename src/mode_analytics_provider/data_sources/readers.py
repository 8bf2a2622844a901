"""Read-only data-source handlers.

Each reader issues a single GET and requires a 200 response. Listing
readers unwrap the HAL ``_embedded`` envelope under their listing key.
"""

import logging
from typing import Any, Dict, List, Type, TypeVar

from ..models import (
    Collection,
    DataSource,
    Group,
    GroupMember,
    WorkspaceMembership,
)
from ..models.base import ModeModel
from ..resources.base import BaseHandler

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=ModeModel)


class DataSourceReader(BaseHandler):
    """Base class for data sources."""

    async def fetch(self, url: str, model: Type[ModelT], action: str) -> ModelT:
        """GET a single object and parse it as ``model``."""
        response = await self.request_ok("GET", url, action)
        return response.parse(model)

    async def fetch_listing(
        self, url: str, key: str, model: Type[ModelT], action: str
    ) -> List[ModelT]:
        """GET a HAL listing and parse every item as ``model``.

        :param url: Listing URL
        :type url: str
        :param key: Key inside ``_embedded``
        :type key: str
        :param model: Model each item is parsed as
        :type model: Type[ModelT]
        :param action: Description for error messages
        :type action: str
        :return: Parsed items in API order
        :rtype: List[ModelT]
        """
        response = await self.request_ok("GET", url, action)
        items = response.parse_embedded(key, model)
        logger.debug("Read %d %s from %s", len(items), key, url)
        return items


class CollectionReader(DataSourceReader):
    type_suffix = "collection"

    async def read(self, collection_token: str) -> Collection:
        return await self.fetch(
            self.url("spaces", collection_token), Collection, "read collection"
        )


class CollectionsReader(DataSourceReader):
    type_suffix = "collections"

    async def read(self) -> List[Collection]:
        return await self.fetch_listing(
            self.url("spaces?filter=all"), "spaces", Collection, "read collections"
        )


class DataSourceItemReader(DataSourceReader):
    type_suffix = "data_source"

    async def read(self, data_source_token: str) -> DataSource:
        return await self.fetch(
            self.url("data_sources", data_source_token),
            DataSource,
            "read data source",
        )


class DataSourcesReader(DataSourceReader):
    type_suffix = "data_sources"

    async def read(self) -> List[DataSource]:
        return await self.fetch_listing(
            self.url("data_sources"), "data_sources", DataSource, "read data sources"
        )


class GroupsReader(DataSourceReader):
    type_suffix = "groups"

    async def read(self) -> List[Group]:
        return await self.fetch_listing(
            self.url("groups"), "groups", Group, "read groups"
        )


class GroupMembershipsReader(DataSourceReader):
    """Members of one group.

    The result carries the group token alongside the member list.
    """

    type_suffix = "group_memberships"

    async def read(self, group_token: str) -> Dict[str, Any]:
        members = await self.fetch_listing(
            self.url("groups", group_token, "memberships"),
            "group_memberships",
            GroupMember,
            "read group memberships",
        )
        return {"group_token": group_token, "memberships": members}


class WorkspaceMembershipsReader(DataSourceReader):
    type_suffix = "workspace_memberships"

    async def read(self) -> List[WorkspaceMembership]:
        return await self.fetch_listing(
            self.url("memberships"),
            "memberships",
            WorkspaceMembership,
            "read workspace memberships",
        )
