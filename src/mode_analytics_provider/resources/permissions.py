"""Permission resources for collections and data sources.

``modeanalytics_collection_permission`` and
``modeanalytics_data_source_permission`` share payloads and lifecycle;
they differ in the parent path and in how a data source permission is
read back.
"""

import logging
from typing import Generic, Optional, TypeVar

import httpx

from ..models import CollectionPermission, DataSourcePermission, Permission
from ..utils.http import raise_for_unexpected
from .base import ResourceHandler, split_import_id

logger = logging.getLogger(__name__)

PermissionT = TypeVar("PermissionT", bound=Permission)


class _PermissionResource(ResourceHandler[PermissionT], Generic[PermissionT]):
    """Shared lifecycle for permissions hanging off a parent object."""

    model: type
    parent_path: str = ""
    parent_field: str = ""
    label: str = ""

    def parent_token(self, permission: Permission) -> str:
        return getattr(permission, self.parent_field)

    def list_url(self, permission: Permission) -> str:
        return self.url(self.parent_path, self.parent_token(permission), "permissions")

    def item_url(self, permission: Permission) -> str:
        return f"{self.list_url(permission)}/{permission.permission_token or ''}"

    async def create(self, plan: PermissionT) -> PermissionT:
        response = await self.request_ok(
            "POST", self.list_url(plan), f"create {self.label}", plan.to_payload()
        )
        created = response.parse(self.model)
        logger.info(
            "Granted %s on %s %s to %s %s",
            plan.action,
            self.parent_path,
            self.parent_token(plan),
            plan.accessor_type,
            plan.accessor_token,
        )
        return plan.model_copy(update={"permission_token": created.permission_token})

    async def read(self, state: PermissionT) -> Optional[PermissionT]:
        response = await self.request("GET", self.item_url(state))
        if response.is_not_found():
            return None
        raise_for_unexpected(response.response, f"read {self.label}")
        return self._merge(state, response.parse(self.model))

    async def update(self, plan: PermissionT, state: PermissionT) -> PermissionT:
        """Change the granted action in place."""
        target = plan.model_copy(update={"permission_token": state.permission_token})
        response = await self.request_ok(
            "PATCH",
            self.item_url(target),
            f"update {self.label}",
            plan.to_update_payload(),
        )
        return self._merge(target, response.parse(self.model))

    async def delete(self, state: PermissionT) -> None:
        await self.delete_and_verify(self.item_url(state), f"delete {self.label}")

    async def import_state(self, import_id: str) -> PermissionT:
        """Import from ``<parent_token>/<permission_token>``."""
        parent, token = split_import_id(
            import_id, self.parent_field, "permission_token"
        )
        return self.model(**{self.parent_field: parent, "permission_token": token})

    @staticmethod
    def _merge(state: PermissionT, current: Permission) -> PermissionT:
        return state.model_copy(
            update={
                "action": current.action or state.action,
                "accessor_type": current.accessor_type or state.accessor_type,
                "accessor_token": current.accessor_token or state.accessor_token,
            }
        )


class CollectionPermissionResource(_PermissionResource[CollectionPermission]):
    """Grant a user or group access to a collection."""

    type_suffix = "collection_permission"
    model = CollectionPermission
    parent_path = "spaces"
    parent_field = "collection_token"
    label = "collection permission"


class DataSourcePermissionResource(_PermissionResource[DataSourcePermission]):
    """Grant a user or group access to a data source."""

    type_suffix = "data_source_permission"
    model = DataSourcePermission
    parent_path = "data_sources"
    parent_field = "data_source_token"
    label = "data source permission"

    async def read(
        self, state: DataSourcePermission
    ) -> Optional[DataSourcePermission]:
        """Refresh the permission.

        The item endpoint may answer 500 for existing permissions; the
        permission is then looked up in the data source's entitlement
        listing and treated as gone if it is not listed.
        """
        response = await self.request("GET", self.item_url(state))
        if response.status_code != httpx.codes.INTERNAL_SERVER_ERROR:
            if response.is_not_found():
                return None
            raise_for_unexpected(response.response, f"read {self.label}")
            return self._merge(state, response.parse(self.model))

        logger.warning(
            "Reading permission %s returned 500, falling back to the listing",
            state.permission_token,
        )
        listing = await self.request_ok(
            "GET", self.list_url(state), f"list {self.label}s"
        )
        entitlements = listing.parse_embedded("data_source_entitlements", Permission)
        for entitlement in entitlements:
            if entitlement.permission_token == state.permission_token:
                return state.model_copy(
                    update={"action": entitlement.action or state.action}
                )
        return None
