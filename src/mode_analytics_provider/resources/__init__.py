"""Managed resource handlers, keyed by Terraform type suffix."""

from .base import ResourceHandler
from .collection import CollectionResource
from .group import GroupResource
from .group_membership import GroupMembershipResource
from .permissions import CollectionPermissionResource, DataSourcePermissionResource

RESOURCE_HANDLERS = {
    handler.type_suffix: handler
    for handler in (
        CollectionResource,
        GroupResource,
        GroupMembershipResource,
        CollectionPermissionResource,
        DataSourcePermissionResource,
    )
}

__all__ = [
    "ResourceHandler",
    "CollectionResource",
    "GroupResource",
    "GroupMembershipResource",
    "CollectionPermissionResource",
    "DataSourcePermissionResource",
    "RESOURCE_HANDLERS",
]
