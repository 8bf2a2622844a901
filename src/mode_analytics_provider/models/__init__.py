"""Mode Analytics provider models package.

Pydantic models for Mode API payloads and the Terraform state derived
from them, organized by API domain.
"""

from .base import ModeModel
from .collections import Collection
from .data_sources import DataSource, WorkspaceMembership
from .groups import Group, GroupMember, GroupMembership
from .permissions import CollectionPermission, DataSourcePermission, Permission

__all__ = [
    "ModeModel",
    "Collection",
    "DataSource",
    "WorkspaceMembership",
    "Group",
    "GroupMember",
    "GroupMembership",
    "Permission",
    "CollectionPermission",
    "DataSourcePermission",
]
