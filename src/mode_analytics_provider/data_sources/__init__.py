"""Read-only data-source handlers, keyed by Terraform type suffix."""

from .readers import (
    CollectionReader,
    CollectionsReader,
    DataSourceItemReader,
    DataSourceReader,
    DataSourcesReader,
    GroupMembershipsReader,
    GroupsReader,
    WorkspaceMembershipsReader,
)

DATA_SOURCE_HANDLERS = {
    handler.type_suffix: handler
    for handler in (
        CollectionReader,
        CollectionsReader,
        DataSourceItemReader,
        DataSourcesReader,
        GroupsReader,
        GroupMembershipsReader,
        WorkspaceMembershipsReader,
    )
}

__all__ = [
    "DataSourceReader",
    "CollectionReader",
    "CollectionsReader",
    "DataSourceItemReader",
    "DataSourcesReader",
    "GroupsReader",
    "GroupMembershipsReader",
    "WorkspaceMembershipsReader",
    "DATA_SOURCE_HANDLERS",
]
