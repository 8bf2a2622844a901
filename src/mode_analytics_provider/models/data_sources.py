"""Data source (database connection) and workspace membership models."""

from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from .base import ModeModel, coerce_str


class DataSource(ModeModel):
    """A database connection configured in the workspace.

    Read-only; fields mirror the API response.
    """

    data_source_token: Optional[str] = Field(None, alias="token")
    id: Optional[str] = None
    name: str = ""
    description: str = ""
    adapter: str = ""
    created_at: str = ""
    updated_at: str = ""
    has_expensive_schema_updates: bool = False
    public: bool = False
    asleep: bool = False
    queryable: bool = False
    soft_deleted: bool = False
    display_name: str = ""
    account_id: Optional[str] = None
    account_username: str = ""
    organization_token: str = ""
    organization_plan_code: str = ""
    database: str = ""
    host: str = ""
    port: Optional[float] = None
    ssl: bool = False
    username: str = ""
    provider: str = ""
    vendor: str = ""
    ldap: bool = False
    warehouse: str = ""
    bridged: bool = False
    adapter_version: str = ""
    custom_attributes: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "account_id", mode="before")
    @classmethod
    def _ids_as_strings(cls, v: Any) -> Any:
        return coerce_str(v)

    @field_validator(
        "description",
        "display_name",
        "database",
        "host",
        "username",
        "provider",
        "vendor",
        "warehouse",
        "adapter_version",
        mode="before",
    )
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("custom_attributes", mode="before")
    @classmethod
    def _null_attributes(cls, v: Any) -> Any:
        return {} if v is None else v


class WorkspaceMembership(ModeModel):
    """A member of the workspace."""

    admin: bool = False
    state: str = ""
    member_username: str = ""
    member_token: str = ""
    activated_at: Optional[str] = None
