"""Permission models for collections and data sources.

Both permission kinds share the same wire shape; they differ only in the
parent they hang off.
"""

from typing import Any, Dict, Optional

from pydantic import Field

from .base import ModeModel


class Permission(ModeModel):
    """Fields shared by collection and data source permissions.

    :param permission_token: Permission token (computed)
    :type permission_token: Optional[str]
    :param action: Granted action, e.g. ``view`` or ``edit``
    :type action: str
    :param accessor_type: Kind of grantee, e.g. ``UserGroup``
    :type accessor_type: str
    :param accessor_token: Token of the grantee
    :type accessor_token: str
    """

    permission_token: Optional[str] = Field(None, alias="token")
    action: str = ""
    accessor_type: str = ""
    accessor_token: str = ""

    def to_payload(self) -> Dict[str, Any]:
        """Build the create body."""
        return {
            "permission": {
                "action": self.action,
                "accessor_type": self.accessor_type,
                "accessor_token": self.accessor_token,
            }
        }

    def to_update_payload(self) -> Dict[str, Any]:
        """Build the update body; only the action can change in place."""
        return {"permission": {"action": self.action}}


class CollectionPermission(Permission):
    """Permission granted on a collection."""

    collection_token: str = ""


class DataSourcePermission(Permission):
    """Permission granted on a data source."""

    data_source_token: str = ""
