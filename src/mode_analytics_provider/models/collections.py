"""Collection models.

Mode calls collections "spaces" in its API; the provider exposes them as
collections.
"""

from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from .base import ModeModel, coerce_str


class Collection(ModeModel):
    """A Mode collection as held in Terraform state.

    :param collection_token: Collection token (computed)
    :type collection_token: Optional[str]
    :param id: Collection id (computed)
    :type id: Optional[str]
    :param state: Lifecycle state, e.g. ``active`` or ``soft_deleted`` (computed)
    :type state: Optional[str]
    :param collection_type: Space type, ``custom`` unless set
    :type collection_type: str
    :param name: Collection name
    :type name: str
    :param description: Collection description
    :type description: str
    :param restricted: Whether access is restricted
    :type restricted: bool
    :param free_default: Free default attribute
    :type free_default: bool
    :param viewable: Viewable attribute
    :type viewable: bool
    :param default_access_level: Default access level for members
    :type default_access_level: str
    """

    collection_token: Optional[str] = Field(None, alias="token")
    id: Optional[str] = None
    state: Optional[str] = None
    collection_type: str = Field("custom", alias="space_type")
    name: str = ""
    description: str = ""
    restricted: bool = False
    free_default: bool = False
    viewable: bool = Field(True, alias="viewable?")
    default_access_level: str = "restricted"

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, v: Any) -> Any:
        return coerce_str(v)

    @property
    def is_soft_deleted(self) -> bool:
        """True when Mode reports the collection as soft deleted."""
        return self.state == "soft_deleted"

    def to_payload(self, creating: bool = False) -> Dict[str, Any]:
        """Build the ``{"space": {...}}`` request body.

        On create, Mode expects ``none`` where the provider's default
        access level is ``restricted``.

        :param creating: True for the create (POST) body
        :type creating: bool
        :return: Request body
        :rtype: Dict[str, Any]
        """
        default_access_level = self.default_access_level
        if creating and default_access_level == "restricted":
            default_access_level = "none"
        return {
            "space": {
                "space_type": self.collection_type,
                "name": self.name,
                "description": self.description,
                "restricted": self.restricted,
                "free_default": self.free_default,
                "viewable?": self.viewable,
                "default_access_level": default_access_level,
            }
        }
