"""User group and group membership models."""

from typing import Any, Dict, Optional

from pydantic import Field

from .base import ModeModel


class Group(ModeModel):
    """A Mode user group.

    :param group_token: Group token (computed)
    :type group_token: Optional[str]
    :param name: Group name
    :type name: str
    :param state: Lifecycle state (computed)
    :type state: Optional[str]
    """

    group_token: Optional[str] = Field(None, alias="token")
    name: str = ""
    state: Optional[str] = None

    @property
    def is_soft_deleted(self) -> bool:
        """True when Mode reports the group as soft deleted."""
        return self.state == "soft_deleted"

    def to_payload(self) -> Dict[str, Any]:
        """Build the ``{"user_group": {...}}`` request body."""
        return {"user_group": {"name": self.name}}


class GroupMembership(ModeModel):
    """Membership of one workspace member in a group.

    ``group_token`` is not part of the API response; handlers carry it
    over from the plan or state.

    :param group_token: Token of the group
    :type group_token: str
    :param member_token: Token of the member
    :type member_token: str
    :param membership_token: Membership token (computed)
    :type membership_token: Optional[str]
    """

    group_token: str = ""
    member_token: str = ""
    membership_token: Optional[str] = Field(None, alias="token")

    def to_payload(self) -> Dict[str, Any]:
        """Build the ``{"membership": {...}}`` request body."""
        return {"membership": {"member_token": self.member_token}}


class GroupMember(ModeModel):
    """Entry of a group membership listing."""

    member_token: str = ""
