"""Shared Pydantic base for Mode API models.

Mode returns JSON with its own field names (``token``, ``space_type``,
``viewable?``). Models declare those names as aliases and keep readable
attribute names, so the same class parses API responses and describes
Terraform state.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class ModeModel(BaseModel):
    """Base class for models parsed from Mode API responses.

    Unknown response fields are ignored and fields can be populated either
    by attribute name or by their API alias.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_state(self) -> Dict[str, Any]:
        """Dump the model using attribute names, as stored in Terraform state.

        :return: State attributes
        :rtype: Dict[str, Any]
        """
        return self.model_dump(by_alias=False)


def coerce_str(value: Any) -> Any:
    """Render numeric identifiers as strings.

    Listings return ``id`` as a JSON number while item endpoints return
    it as a string; state always holds the string form.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value
