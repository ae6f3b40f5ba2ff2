"""
Template info: the serializable identity record of an analyzed template.

Subclasses declare their own ``type_name``, return any extra payload from
``serialize_data()`` and reverse it in ``deserialize()``. A subclass must be
registered with a ``TemplateInfoRegistry`` under its ``type_name`` before a
serialized value can be reconstructed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, NotRequired, TypedDict


class SerializedTemplateInfo(TypedDict):
    type: str
    identifier: str
    data: NotRequired[list[Any]]


@dataclass(frozen=True)
class TemplateInfo:
    """Base template info. Carries only the template identifier."""

    type_name: ClassVar[str] = "CssBlocks.TemplateInfo"

    identifier: str

    @classmethod
    def deserialize(cls, identifier: str, *data: Any) -> "TemplateInfo":
        return cls(identifier)

    def serialize_data(self) -> list[Any]:
        """Extra payload for subclasses. Passed back to ``deserialize`` as positional args."""
        return []

    def serialize(self) -> SerializedTemplateInfo:
        result: SerializedTemplateInfo = {
            "type": type(self).type_name,
            "identifier": self.identifier,
        }
        data = self.serialize_data()
        if data:
            result["data"] = list(data)
        return result
