"""
Template info registry: type name -> reconstruction capability.

Producers of template info subtypes register them by type name. Consumers
on the other side of a serialization boundary use the registry to rebuild
any registered subtype without importing every producer.

The registry is an explicit object owned by the host application. All
``register`` calls must complete at startup, before any lookup and before
concurrent walks fan out; lookups afterwards are read-only.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from ..errors import UnknownTypeError
from .info import SerializedTemplateInfo, TemplateInfo

logger = logging.getLogger(__name__)


@runtime_checkable
class TemplateInfoConstructor(Protocol):
    def deserialize(self, identifier: str, *data: Any) -> TemplateInfo:
        ...


class TemplateInfoRegistry:
    """Lookup table from template info type name to its constructor."""

    def __init__(self) -> None:
        self._constructors: dict[str, TemplateInfoConstructor] = {}

    def register(self, type_name: str, constructor: TemplateInfoConstructor) -> None:
        """
        Register a constructor under a type name.

        Later registrations for the same name replace earlier ones.
        """
        if type_name in self._constructors and self._constructors[type_name] is not constructor:
            logger.warning("Replacing template info constructor for %s", type_name)
        else:
            logger.debug("Registered template info type %s", type_name)
        self._constructors[type_name] = constructor

    def register_type(self, cls: type[TemplateInfo]) -> type[TemplateInfo]:
        """Register a TemplateInfo subclass under its own ``type_name``. Usable as a decorator."""
        self.register(cls.type_name, cls)
        return cls

    def get(self, type_name: str) -> TemplateInfoConstructor | None:
        return self._constructors.get(type_name)

    def create(self, type_name: str, identifier: str, *data: Any) -> TemplateInfo:
        """
        Build a template info of the named type.

        Raises:
            UnknownTypeError: if no constructor is registered for ``type_name``
        """
        constructor = self._constructors.get(type_name)
        if constructor is None:
            raise UnknownTypeError(type_name)
        return constructor.deserialize(identifier, *data)

    def deserialize(self, obj: SerializedTemplateInfo) -> TemplateInfo:
        """Rebuild a template info from its wire form. A missing ``data`` means no payload."""
        data = obj.get("data") or []
        return self.create(obj["type"], obj["identifier"], *data)

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return sorted(self._constructors)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._constructors

    def clear(self) -> None:
        """Remove all registrations (for testing)."""
        self._constructors.clear()


def default_registry() -> TemplateInfoRegistry:
    """A fresh registry with the base ``TemplateInfo`` type registered."""
    registry = TemplateInfoRegistry()
    registry.register_type(TemplateInfo)
    return registry
