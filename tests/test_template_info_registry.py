"""
Tests for template info records and the template info registry.

These tests verify:
- Serialization of the base type and of subtypes with payload
- Round-tripping through the registry
- Unknown type lookups
- Registration overwrite semantics
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import pytest

from blockref.errors import UnknownTypeError
from blockref.template import TemplateInfo, TemplateInfoRegistry, default_registry


@dataclass(frozen=True)
class HandlebarsTemplateInfo(TemplateInfo):
    """A subtype that carries the project root as extra payload."""

    type_name: ClassVar[str] = "Test.HandlebarsTemplateInfo"

    project_dir: str = ""

    @classmethod
    def deserialize(cls, identifier: str, *data: Any) -> "HandlebarsTemplateInfo":
        return cls(identifier, *data)

    def serialize_data(self) -> list[Any]:
        return [self.project_dir]


# ============================================================================
# TEMPLATE INFO
# ============================================================================


def test_base_serialize_has_no_data():
    """Base template info serializes to type + identifier only."""
    assert TemplateInfo("a.hbs").serialize() == {
        "type": "CssBlocks.TemplateInfo",
        "identifier": "a.hbs",
    }


def test_subtype_serializes_own_type_and_payload():
    info = HandlebarsTemplateInfo("app/templates/a.hbs", "/src/app")
    assert info.serialize() == {
        "type": "Test.HandlebarsTemplateInfo",
        "identifier": "app/templates/a.hbs",
        "data": ["/src/app"],
    }


def test_identifier_is_not_validated():
    """Any string is accepted as an identifier."""
    assert TemplateInfo("").identifier == ""
    assert TemplateInfo("not a path !!").identifier == "not a path !!"


def test_template_info_is_immutable():
    info = TemplateInfo("a.hbs")
    with pytest.raises(AttributeError):
        info.identifier = "b.hbs"  # type: ignore[misc]


# ============================================================================
# REGISTRY
# ============================================================================


def test_default_registry_knows_base_type(registry: TemplateInfoRegistry):
    assert "CssBlocks.TemplateInfo" in registry
    assert registry.list_types() == ["CssBlocks.TemplateInfo"]


def test_round_trip_base(registry: TemplateInfoRegistry):
    original = TemplateInfo("templates/app.hbs")
    restored = registry.deserialize(original.serialize())
    assert type(restored) is TemplateInfo
    assert restored.identifier == original.identifier
    assert restored == original


def test_round_trip_subtype(registry: TemplateInfoRegistry):
    registry.register_type(HandlebarsTemplateInfo)
    original = HandlebarsTemplateInfo("templates/app.hbs", "/src/app")
    restored = registry.deserialize(original.serialize())
    assert isinstance(restored, HandlebarsTemplateInfo)
    assert restored.identifier == "templates/app.hbs"
    assert restored.project_dir == "/src/app"


def test_create_passes_payload(registry: TemplateInfoRegistry):
    registry.register_type(HandlebarsTemplateInfo)
    info = registry.create("Test.HandlebarsTemplateInfo", "x.hbs", "/root")
    assert info == HandlebarsTemplateInfo("x.hbs", "/root")


def test_missing_data_means_empty_payload(registry: TemplateInfoRegistry):
    registry.register_type(HandlebarsTemplateInfo)
    info = registry.deserialize({"type": "Test.HandlebarsTemplateInfo", "identifier": "x.hbs"})
    assert info == HandlebarsTemplateInfo("x.hbs")


def test_unknown_type_raises(registry: TemplateInfoRegistry):
    with pytest.raises(UnknownTypeError) as excinfo:
        registry.create("Nope.TemplateInfo", "x.hbs")
    assert excinfo.value.type_name == "Nope.TemplateInfo"
    assert "No template info registered for Nope.TemplateInfo" in str(excinfo.value)


def test_unknown_type_via_wire_form(registry: TemplateInfoRegistry):
    with pytest.raises(UnknownTypeError):
        registry.deserialize({"type": "Nope.TemplateInfo", "identifier": "x.hbs"})


def test_unknown_type_is_a_lookup_error(registry: TemplateInfoRegistry):
    with pytest.raises(LookupError):
        registry.create("Nope.TemplateInfo", "x.hbs")


def test_later_registration_overwrites_earlier():
    registry = TemplateInfoRegistry()

    class First:
        @staticmethod
        def deserialize(identifier: str, *data: Any) -> TemplateInfo:
            return TemplateInfo("first:" + identifier)

    class Second:
        @staticmethod
        def deserialize(identifier: str, *data: Any) -> TemplateInfo:
            return TemplateInfo("second:" + identifier)

    registry.register("Shared", First)
    registry.register("Shared", Second)
    assert registry.create("Shared", "x").identifier == "second:x"


def test_registries_are_independent():
    a = default_registry()
    b = default_registry()
    a.register_type(HandlebarsTemplateInfo)
    assert "Test.HandlebarsTemplateInfo" in a
    assert "Test.HandlebarsTemplateInfo" not in b


def test_clear_removes_registrations(registry: TemplateInfoRegistry):
    registry.clear()
    assert registry.list_types() == []
    with pytest.raises(UnknownTypeError):
        registry.create("CssBlocks.TemplateInfo", "x.hbs")
