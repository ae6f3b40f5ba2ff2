"""
Configuration for the blockref CLI.

Read from ``blockref.toml`` or from the ``[tool.blockref]`` table of a
``pyproject.toml``:

    template_types = [
        "mypkg.templates:HandlebarsTemplateInfo",
        { type = "Legacy.Template", constructor = "mypkg.legacy:LegacyInfo" },
    ]
    output = "json"   # json | yaml
    indent = 2        # 0 = compact canonical JSON

``template_types`` is the startup hook for the template info registry:
every entry is imported and registered before any analysis is deserialized.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from .errors import ConfigError
from .template.info import TemplateInfo
from .template.registry import TemplateInfoRegistry, default_registry

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "blockref.toml"
OutputFormat = Literal["json", "yaml"]
OUTPUT_FORMATS: tuple[str, ...] = ("json", "yaml")


@dataclass
class TemplateTypeRef:
    """A template info constructor to import, optionally under an explicit type name."""

    target: str  # "package.module:attr"
    type_name: str | None = None


@dataclass
class BlockrefConfig:
    template_types: list[TemplateTypeRef] = field(default_factory=list)
    output: OutputFormat = "json"
    indent: int = 2
    path: Path | None = None


def find_config(start: Path) -> Path | None:
    """Find ``blockref.toml`` (or a pyproject with ``[tool.blockref]``) walking up from ``start``."""
    import tomllib

    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = p / "pyproject.toml"
        if pyproject.is_file():
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError:
                continue
            if isinstance(data.get("tool"), dict) and "blockref" in data["tool"]:
                return pyproject
    return None


def _parse_type_ref(raw: Any, n: int) -> TemplateTypeRef:
    if isinstance(raw, str):
        target, type_name = raw, None
    elif isinstance(raw, dict):
        target = raw.get("constructor")
        type_name = raw.get("type")
        if type_name is not None and not isinstance(type_name, str):
            raise ConfigError(f"template_types[{n}].type must be a string")
    else:
        raise ConfigError(f"template_types[{n}] must be a string or a table")
    if not isinstance(target, str) or ":" not in target:
        raise ConfigError(f"template_types[{n}] must look like 'package.module:attr'")
    return TemplateTypeRef(target=target.strip(), type_name=type_name)


def load_config(path: Path | None) -> BlockrefConfig:
    """
    Load configuration from TOML. ``None`` yields the defaults.

    Raises:
        ConfigError: if the file cannot be parsed or has invalid values
    """
    import tomllib

    if path is None:
        return BlockrefConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("blockref", {})
    if not isinstance(data, dict):
        raise ConfigError(f"Config in {path} must be a table")

    raw_types = data.get("template_types", [])
    if not isinstance(raw_types, list):
        raise ConfigError("template_types must be a list")

    output = str(data.get("output", "json")).strip().lower()
    if output not in OUTPUT_FORMATS:
        raise ConfigError(f"output must be one of: {', '.join(OUTPUT_FORMATS)}")

    indent = data.get("indent", 2)
    if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
        raise ConfigError("indent must be a non-negative integer")

    return BlockrefConfig(
        template_types=[_parse_type_ref(raw, n) for n, raw in enumerate(raw_types)],
        output=output,  # type: ignore[arg-type]
        indent=indent,
        path=path,
    )


def _import_target(target: str) -> Any:
    module_name, _, attr = target.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import template type module {module_name!r}: {e}") from e
    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigError(f"{module_name!r} has no attribute {attr!r}") from e
    return obj


def build_registry(config: BlockrefConfig) -> TemplateInfoRegistry:
    """A registry with the base type plus every configured template type."""
    registry = default_registry()
    for ref in config.template_types:
        constructor = _import_target(ref.target)
        if not callable(getattr(constructor, "deserialize", None)):
            raise ConfigError(f"{ref.target} has no deserialize()")
        type_name = ref.type_name
        if type_name is None:
            if isinstance(constructor, type) and issubclass(constructor, TemplateInfo):
                type_name = constructor.type_name
            else:
                raise ConfigError(f"{ref.target} is not a TemplateInfo subclass; give an explicit type")
        registry.register(type_name, constructor)
        logger.debug("Configured template type %s -> %s", type_name, ref.target)
    return registry
