"""Template info records and their type registry."""

from .info import SerializedTemplateInfo, TemplateInfo
from .registry import TemplateInfoConstructor, TemplateInfoRegistry, default_registry

__all__ = [
    "SerializedTemplateInfo",
    "TemplateInfo",
    "TemplateInfoConstructor",
    "TemplateInfoRegistry",
    "default_registry",
]
