"""Template analysis engine and its canonical wire form."""

from .canonical import SerializedTemplateAnalysis, analysis_digest, canonical_json
from .element import ElementScope, ElementState
from .identity import FrozenIdentitySet, IdentitySet
from .record import AnalysisRecord
from .template_analysis import StyleAnalysis, TemplateAnalysis

__all__ = [
    "AnalysisRecord",
    "ElementScope",
    "ElementState",
    "FrozenIdentitySet",
    "IdentitySet",
    "SerializedTemplateAnalysis",
    "StyleAnalysis",
    "TemplateAnalysis",
    "analysis_digest",
    "canonical_json",
]
