"""
Wire format and canonical encoding of a serialized template analysis.

The serialized analysis is already order-canonical (see
``TemplateAnalysis.serialize``). ``canonical_json`` fixes the remaining
degrees of freedom (key order, whitespace) so the bytes, and therefore the
digest, are stable across processes.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, TypedDict

from ..template.info import SerializedTemplateInfo


class SerializedTemplateAnalysis(TypedDict):
    template: SerializedTemplateInfo
    blocks: dict[str, str]  # local name -> block source
    stylesFound: list[str]  # sorted canonical names
    dynamicStyles: list[int]  # sorted indices into stylesFound
    styleCorrelations: list[list[int]]  # each sorted; only sets of two or more


def canonical_json(obj: Any) -> str:
    """Compact JSON with sorted keys."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def analysis_digest(serialized: SerializedTemplateAnalysis | dict[str, Any]) -> str:
    """
    Content address of a serialized analysis.

    Returns:
        Hex-encoded sha256 of the canonical JSON encoding
    """
    return hashlib.sha256(canonical_json(serialized).encode("utf-8")).hexdigest()
