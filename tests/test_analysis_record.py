"""Tests for loading serialized analyses on the consumer side."""

from __future__ import annotations

import copy

import pytest

from blockref.analysis import AnalysisRecord
from blockref.errors import UnknownTypeError

WIRE = {
    "template": {"type": "CssBlocks.TemplateInfo", "identifier": "templates/app.hbs"},
    "blocks": {"primary": ".a.css", "helper": ".b.css"},
    "stylesFound": ["helper.pad", "primary.icon", "primary.root"],
    "dynamicStyles": [1],
    "styleCorrelations": [[0, 2]],
}


def _wire(**changes):
    data = copy.deepcopy(WIRE)
    data.update(changes)
    return data


def test_from_dict_round_trips(registry):
    record = AnalysisRecord.from_dict(_wire(), registry)
    assert record.template.identifier == "templates/app.hbs"
    assert record.to_dict() == WIRE


def test_live_analysis_loads_back(registry, analysis, scenario):
    s = scenario
    analysis.start_element().add_style(s.p1).add_style(s.h1).end_element()
    analysis.start_element().add_style(s.p2).mark_dynamic(s.p2).end_element()
    serialized = analysis.serialize()
    assert AnalysisRecord.from_dict(serialized, registry).to_dict() == serialized


def test_name_queries(registry):
    record = AnalysisRecord.from_dict(_wire(), registry)
    assert record.was_found("primary.root")
    assert not record.was_found("primary.missing")
    assert record.is_dynamic("primary.icon")
    assert not record.is_dynamic("primary.root")
    assert not record.is_dynamic("primary.missing")
    assert record.are_correlated("primary.root", "helper.pad")
    assert record.are_correlated("helper.pad")
    assert not record.are_correlated("primary.icon")
    assert not record.are_correlated("primary.root", "nope")


def test_correlation_names(registry):
    record = AnalysisRecord.from_dict(_wire(), registry)
    assert record.correlation_names() == [["helper.pad", "primary.root"]]


def test_unknown_template_type(registry):
    data = _wire(template={"type": "Nope", "identifier": "x"})
    with pytest.raises(UnknownTypeError):
        AnalysisRecord.from_dict(data, registry)


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"stylesFound": ["b", "a"]}, "stylesFound must be sorted"),
        ({"dynamicStyles": [3]}, "out of range"),
        ({"dynamicStyles": [2, 1]}, "must be sorted"),
        ({"styleCorrelations": [[1]]}, "at least two styles"),
        ({"styleCorrelations": [[2, 0]]}, "must be sorted"),
        ({"blocks": {"primary": 1}}, "blocks must map"),
        ({"template": {"type": "CssBlocks.TemplateInfo"}}, "template must have"),
        (
            {"template": {"type": "CssBlocks.TemplateInfo", "identifier": "x", "data": "abc"}},
            "template.data must be a list",
        ),
    ],
)
def test_invalid_wire_shapes(registry, changes, message):
    with pytest.raises(ValueError, match=message):
        AnalysisRecord.from_dict(_wire(**changes), registry)


def test_missing_field(registry):
    data = _wire()
    del data["dynamicStyles"]
    with pytest.raises(ValueError, match="missing required field: dynamicStyles"):
        AnalysisRecord.from_dict(data, registry)
