"""Pytest configuration and fixtures."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from blockref.analysis import TemplateAnalysis
from blockref.blocks import SourceBlock, SourceStyle
from blockref.template import TemplateInfo, TemplateInfoRegistry, default_registry


@dataclass
class Scenario:
    """Two bound blocks and three styles: primary(.a.css) and helper(.b.css)."""

    module_a: SourceBlock
    module_b: SourceBlock
    p1: SourceStyle
    p2: SourceStyle
    h1: SourceStyle


@pytest.fixture
def registry() -> TemplateInfoRegistry:
    return default_registry()


@pytest.fixture
def scenario() -> Scenario:
    module_a = SourceBlock(".a.css")
    module_b = SourceBlock(".b.css")
    return Scenario(
        module_a=module_a,
        module_b=module_b,
        p1=module_a.style(".root"),
        p2=module_a.style(".icon"),
        h1=module_b.style(".pad"),
    )


@pytest.fixture
def analysis(scenario: Scenario) -> TemplateAnalysis[TemplateInfo]:
    """An analysis with primary/helper bound and no elements walked yet."""
    a: TemplateAnalysis[TemplateInfo] = TemplateAnalysis(TemplateInfo("templates/app.hbs"))
    a.bind_block("primary", scenario.module_a)
    a.bind_block("helper", scenario.module_b)
    return a


@pytest.fixture
def fixtures_path() -> Path:
    return Path(__file__).parent / "fixtures"
