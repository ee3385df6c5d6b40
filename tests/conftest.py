"""Shared fixtures for gdstyle tests."""

from typing import List, Optional

import pytest

from checkers.base import LintContext, LintRule
from gdstyle.analyzers.classifier import classify_tree
from gdstyle.config import LinterConfig
from gdstyle.models.diagnostic import Diagnostic
from gdstyle.parser import parse_source


@pytest.fixture
def run_rule():
    """Run one rule over GDScript source and return its diagnostics sorted by line."""

    def _run(rule: LintRule, source: str, config: Optional[LinterConfig] = None) -> List[Diagnostic]:
        parsed = parse_source(source, "test.gd")
        context = LintContext(parsed, classify_tree(parsed.root), config)
        return sorted(rule.check(context), key=lambda d: (d.line, d.column))

    return _run
