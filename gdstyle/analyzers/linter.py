"""
Rule engine.

Runs every enabled rule over a parsed file, drops suppressed diagnostics and
returns the rest in a stable order. A rule that fails is logged and skipped;
the other rules still run.
"""

import logging
from typing import List, Optional

from checkers.base import LintContext
from checkers.registry import RuleRegistry, create_default_registry
from gdstyle.analyzers.classifier import classify_tree
from gdstyle.analyzers.suppression import SuppressionResolver
from gdstyle.config import LinterConfig
from gdstyle.models.diagnostic import Diagnostic
from gdstyle.parser import ParsedFile, parse_source

logger = logging.getLogger(__name__)


def sort_diagnostics(diagnostics: List[Diagnostic]) -> List[Diagnostic]:
    return sorted(diagnostics, key=lambda d: (d.line, d.rule, d.column))


class Linter:
    """Lint parsed GDScript files with the rules of a registry."""

    def __init__(
        self,
        config: Optional[LinterConfig] = None,
        registry: Optional[RuleRegistry] = None
    ):
        self.config = config or LinterConfig()
        self.registry = registry or create_default_registry()

    def lint(self, parsed: ParsedFile) -> List[Diagnostic]:
        """
        Lint one file.

        Args:
            parsed: Parsed file

        Returns:
            Diagnostics sorted by line, then rule identifier, then column
        """
        enabled = self.registry.enabled_rule_ids(self.config.disabled_rules)
        context = LintContext(parsed, classify_tree(parsed.root), self.config)

        diagnostics: List[Diagnostic] = []
        for rule in self.registry.enabled_rules(self.config.disabled_rules):
            try:
                found = rule.check(context)
            except Exception as e:
                logger.error(
                    f"Rule '{rule.name}' failed on {parsed.file_path}: {e}",
                    exc_info=True,
                    extra={"file_path": parsed.file_path, "rule": rule.name},
                )
                continue
            diagnostics.extend(d for d in found if d.rule in enabled)

        resolver = SuppressionResolver.from_tree(parsed.root)
        kept = resolver.filter(diagnostics)
        if len(kept) != len(diagnostics):
            logger.debug(f"Suppressed {len(diagnostics) - len(kept)} diagnostics in {parsed.file_path}")

        return sort_diagnostics(kept)


def lint_source(
    content: str,
    file_path: str = "<string>",
    config: Optional[LinterConfig] = None
) -> List[Diagnostic]:
    """Parse and lint GDScript source with the built-in rules."""
    return Linter(config).lint(parse_source(content, file_path))
