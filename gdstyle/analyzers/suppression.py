"""
Suppression resolver.

Reads ``gdlint-ignore`` directives from comments and filters diagnostics:

- ``# gdlint-ignore`` / ``# gdlint-ignore-line``: every rule, same line
- ``# gdlint-ignore: rule-a, rule-b``: listed rules, same line
- ``# gdlint-ignore-next-line``: every rule, next line
- ``# gdlint-ignore-next-line: rule-a rule-b``: listed rules, next line

A comment that looks like a directive but whose rule list cannot be parsed
is ignored, so that a typo never hides diagnostics.
"""

import logging
import re
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from gdstyle.models.ast_node import SyntaxNode
from gdstyle.models.diagnostic import Diagnostic
from gdstyle.models.suppression import SuppressionDirective, SuppressionScope

logger = logging.getLogger(__name__)

_DIRECTIVE_PATTERN = re.compile(r"^#+\s*gdlint-ignore(?P<variant>-next-line|-line)?(?P<rest>.*)$")
_RULE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")
_RULE_SEPARATOR = re.compile(r"[,\s]+")


def parse_directive(comment: str, line: int) -> Optional[SuppressionDirective]:
    """
    Parse one comment.

    Args:
        comment: Comment text, starting with ``#``
        line: Line of the comment (1-indexed)

    Returns:
        SuppressionDirective, or None when the comment is not a well-formed
        directive
    """
    match = _DIRECTIVE_PATTERN.match(comment.strip())
    if not match:
        return None

    scope = SuppressionScope.NEXT_LINE if match.group("variant") == "-next-line" else SuppressionScope.SAME_LINE
    rest = match.group("rest")

    if not rest.strip():
        return SuppressionDirective(scope=scope, rules=None, line=line)

    if rest.startswith(":"):
        rule_text = rest[1:]
    elif rest[0].isspace():
        rule_text = rest
    else:
        # "gdlint-ignored", "gdlint-ignore-all": a different word altogether
        return None

    names = [name for name in _RULE_SEPARATOR.split(rule_text.strip()) if name]
    if not names or not all(_RULE_NAME_PATTERN.match(name) for name in names):
        logger.debug(f"Ignoring malformed suppression comment on line {line}: {comment.strip()!r}")
        return None

    return SuppressionDirective(scope=scope, rules=frozenset(names), line=line)


class SuppressionResolver:
    """Lookup of suppression directives by the line they apply to."""

    def __init__(self, directives: Iterable[SuppressionDirective] = ()):
        self._by_line: Dict[int, List[SuppressionDirective]] = defaultdict(list)
        for directive in directives:
            self._by_line[directive.target_line].append(directive)

    @classmethod
    def from_tree(cls, root: SyntaxNode) -> "SuppressionResolver":
        """Scan every comment node of a tree once."""
        directives = []
        for node in root.walk():
            if node.node_type != "comment":
                continue
            directive = parse_directive(node.text, node.start_line)
            if directive is not None:
                directives.append(directive)
        return cls(directives)

    @property
    def directives(self) -> List[SuppressionDirective]:
        return [d for line in sorted(self._by_line) for d in self._by_line[line]]

    def is_suppressed(self, line: int, rule: str) -> bool:
        return any(d.covers(line, rule) for d in self._by_line.get(line, ()))

    def filter(self, diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
        """Drop the diagnostics covered by a directive."""
        return [d for d in diagnostics if not self.is_suppressed(d.line, d.rule)]
