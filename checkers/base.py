"""
Base interface for lint rules.

This module defines the context every rule receives and the abstract base
class all rules must implement. Rules are pure: they read the syntax tree and
the classified declarations and return diagnostics, without knowing about
suppression comments or which other rules run.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Set, Tuple

from gdstyle.config import LinterConfig
from gdstyle.models.ast_node import SyntaxNode
from gdstyle.models.declaration import Declaration, DeclarationKind
from gdstyle.models.diagnostic import Diagnostic, Severity
from gdstyle.parser import ParsedFile

FUNCTION_SCOPE_TYPES = {"function_definition", "constructor_definition", "lambda"}


class LintContext:
    """Everything a rule may look at for one file."""

    def __init__(
        self,
        parsed: ParsedFile,
        declarations: List[Declaration],
        config: Optional[LinterConfig] = None
    ):
        self.parsed = parsed
        self.file_path = parsed.file_path
        self.root = parsed.root
        self.lines = parsed.lines
        self.declarations = declarations
        self.config = config or LinterConfig()
        # Subtrees the classifier could not make sense of are not linted.
        self._skipped: Set[Tuple[int, int, str]] = {
            (d.node.start_byte, d.node.end_byte, d.node.node_type)
            for d in declarations
            if d.kind == DeclarationKind.UNKNOWN and d.node is not None
        }

    def _is_skipped(self, node: SyntaxNode) -> bool:
        return (node.start_byte, node.end_byte, node.node_type) in self._skipped

    def nodes_with_ancestors(self, *node_types: str) -> Iterator[Tuple[SyntaxNode, Tuple[SyntaxNode, ...]]]:
        """
        Yield (node, ancestors) for nodes of the given types, pre-order.

        Ancestors are ordered from the root down to the direct parent.
        """
        stack: List[Tuple[SyntaxNode, Tuple[SyntaxNode, ...]]] = [(self.root, ())]
        while stack:
            node, ancestors = stack.pop()
            if ancestors and self._is_skipped(node):
                continue
            if not node_types or node.node_type in node_types:
                yield node, ancestors
            lineage = ancestors + (node,)
            stack.extend((child, lineage) for child in reversed(node.children))

    def nodes(self, *node_types: str) -> Iterator[SyntaxNode]:
        """Yield nodes of the given types, pre-order, skipping unclassified subtrees."""
        for node, _ in self.nodes_with_ancestors(*node_types):
            yield node

    def declarations_of(self, *kinds: DeclarationKind) -> List[Declaration]:
        return [d for d in self.declarations if d.kind in kinds]


class LintRule(ABC):
    """Base interface for lint rules."""

    #: Severity used for every identifier the rule reports unless configured.
    default_severity: Severity = Severity.ERROR

    def __init__(self):
        self._severities: Dict[str, Severity] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the rule identifier (e.g., 'constant-name')."""
        pass

    @property
    def rule_ids(self) -> List[str]:
        """All identifiers this rule reports diagnostics under."""
        return [self.name]

    @property
    def description(self) -> str:
        return (self.__doc__ or "").strip().split("\n")[0]

    def severity_for(self, rule_id: str) -> Severity:
        return self._severities.get(rule_id, self.default_severity)

    def set_severity(self, rule_id: str, severity: Severity) -> None:
        self._severities[rule_id] = Severity(severity)

    @abstractmethod
    def check(self, context: LintContext) -> List[Diagnostic]:
        """
        Check one file.

        Args:
            context: Parsed file, declarations and configuration

        Returns:
            Diagnostics found by this rule, in any order
        """
        pass

    def report(
        self,
        node: SyntaxNode,
        message: str,
        rule_id: Optional[str] = None
    ) -> Diagnostic:
        """Build a diagnostic positioned at the start of a node."""
        rule_id = rule_id or self.name
        return Diagnostic(
            rule=rule_id,
            line=node.start_line,
            column=node.start_column + 1,
            message=message,
            severity=self.severity_for(rule_id),
        )
