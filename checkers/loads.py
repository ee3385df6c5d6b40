"""
Duplicated load rule.

Only calls with a literal string path are compared, and ``load`` and
``preload`` are tracked separately. A path held in a variable is never
reported, even when two variables hold the same literal.
"""

from typing import Dict, List, Tuple

from checkers.base import FUNCTION_SCOPE_TYPES, LintContext, LintRule
from checkers.patterns import LOAD_FUNCTIONS, called_function, string_value
from gdstyle.models.diagnostic import Diagnostic, Severity


class DuplicatedLoadRule(LintRule):
    """The same resource is loaded more than once at file or class scope."""

    default_severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "duplicated-load"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        seen: Dict[Tuple[str, str], int] = {}

        for call, ancestors in context.nodes_with_ancestors("call"):
            function = called_function(call)
            if function not in LOAD_FUNCTIONS:
                continue
            if any(a.node_type in FUNCTION_SCOPE_TYPES for a in ancestors):
                continue

            arguments = call.child_by_field("arguments")
            if arguments is None:
                arguments = next((c for c in call.children if c.node_type == "arguments"), None)
            if arguments is None or not arguments.named_children:
                continue
            path_node = arguments.named_children[0]
            if path_node.node_type != "string":
                continue

            path = string_value(path_node)
            key = (function, path)
            seen[key] = seen.get(key, 0) + 1
            if seen[key] > 1:
                diagnostics.append(self.report(
                    path_node,
                    f"Duplicated load of '{path}'. Consider extracting to a constant."
                ))
        return diagnostics
