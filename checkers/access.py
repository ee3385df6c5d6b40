"""
Private member access rule.

Privacy is a naming convention in GDScript, so the check is syntactic: a
name starting with an underscore reached through an explicit receiver other
than ``self`` or ``super`` belongs to another object.
"""

from typing import List

from checkers.base import LintContext, LintRule
from gdstyle.models.diagnostic import Diagnostic

ALLOWED_RECEIVERS = ("self", "super")


def _is_allowed_receiver(text: str) -> bool:
    text = text.strip()
    return text in ALLOWED_RECEIVERS or text.startswith("super(")


class PrivateAccessRule(LintRule):
    """Private members are only accessed through self or super."""

    @property
    def name(self) -> str:
        return "private-access"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for attribute in context.nodes("attribute"):
            if not attribute.children:
                continue
            receiver = attribute.children[0]
            first_member = True

            for element in attribute.children[1:]:
                if not element.is_named:
                    continue

                if element.node_type == "identifier":
                    name_node, is_call = element, False
                elif element.node_type in ("attribute_call", "attribute_subscript") and element.children:
                    name_node, is_call = element.children[0], element.node_type == "attribute_call"
                else:
                    first_member = False
                    continue

                name = name_node.text
                exempt = first_member and _is_allowed_receiver(receiver.text)
                first_member = False
                if not name.startswith("_") or exempt:
                    continue

                if is_call:
                    message = f"Private method '{name}' should not be called from outside its class"
                else:
                    message = f"Private variable '{name}' should not be accessed from outside its class"
                diagnostics.append(self.report(name_node, message))
        return diagnostics
