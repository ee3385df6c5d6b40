"""
Naming rules.

Each rule checks one kind of name against the conventions of the GDScript
style guide. Names of declarations come from the classifier; names that are
not declarations (parameters, loop variables, local variables, enumerators)
are read from the syntax tree.
"""

from typing import List, Optional

from checkers.base import LintContext, LintRule
from checkers.patterns import (
    PARAMETER_NODE_TYPES,
    is_any_constant_case,
    is_any_snake_case,
    is_load_call,
    is_pascal_case,
    is_snake_case,
    parameter_name_node,
)
from gdstyle.models.ast_node import SyntaxNode
from gdstyle.models.declaration import Declaration, DeclarationKind
from gdstyle.models.diagnostic import Diagnostic


def _name_node(declaration: Declaration) -> Optional[SyntaxNode]:
    if declaration.node is None:
        return None
    return declaration.node.child_by_field("name") or declaration.node


class ConstantNameRule(LintRule):
    """Constants use CONSTANT_CASE; preloaded constants may use PascalCase."""

    @property
    def name(self) -> str:
        return "constant-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for declaration in context.declarations_of(DeclarationKind.CONSTANT):
            name = declaration.name
            if not name or is_any_constant_case(name):
                continue

            value = declaration.node.child_by_field("value") if declaration.node else None
            if is_load_call(value, ("preload",)):
                if is_pascal_case(name):
                    continue
                message = f"Preload constant name '{name}' should be in PascalCase or CONSTANT_CASE format"
            else:
                message = f"Constant name '{name}' should be in CONSTANT_CASE format"
            diagnostics.append(self.report(_name_node(declaration), message))
        return diagnostics


class FunctionNameRule(LintRule):
    """Functions use snake_case or _private_snake_case."""

    @property
    def name(self) -> str:
        return "function-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for declaration in context.declarations_of(DeclarationKind.FUNCTION):
            if declaration.node_type != "function_definition" or not declaration.name:
                continue
            if not is_any_snake_case(declaration.name):
                diagnostics.append(self.report(
                    _name_node(declaration),
                    f"Function name '{declaration.name}' should be in snake_case, _private_snake_case format"
                ))
        return diagnostics


class ClassNameRule(LintRule):
    """class_name and inner classes use PascalCase."""

    @property
    def name(self) -> str:
        return "class-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for declaration in context.declarations_of(DeclarationKind.CLASS_NAME, DeclarationKind.INNER_CLASS):
            if declaration.name and not is_pascal_case(declaration.name):
                diagnostics.append(self.report(
                    _name_node(declaration),
                    f"Class name '{declaration.name}' should be in PascalCase format"
                ))
        return diagnostics


class SignalNameRule(LintRule):
    """Signals use snake_case."""

    @property
    def name(self) -> str:
        return "signal-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for declaration in context.declarations_of(DeclarationKind.SIGNAL):
            if declaration.name and not is_snake_case(declaration.name):
                diagnostics.append(self.report(
                    _name_node(declaration),
                    f"Signal name '{declaration.name}' should be in snake_case format"
                ))
        return diagnostics


class EnumNameRule(LintRule):
    """Named enums use PascalCase."""

    @property
    def name(self) -> str:
        return "enum-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for declaration in context.declarations_of(DeclarationKind.ENUM):
            if declaration.name and not is_pascal_case(declaration.name):
                diagnostics.append(self.report(
                    _name_node(declaration),
                    f"Enum name '{declaration.name}' should be in PascalCase format"
                ))
        return diagnostics


class EnumMemberNameRule(LintRule):
    """Enum members use CONSTANT_CASE."""

    @property
    def name(self) -> str:
        return "enum-member-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for enumerator in context.nodes("enumerator"):
            name_node = enumerator.child_by_field("left")
            if name_node is None and enumerator.children:
                name_node = enumerator.children[0]
            if name_node is None:
                continue
            if not is_any_constant_case(name_node.text):
                diagnostics.append(self.report(
                    name_node,
                    f"Enum element name '{name_node.text}' should be in CONSTANT_CASE format"
                ))
        return diagnostics


class VariableNameRule(LintRule):
    """
    Variables use snake_case or _private_snake_case.

    A variable holding a loaded resource may also use PascalCase; violations
    of that variant are reported as ``load-variable-name``.
    """

    NODE_TYPES = ("variable_statement", "export_variable_statement", "onready_variable_statement")

    @property
    def name(self) -> str:
        return "variable-name"

    @property
    def rule_ids(self) -> List[str]:
        return ["variable-name", "load-variable-name"]

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for node in context.nodes(*self.NODE_TYPES):
            name_node = node.child_by_field("name")
            if name_node is None:
                continue
            name = name_node.text

            if is_load_call(node.child_by_field("value")):
                if not (is_pascal_case(name) or is_any_snake_case(name)):
                    diagnostics.append(self.report(
                        name_node,
                        f"Variable name '{name}' should be in PascalCase, snake_case or _private_snake_case format",
                        rule_id="load-variable-name",
                    ))
            elif not is_any_snake_case(name):
                diagnostics.append(self.report(
                    name_node,
                    f"Variable name '{name}' should be in snake_case or _private_snake_case format"
                ))
        return diagnostics


class LoopVariableNameRule(LintRule):
    """for loop variables use snake_case."""

    @property
    def name(self) -> str:
        return "loop-variable-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for loop in context.nodes("for_statement"):
            left = loop.child_by_field("left")
            if left is None:
                continue
            name_node = parameter_name_node(left)
            if name_node is not None and not is_snake_case(name_node.text):
                diagnostics.append(self.report(
                    name_node,
                    f"Loop variable '{name_node.text}' should be in snake_case format"
                ))
        return diagnostics


class FunctionArgumentNameRule(LintRule):
    """
    Parameters use snake_case, and unused parameters start with an underscore.

    A parameter is unused when its name never appears as an identifier in the
    function body. Member accesses such as ``self.speed`` do not count as a
    use of a parameter named ``speed``. Each parameter is reported at most
    once.
    """

    @property
    def name(self) -> str:
        return "function-argument-name"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for function in context.nodes("function_definition", "constructor_definition"):
            parameters = function.child_by_field("parameters")
            if parameters is None:
                continue
            body = function.child_by_field("body")
            used = self._used_identifiers(body) if body is not None else None

            for parameter in parameters.children:
                if parameter.node_type not in PARAMETER_NODE_TYPES:
                    continue
                name_node = parameter_name_node(parameter)
                if name_node is None:
                    continue
                name = name_node.text

                if not is_any_snake_case(name):
                    diagnostics.append(self.report(
                        parameter,
                        f"Function argument '{name}' should be in snake_case or _private_snake_case format"
                    ))
                elif used is not None and not name.startswith("_") and name not in used:
                    diagnostics.append(self.report(
                        parameter,
                        f"Function argument '{name}' is unused. Consider removing it or prefixing with '_'"
                    ))
        return diagnostics

    @staticmethod
    def _used_identifiers(body: SyntaxNode) -> set:
        used = set()
        for node, ancestors in body.walk_with_ancestors():
            if node.node_type != "identifier":
                continue
            parent = ancestors[-1] if ancestors else None
            if parent is not None and _is_member_name(node, parent, ancestors):
                continue
            used.add(node.text)
        return used


def _is_member_name(node: SyntaxNode, parent: SyntaxNode, ancestors) -> bool:
    """Whether an identifier names a member after a ``.``, as in ``self.speed``."""
    if parent.node_type == "attribute":
        return bool(parent.children) and parent.children[0] is not node
    if parent.node_type in ("attribute_call", "attribute_subscript") and len(ancestors) > 1:
        return ancestors[-2].node_type == "attribute" and parent.children[0] is node
    return False
