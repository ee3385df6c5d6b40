"""
Statement rules: expressions without effect, redundant control flow and
redundant comparisons.
"""

from typing import List, Optional

from checkers.base import LintContext, LintRule
from checkers.patterns import first_line
from gdstyle.models.ast_node import SyntaxNode
from gdstyle.models.diagnostic import Diagnostic, Severity

# Statement-level expressions assumed to have side effects.
EFFECTFUL_EXPRESSIONS = {"call", "assignment", "augmented_assignment", "await_expression", "base_call"}

COMPARISON_OPERATORS = {"==", "!=", "<", ">", "<=", ">="}

IGNORED_STATEMENTS = {"comment", "region_start", "region_end"}


def _statements(body: SyntaxNode) -> List[SyntaxNode]:
    return [child for child in body.named_children if child.node_type not in IGNORED_STATEMENTS]


class StandaloneExpressionRule(LintRule):
    """
    Expression statements have an effect.

    Calls and assignments are assumed to have side effects. The last
    expression of a one-line lambda is its result and is allowed too.
    """

    default_severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "standalone-expression"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for statement, ancestors in context.nodes_with_ancestors("expression_statement"):
            expression = statement.named_children[0] if statement.named_children else None
            if expression is None or self._has_effect(expression):
                continue
            if self._is_lambda_result(statement, ancestors):
                continue
            diagnostics.append(self.report(
                expression,
                f"Standalone expression '{first_line(expression.text)}' is not assigned or used, "
                f"the line may have no effect"
            ))
        return diagnostics

    @staticmethod
    def _has_effect(expression: SyntaxNode) -> bool:
        if expression.node_type in EFFECTFUL_EXPRESSIONS:
            return True
        if expression.node_type == "attribute":
            members = expression.named_children
            return bool(members) and members[-1].node_type == "attribute_call"
        return False

    @staticmethod
    def _is_lambda_result(statement: SyntaxNode, ancestors) -> bool:
        lambda_node: Optional[SyntaxNode] = None
        body: Optional[SyntaxNode] = None
        if ancestors and ancestors[-1].node_type == "lambda":
            lambda_node, body = ancestors[-1], None
        elif len(ancestors) > 1 and ancestors[-1].node_type == "body" and ancestors[-2].node_type == "lambda":
            lambda_node, body = ancestors[-2], ancestors[-1]
        if lambda_node is None or statement.start_line != lambda_node.start_line:
            return False
        if body is None:
            return True
        statements = _statements(body)
        return bool(statements) and statements[-1] is statement


class NoElseReturnRule(LintRule):
    """No elif or else after branches that all end with return."""

    default_severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "no-else-return"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for if_statement in context.nodes("if_statement"):
            body = if_statement.child_by_field("body")
            if_returns = body is not None and self._ends_with_return(body)
            all_return = if_returns

            for clause in if_statement.children:
                if clause.node_type == "elif_clause":
                    if if_returns:
                        diagnostics.append(self.report(
                            clause,
                            "Unnecessary 'elif' after 'if' block that ends with 'return'. Use 'if' instead"
                        ))
                    elif_body = clause.child_by_field("body")
                    if elif_body is None or not self._ends_with_return(elif_body):
                        all_return = False
                elif clause.node_type == "else_clause" and all_return:
                    diagnostics.append(self.report(
                        clause,
                        "Unnecessary 'else' after 'if'/'elif' blocks that end with 'return'"
                    ))
        return diagnostics

    @staticmethod
    def _ends_with_return(body: SyntaxNode) -> bool:
        statements = _statements(body)
        return bool(statements) and statements[-1].node_type == "return_statement"


class UnnecessaryPassRule(LintRule):
    """pass only appears in otherwise empty blocks."""

    default_severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "unnecessary-pass"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for body in context.nodes("body", "class_body"):
            statements = _statements(body)
            passes = [s for s in statements if s.node_type == "pass_statement"]
            if passes and len(passes) < len(statements):
                diagnostics.extend(
                    self.report(node, "Unnecessary 'pass' statement when other statements are present")
                    for node in passes
                )
        return diagnostics


class ComparisonWithItselfRule(LintRule):
    """Comparisons have two different operands."""

    default_severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "comparison-with-itself"

    def check(self, context: LintContext) -> List[Diagnostic]:
        diagnostics = []
        for operation in context.nodes("binary_operator"):
            left = operation.child_by_field("left")
            operator = operation.child_by_field("op")
            right = operation.child_by_field("right")
            if (left is None or operator is None or right is None) and len(operation.children) == 3:
                left, operator, right = operation.children
            if left is None or operator is None or right is None:
                continue
            if operator.text in COMPARISON_OPERATORS and left.text == right.text:
                diagnostics.append(self.report(
                    operation,
                    f"Redundant comparison '{first_line(operation.text)}' - comparing expression with itself"
                ))
        return diagnostics
