"""
Naming conventions of the GDScript style guide, and small tree helpers shared
by the rules.
"""

import re
from typing import Optional

from gdstyle.models.ast_node import SyntaxNode

SNAKE_CASE = re.compile(r"^[a-z][a-z0-9_]*$")
PRIVATE_SNAKE_CASE = re.compile(r"^_[a-z][a-z0-9_]*$")
PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
CONSTANT_CASE = re.compile(r"^[A-Z][A-Z0-9_]*$")
PRIVATE_CONSTANT_CASE = re.compile(r"^_[A-Z][A-Z0-9_]*$")

LOAD_FUNCTIONS = ("load", "preload")

PARAMETER_NODE_TYPES = {"identifier", "typed_parameter", "default_parameter", "typed_default_parameter"}


def is_snake_case(name: str) -> bool:
    return bool(SNAKE_CASE.match(name))


def is_any_snake_case(name: str) -> bool:
    """snake_case or _private_snake_case."""
    return bool(SNAKE_CASE.match(name) or PRIVATE_SNAKE_CASE.match(name))


def is_pascal_case(name: str) -> bool:
    return bool(PASCAL_CASE.match(name))


def is_any_constant_case(name: str) -> bool:
    """CONSTANT_CASE or _PRIVATE_CONSTANT_CASE."""
    return bool(CONSTANT_CASE.match(name) or PRIVATE_CONSTANT_CASE.match(name))


def called_function(node: SyntaxNode) -> Optional[str]:
    """Name of the function a ``call`` node calls, e.g. ``preload``."""
    if node.node_type != "call" or not node.children:
        return None
    return node.children[0].text


def is_load_call(node: Optional[SyntaxNode], functions=LOAD_FUNCTIONS) -> bool:
    return node is not None and called_function(node) in functions


def parameter_name_node(node: SyntaxNode) -> Optional[SyntaxNode]:
    """Identifier node naming a function parameter."""
    if node.node_type == "identifier":
        return node
    if node.children and node.children[0].node_type == "identifier":
        return node.children[0]
    return None


def string_value(node: SyntaxNode) -> str:
    """Content of a string literal node, without its quotes."""
    text = node.text
    for quote in ('"""', "'''", '"', "'"):
        if len(text) >= 2 * len(quote) and text.startswith(quote) and text.endswith(quote):
            return text[len(quote):-len(quote)]
    return text


def first_line(text: str) -> str:
    return text.strip().split("\n", 1)[0].rstrip()
