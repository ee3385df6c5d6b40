"""
Declaration classifier.

Assigns every direct child of the file root or of an inner class body a
Declaration with its ordering category. Comments are left to the trivia
index; annotations written on their own line are folded into the
declaration that follows them.
"""

import logging
import re
from typing import Iterator, List, Optional, Tuple

from gdstyle.models.ast_node import SyntaxNode
from gdstyle.models.declaration import (
    Category,
    Declaration,
    DeclarationKind,
    MethodKind,
    VariableKind,
    Visibility,
)

logger = logging.getLogger(__name__)

# Engine callbacks in the order the engine invokes them.
LIFECYCLE_METHODS = (
    "_init",
    "_enter_tree",
    "_ready",
    "_process",
    "_physics_process",
    "_exit_tree",
    "_input",
    "_unhandled_input",
    "_gui_input",
    "_draw",
    "_notification",
    "_get_configuration_warnings",
    "_validate_property",
    "_get_property_list",
    "_property_can_revert",
    "_property_get_revert",
    "_get",
    "_set",
    "_to_string",
)

CLASS_ANNOTATIONS = ("@tool", "@icon", "@static_unload")

TRIVIA_NODE_TYPES = {"comment", "region_start", "region_end"}
ANNOTATION_NODE_TYPES = {"annotation", "annotations"}
VARIABLE_NODE_TYPES = {"variable_statement", "export_variable_statement", "onready_variable_statement"}
FUNCTION_NODE_TYPES = {"function_definition", "constructor_definition"}

_NAME_PATTERN = re.compile(r"\b(?:var|const|signal|enum|func|class|class_name)\s+([A-Za-z_][A-Za-z0-9_]*)")
_STATIC_FUNC_PATTERN = re.compile(r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*static\s+func\b")
_STATIC_VAR_PATTERN = re.compile(r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*static\s+var\b")
_ANNOTATION_PATTERN = re.compile(r"@\w+")


def is_private_name(name: str) -> bool:
    return name.startswith("_")


def visibility_of(name: str) -> Visibility:
    return Visibility.PRIVATE if is_private_name(name) else Visibility.PUBLIC


def is_class_annotation(text: str) -> bool:
    return text.strip().startswith(CLASS_ANNOTATIONS)


def declared_name(node: SyntaxNode) -> str:
    """Return the identifier a declaration node declares, or an empty string."""
    name_node = node.child_by_field("name")
    if name_node is not None:
        return name_node.text
    match = _NAME_PATTERN.search(node.text.split("\n", 1)[0])
    return match.group(1) if match else ""


def _annotation_texts(node: SyntaxNode) -> List[str]:
    if node.node_type == "annotation":
        return [node.text.strip()]
    texts = []
    for child in node.children:
        if child.node_type in ANNOTATION_NODE_TYPES:
            texts.extend(_annotation_texts(child))
    return texts


def _inline_annotations(node: SyntaxNode) -> List[str]:
    """Annotations written on the declaration itself, like ``@export var x``."""
    texts = []
    for child in node.children:
        if child.node_type in ANNOTATION_NODE_TYPES:
            texts.extend(_annotation_texts(child))
    if not texts:
        header = node.text.split("\n", 1)[0]
        prefix = re.split(r"\b(?:static|var|func)\b", header, maxsplit=1)[0]
        texts = _ANNOTATION_PATTERN.findall(prefix)
    return texts


class DeclarationClassifier:
    """Classify the members of one scope of a GDScript file."""

    def classify_scope(self, scope_node: SyntaxNode) -> List[Declaration]:
        """
        Classify the direct children of a scope node.

        Args:
            scope_node: The ``source`` root or a ``class_body`` node

        Returns:
            Declarations in source order, one per declaration-shaped child.
            Children the classifier does not recognize yield an UNKNOWN
            declaration so that they keep their place when reordering.
        """
        declarations: List[Declaration] = []
        pending: List[SyntaxNode] = []

        for child in scope_node.children:
            if not child.is_named or child.node_type in TRIVIA_NODE_TYPES:
                continue

            if child.node_type in ANNOTATION_NODE_TYPES or child.node_type == "tool_statement":
                texts = _annotation_texts(child) if child.node_type != "tool_statement" else ["tool"]
                if child.node_type == "tool_statement" or all(is_class_annotation(t) for t in texts):
                    declarations.append(self._annotation_declaration(child, texts))
                else:
                    pending.append(child)
                continue

            declaration = self.classify_node(child)
            if pending:
                annotations = [t for p in pending for t in _annotation_texts(p)]
                declaration = self._attach_annotations(declaration, annotations, pending[0].start_line)
                pending = []
            declarations.append(declaration)

        # Annotations with nothing after them stay where they are.
        for orphan in pending:
            declarations.append(self._unknown(orphan))

        return declarations

    def classify_node(self, node: SyntaxNode) -> Declaration:
        """Classify a single declaration-shaped node."""
        node_type = node.node_type

        if node_type == "class_name_statement":
            return self._declaration(node, DeclarationKind.CLASS_NAME, Category.CLASS_NAME)
        if node_type == "extends_statement":
            return self._declaration(node, DeclarationKind.EXTENDS, Category.EXTENDS, name="")
        if node_type == "signal_statement":
            return self._declaration(node, DeclarationKind.SIGNAL, Category.SIGNAL)
        if node_type == "enum_definition":
            return self._declaration(node, DeclarationKind.ENUM, Category.ENUM)
        if node_type == "const_statement":
            return self._declaration(node, DeclarationKind.CONSTANT, Category.CONSTANT)
        if node_type in VARIABLE_NODE_TYPES:
            return self._classify_variable(node, _inline_annotations(node))
        if node_type in FUNCTION_NODE_TYPES:
            return self._classify_function(node)
        if node_type == "class_definition":
            name = declared_name(node)
            category = Category.PRIVATE_INNER_CLASS if is_private_name(name) else Category.PUBLIC_INNER_CLASS
            return self._declaration(node, DeclarationKind.INNER_CLASS, category, name=name)

        logger.debug(f"Unclassified node '{node_type}' at line {node.start_line}")
        return self._unknown(node)

    def _declaration(
        self,
        node: SyntaxNode,
        kind: DeclarationKind,
        category: Category,
        name: Optional[str] = None,
        **extra
    ) -> Declaration:
        if name is None:
            name = declared_name(node)
        return Declaration(
            kind=kind,
            name=name,
            visibility=visibility_of(name),
            category=category,
            start_line=node.start_line,
            end_line=node.last_line,
            node_type=node.node_type,
            node=node,
            **extra
        )

    def _unknown(self, node: SyntaxNode) -> Declaration:
        return Declaration(
            kind=DeclarationKind.UNKNOWN,
            category=Category.UNKNOWN,
            start_line=node.start_line,
            end_line=node.last_line,
            node_type=node.node_type,
            node=node,
        )

    def _annotation_declaration(self, node: SyntaxNode, texts: List[str]) -> Declaration:
        return Declaration(
            kind=DeclarationKind.CLASS_ANNOTATION,
            name=texts[0] if texts else "",
            category=Category.CLASS_ANNOTATION,
            annotations=texts,
            start_line=node.start_line,
            end_line=node.last_line,
            node_type=node.node_type,
            node=node,
        )

    def _attach_annotations(self, declaration: Declaration, annotations: List[str], start_line: int) -> Declaration:
        """Fold annotations written on the lines above into a declaration."""
        if declaration.kind == DeclarationKind.UNKNOWN:
            return declaration.model_copy(update={"start_line": start_line})
        if declaration.kind == DeclarationKind.VARIABLE and declaration.node is not None:
            combined = annotations + declaration.annotations
            reclassified = self._classify_variable(declaration.node, combined)
            return reclassified.model_copy(update={"start_line": start_line})
        return declaration.model_copy(update={
            "start_line": start_line,
            "annotations": annotations + declaration.annotations,
        })

    def _classify_variable(self, node: SyntaxNode, annotations: List[str]) -> Declaration:
        if node.node_type == "export_variable_statement" or any(a.startswith("@export") for a in annotations):
            variable_kind = VariableKind.EXPORTED
        elif node.node_type == "onready_variable_statement" or any(a.startswith("@onready") for a in annotations):
            variable_kind = VariableKind.ONREADY
        elif self._has_static_keyword(node) or _STATIC_VAR_PATTERN.match(node.text):
            variable_kind = VariableKind.STATIC
        else:
            variable_kind = VariableKind.REGULAR

        category = {
            VariableKind.STATIC: Category.STATIC_VARIABLE,
            VariableKind.EXPORTED: Category.EXPORTED_VARIABLE,
            VariableKind.ONREADY: Category.ONREADY_VARIABLE,
            VariableKind.REGULAR: Category.REGULAR_VARIABLE,
        }[variable_kind]

        return self._declaration(
            node,
            DeclarationKind.VARIABLE,
            category,
            variable_kind=variable_kind,
            annotations=annotations,
        )

    def _classify_function(self, node: SyntaxNode) -> Declaration:
        name = "_init" if node.node_type == "constructor_definition" else declared_name(node)
        is_static = self._has_static_keyword(node) or bool(_STATIC_FUNC_PATTERN.match(node.text))

        sub_rank = 0
        if is_static:
            method_kind = MethodKind.STATIC
            category = Category.STATIC_METHOD
            # _static_init runs before any other static code.
            sub_rank = 0 if name == "_static_init" else 1
        elif name in LIFECYCLE_METHODS:
            method_kind = MethodKind.LIFECYCLE
            category = Category.LIFECYCLE_METHOD
            sub_rank = LIFECYCLE_METHODS.index(name)
        elif is_private_name(name):
            method_kind = MethodKind.PRIVATE
            category = Category.PRIVATE_METHOD
        else:
            method_kind = MethodKind.PUBLIC
            category = Category.PUBLIC_METHOD

        return self._declaration(
            node,
            DeclarationKind.FUNCTION,
            category,
            name=name,
            sub_rank=sub_rank,
            method_kind=method_kind,
            annotations=_inline_annotations(node),
        )

    @staticmethod
    def _has_static_keyword(node: SyntaxNode) -> bool:
        for child in node.children:
            if child.field_name == "name" or child.text in ("var", "func"):
                break
            if child.node_type == "static_keyword" or child.text == "static":
                return True
        return False


def scope_body(node: SyntaxNode) -> Optional[SyntaxNode]:
    """Return the ``class_body`` of a class definition, if it has one."""
    body = node.child_by_field("body")
    if body is None:
        bodies = node.children_of_type("class_body")
        body = bodies[0] if bodies else None
    return body


def iter_scopes(
    root: SyntaxNode,
    classifier: Optional[DeclarationClassifier] = None
) -> Iterator[Tuple[SyntaxNode, List[Declaration]]]:
    """
    Yield (scope node, declarations) for the file and every nested class body.

    Scopes are yielded outermost first.
    """
    classifier = classifier or DeclarationClassifier()
    stack = [root]
    while stack:
        scope = stack.pop(0)
        declarations = classifier.classify_scope(scope)
        yield scope, declarations
        for declaration in declarations:
            if declaration.kind == DeclarationKind.INNER_CLASS and declaration.node is not None:
                body = scope_body(declaration.node)
                if body is not None:
                    stack.append(body)


def classify_tree(root: SyntaxNode) -> List[Declaration]:
    """Classify the declarations of every scope of a file."""
    declarations: List[Declaration] = []
    for _, scope_declarations in iter_scopes(root):
        declarations.extend(scope_declarations)
    return declarations
