"""Syntax tree node data models."""

from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel


class SyntaxNode(BaseModel):
    """Immutable snapshot of one node of the parsed GDScript tree."""

    node_type: str
    field_name: Optional[str] = None
    is_named: bool = True
    start_byte: int
    end_byte: int
    start_line: int
    end_line: int
    start_column: int
    end_column: int
    children: List['SyntaxNode'] = []
    text: str = ""
    has_error: bool = False

    def child_by_field(self, field_name: str) -> Optional['SyntaxNode']:
        """Return the first child stored under a grammar field."""
        for child in self.children:
            if child.field_name == field_name:
                return child
        return None

    def children_of_type(self, *node_types: str) -> List['SyntaxNode']:
        return [child for child in self.children if child.node_type in node_types]

    @property
    def named_children(self) -> List['SyntaxNode']:
        return [child for child in self.children if child.is_named]

    @property
    def last_line(self) -> int:
        """
        Last source line that holds text of this node.

        Tree-sitter reports blocks that swallow their final newline as ending
        at column 0 of the following row.
        """
        if self.end_column == 0 and self.end_line > self.start_line:
            return self.end_line - 1
        return self.end_line

    def walk(self) -> Iterator['SyntaxNode']:
        """Yield this node and all of its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def walk_with_ancestors(
        self,
        ancestors: Tuple['SyntaxNode', ...] = ()
    ) -> Iterator[Tuple['SyntaxNode', Tuple['SyntaxNode', ...]]]:
        """Yield (node, ancestors) pairs in pre-order, nearest ancestor last."""
        stack = [(self, ancestors)]
        while stack:
            node, parents = stack.pop()
            yield node, parents
            lineage = parents + (node,)
            stack.extend((child, lineage) for child in reversed(node.children))


# Enable forward references for recursive model
SyntaxNode.model_rebuild()
