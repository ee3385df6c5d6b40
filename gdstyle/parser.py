"""
GDScript parser adapter.

Parses GDScript source with tree-sitter-gdscript and converts the result into
an immutable SyntaxNode snapshot that the analyzers work on.
"""

import logging
from typing import List, Optional

import tree_sitter_gdscript
from pydantic import BaseModel, Field
from tree_sitter import Language, Node, Parser

from gdstyle.errors import ParseError
from gdstyle.models.ast_node import SyntaxNode

logger = logging.getLogger(__name__)

GDSCRIPT_LANGUAGE = Language(tree_sitter_gdscript.language())


class ParsedFile(BaseModel):
    """A parsed GDScript file: its source, lines and syntax tree."""

    file_path: str = Field(..., description="Path used in diagnostics")
    source: str = Field(..., description="Raw file content")
    lines: List[str] = Field(default_factory=list, description="Source split into lines, without terminators")
    root: SyntaxNode = Field(..., description="Root node of the syntax tree")

    @property
    def has_error(self) -> bool:
        return self.root.has_error

    def line(self, number: int) -> str:
        """Return the 1-indexed source line, or an empty string when out of range."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""


def split_lines(source: str) -> List[str]:
    """
    Split source into lines without terminators.

    A final newline does not start an extra line. Only "\\n" ends a line, the
    same as the row numbering of tree-sitter; a "\\r" before it is dropped.
    """
    if not source:
        return []
    lines = source.split("\n")
    if source.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class GDScriptParser:
    """
    Parse GDScript source into SyntaxNode trees.

    A tree-sitter Parser is not safe to share between threads, so a fresh
    one is created for every parse call.
    """

    def __init__(self, language: Optional[Language] = None):
        self._language = language or GDSCRIPT_LANGUAGE

    def parse(self, content: str, file_path: str = "<string>") -> ParsedFile:
        """
        Parse a GDScript file.

        Args:
            content: File content as string
            file_path: Path of the file, used for error messages

        Returns:
            ParsedFile with the converted syntax tree

        Raises:
            ParseError: If tree-sitter does not return a tree
        """
        source_bytes = content.encode("utf8")
        try:
            tree = Parser(self._language).parse(source_bytes)
        except (ValueError, TypeError) as e:
            raise ParseError(file_path, str(e)) from e

        if tree is None or tree.root_node is None:
            raise ParseError(file_path, "no syntax tree produced")

        # Byte and character columns only differ when the source is not ASCII
        line_starts = _line_starts(source_bytes) if len(source_bytes) != len(content) else None
        root = self._convert_node(tree.root_node, source_bytes, None, line_starts)
        if root.has_error:
            logger.debug(f"Syntax errors in {file_path}")

        return ParsedFile(
            file_path=file_path,
            source=content,
            lines=split_lines(content),
            root=root,
        )

    def _convert_node(
        self,
        ts_node: Node,
        source_bytes: bytes,
        field_name: Optional[str],
        line_starts: Optional[List[int]] = None
    ) -> SyntaxNode:
        """
        Convert a tree-sitter Node to a SyntaxNode, keeping field names.

        Args:
            ts_node: tree-sitter Node
            source_bytes: Encoded file content
            field_name: Grammar field the node is stored under in its parent
            line_starts: Byte offset of every line, used to turn tree-sitter's
                byte columns into character columns

        Returns:
            SyntaxNode model instance
        """
        children = []
        cursor = ts_node.walk()
        if cursor.goto_first_child():
            while True:
                children.append(
                    self._convert_node(cursor.node, source_bytes, cursor.field_name, line_starts)
                )
                if not cursor.goto_next_sibling():
                    break

        return SyntaxNode(
            node_type=ts_node.type,
            field_name=field_name,
            is_named=ts_node.is_named,
            start_byte=ts_node.start_byte,
            end_byte=ts_node.end_byte,
            start_line=ts_node.start_point[0] + 1,  # Convert to 1-indexed
            end_line=ts_node.end_point[0] + 1,
            start_column=_char_column(source_bytes, line_starts, ts_node.start_point),
            end_column=_char_column(source_bytes, line_starts, ts_node.end_point),
            children=children,
            text=source_bytes[ts_node.start_byte:ts_node.end_byte].decode("utf8", errors="replace"),
            has_error=ts_node.has_error or ts_node.is_missing,
        )


def _line_starts(source_bytes: bytes) -> List[int]:
    starts = [0]
    offset = source_bytes.find(b"\n")
    while offset != -1:
        starts.append(offset + 1)
        offset = source_bytes.find(b"\n", offset + 1)
    return starts


def _char_column(source_bytes: bytes, line_starts: Optional[List[int]], point) -> int:
    """Character column of a tree-sitter point, whose column counts bytes."""
    row, byte_column = point
    if line_starts is None or row >= len(line_starts):
        return byte_column
    start = line_starts[row]
    return len(source_bytes[start:start + byte_column].decode("utf8", errors="replace"))


def parse_source(content: str, file_path: str = "<string>") -> ParsedFile:
    """Parse GDScript source with a default parser."""
    return GDScriptParser().parse(content, file_path)
