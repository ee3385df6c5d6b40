"""
Reorder engine.

Rewrites the declarations of every scope of a GDScript file into the order of
the GDScript style guide. Each declaration moves as one unit together with
its leading comments, its trailing comments and, for inner classes, its
recursively reordered body. Blank lines between units are derived again from
the unit categories so that a second run never changes the output.
"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from gdstyle.analyzers.classifier import TRIVIA_NODE_TYPES, DeclarationClassifier, scope_body
from gdstyle.analyzers.trivia import TriviaIndexer, indent_width, is_blank
from gdstyle.errors import ReorderError
from gdstyle.models.ast_node import SyntaxNode
from gdstyle.models.declaration import Category, Declaration, DeclarationKind, SpacingGroup
from gdstyle.models.reorder import ReorderResult
from gdstyle.models.trivia import BlankLines, DeclarationTrivia, TriviaBlock
from gdstyle.parser import ParsedFile, parse_source

logger = logging.getLogger(__name__)

# Groups surrounded by two blank lines.
WIDE_GROUPS = {SpacingGroup.METHODS, SpacingGroup.INNER_CLASSES}

SKIPPED_SYNTAX_ERRORS = "file contains syntax errors"
SKIPPED_INCONSISTENT = "internal inconsistency"


class ReorderUnit(BaseModel):
    """Lines that move together, with what is needed to place and space them."""

    lines: List[str] = Field(default_factory=list)
    sort_key: Tuple[int, int, int] = (int(Category.UNKNOWN), 0, 0)
    group: SpacingGroup = SpacingGroup.OTHER
    is_barrier: bool = Field(False, description="Stays in place and splits the scope into sortable runs")
    blank_before: int = Field(0, description="Blank lines before the unit in the input, collapsed to 2")
    blank_after: int = Field(0, description="Blank lines after the unit in the input, collapsed to 2")
    name: str = ""


def blank_lines_between(previous: ReorderUnit, current: ReorderUnit) -> int:
    """Number of blank lines to emit between two adjacent units."""
    if current.is_barrier:
        return current.blank_before
    if previous.is_barrier:
        return previous.blank_after
    if previous.group in WIDE_GROUPS or current.group in WIDE_GROUPS:
        return int(BlankLines.MANY)
    if previous.group == SpacingGroup.HEADER and current.group == SpacingGroup.HEADER:
        return int(BlankLines.NONE)
    if previous.group != current.group:
        return int(BlankLines.ONE)
    return min(current.blank_before, int(BlankLines.ONE))


def sort_units(units: List[ReorderUnit]) -> List[ReorderUnit]:
    """Stable-sort each run of units between barriers; barriers keep their index."""
    result: List[ReorderUnit] = []
    run: List[ReorderUnit] = []
    for unit in units:
        if unit.is_barrier:
            result.extend(sorted(run, key=lambda u: u.sort_key))
            run = []
            result.append(unit)
        else:
            run.append(unit)
    result.extend(sorted(run, key=lambda u: u.sort_key))
    return result


def render_units(units: List[ReorderUnit]) -> List[str]:
    lines: List[str] = []
    previous: Optional[ReorderUnit] = None
    for unit in units:
        if previous is not None:
            lines.extend([""] * blank_lines_between(previous, unit))
        lines.extend(unit.lines)
        previous = unit
    return lines


def merge_same_line(declarations: List[Declaration]) -> List[Declaration]:
    """Merge declarations that share a line into a single unknown declaration."""
    merged: List[Declaration] = []
    for declaration in declarations:
        if merged and declaration.start_line <= merged[-1].end_line:
            previous = merged[-1]
            merged[-1] = Declaration(
                kind=DeclarationKind.UNKNOWN,
                category=Category.UNKNOWN,
                start_line=previous.start_line,
                end_line=max(previous.end_line, declaration.end_line),
                node_type=previous.node_type,
            )
        else:
            merged.append(declaration)
    return merged


class ReorderEngine:
    """Reorder the declarations of a parsed GDScript file."""

    def __init__(self, classifier: Optional[DeclarationClassifier] = None):
        self.classifier = classifier or DeclarationClassifier()

    def reorder(self, parsed: ParsedFile) -> ReorderResult:
        """
        Reorder every scope of a file.

        Files with syntax errors are left untouched, as are files where the
        rewritten text would not hold exactly the same non-blank lines as the
        input.

        Args:
            parsed: Parsed file

        Returns:
            ReorderResult with the new text and whether it changed
        """
        if parsed.has_error:
            logger.warning(f"Not reordering {parsed.file_path}: {SKIPPED_SYNTAX_ERRORS}")
            return ReorderResult(text=parsed.source, skipped_reason=SKIPPED_SYNTAX_ERRORS)

        try:
            lines = self._reorder_scope(parsed.lines, parsed.root, 1, len(parsed.lines), 0)
            self._check_lines_preserved(parsed.lines, lines)
        except ReorderError as e:
            logger.warning(f"Not reordering {parsed.file_path}: {e}", exc_info=True)
            return ReorderResult(text=parsed.source, skipped_reason=f"{SKIPPED_INCONSISTENT}: {e}")

        newline = "\r\n" if "\r\n" in parsed.source else "\n"
        text = newline.join(lines) + newline if lines else ""
        changed = text != parsed.source
        logger.debug(f"Reordered {parsed.file_path} (changed={changed})")
        return ReorderResult(text=text, changed=changed)

    def _reorder_scope(
        self,
        lines: List[str],
        scope_node: SyntaxNode,
        start: int,
        end: int,
        indent: int
    ) -> List[str]:
        declarations = merge_same_line(self.classifier.classify_scope(scope_node))
        indexer = TriviaIndexer(lines, start, end, indent)
        scope = indexer.build(declarations)

        units: List[ReorderUnit] = []
        for position, (declaration, trivia) in enumerate(zip(declarations, scope.declarations)):
            if scope.docstring is not None and scope.docstring_position == position:
                units.append(self._docstring_unit(scope.docstring))
            if trivia.detached is not None:
                units.append(ReorderUnit(
                    lines=trivia.detached.lines,
                    is_barrier=True,
                    blank_before=int(trivia.blank_lines_before_detached),
                ))
            units.append(self._declaration_unit(lines, declaration, trivia))

        if scope.docstring is not None and scope.docstring_position == len(declarations):
            units.append(self._docstring_unit(scope.docstring))
        if scope.tail is not None:
            units.append(ReorderUnit(
                lines=scope.tail.lines,
                is_barrier=True,
                blank_before=int(scope.blank_lines_before_tail),
            ))

        for current, following in zip(units, units[1:]):
            current.blank_after = following.blank_before

        return render_units(sort_units(units))

    def _docstring_unit(self, docstring: TriviaBlock) -> ReorderUnit:
        return ReorderUnit(
            lines=docstring.lines,
            sort_key=(int(Category.DOCSTRING), 0, 0),
            group=SpacingGroup.HEADER,
            name="docstring",
        )

    def _declaration_unit(
        self,
        lines: List[str],
        declaration: Declaration,
        trivia: DeclarationTrivia
    ) -> ReorderUnit:
        body = self._declaration_lines(lines, declaration, trivia.end_line)
        unit_lines: List[str] = []
        if trivia.leading is not None:
            unit_lines.extend(trivia.leading.lines)
        unit_lines.extend(body)
        if trivia.trailing is not None:
            unit_lines.extend(trivia.trailing.lines)

        return ReorderUnit(
            lines=unit_lines,
            sort_key=declaration.sort_key,
            group=declaration.spacing_group,
            is_barrier=not declaration.is_recognized,
            blank_before=int(trivia.blank_lines_before),
            name=declaration.name,
        )

    def _declaration_lines(self, lines: List[str], declaration: Declaration, end_line: int) -> List[str]:
        original = lines[declaration.start_line - 1:end_line]
        if declaration.kind != DeclarationKind.INNER_CLASS or declaration.node is None:
            return original

        body = scope_body(declaration.node)
        members = []
        if body is not None:
            members = [c for c in body.named_children if c.node_type not in TRIVIA_NODE_TYPES]
        header_end = self._class_header_end(declaration.node, members)
        # The class_body node opens on the header line, right after the colon.
        if not members or header_end is None or members[0].start_line <= header_end or header_end >= end_line:
            return original

        body_indent = indent_width(lines[members[0].start_line - 1])
        reordered = self._reorder_scope(lines, body, header_end + 1, end_line, body_indent)
        return lines[declaration.start_line - 1:header_end] + reordered

    @staticmethod
    def _class_header_end(node: SyntaxNode, members: List[SyntaxNode]) -> Optional[int]:
        """Line of the colon that ends a ``class Name extends Base:`` header."""
        for child in node.children:
            if not child.is_named and child.text == ":":
                return child.end_line
        if members:
            return members[0].start_line - 1
        return None

    @staticmethod
    def _check_lines_preserved(before: List[str], after: List[str]) -> None:
        original = sorted(line for line in before if not is_blank(line))
        rewritten = sorted(line for line in after if not is_blank(line))
        if original != rewritten:
            raise ReorderError("reordered text does not hold the same lines as the input")


def reorder_source(content: str, file_path: str = "<string>") -> ReorderResult:
    """Parse and reorder GDScript source."""
    return ReorderEngine().reorder(parse_source(content, file_path))
