"""
Trivia index.

Attaches comments and blank-line gaps to the declarations of a scope, working
on source lines rather than on comment nodes: the parser attaches comments to
whichever node happens to be open, while ownership here follows the style
guide (a comment block belongs to the declaration right below it).
"""

import logging
from typing import List, Optional, Tuple

from gdstyle.errors import ReorderError
from gdstyle.models.declaration import Declaration, SpacingGroup
from gdstyle.models.trivia import BlankLines, DeclarationTrivia, ScopeTrivia, TriviaBlock

logger = logging.getLogger(__name__)

DOCSTRING_MARKER = "##"
REGION_END_MARKER = "#endregion"


def is_blank(line: str) -> bool:
    return not line.strip()


def is_comment(line: str) -> bool:
    return line.lstrip().startswith("#")


def is_region_end(line: str) -> bool:
    return line.strip().startswith(REGION_END_MARKER)


def indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


class TriviaIndexer:
    """
    Build the trivia index of one scope.

    Args:
        lines: All lines of the file
        start: First line of the scope region (1-indexed)
        end: Last line of the scope region (1-indexed, inclusive)
        indent: Indentation width of the scope's members
    """

    def __init__(self, lines: List[str], start: int, end: int, indent: int = 0):
        self.lines = lines
        self.start = start
        self.end = end
        self.indent = indent

    def line(self, number: int) -> str:
        return self.lines[number - 1]

    def effective_end(self, declaration: Declaration) -> int:
        """
        Last line of a declaration once trailing blank lines and comments at
        scope indentation, which tree-sitter may leave inside a block, are
        given back to the scope.
        """
        end = min(declaration.end_line, self.end)
        while end > declaration.start_line:
            text = self.line(end)
            if is_blank(text) or (is_comment(text) and indent_width(text) <= self.indent):
                end -= 1
            else:
                break
        return end

    def build(self, declarations: List[Declaration]) -> ScopeTrivia:
        """
        Index the trivia of every declaration of the scope.

        Raises:
            ReorderError: If a line between two declarations is neither blank
                nor a comment, meaning declaration ranges are inconsistent
        """
        scope = ScopeTrivia()
        header_count = 0
        for declaration in declarations:
            if declaration.spacing_group != SpacingGroup.HEADER:
                break
            header_count += 1

        ends = [self.effective_end(d) for d in declarations]
        for i in range(len(declarations) - 1):
            if declarations[i + 1].start_line <= ends[i]:
                ends[i] = declarations[i + 1].start_line - 1

        lo = self.start
        for i in range(len(declarations) + 1):
            has_next = i < len(declarations)
            hi = declarations[i].start_line - 1 if has_next else self.end

            if i > 0:
                trailing, lo = self._trailing(ends[i - 1] + 1, hi)
                scope.declarations[i - 1].trailing = trailing

            if i == header_count and scope.docstring is None:
                docstring, lo = self._docstring(lo, hi, has_next, after_header=header_count > 0)
                if docstring is not None:
                    scope.docstring = docstring
                    scope.docstring_position = i

            if has_next:
                scope.declarations.append(self._leading(lo, hi, ends[i]))
                lo = declarations[i].start_line
            else:
                self._tail(scope, lo, hi)

        return scope

    def _check_gap_line(self, number: int) -> None:
        text = self.line(number)
        if not (is_blank(text) or is_comment(text)):
            raise ReorderError(f"Line {number} is not part of any declaration: {text.strip()!r}")

    def _count_blanks(self, lo: int, hi: int) -> BlankLines:
        return BlankLines.from_count(sum(1 for n in range(lo, hi + 1) if is_blank(self.line(n))))

    def _block(self, lo: int, hi: int, is_docstring: bool = False) -> TriviaBlock:
        return TriviaBlock(start_line=lo, lines=self.lines[lo - 1:hi], is_docstring=is_docstring)

    def _trailing(self, lo: int, hi: int) -> Tuple[Optional[TriviaBlock], int]:
        """Indented comments and #endregion lines directly after a declaration."""
        n = lo
        while n <= hi:
            text = self.line(n)
            if is_comment(text) and (indent_width(text) > self.indent or is_region_end(text)):
                n += 1
            elif is_blank(text) and n + 1 <= hi and is_region_end(self.line(n + 1)):
                # One blank line may separate a declaration from its #endregion.
                n += 2
            else:
                break
        if n == lo:
            return None, lo
        return self._block(lo, n - 1), n

    def _docstring(
        self,
        lo: int,
        hi: int,
        has_next: bool,
        after_header: bool = False
    ) -> Tuple[Optional[TriviaBlock], int]:
        """
        A ``##`` block at the top of the scope.

        A block written directly under the header always documents the file.
        Elsewhere a block touching the next declaration documents that
        declaration instead.
        """
        first = lo
        while first <= hi and is_blank(self.line(first)):
            first += 1
        last = first
        while last <= hi and self.line(last).lstrip().startswith(DOCSTRING_MARKER):
            last += 1
        last -= 1
        if last < first:
            return None, lo
        if last == hi and has_next and not (after_header and first == lo):
            # Directly above a declaration: it documents that declaration.
            return None, lo
        return self._block(first, last, is_docstring=True), last + 1

    def _leading(self, lo: int, hi: int, end_line: int) -> DeclarationTrivia:
        """Split the gap before a declaration into detached and leading comments."""
        first_comment = None
        blank_run = 0
        n = hi
        while n >= lo:
            self._check_gap_line(n)
            if is_blank(self.line(n)):
                blank_run += 1
                if blank_run > 1:
                    break
            else:
                blank_run = 0
                first_comment = n
            n -= 1

        for m in range(lo, n + 1):
            self._check_gap_line(m)

        leading = self._block(first_comment, hi) if first_comment is not None else None
        middle_end = (first_comment - 1) if first_comment is not None else hi

        trivia = DeclarationTrivia(end_line=end_line, leading=leading)
        comments = [m for m in range(lo, middle_end + 1) if is_comment(self.line(m))]
        if comments:
            trivia.detached = self._block(comments[0], comments[-1])
            trivia.blank_lines_before_detached = self._count_blanks(lo, comments[0] - 1)
            trivia.blank_lines_before = self._count_blanks(comments[-1] + 1, middle_end)
            trivia.separation = BlankLines.from_count(
                trivia.blank_lines_before_detached + trivia.blank_lines_before
            )
        else:
            trivia.blank_lines_before = self._count_blanks(lo, middle_end)
            trivia.separation = trivia.blank_lines_before
        return trivia

    def _tail(self, scope: ScopeTrivia, lo: int, hi: int) -> None:
        comments = []
        for n in range(lo, hi + 1):
            self._check_gap_line(n)
            if is_comment(self.line(n)):
                comments.append(n)
        if comments:
            scope.tail = self._block(comments[0], comments[-1])
            scope.blank_lines_before_tail = self._count_blanks(lo, comments[0] - 1)


def index_scope(
    lines: List[str],
    declarations: List[Declaration],
    start: int,
    end: int,
    indent: int = 0
) -> ScopeTrivia:
    """Build the trivia index of the declarations of one scope."""
    return TriviaIndexer(lines, start, end, indent).build(declarations)
