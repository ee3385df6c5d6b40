"""Trivia data models: comments and blank lines around declarations."""

from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, Field


class BlankLines(IntEnum):
    """Blank lines between two siblings, with two or more collapsed."""

    NONE = 0
    ONE = 1
    MANY = 2

    @classmethod
    def from_count(cls, count: int) -> "BlankLines":
        return cls(min(count, 2))


class TriviaBlock(BaseModel):
    """
    Consecutive comment lines, kept verbatim.

    ``lines`` holds the raw source lines of the block. A leading block may
    hold single blank lines between its comments and before its declaration.
    Line numbers are 1-indexed.
    """

    start_line: int = Field(..., description="First line of the block")
    lines: List[str] = Field(default_factory=list, description="Raw source lines")
    is_docstring: bool = Field(False, description="Scope docstring (## block) rather than leading comments")

    @property
    def end_line(self) -> int:
        return self.start_line + len(self.lines) - 1

    @property
    def comment_lines(self) -> List[str]:
        return [line.strip() for line in self.lines if line.strip()]


class DeclarationTrivia(BaseModel):
    """Trivia surrounding one declaration of a scope."""

    end_line: int = Field(..., description="Effective last line of the declaration (1-indexed)")
    leading: Optional[TriviaBlock] = Field(None, description="Comments attached above the declaration")
    trailing: Optional[TriviaBlock] = Field(
        None,
        description="Indented comments and #endregion lines directly after the declaration"
    )
    # Comments between the previous sibling and this one that are attached to
    # neither of them.
    detached: Optional[TriviaBlock] = None
    blank_lines_before_detached: BlankLines = BlankLines.NONE
    blank_lines_before: BlankLines = Field(
        BlankLines.NONE,
        description="Blank lines between the preceding content and the leading block (or declaration)"
    )
    separation: BlankLines = Field(
        BlankLines.NONE,
        description="Blank lines separating this declaration from the previous sibling"
    )

    @property
    def first_line(self) -> Optional[int]:
        """First line owned by the declaration, leading comments included."""
        return self.leading.start_line if self.leading else None


class ScopeTrivia(BaseModel):
    """Trivia index for every declaration of one scope."""

    declarations: List[DeclarationTrivia] = Field(default_factory=list)
    docstring: Optional[TriviaBlock] = Field(None, description="Docstring of the file or inner class")
    # The docstring sits before the declaration with this index.
    docstring_position: int = 0
    tail: Optional[TriviaBlock] = Field(None, description="Comments after the last declaration")
    blank_lines_before_tail: BlankLines = BlankLines.NONE

    @property
    def gaps(self) -> List[BlankLines]:
        """Blank lines separating each adjacent pair of declarations."""
        return [entry.separation for entry in self.declarations[1:]]
