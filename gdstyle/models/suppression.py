"""Suppression directive data models."""

from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, Field


class SuppressionScope(str, Enum):
    """Line a suppression directive applies to, relative to its comment."""

    SAME_LINE = "same_line"
    NEXT_LINE = "next_line"


class SuppressionDirective(BaseModel):
    """An inline ``gdlint-ignore`` directive parsed from a comment."""

    scope: SuppressionScope = Field(..., description="Same line or next line")
    rules: Optional[FrozenSet[str]] = Field(
        None,
        description="Suppressed rule identifiers; None suppresses every rule"
    )
    line: int = Field(..., description="Line of the comment holding the directive (1-indexed)")

    model_config = {"frozen": True}

    @property
    def target_line(self) -> int:
        if self.scope == SuppressionScope.NEXT_LINE:
            return self.line + 1
        return self.line

    def covers(self, line: int, rule: str) -> bool:
        """Check whether a diagnostic of ``rule`` on ``line`` is suppressed."""
        if line != self.target_line:
            return False
        return self.rules is None or rule in self.rules
