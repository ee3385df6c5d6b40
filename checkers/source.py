"""Rules working on raw source lines."""

from typing import List

from checkers.base import LintContext, LintRule
from gdstyle.models.diagnostic import Diagnostic, Severity

TAB_WIDTH = 4


def display_width(line: str) -> int:
    """Width of a line with every tab counted as four columns."""
    return len(line) + line.count("\t") * (TAB_WIDTH - 1)


class MaxLineLengthRule(LintRule):
    """Lines are no wider than the configured maximum."""

    default_severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "max-line-length"

    def check(self, context: LintContext) -> List[Diagnostic]:
        limit = context.config.max_line_length
        diagnostics = []
        for number, line in enumerate(context.lines, start=1):
            width = display_width(line)
            if width > limit:
                diagnostics.append(Diagnostic(
                    rule=self.name,
                    line=number,
                    column=limit + 1,
                    message=f"Line is too long. Found {width} characters, maximum allowed is {limit}",
                    severity=self.severity_for(self.name),
                ))
        return diagnostics
