"""Lint result data models."""

from typing import List

from pydantic import BaseModel, Field

from gdstyle.models.diagnostic import Diagnostic, Severity
from gdstyle.models.error import FileError


class FileLintResult(BaseModel):
    """Diagnostics produced for one file."""

    file_path: str
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.diagnostics

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == Severity.WARNING)

    def format_lines(self) -> List[str]:
        return [diagnostic.format(self.file_path) for diagnostic in self.diagnostics]


class LintReport(BaseModel):
    """Results of linting a batch of files."""

    results: List[FileLintResult] = Field(default_factory=list)
    errors: List[FileError] = Field(default_factory=list)

    @property
    def diagnostic_count(self) -> int:
        return sum(len(result.diagnostics) for result in self.results)

    @property
    def has_findings(self) -> bool:
        return self.diagnostic_count > 0
