"""Reorder result data models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from gdstyle.models.error import FileError


class ReorderResult(BaseModel):
    """Outcome of reordering the declarations of one file."""

    text: str = Field(..., description="Reordered source, or the input when nothing was done")
    changed: bool = Field(False, description="Whether text differs from the input")
    skipped_reason: Optional[str] = Field(
        None,
        description="Why the file was left untouched (syntax errors, internal inconsistency)"
    )


class FileReorderResult(BaseModel):
    """Reorder outcome for one file of a batch run."""

    file_path: str
    result: ReorderResult
    written: bool = False


class ReorderReport(BaseModel):
    """Results of reordering a batch of files."""

    results: List[FileReorderResult] = Field(default_factory=list)
    errors: List[FileError] = Field(default_factory=list)

    @property
    def changed_files(self) -> List[str]:
        return [r.file_path for r in self.results if r.result.changed]
