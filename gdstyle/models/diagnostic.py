"""Diagnostic data models."""

from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Severity level of a lint diagnostic."""

    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """A single style or correctness violation found in a file."""

    rule: str = Field(..., description="Identifier of the rule that produced this diagnostic")
    line: int = Field(..., description="Line number (1-indexed)")
    message: str = Field(..., description="Human readable description")
    column: int = Field(1, description="Column number (1-indexed)")
    severity: Severity = Field(Severity.WARNING, description="Severity level")

    model_config = {"frozen": True}

    def format(self, file_path: str) -> str:
        """Render the diagnostic in the standard ``path:line:rule:severity: message`` form."""
        return f"{file_path}:{self.line}:{self.rule}:{self.severity.value}: {self.message}"
