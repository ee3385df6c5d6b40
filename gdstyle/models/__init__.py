"""
Data models for the GDScript style checker.
"""

from .ast_node import SyntaxNode
from .declaration import (
    Category,
    Declaration,
    DeclarationKind,
    MethodKind,
    SpacingGroup,
    VariableKind,
    Visibility,
)
from .diagnostic import Diagnostic, Severity
from .error import FileError
from .lint import FileLintResult, LintReport
from .reorder import FileReorderResult, ReorderReport, ReorderResult
from .suppression import SuppressionDirective, SuppressionScope
from .trivia import BlankLines, DeclarationTrivia, ScopeTrivia, TriviaBlock

__all__ = [
    # Syntax tree
    "SyntaxNode",
    # Declarations
    "Category",
    "Declaration",
    "DeclarationKind",
    "MethodKind",
    "SpacingGroup",
    "VariableKind",
    "Visibility",
    # Diagnostics
    "Diagnostic",
    "Severity",
    "FileLintResult",
    "LintReport",
    # Suppression
    "SuppressionDirective",
    "SuppressionScope",
    # Trivia
    "BlankLines",
    "DeclarationTrivia",
    "ScopeTrivia",
    "TriviaBlock",
    # Reorder
    "ReorderResult",
    "FileReorderResult",
    "ReorderReport",
    # Errors
    "FileError",
]
