"""
Exception hierarchy for the GDScript style checker.
"""


class GDStyleError(Exception):
    """Base class for all errors raised by gdstyle."""


class ParseError(GDStyleError):
    """The parser could not produce a syntax tree for a file."""

    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        super().__init__(f"Failed to parse {file_path}: {message}")


class ConfigError(GDStyleError):
    """Invalid configuration, such as an unknown rule name or setting."""


class ReorderError(GDStyleError):
    """Internal inconsistency detected while reordering declarations."""
