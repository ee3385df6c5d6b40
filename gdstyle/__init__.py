"""
GDScript style checker: linter and declaration reorderer.
"""

__version__ = "1.0.0"
