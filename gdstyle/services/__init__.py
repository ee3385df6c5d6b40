"""
Services for processing GDScript files on disk.
"""

from .batch import StyleService

__all__ = ["StyleService"]
