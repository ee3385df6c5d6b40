"""
Lint rule plugins for GDScript.

This package provides the rule interface, the rule registry and the
built-in rules.
"""

from checkers.base import LintContext, LintRule
from checkers.registry import RuleRegistry, create_default_registry

__all__ = ['LintContext', 'LintRule', 'RuleRegistry', 'create_default_registry']
