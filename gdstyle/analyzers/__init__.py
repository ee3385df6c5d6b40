"""Analyzers: declaration classifier, trivia index, suppression, rule engine and reorder engine."""

from gdstyle.analyzers.classifier import DeclarationClassifier, classify_tree
from gdstyle.analyzers.linter import Linter, lint_source
from gdstyle.analyzers.reorder import ReorderEngine, reorder_source
from gdstyle.analyzers.suppression import SuppressionResolver
from gdstyle.analyzers.trivia import TriviaIndexer, index_scope

__all__ = [
    "DeclarationClassifier",
    "classify_tree",
    "Linter",
    "lint_source",
    "ReorderEngine",
    "reorder_source",
    "SuppressionResolver",
    "TriviaIndexer",
    "index_scope",
]
