"""
Declaration data models.

A declaration is one member of a script scope (the file root or an inner
class body): a signal, constant, variable, function and so on. The
declaration classifier assigns each of them a category used by both the
naming rules and the reorder engine.
"""

from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from gdstyle.models.ast_node import SyntaxNode


class DeclarationKind(str, Enum):
    """Syntactic variant of a declaration."""

    CLASS_ANNOTATION = "class_annotation"
    CLASS_NAME = "class_name"
    EXTENDS = "extends"
    DOCSTRING = "docstring"
    SIGNAL = "signal"
    ENUM = "enum"
    CONSTANT = "constant"
    VARIABLE = "variable"
    FUNCTION = "function"
    INNER_CLASS = "inner_class"
    UNKNOWN = "unknown"


class Visibility(str, Enum):
    """Visibility by naming convention: a single leading underscore is private."""

    PUBLIC = "public"
    PRIVATE = "private"


class VariableKind(str, Enum):
    STATIC = "static"
    EXPORTED = "exported"
    ONREADY = "onready"
    REGULAR = "regular"


class MethodKind(str, Enum):
    STATIC = "static"
    LIFECYCLE = "lifecycle"
    PUBLIC = "public"
    PRIVATE = "private"


class Category(IntEnum):
    """Major ordering category of the style guide, in ascending order."""

    CLASS_ANNOTATION = 1
    CLASS_NAME = 2
    EXTENDS = 3
    DOCSTRING = 4
    SIGNAL = 5
    ENUM = 6
    CONSTANT = 7
    STATIC_VARIABLE = 8
    EXPORTED_VARIABLE = 9
    REGULAR_VARIABLE = 10
    ONREADY_VARIABLE = 11
    STATIC_METHOD = 12
    LIFECYCLE_METHOD = 13
    PUBLIC_METHOD = 14
    PRIVATE_METHOD = 15
    PUBLIC_INNER_CLASS = 16
    PRIVATE_INNER_CLASS = 17
    UNKNOWN = 255


class SpacingGroup(str, Enum):
    """Groups of categories that share blank-line separation rules."""

    HEADER = "header"
    SIGNALS = "signals"
    ENUMS = "enums"
    CONSTANTS = "constants"
    STATIC_VARIABLES = "static_variables"
    EXPORTED_VARIABLES = "exported_variables"
    REGULAR_VARIABLES = "regular_variables"
    ONREADY_VARIABLES = "onready_variables"
    METHODS = "methods"
    INNER_CLASSES = "inner_classes"
    OTHER = "other"


_SPACING_GROUPS = {
    Category.CLASS_ANNOTATION: SpacingGroup.HEADER,
    Category.CLASS_NAME: SpacingGroup.HEADER,
    Category.EXTENDS: SpacingGroup.HEADER,
    Category.DOCSTRING: SpacingGroup.HEADER,
    Category.SIGNAL: SpacingGroup.SIGNALS,
    Category.ENUM: SpacingGroup.ENUMS,
    Category.CONSTANT: SpacingGroup.CONSTANTS,
    Category.STATIC_VARIABLE: SpacingGroup.STATIC_VARIABLES,
    Category.EXPORTED_VARIABLE: SpacingGroup.EXPORTED_VARIABLES,
    Category.REGULAR_VARIABLE: SpacingGroup.REGULAR_VARIABLES,
    Category.ONREADY_VARIABLE: SpacingGroup.ONREADY_VARIABLES,
    Category.STATIC_METHOD: SpacingGroup.METHODS,
    Category.LIFECYCLE_METHOD: SpacingGroup.METHODS,
    Category.PUBLIC_METHOD: SpacingGroup.METHODS,
    Category.PRIVATE_METHOD: SpacingGroup.METHODS,
    Category.PUBLIC_INNER_CLASS: SpacingGroup.INNER_CLASSES,
    Category.PRIVATE_INNER_CLASS: SpacingGroup.INNER_CLASSES,
    Category.UNKNOWN: SpacingGroup.OTHER,
}

# Categories whose members are split into public-then-private buckets.
_VISIBILITY_RANKED = {
    Category.CONSTANT,
    Category.STATIC_VARIABLE,
    Category.EXPORTED_VARIABLE,
    Category.REGULAR_VARIABLE,
    Category.ONREADY_VARIABLE,
    Category.STATIC_METHOD,
}


class Declaration(BaseModel):
    """One classified member of a file or inner class scope."""

    kind: DeclarationKind = Field(..., description="Syntactic variant")
    name: str = Field("", description="Identifier text of the declared name")
    visibility: Visibility = Field(Visibility.PUBLIC, description="Visibility by naming convention")
    category: Category = Field(..., description="Major ordering category")
    sub_rank: int = Field(0, description="Rank inside the category (lifecycle order, _static_init first)")
    variable_kind: Optional[VariableKind] = None
    method_kind: Optional[MethodKind] = None
    annotations: List[str] = Field(default_factory=list, description="Annotations attached to the declaration")
    start_line: int = Field(..., description="First line, including attached annotation lines (1-indexed)")
    end_line: int = Field(..., description="Last line holding declaration text (1-indexed)")
    node_type: str = Field("", description="Node type of the declaration in the syntax tree")
    node: Optional[SyntaxNode] = Field(None, exclude=True, repr=False)

    @property
    def is_private(self) -> bool:
        return self.visibility == Visibility.PRIVATE

    @property
    def is_recognized(self) -> bool:
        return self.kind != DeclarationKind.UNKNOWN

    @property
    def spacing_group(self) -> SpacingGroup:
        return _SPACING_GROUPS[self.category]

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        """(major category, sub rank, visibility rank); ties keep source order."""
        visibility_rank = 0
        if self.category in _VISIBILITY_RANKED and self.is_private:
            visibility_rank = 1
        return (int(self.category), self.sub_rank, visibility_rank)
