"""Unit tests for the reorder engine."""

import pytest

from gdstyle.analyzers.reorder import (
    SKIPPED_SYNTAX_ERRORS,
    ReorderEngine,
    ReorderUnit,
    blank_lines_between,
    merge_same_line,
    reorder_source,
    sort_units,
)
from gdstyle.models.declaration import Category, Declaration, DeclarationKind, SpacingGroup
from gdstyle.parser import parse_source

UNORDERED = """extends Node

func _ready():
	pass

var speed = 10

signal died
"""

ORDERED = """extends Node

signal died

var speed = 10


func _ready():
	pass
"""

FULL_SCRIPT = """@tool
class_name Player
extends CharacterBody2D
## A player character.

# Emitted when health reaches zero.
signal died


func _private_helper():
	pass


func _ready():
	pass

@onready var sprite = $Sprite2D
var _cache = {}
var health = 3
@export var speed = 10

const MAX_HEALTH = 3

enum State { IDLE, RUNNING }


func jump():
	pass

static func create():
	pass


class _Hidden:
	var x = 1


class Item:
	var id = 0
"""

FULL_SCRIPT_ORDERED = """@tool
class_name Player
extends CharacterBody2D
## A player character.

# Emitted when health reaches zero.
signal died

enum State { IDLE, RUNNING }

const MAX_HEALTH = 3

@export var speed = 10

var health = 3
var _cache = {}

@onready var sprite = $Sprite2D


static func create():
	pass


func _ready():
	pass


func jump():
	pass


func _private_helper():
	pass


class Item:
	var id = 0


class _Hidden:
	var x = 1
"""


@pytest.fixture
def engine():
    """Create a reorder engine."""
    return ReorderEngine()


def reorder(engine, source):
    return engine.reorder(parse_source(source, "test.gd"))


class TestReorderEngine:
    """Test suite for ReorderEngine."""

    def test_basic_reorder(self, engine):
        """Test that declarations move into style-guide order."""
        result = reorder(engine, UNORDERED)

        assert result.text == ORDERED
        assert result.changed
        assert result.skipped_reason is None

    def test_ordered_file_unchanged(self, engine):
        """Test that an ordered file is returned unchanged."""
        result = reorder(engine, ORDERED)

        assert result.text == ORDERED
        assert not result.changed

    def test_full_script(self, engine):
        """Test every category of a realistic script."""
        result = reorder(engine, FULL_SCRIPT)

        assert result.text == FULL_SCRIPT_ORDERED

    def test_idempotent(self, engine):
        """Test that reordering twice gives the same text."""
        first = reorder(engine, FULL_SCRIPT)
        second = reorder(engine, first.text)

        assert second.text == first.text
        assert not second.changed

    def test_leading_comments_travel(self, engine):
        """Test that comments directly above a declaration move with it."""
        source = (
            "extends Node\n"
            "\n"
            "# Speed in pixels.\n"
            "var speed = 10\n"
            "\n"
            "## Emitted on death.\n"
            "signal died\n"
        )

        result = reorder(engine, source)

        assert result.text == (
            "extends Node\n"
            "\n"
            "## Emitted on death.\n"
            "signal died\n"
            "\n"
            "# Speed in pixels.\n"
            "var speed = 10\n"
        )

    def test_docstring_stays_after_header(self, engine):
        """Test that the file docstring keeps its place after extends."""
        source = "extends Node\n## A player.\n\nvar speed = 10\n"

        result = reorder(engine, source)

        assert result.text == source
        assert not result.changed

    def test_file_docstring_touching_declaration_stays(self, engine):
        """Test that a docstring under extends stays there when a declaration follows directly."""
        source = "extends Node\n## File docstring.\nconst A = 1\nsignal changed\n"

        result = reorder(engine, source)

        assert result.text == "extends Node\n## File docstring.\n\nsignal changed\n\nconst A = 1\n"
        assert reorder(engine, result.text).text == result.text

    def test_static_init_first(self, engine):
        """Test that _static_init moves ahead of the other static methods."""
        source = "static func build():\n\tpass\n\n\nstatic func _static_init():\n\tpass\n"

        result = reorder(engine, source)

        assert result.text == "static func _static_init():\n\tpass\n\n\nstatic func build():\n\tpass\n"

    def test_public_before_private(self, engine):
        """Test visibility order inside a category, keeping source order otherwise."""
        source = "var _b = 1\nvar a = 2\nvar _a = 3\nvar b = 4\n"

        result = reorder(engine, source)

        assert result.text == "var a = 2\nvar b = 4\nvar _b = 1\nvar _a = 3\n"

    def test_lifecycle_order(self, engine):
        """Test that lifecycle methods follow engine call order."""
        source = (
            "func _process(delta):\n\tpass\n\n\n"
            "func _ready():\n\tpass\n\n\n"
            "func _init():\n\tpass\n"
        )

        result = reorder(engine, source)

        assert result.text == (
            "func _init():\n\tpass\n\n\n"
            "func _ready():\n\tpass\n\n\n"
            "func _process(delta):\n\tpass\n"
        )

    def test_inner_class_body_reordered(self, engine):
        """Test that inner class bodies are reordered recursively."""
        source = "class Inner:\n\tfunc b():\n\t\tpass\n\n\tvar a = 1\n"

        result = reorder(engine, source)

        assert result.text == "class Inner:\n\tvar a = 1\n\n\n\tfunc b():\n\t\tpass\n"

    def test_nested_inner_class_body_reordered(self, engine):
        """Test recursion through a class nested in another class."""
        source = (
            "extends Node\n"
            "\n"
            "\n"
            "class Outer:\n"
            "\tfunc run():\n"
            "\t\tpass\n"
            "\n"
            "\tclass Nested:\n"
            "\t\tfunc go():\n"
            "\t\t\tpass\n"
            "\n"
            "\t\tsignal done\n"
            "\n"
            "\tconst LIMIT = 3\n"
        )

        result = reorder(engine, source)

        assert result.text == (
            "extends Node\n"
            "\n"
            "\n"
            "class Outer:\n"
            "\tconst LIMIT = 3\n"
            "\n"
            "\n"
            "\tfunc run():\n"
            "\t\tpass\n"
            "\n"
            "\n"
            "\tclass Nested:\n"
            "\t\tsignal done\n"
            "\n"
            "\n"
            "\t\tfunc go():\n"
            "\t\t\tpass\n"
        )
        assert reorder(engine, result.text).text == result.text

    def test_detached_comment_is_barrier(self, engine):
        """Test that a detached comment block splits the scope into runs."""
        source = (
            "var b = 1\n"
            "signal first\n"
            "\n"
            "\n"
            "# Second section\n"
            "\n"
            "\n"
            "var d = 2\n"
            "signal second\n"
        )

        result = reorder(engine, source)

        assert result.text == (
            "signal first\n"
            "\n"
            "var b = 1\n"
            "\n"
            "\n"
            "# Second section\n"
            "\n"
            "\n"
            "signal second\n"
            "\n"
            "var d = 2\n"
        )

    def test_same_line_declarations_stay(self, engine):
        """Test that declarations sharing a line are not split."""
        source = "var b = 1; signal a\nconst C = 1\n"

        result = reorder(engine, source)

        assert result.text.splitlines()[0] == "var b = 1; signal a"

    def test_syntax_error_skipped(self, engine):
        """Test that files with syntax errors are never reordered."""
        source = "var b = 1\nsignal a\nfunc broken(:\n\tpass\n"

        result = reorder(engine, source)

        assert result.text == source
        assert not result.changed
        assert result.skipped_reason == SKIPPED_SYNTAX_ERRORS

    def test_crlf_preserved(self, engine):
        """Test that CRLF line endings are kept."""
        result = reorder(engine, "var b = 1\r\nsignal a\r\n")

        assert result.text == "signal a\r\n\r\nvar b = 1\r\n"

    def test_empty_file(self, engine):
        """Test an empty file."""
        result = reorder(engine, "")

        assert result.text == ""
        assert not result.changed

    def test_reorder_source(self):
        """Test the module-level helper."""
        assert reorder_source(UNORDERED).text == ORDERED


class TestReorderUnits:
    """Test suite for unit sorting and spacing."""

    def _unit(self, group, sort_key=(1, 0, 0), barrier=False, blank_before=0, name=""):
        return ReorderUnit(
            lines=[name],
            group=group,
            sort_key=sort_key,
            is_barrier=barrier,
            blank_before=blank_before,
            name=name,
        )

    def test_methods_get_two_blank_lines(self):
        """Test spacing around methods and inner classes."""
        variable = self._unit(SpacingGroup.REGULAR_VARIABLES)
        method = self._unit(SpacingGroup.METHODS)
        inner = self._unit(SpacingGroup.INNER_CLASSES)

        assert blank_lines_between(variable, method) == 2
        assert blank_lines_between(method, inner) == 2

    def test_header_units_are_adjacent(self):
        """Test that header units have no blank line between them."""
        first = self._unit(SpacingGroup.HEADER)
        second = self._unit(SpacingGroup.HEADER, blank_before=1)

        assert blank_lines_between(first, second) == 0

    def test_same_group_keeps_at_most_one(self):
        """Test spacing inside a group."""
        first = self._unit(SpacingGroup.CONSTANTS)

        assert blank_lines_between(first, self._unit(SpacingGroup.CONSTANTS, blank_before=0)) == 0
        assert blank_lines_between(first, self._unit(SpacingGroup.CONSTANTS, blank_before=2)) == 1

    def test_barrier_keeps_spacing(self):
        """Test that barriers keep their original separation."""
        barrier = self._unit(SpacingGroup.OTHER, barrier=True, blank_before=2)
        barrier.blank_after = 0
        constant = self._unit(SpacingGroup.CONSTANTS)

        assert blank_lines_between(constant, barrier) == 2
        assert blank_lines_between(barrier, constant) == 0

    def test_sort_units_between_barriers(self):
        """Test that sorting never crosses a barrier."""
        units = [
            self._unit(SpacingGroup.METHODS, (14, 0, 0), name="b"),
            self._unit(SpacingGroup.SIGNALS, (5, 0, 0), name="a"),
            self._unit(SpacingGroup.OTHER, barrier=True, name="barrier"),
            self._unit(SpacingGroup.METHODS, (14, 0, 0), name="d"),
            self._unit(SpacingGroup.SIGNALS, (5, 0, 0), name="c"),
        ]

        assert [u.name for u in sort_units(units)] == ["a", "b", "barrier", "c", "d"]

    def test_merge_same_line(self):
        """Test that overlapping declarations merge into one unknown declaration."""
        declarations = [
            Declaration(kind=DeclarationKind.VARIABLE, category=Category.REGULAR_VARIABLE, start_line=1, end_line=1),
            Declaration(kind=DeclarationKind.SIGNAL, category=Category.SIGNAL, start_line=1, end_line=1),
            Declaration(kind=DeclarationKind.CONSTANT, category=Category.CONSTANT, start_line=2, end_line=2),
        ]

        merged = merge_same_line(declarations)

        assert len(merged) == 2
        assert merged[0].kind == DeclarationKind.UNKNOWN
        assert merged[1].kind == DeclarationKind.CONSTANT


class TestScenarios:
    """End-to-end reorder scenarios."""

    def test_function_constant_variable(self):
        """Test that each declaration keeps its leading comment when moved."""
        source = (
            "# Moves the player.\n"
            "func move():\n"
            "\tpass\n"
            "\n"
            "# Top speed.\n"
            "const MAX_SPEED = 10\n"
            "\n"
            "# Current speed.\n"
            "var speed = 0\n"
        )

        result = reorder_source(source)

        assert result.text == (
            "# Top speed.\n"
            "const MAX_SPEED = 10\n"
            "\n"
            "# Current speed.\n"
            "var speed = 0\n"
            "\n"
            "\n"
            "# Moves the player.\n"
            "func move():\n"
            "\tpass\n"
        )

    def test_categories_non_decreasing(self):
        """Test that every scope ends up in category order."""
        from gdstyle.analyzers.classifier import iter_scopes

        result = reorder_source(FULL_SCRIPT)

        for _, declarations in iter_scopes(parse_source(result.text).root):
            categories = [d.category for d in declarations]
            assert categories == sorted(categories)

    def test_comments_preserved(self):
        """Test that no comment line is gained or lost."""
        result = reorder_source(FULL_SCRIPT)

        def comments(text):
            return sorted(line.strip() for line in text.splitlines() if line.strip().startswith("#"))

        assert comments(result.text) == comments(FULL_SCRIPT)
