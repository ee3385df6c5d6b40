"""Unit tests for the naming rules."""

from checkers.naming import (
    ClassNameRule,
    ConstantNameRule,
    EnumMemberNameRule,
    EnumNameRule,
    FunctionArgumentNameRule,
    FunctionNameRule,
    LoopVariableNameRule,
    SignalNameRule,
    VariableNameRule,
)
from checkers.patterns import is_any_constant_case, is_any_snake_case, is_pascal_case, is_snake_case
from gdstyle.models.diagnostic import Severity


class TestPatterns:
    """Test suite for the naming patterns."""

    def test_snake_case(self):
        """Test snake_case names."""
        assert is_snake_case("move_and_slide")
        assert is_snake_case("x2")
        assert not is_snake_case("_private")
        assert not is_snake_case("camelCase")
        assert is_any_snake_case("_private")

    def test_pascal_case(self):
        """Test PascalCase names."""
        assert is_pascal_case("Player")
        assert is_pascal_case("HTTPRequest2")
        assert not is_pascal_case("player")
        assert not is_pascal_case("Bad_Name")

    def test_constant_case(self):
        """Test CONSTANT_CASE names."""
        assert is_any_constant_case("MAX_SPEED")
        assert is_any_constant_case("_HIDDEN")
        assert not is_any_constant_case("maxSpeed")


class TestConstantNameRule:
    """Test suite for constant-name."""

    def test_constant_case_passes(self, run_rule):
        """Test that CONSTANT_CASE constants pass."""
        assert run_rule(ConstantNameRule(), "const MAX_SPEED = 10\nconst _HIDDEN = 2\n") == []

    def test_bad_constant(self, run_rule):
        """Test a camelCase constant."""
        diagnostics = run_rule(ConstantNameRule(), "const badConstant = 10\n")

        assert len(diagnostics) == 1
        assert diagnostics[0].rule == "constant-name"
        assert diagnostics[0].line == 1
        assert diagnostics[0].message == "Constant name 'badConstant' should be in CONSTANT_CASE format"
        assert diagnostics[0].severity == Severity.ERROR

    def test_preload_allows_pascal_case(self, run_rule):
        """Test that preloaded constants may use PascalCase."""
        source = 'const Bullet = preload("res://bullet.tscn")\n'

        assert run_rule(ConstantNameRule(), source) == []

    def test_bad_preload_constant(self, run_rule):
        """Test a preloaded constant that is neither PascalCase nor CONSTANT_CASE."""
        source = 'const bullet_scene = preload("res://bullet.tscn")\n'

        diagnostics = run_rule(ConstantNameRule(), source)

        assert len(diagnostics) == 1
        assert "PascalCase or CONSTANT_CASE" in diagnostics[0].message

    def test_load_does_not_allow_pascal_case(self, run_rule):
        """Test that only preload relaxes the constant naming rule."""
        source = 'const Bullet = load("res://bullet.tscn")\n'

        diagnostics = run_rule(ConstantNameRule(), source)

        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Constant name 'Bullet' should be in CONSTANT_CASE format"


class TestDeclarationNameRules:
    """Test suite for function, class, signal and enum names."""

    def test_function_name(self, run_rule):
        """Test function names."""
        source = "func badFunctionName():\n\tpass\n\nfunc good_name():\n\tpass\n\nfunc _private():\n\tpass\n"

        diagnostics = run_rule(FunctionNameRule(), source)

        assert [d.line for d in diagnostics] == [1]
        assert diagnostics[0].message == (
            "Function name 'badFunctionName' should be in snake_case, _private_snake_case format"
        )

    def test_class_name(self, run_rule):
        """Test class_name and inner class names."""
        source = "class_name badClassName\n\nclass inner_thing:\n\tvar a = 1\n\nclass Good:\n\tvar b = 2\n"

        diagnostics = run_rule(ClassNameRule(), source)

        assert [d.line for d in diagnostics] == [1, 3]
        assert diagnostics[0].message == "Class name 'badClassName' should be in PascalCase format"

    def test_signal_name(self, run_rule):
        """Test signal names."""
        diagnostics = run_rule(SignalNameRule(), "signal BadSignal\nsignal health_changed(value)\n")

        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Signal name 'BadSignal' should be in snake_case format"

    def test_enum_names(self, run_rule):
        """Test enum and enumerator names."""
        source = "enum state { IDLE, running }\nenum Direction { UP, DOWN }\n"

        enum_diagnostics = run_rule(EnumNameRule(), source)
        member_diagnostics = run_rule(EnumMemberNameRule(), source)

        assert [d.message for d in enum_diagnostics] == ["Enum name 'state' should be in PascalCase format"]
        assert [d.message for d in member_diagnostics] == [
            "Enum element name 'running' should be in CONSTANT_CASE format"
        ]


class TestVariableNameRule:
    """Test suite for variable-name and load-variable-name."""

    def test_member_and_local_variables(self, run_rule):
        """Test member and local variables."""
        source = (
            "var badVariable = 30\n"
            "var good_variable = 40\n"
            "var _private_one = 1\n"
            "\n"
            "func run():\n"
            "\tvar localValue = 1\n"
            "\treturn localValue\n"
        )

        diagnostics = run_rule(VariableNameRule(), source)

        assert [(d.line, d.rule) for d in diagnostics] == [(1, "variable-name"), (6, "variable-name")]
        assert diagnostics[0].message == (
            "Variable name 'badVariable' should be in snake_case or _private_snake_case format"
        )

    def test_loaded_variable_may_be_pascal_case(self, run_rule):
        """Test that a loaded resource may use PascalCase."""
        source = 'var Enemy = load("res://enemy.gd")\nvar bad_Name = preload("res://a.gd")\n'

        diagnostics = run_rule(VariableNameRule(), source)

        assert len(diagnostics) == 1
        assert diagnostics[0].rule == "load-variable-name"
        assert diagnostics[0].line == 2

    def test_reports_both_identifiers(self):
        """Test the identifiers reported by the rule."""
        assert VariableNameRule().rule_ids == ["variable-name", "load-variable-name"]


class TestLoopVariableNameRule:
    """Test suite for loop-variable-name."""

    def test_loop_variable(self, run_rule):
        """Test for loop variable names."""
        source = "func run(items):\n\tfor Item in items:\n\t\tprint(Item)\n\tfor item in items:\n\t\tprint(item)\n"

        diagnostics = run_rule(LoopVariableNameRule(), source)

        assert len(diagnostics) == 1
        assert diagnostics[0].line == 2
        assert diagnostics[0].message == "Loop variable 'Item' should be in snake_case format"


class TestFunctionArgumentNameRule:
    """Test suite for function-argument-name."""

    def test_unused_argument(self, run_rule):
        """Test that an unused argument without underscore is reported."""
        source = "func move(unused, delta):\n\treturn delta\n"

        diagnostics = run_rule(FunctionArgumentNameRule(), source)

        assert len(diagnostics) == 1
        assert diagnostics[0].message == (
            "Function argument 'unused' is unused. Consider removing it or prefixing with '_'"
        )

    def test_underscore_marks_unused(self, run_rule):
        """Test that an underscore prefix silences the unused check."""
        source = "func _on_timeout(_delta):\n\tpass\n"

        assert run_rule(FunctionArgumentNameRule(), source) == []

    def test_bad_argument_name(self, run_rule):
        """Test a camelCase argument reported once."""
        source = "func move(myDelta):\n\tprint(myDelta)\n"

        diagnostics = run_rule(FunctionArgumentNameRule(), source)

        assert len(diagnostics) == 1
        assert diagnostics[0].message == (
            "Function argument 'myDelta' should be in snake_case or _private_snake_case format"
        )

    def test_typed_and_default_arguments(self, run_rule):
        """Test typed and default arguments."""
        source = "func move(speed: float, direction := Vector2.ZERO):\n\treturn speed * direction\n"

        assert run_rule(FunctionArgumentNameRule(), source) == []

    def test_member_access_is_not_a_use(self, run_rule):
        """Test that self.speed does not use an argument named speed."""
        source = "func set_speed(speed):\n\tself.speed = 10\n"

        diagnostics = run_rule(FunctionArgumentNameRule(), source)

        assert len(diagnostics) == 1
        assert "'speed' is unused" in diagnostics[0].message
