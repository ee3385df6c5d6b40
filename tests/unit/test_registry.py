"""Unit tests for RuleRegistry."""

from typing import List

import pytest

from checkers import LintContext, LintRule, RuleRegistry, create_default_registry
from checkers.naming import ClassNameRule, VariableNameRule
from checkers.registry import builtin_rules
from gdstyle.models.diagnostic import Diagnostic, Severity

ALL_RULE_IDS = {
    "duplicated-load",
    "standalone-expression",
    "unnecessary-pass",
    "comparison-with-itself",
    "private-access",
    "max-line-length",
    "no-else-return",
    "function-name",
    "class-name",
    "signal-name",
    "variable-name",
    "load-variable-name",
    "function-argument-name",
    "loop-variable-name",
    "enum-name",
    "enum-member-name",
    "constant-name",
}


class MockRule(LintRule):
    """Mock rule for testing."""

    @property
    def name(self) -> str:
        return "mock-rule"

    def check(self, context: LintContext) -> List[Diagnostic]:
        return []


@pytest.fixture
def registry():
    """Create an empty registry."""
    return RuleRegistry()


class TestRuleRegistry:
    """Test suite for RuleRegistry."""

    def test_register_rule(self, registry):
        """Test registering a rule."""
        rule = MockRule()

        registry.register_rule(rule)

        assert registry.get_rule("mock-rule") is rule
        assert registry.list_rule_ids() == ["mock-rule"]

    def test_register_rule_with_several_ids(self, registry):
        """Test that every identifier maps to the reporting rule."""
        rule = VariableNameRule()

        registry.register_rule(rule)

        assert registry.get_rule("variable-name") is rule
        assert registry.get_rule("load-variable-name") is rule

    def test_register_overwrites(self, registry):
        """Test registering a second rule with the same name."""
        first, second = MockRule(), MockRule()

        registry.register_rule(first)
        registry.register_rule(second)

        assert registry.get_rule("mock-rule") is second
        assert len(registry.list_rules()) == 1

    def test_get_unknown_rule(self, registry):
        """Test looking up an unknown identifier."""
        assert registry.get_rule("nonexistent") is None

    def test_unregister_rule(self, registry):
        """Test unregistering a rule."""
        registry.register_rule(VariableNameRule())

        assert registry.unregister_rule("variable-name") is True
        assert registry.get_rule("load-variable-name") is None
        assert registry.unregister_rule("variable-name") is False

    def test_enabled_rules(self, registry):
        """Test that a rule runs while any of its identifiers is enabled."""
        registry.register_rule(VariableNameRule())
        registry.register_rule(ClassNameRule())

        assert len(registry.enabled_rules({"load-variable-name"})) == 2
        assert [r.name for r in registry.enabled_rules({"variable-name", "load-variable-name"})] == ["class-name"]

    def test_supports_file(self, registry):
        """Test file extension support."""
        assert registry.supports_file("player.gd")
        assert not registry.supports_file("player.tscn")

    def test_validate_rule_names(self, registry):
        """Test reporting unknown rule names."""
        registry.register_rule(ClassNameRule())

        assert registry.validate_rule_names({"class-name"}) == []
        assert registry.validate_rule_names({"class-name", "invalid-rule"}) == ["invalid-rule"]

    def test_get_statistics(self, registry):
        """Test registry statistics."""
        registry.register_rule(VariableNameRule())
        registry.register_rule(MockRule())

        stats = registry.get_statistics()

        assert stats["total_rules"] == 2
        assert stats["total_rule_ids"] == 3
        assert set(stats["rules"]) == {"variable-name", "mock-rule"}


class TestRuleConfig:
    """Test suite for config.yaml loading."""

    def test_load_builtin_config(self, registry):
        """Test loading the shipped configuration."""
        config = registry.load_rule_config()

        assert config["name"] == "gdscript-style"
        assert config["file_extensions"] == [".gd"]
        assert set(config["rules"]) == ALL_RULE_IDS

    def test_config_is_cached(self, registry):
        """Test that configuration is read once per path."""
        first = registry.load_rule_config()
        second = registry.load_rule_config()

        assert first is second

    def test_missing_required_field(self, registry, tmp_path):
        """Test that a configuration without rules is rejected."""
        (tmp_path / "config.yaml").write_text("name: test\nversion: 1.0.0\nfile_extensions: [.gd]\n")

        with pytest.raises(ValueError, match="rules"):
            registry.load_rule_config(tmp_path)

    def test_missing_config_file(self, registry, tmp_path):
        """Test that a missing configuration file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            registry.load_rule_config(tmp_path)

    def test_apply_config_sets_severities(self, registry):
        """Test that severities from the configuration are applied."""
        rule = ClassNameRule()
        registry.register_rule(rule)

        registry.apply_config({
            "name": "test",
            "version": "1",
            "file_extensions": [".gd", ".gdscript"],
            "rules": ["class-name"],
            "severities": {"class-name": "warning"},
        })

        assert rule.severity_for("class-name") == Severity.WARNING
        assert registry.supports_file("tool.gdscript")

    def test_rules_list_is_the_default_set(self, registry):
        """Test that a rule left out of the configured list does not run."""
        registry.register_rule(ClassNameRule())
        registry.register_rule(VariableNameRule())

        registry.apply_config({"rules": ["class-name", "variable-name"]})

        assert registry.enabled_rule_ids() == {"class-name", "variable-name"}
        assert [r.name for r in registry.enabled_rules({"class-name"})] == ["variable-name"]
        assert registry.enabled_rules({"class-name", "variable-name"}) == []

    def test_without_config_every_rule_is_enabled(self, registry):
        """Test that a registry without configuration enables all identifiers."""
        registry.register_rule(VariableNameRule())

        assert registry.enabled_rule_ids() == {"variable-name", "load-variable-name"}

    def test_apply_config_rejects_unknown_rules(self, registry):
        """Test that unknown rule names in the configuration are rejected."""
        with pytest.raises(ValueError, match="unknown-rule"):
            registry.apply_config({"rules": ["unknown-rule"]})


class TestDefaultRegistry:
    """Test suite for create_default_registry."""

    def test_all_rules_registered(self):
        """Test that every built-in identifier is available."""
        registry = create_default_registry()

        assert set(registry.list_rule_ids()) == ALL_RULE_IDS
        assert len(registry.list_rules()) == len(builtin_rules())

    def test_default_severities(self):
        """Test severities from config.yaml."""
        registry = create_default_registry()

        assert registry.get_rule("class-name").severity_for("class-name") == Severity.ERROR
        assert registry.get_rule("duplicated-load").severity_for("duplicated-load") == Severity.WARNING
        assert registry.get_rule("max-line-length").severity_for("max-line-length") == Severity.WARNING

    def test_rule_descriptions(self):
        """Test that every rule has a one-line description."""
        for rule in create_default_registry().list_rules():
            assert rule.description
            assert "\n" not in rule.description
