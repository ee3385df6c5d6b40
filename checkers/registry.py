"""
Rule registry.

This module manages rule registration, lookup and configuration. The
built-in rules and their severities are declared in ``config.yaml`` next to
this module.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import yaml

from checkers.access import PrivateAccessRule
from checkers.base import LintRule
from checkers.loads import DuplicatedLoadRule
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
from checkers.source import MaxLineLengthRule
from checkers.statements import (
    ComparisonWithItselfRule,
    NoElseReturnRule,
    StandaloneExpressionRule,
    UnnecessaryPassRule,
)
from gdstyle.config import validate_rule_names
from gdstyle.models.diagnostic import Severity

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent


class RuleRegistry:
    """Manages lint rule registration and selection."""

    def __init__(self):
        self._rules: Dict[str, LintRule] = {}
        self._rule_id_map: Dict[str, str] = {}
        self._config_cache: Dict[str, Dict] = {}
        self.file_extensions: List[str] = [".gd"]
        # None enables every registered identifier
        self.default_rule_ids: Optional[Set[str]] = None

    def register_rule(self, rule: LintRule) -> None:
        """
        Register a lint rule.

        Args:
            rule: LintRule instance to register
        """
        name = rule.name

        if name in self._rules:
            logger.warning(f"Rule '{name}' already registered, overwriting")

        self._rules[name] = rule

        # Map every reported identifier to the rule producing it
        for rule_id in rule.rule_ids:
            if rule_id in self._rule_id_map and self._rule_id_map[rule_id] != name:
                logger.warning(
                    f"Rule identifier '{rule_id}' already reported by '{self._rule_id_map[rule_id]}', "
                    f"overwriting with '{name}'"
                )
            self._rule_id_map[rule_id] = name

        logger.debug(f"Registered rule '{name}' reporting {rule.rule_ids}")

    def get_rule(self, rule_id: str) -> Optional[LintRule]:
        """
        Get the rule reporting an identifier.

        Args:
            rule_id: Rule identifier, such as 'load-variable-name'

        Returns:
            LintRule instance if found, None otherwise
        """
        name = self._rule_id_map.get(rule_id)
        return self._rules.get(name) if name else None

    def list_rules(self) -> List[LintRule]:
        return list(self._rules.values())

    def list_rule_ids(self) -> List[str]:
        """List every identifier a registered rule can report."""
        return list(self._rule_id_map.keys())

    def supports_file(self, file_path: str) -> bool:
        return Path(file_path).suffix in self.file_extensions

    def validate_rule_names(self, names: Iterable[str]) -> List[str]:
        """Return the names that no registered rule reports, sorted."""
        return validate_rule_names(names, self._rule_id_map)

    def enabled_rule_ids(self, disabled: Iterable[str] = ()) -> Set[str]:
        """Identifiers enabled by default and not disabled."""
        enabled = set(self._rule_id_map)
        if self.default_rule_ids is not None:
            enabled &= self.default_rule_ids
        return enabled - set(disabled)

    def enabled_rules(self, disabled: Iterable[str] = ()) -> List[LintRule]:
        """Rules with at least one enabled identifier."""
        enabled = self.enabled_rule_ids(disabled)
        return [
            rule for rule in self._rules.values()
            if any(rule_id in enabled for rule_id in rule.rule_ids)
        ]

    def load_rule_config(self, config_dir: Path = CONFIG_DIR) -> Dict:
        """
        Load rule configuration from YAML file.

        Args:
            config_dir: Directory containing config.yaml

        Returns:
            Dictionary containing rule configuration

        Raises:
            FileNotFoundError: If config.yaml is not found
            ValueError: If a required field is missing
            yaml.YAMLError: If config.yaml is malformed
        """
        config_path = config_dir / "config.yaml"

        # Check cache first
        cache_key = str(config_path)
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        if not config_path.exists():
            raise FileNotFoundError(f"Rule configuration not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse rule configuration {config_path}: {e}")
            raise

        required_fields = ['name', 'version', 'file_extensions', 'rules']
        for field in required_fields:
            if field not in config:
                raise ValueError(f"Missing required field '{field}' in {config_path}")

        self._config_cache[cache_key] = config
        logger.debug(f"Loaded rule configuration from {config_path}")
        return config

    def apply_config(self, config: Dict) -> None:
        """
        Apply the default rule set, file extensions and severities from a
        loaded configuration.

        Raises:
            ValueError: If the configuration names unknown rules or severities
        """
        unknown = self.validate_rule_names(config.get('rules', []))
        if unknown:
            raise ValueError(f"Unknown rules in configuration: {', '.join(unknown)}")

        if 'rules' in config:
            self.default_rule_ids = set(config['rules'])

        self.file_extensions = list(config.get('file_extensions', self.file_extensions))

        for rule_id, severity in (config.get('severities') or {}).items():
            rule = self.get_rule(rule_id)
            if rule is None:
                raise ValueError(f"Severity given for unknown rule '{rule_id}'")
            rule.set_severity(rule_id, Severity(severity))

    def unregister_rule(self, name: str) -> bool:
        """
        Unregister a rule.

        Args:
            name: Name of the rule to unregister

        Returns:
            True if the rule was unregistered, False if not found
        """
        if name not in self._rules:
            return False

        rule = self._rules.pop(name)
        for rule_id in rule.rule_ids:
            if self._rule_id_map.get(rule_id) == name:
                del self._rule_id_map[rule_id]

        logger.debug(f"Unregistered rule '{name}'")
        return True

    def get_statistics(self) -> Dict:
        """
        Get registry statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "total_rules": len(self._rules),
            "total_rule_ids": len(self._rule_id_map),
            "rules": list(self._rules.keys()),
        }


def builtin_rules() -> List[LintRule]:
    """Instantiate every built-in rule."""
    return [
        DuplicatedLoadRule(),
        StandaloneExpressionRule(),
        UnnecessaryPassRule(),
        ComparisonWithItselfRule(),
        PrivateAccessRule(),
        MaxLineLengthRule(),
        NoElseReturnRule(),
        FunctionNameRule(),
        ClassNameRule(),
        SignalNameRule(),
        VariableNameRule(),
        FunctionArgumentNameRule(),
        LoopVariableNameRule(),
        EnumNameRule(),
        EnumMemberNameRule(),
        ConstantNameRule(),
    ]


def create_default_registry(config_dir: Path = CONFIG_DIR) -> RuleRegistry:
    """Create a registry holding the built-in rules, configured from config.yaml."""
    registry = RuleRegistry()
    for rule in builtin_rules():
        registry.register_rule(rule)
    registry.apply_config(registry.load_rule_config(config_dir))
    return registry
