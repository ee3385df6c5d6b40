"""
Application configuration management.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from gdstyle.errors import ConfigError

PROJECT_CONFIG_FILE = "gdstyle.yaml"
DEFAULT_MAX_LINE_LENGTH = 100

_PROJECT_KEYS = {"disabled_rules", "max_line_length"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    # Linting
    disabled_rules: str = ""
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH

    # Reordering
    reorder_code: bool = False

    # Batch processing
    max_workers: int = 4

    class Config:
        env_file = ".env"
        env_prefix = "GDSTYLE_"
        case_sensitive = False
        extra = "ignore"

    @property
    def disabled_rule_set(self) -> Set[str]:
        return parse_rule_list(self.disabled_rules)


class LinterConfig(BaseModel):
    """Per-run configuration handed to the rule engine."""

    disabled_rules: Set[str] = Field(default_factory=set, description="Rule identifiers to skip")
    max_line_length: int = Field(DEFAULT_MAX_LINE_LENGTH, ge=1, description="Maximum display width of a line")

    def is_enabled(self, rule: str) -> bool:
        return rule not in self.disabled_rules


def parse_rule_list(value: Union[str, Iterable[str], None]) -> Set[str]:
    """
    Parse a comma separated rule list.

    Args:
        value: ``"rule-a, rule-b"`` or an iterable of names

    Returns:
        Set of stripped, non-empty rule names
    """
    if value is None:
        return set()
    if isinstance(value, str):
        value = value.split(",")
    return {name.strip() for name in value if name and name.strip()}


def load_project_config(
    path: Optional[Path] = None,
    settings: Optional[Settings] = None
) -> LinterConfig:
    """
    Build the linter configuration from settings and an optional project file.

    Values from the project file take precedence over environment settings;
    disabled rules from both sources are combined.

    Args:
        path: Path to a ``gdstyle.yaml`` file. If None, ``./gdstyle.yaml`` is
            used when it exists.
        settings: Environment settings. If None, they are loaded now.

    Returns:
        Merged LinterConfig

    Raises:
        ConfigError: If the file cannot be read or holds unknown keys
    """
    settings = settings or Settings()
    disabled = settings.disabled_rule_set
    max_line_length = settings.max_line_length

    if path is None:
        default_path = Path(PROJECT_CONFIG_FILE)
        path = default_path if default_path.is_file() else None

    if path is not None:
        data = _read_project_file(Path(path))
        disabled |= parse_rule_list(data.get("disabled_rules"))
        if "max_line_length" in data:
            max_line_length = data["max_line_length"]

    try:
        return LinterConfig(disabled_rules=disabled, max_line_length=max_line_length)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _read_project_file(path: Path) -> dict:
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    unknown = sorted(set(data) - _PROJECT_KEYS)
    if unknown:
        raise ConfigError(f"{path}: unknown configuration keys: {', '.join(unknown)}")

    rules = data.get("disabled_rules")
    if rules is not None and not isinstance(rules, (list, str)):
        raise ConfigError(f"{path}: disabled_rules must be a list of rule names")
    return data


def validate_rule_names(names: Iterable[str], known: Iterable[str]) -> List[str]:
    """Return the names that are not known rule identifiers, sorted."""
    known_set = set(known)
    return sorted(name for name in set(names) if name not in known_set)


# Global settings instance
settings = Settings()
