"""Configuration management for git-commit-lint."""
import json
import os
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import tomli
import tomli_w
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from .commit_message.rules import get_rule
from .errors import ConfigurationError
from .models import Applicability, CommitType, RuleDefinition, Severity

DEFAULT_CONFIG_FILENAME = ".gitcommitlint.toml"
PYPROJECT_FILENAME = "pyproject.toml"
COMMITLINTRC_FILENAME = ".commitlintrc.json"
CONFIG_SECTION = "gitcommitlint"

CONFIG_FILENAMES = (DEFAULT_CONFIG_FILENAME, PYPROJECT_FILENAME, COMMITLINTRC_FILENAME)

DEFAULT_HELP_URL = "https://www.conventionalcommits.org/"

DEFAULT_RULES: Dict[str, list] = {
    "type-enum": [2, "always", [t.value for t in CommitType]],
    "type-case": [2, "always", "lower-case"],
    "subject-empty": [2, "never"],
    "subject-max-length": [2, "always", 100],
    "header-max-length": [2, "always", 120],
}

# Messages git writes itself; linted only when default_ignores is off.
DEFAULT_IGNORE_PATTERNS = (
    r"^Merge pull request .*",
    r"^Merge (?:remote-tracking )?branch .*",
    r"^Merge tag .*",
    r"^Merge .+ into .+",
    r"^Merged .+ (?:in|into) .+",
    r"^Automatic merge.*",
    r"^Auto-merged .+ into .+",
    r'^[Rr]evert ".*"',
    r"^(?:amend|fixup|squash)! .*",
)


def parse_rule(name: str, entry: Any) -> RuleDefinition:
    """Turn a ``[level, when, value]`` config entry into a rule definition.

    Raises:
        ConfigurationError: if the entry is malformed
    """
    rule = get_rule(name)

    if not isinstance(entry, (list, tuple)) or not 1 <= len(entry) <= 3:
        raise ConfigurationError(
            f"rule '{name}' must be a list of [level, \"always\"|\"never\", value]"
        )

    level = entry[0]
    if isinstance(level, bool) or not isinstance(level, int) or level not in (0, 1, 2):
        raise ConfigurationError(f"rule '{name}' has invalid level {level!r}, expected 0, 1 or 2")
    severity = Severity(level)

    when = entry[1] if len(entry) > 1 else Applicability.ALWAYS.value
    if when not in (Applicability.ALWAYS.value, Applicability.NEVER.value):
        raise ConfigurationError(
            f"rule '{name}' has invalid applicability {when!r}, expected \"always\" or \"never\""
        )

    value = entry[2] if len(entry) > 2 else None
    # a disabled rule keeps no value
    if severity is Severity.DISABLED:
        return RuleDefinition(name=name, severity=severity, applicability=Applicability(when))
    if value is None and rule.requires_value:
        raise ConfigurationError(f"rule '{name}' needs a value")

    return RuleDefinition(
        name=name,
        severity=severity,
        applicability=Applicability(when),
        value=rule.check_value(value),
    )


class RuleConfig(BaseModel):
    """An ordered, immutable rule table with unique rule names."""

    model_config = ConfigDict(frozen=True)

    rules: Tuple[RuleDefinition, ...] = ()

    @field_validator("rules")
    @classmethod
    def _unique_names(cls, rules: Tuple[RuleDefinition, ...]) -> Tuple[RuleDefinition, ...]:
        seen = set()
        for rule in rules:
            if rule.name in seen:
                raise ValueError(f"duplicate rule '{rule.name}'")
            seen.add(rule.name)
        return rules

    @classmethod
    def from_entries(cls, entries: List[Tuple[str, Any]]) -> "RuleConfig":
        """Build a rule table from ``(name, entry)`` pairs, keeping their order.

        Raises:
            ConfigurationError: on duplicate names or malformed entries
        """
        seen = set()
        definitions = []
        for name, entry in entries:
            if name in seen:
                raise ConfigurationError(f"duplicate rule '{name}'")
            seen.add(name)
            definitions.append(parse_rule(name, entry))
        return cls(rules=tuple(definitions))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RuleConfig":
        return cls.from_entries(list(mapping.items()))

    def get(self, name: str) -> Optional[RuleDefinition]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def to_mapping(self) -> Dict[str, list]:
        return {rule.name: rule.as_entry() for rule in self.rules}


class Config(BaseModel):
    """Configuration settings for git-commit-lint.

    Settings come from ``.gitcommitlint.toml``, the ``[tool.gitcommitlint]``
    table of ``pyproject.toml`` or a ``.commitlintrc.json``, with
    ``GIT_COMMIT_LINT_*`` environment variables filling in scalar settings.
    """

    model_config = ConfigDict(extra="forbid")

    rules: Dict[str, Any] = Field(
        default_factory=dict,
        description="Rule entries, merged onto the default rules unless extends_defaults is false"
    )

    extends_defaults: bool = Field(
        default=True,
        description="Whether configured rules are merged onto the default rule table"
    )

    default_ignores: bool = Field(
        default=True,
        description="Whether merge, revert and fixup commits are skipped"
    )

    ignores: List[str] = Field(
        default_factory=list,
        description="Regular expressions; matching messages are not linted"
    )

    help_url: str = Field(
        default=DEFAULT_HELP_URL,
        description="URL shown at the end of a failed report"
    )

    always_log: bool = Field(
        default=False,
        description="Whether to always write a timestamped log file"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Path to log file (if not using automatic log file generation)"
    )

    _source: Optional[Path] = PrivateAttr(default=None)

    @property
    def source(self) -> Optional[Path]:
        """The config file this configuration was loaded from, if any."""
        return self._source

    @staticmethod
    def _sanitize_string(value: str) -> str:
        """Strip control characters and cap the length of a string setting."""
        if not value:
            return value

        value = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', value)

        if len(value) > 1000:
            value = value[:1000]

        return value.strip()

    @staticmethod
    def _is_safe_path(path: str) -> bool:
        """Check if a path is safe (relative, no traversal)."""
        if not path:
            return False

        if '..' in path or path.startswith('/') or '\\' in path:
            return False

        if os.path.isabs(path):
            return False

        return True

    def rule_config(self) -> RuleConfig:
        """Build the effective rule table.

        Raises:
            ConfigurationError: if any rule entry is malformed
        """
        merged: Dict[str, Any] = dict(DEFAULT_RULES) if self.extends_defaults else {}
        merged.update(self.rules)
        return RuleConfig.from_mapping(merged)

    def ignore_patterns(self) -> List[re.Pattern]:
        """Compile the ignore patterns in effect.

        Raises:
            ConfigurationError: if a user pattern is not a valid regular expression
        """
        patterns = [re.compile(p) for p in DEFAULT_IGNORE_PATTERNS] if self.default_ignores else []
        for pattern in self.ignores:
            try:
                patterns.append(re.compile(pattern))
            except re.error as e:
                raise ConfigurationError(f"invalid ignore pattern {pattern!r}: {e}") from e
        return patterns

    @classmethod
    def _read_config_file(cls, path: Path) -> Optional[Dict[str, Any]]:
        """Read the git-commit-lint settings out of a config file.

        Returns None for a ``pyproject.toml`` without a ``[tool.gitcommitlint]``
        table.
        """
        try:
            if path.suffix == ".json":
                with path.open('r', encoding='utf-8') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ConfigurationError(f"{path}: expected a JSON object")
                section = {}
                if "rules" in data:
                    section["rules"] = data["rules"]
                if "defaultIgnores" in data:
                    section["default_ignores"] = data["defaultIgnores"]
                if "helpUrl" in data:
                    section["help_url"] = data["helpUrl"]
                return section

            with path.open('rb') as f:
                data = tomli.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"{path}: cannot read config file: {e}") from e
        except (json.JSONDecodeError, tomli.TOMLDecodeError) as e:
            raise ConfigurationError(f"{path}: invalid config file: {e}") from e

        if path.name == PYPROJECT_FILENAME:
            tool = data.get("tool", {})
            if not isinstance(tool, dict):
                raise ConfigurationError(f"{path}: [tool] must be a table")
            section = tool.get(CONFIG_SECTION)
            if section is None:
                return None
        else:
            section = data.get(CONFIG_SECTION, {})

        if not isinstance(section, dict):
            raise ConfigurationError(f"{path}: [{CONFIG_SECTION}] must be a table")
        return section

    @classmethod
    def load(cls, repo_path: Path, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from a config file.

        Args:
            repo_path: Directory searched for a config file
            config_path: Explicit config file, used instead of searching

        Returns:
            Config: Configuration object with values from file or defaults

        Raises:
            ConfigurationError: if the config file is missing (when given
                explicitly), unreadable or malformed
        """
        if config_path is not None:
            if not config_path.is_file():
                raise ConfigurationError(f"config file not found: {config_path}")
            candidates = [config_path]
        else:
            candidates = [repo_path / name for name in CONFIG_FILENAMES]

        for path in candidates:
            if not path.is_file():
                continue
            section = cls._read_config_file(path)
            if section is None:
                continue
            config = cls._from_section(section, path)
            config._source = path
            return config

        config = cls()
        config.rule_config()
        return config

    @classmethod
    def _from_section(cls, section: Dict[str, Any], path: Path) -> 'Config':
        section = dict(section)
        for key in ('log_file', 'help_url'):
            if key in section and isinstance(section[key], str):
                section[key] = cls._sanitize_string(section[key])

        if section.get('log_file') and not cls._is_safe_path(section['log_file']):
            print(f"Warning: Unsafe log file path '{section['log_file']}', using default", file=sys.stderr)
            section['log_file'] = None

        try:
            config = cls(**section)
        except ValidationError as e:
            raise ConfigurationError(f"{path}: {e}") from e

        try:
            config.rule_config()
            config.ignore_patterns()
        except ConfigurationError as e:
            raise ConfigurationError(f"{path}: {e}") from e
        return config

    def save(self, repo_path: Path) -> Path:
        """Write the effective configuration to ``.gitcommitlint.toml``.

        The full rule table is written, defaults included, so the file
        documents every rule in force.

        Returns:
            Path: The file written
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        section = {k: v for k, v in self.model_dump().items() if v is not None}
        section['rules'] = self.rule_config().to_mapping()
        section['extends_defaults'] = False
        if section.get('log_file') and not self._is_safe_path(section['log_file']):
            print(f"Warning: Unsafe log file path '{section['log_file']}', not saving", file=sys.stderr)
            del section['log_file']

        with config_path.open('wb') as f:
            tomli_w.dump({CONFIG_SECTION: section}, f)
        return config_path

    def get_log_file(self) -> Optional[Path]:
        """Get the path to the log file.

        If always_log is True, generates a timestamped log file name.
        Otherwise, returns the configured log_file path if set.

        Returns:
            Optional[Path]: Path to the log file, or None if logging is disabled
        """
        if self.always_log:
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            return Path(f"gcl_log-{timestamp}.log")
        elif self.log_file:
            if self._is_safe_path(self.log_file):
                return Path(self.log_file)
            else:
                print(f"Warning: Unsafe log file path '{self.log_file}', using default", file=sys.stderr)
                return None
        return None

    def __init__(self, **data):
        """Initialize config with environment variable support and sanitization."""
        env_data = {}

        env_mapping = {
            'GIT_COMMIT_LINT_EXTENDS_DEFAULTS': 'extends_defaults',
            'GIT_COMMIT_LINT_DEFAULT_IGNORES': 'default_ignores',
            'GIT_COMMIT_LINT_HELP_URL': 'help_url',
            'GIT_COMMIT_LINT_ALWAYS_LOG': 'always_log',
            'GIT_COMMIT_LINT_LOG_FILE': 'log_file',
        }

        for env_var, field_name in env_mapping.items():
            if env_var in os.environ:
                value = os.environ[env_var]

                if field_name in ['help_url', 'log_file']:
                    value = self._sanitize_string(value)

                if field_name in ['extends_defaults', 'default_ignores', 'always_log']:
                    value = value.lower() in ['true', '1', 'yes', 'on']

                env_data[field_name] = value

        merged_data = {**env_data, **data}

        super().__init__(**merged_data)
