"""Shared models for git-commit-lint."""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CommitType(str, Enum):
    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    CHORE = "chore"
    CI = "ci"
    PERF = "perf"
    REVERT = "revert"
    BUILD = "build"


COMMIT_TYPE_DESCRIPTIONS = {
    CommitType.FEAT: "New feature",
    CommitType.FIX: "Bug fix",
    CommitType.DOCS: "Documentation changes",
    CommitType.STYLE: "Code style (formatting, semicolons, etc)",
    CommitType.REFACTOR: "Code refactoring",
    CommitType.TEST: "Adding or updating tests",
    CommitType.CHORE: "Maintenance tasks",
    CommitType.CI: "CI/CD changes",
    CommitType.PERF: "Performance improvements",
    CommitType.REVERT: "Revert previous commit",
    CommitType.BUILD: "Build system changes",
}


class Severity(IntEnum):
    DISABLED = 0
    WARNING = 1
    ERROR = 2


class Applicability(str, Enum):
    ALWAYS = "always"
    NEVER = "never"


@dataclass(frozen=True)
class CommitMessage:
    """A commit message split into the parts the rules look at.

    ``raw_type`` keeps the token as written; ``type`` is its lower-cased form.
    An unparsable header leaves both empty, and ``subject`` empty too.
    """
    raw: str
    header: str
    raw_type: str
    type: str
    scope: Optional[str]
    breaking: bool
    subject: str
    body: Optional[str]


class RuleDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    severity: Severity = Field(description="0 = disabled, 1 = warning, 2 = error")
    applicability: Applicability = Applicability.ALWAYS
    value: Optional[Any] = None

    def as_entry(self) -> list:
        """Return the ``[level, when, value]`` form used in config files."""
        entry = [int(self.severity), self.applicability.value]
        if self.value is not None:
            entry.append(list(self.value) if isinstance(self.value, tuple) else self.value)
        return entry


class Violation(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule: str
    severity: Severity
    message: str


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: str = Field(description="Header of the validated message")
    valid: bool
    ignored: bool = False
    violations: Tuple[Violation, ...] = ()

    @property
    def errors(self) -> Tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == Severity.ERROR)

    @property
    def warnings(self) -> Tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.severity == Severity.WARNING)
