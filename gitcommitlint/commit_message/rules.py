"""Commit message rules.

Each rule checks one property of a parsed :class:`CommitMessage`. Rules are
stateless: the configured applicability and value are passed in on every
call, so one instance serves any number of rule tables and threads.
"""
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Tuple

from ..errors import ConfigurationError
from ..models import Applicability, CommitMessage

CASE_CHECKS: Dict[str, Callable[[str], bool]] = {
    "lower-case": lambda s: not any(c.isupper() for c in s),
    "upper-case": lambda s: not any(c.islower() for c in s),
    "camel-case": lambda s: re.fullmatch(r"[a-z][a-zA-Z0-9]*", s) is not None,
    "kebab-case": lambda s: re.fullmatch(r"[a-z0-9]+(?:-[a-z0-9]+)*", s) is not None,
    "pascal-case": lambda s: re.fullmatch(r"[A-Z][a-zA-Z0-9]*", s) is not None,
    "snake-case": lambda s: re.fullmatch(r"[a-z0-9]+(?:_[a-z0-9]+)*", s) is not None,
    "sentence-case": lambda s: s[:1].isupper() and not any(c.isupper() for c in s[1:]),
    "start-case": lambda s: all(w[:1].isupper() for w in s.split()),
}


class Rule(ABC):
    """Abstract base class for commit message rules."""

    name: str = ""
    requires_value: bool = False

    def check_value(self, value: Any) -> Any:
        """Validate a configured value and return it in normalised form.

        Raises:
            ConfigurationError: if the value does not suit this rule
        """
        if value is not None:
            raise ConfigurationError(f"rule '{self.name}' does not take a value")
        return None

    @abstractmethod
    def validate(self, message: CommitMessage, when: Applicability, value: Any) -> Tuple[bool, str]:
        """Validate the commit message. Returns ``(valid, message)``."""
        pass


class TypeEnumRule(Rule):
    """Validates that the type is one of the allowed types."""

    name = "type-enum"
    requires_value = True

    def check_value(self, value: Any) -> Tuple[str, ...]:
        if not isinstance(value, (list, tuple)) or not value:
            raise ConfigurationError(f"rule '{self.name}' needs a non-empty list of types")
        for item in value:
            if not isinstance(item, str) or not item.strip():
                raise ConfigurationError(f"rule '{self.name}' has an invalid type: {item!r}")
        return tuple(value)

    def validate(self, message: CommitMessage, when: Applicability, value: Any) -> Tuple[bool, str]:
        allowed = {t.lower() for t in value}
        listed = ", ".join(value)
        # an empty type is never a member
        found = bool(message.type) and message.type in allowed
        if when is Applicability.NEVER:
            if found:
                return False, f"type must not be one of [{listed}]"
            return True, ""
        if not found:
            return False, f"type must be one of [{listed}]"
        return True, ""


class TypeCaseRule(Rule):
    """Validates the casing of the type token."""

    name = "type-case"
    requires_value = True

    def check_value(self, value: Any) -> Tuple[str, ...]:
        cases = (value,) if isinstance(value, str) else value
        if not isinstance(cases, (list, tuple)) or not cases:
            raise ConfigurationError(f"rule '{self.name}' needs a case name or list of case names")
        for case in cases:
            if not isinstance(case, str) or case not in CASE_CHECKS:
                raise ConfigurationError(
                    f"rule '{self.name}' has an unknown case {case!r}, "
                    f"expected one of: {', '.join(CASE_CHECKS)}"
                )
        return tuple(cases)

    def validate(self, message: CommitMessage, when: Applicability, value: Any) -> Tuple[bool, str]:
        if not message.raw_type:
            return True, ""
        cases = (value,) if isinstance(value, str) else tuple(value)
        matches = any(CASE_CHECKS[case](message.raw_type) for case in cases)
        names = ", ".join(cases)
        if when is Applicability.NEVER:
            if matches:
                return False, f"type must not be {names}"
            return True, ""
        if not matches:
            return False, f"type must be {names}"
        return True, ""


class SubjectEmptyRule(Rule):
    """Validates whether the subject is empty."""

    name = "subject-empty"

    def validate(self, message: CommitMessage, when: Applicability, value: Any) -> Tuple[bool, str]:
        empty = not message.subject.strip()
        if when is Applicability.NEVER and empty:
            return False, "subject may not be empty"
        if when is Applicability.ALWAYS and not empty:
            return False, "subject must be empty"
        return True, ""


class MaxLengthRule(Rule):
    """Validates that a part of the header fits a maximum length.

    Applicability is ignored: a length limit only makes sense as ``always``.
    """

    requires_value = True
    part = ""

    def check_value(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigurationError(f"rule '{self.name}' needs a non-negative integer length")
        return value

    def text(self, message: CommitMessage) -> str:
        return getattr(message, self.part)

    def validate(self, message: CommitMessage, when: Applicability, value: Any) -> Tuple[bool, str]:
        length = len(self.text(message).strip())
        if length > value:
            return False, (
                f"{self.part} must not be longer than {value} characters, "
                f"current length is {length}"
            )
        return True, ""


class SubjectMaxLengthRule(MaxLengthRule):
    name = "subject-max-length"
    part = "subject"


class HeaderMaxLengthRule(MaxLengthRule):
    name = "header-max-length"
    part = "header"


RULES: Dict[str, Rule] = {
    rule.name: rule
    for rule in (
        TypeEnumRule(),
        TypeCaseRule(),
        SubjectEmptyRule(),
        SubjectMaxLengthRule(),
        HeaderMaxLengthRule(),
    )
}


def get_rule(name: str) -> Rule:
    """Look up a rule by name.

    Raises:
        ConfigurationError: if no rule has that name
    """
    try:
        return RULES[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown rule '{name}', expected one of: {', '.join(RULES)}"
        ) from None
