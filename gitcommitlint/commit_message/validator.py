"""Commit message validation."""
from typing import Union

from ..config import RuleConfig
from ..models import CommitMessage, Severity, ValidationResult, Violation
from .parser import parse_commit_message
from .rules import get_rule


class CommitMessageValidator:
    """Validates commit messages against a rule table.

    Every enabled rule runs and every violation is collected, in rule table
    order. A message is valid when no error-level rule is violated.
    """

    def __init__(self, rule_config: RuleConfig):
        self.rule_config = rule_config

    def validate(self, message: Union[str, CommitMessage]) -> ValidationResult:
        """Validate a raw or already parsed commit message."""
        if isinstance(message, str):
            message = parse_commit_message(message)

        violations = []
        for definition in self.rule_config.rules:
            if definition.severity is Severity.DISABLED:
                continue
            rule = get_rule(definition.name)
            valid, reason = rule.validate(message, definition.applicability, definition.value)
            if not valid:
                violations.append(Violation(
                    rule=definition.name,
                    severity=definition.severity,
                    message=reason,
                ))

        return ValidationResult(
            input=message.header,
            valid=not any(v.severity is Severity.ERROR for v in violations),
            violations=tuple(violations),
        )


def validate(rule_config: RuleConfig, message: str) -> ValidationResult:
    """Validate ``message`` against ``rule_config``."""
    return CommitMessageValidator(rule_config).validate(message)
