"""Tests for commit message rules and validation."""
import pytest
from pydantic import ValidationError

from gitcommitlint.commit_message.parser import parse_commit_message
from gitcommitlint.commit_message.rules import (
    HeaderMaxLengthRule,
    SubjectEmptyRule,
    SubjectMaxLengthRule,
    TypeCaseRule,
    TypeEnumRule,
)
from gitcommitlint.commit_message.validator import CommitMessageValidator, validate
from gitcommitlint.config import RuleConfig
from gitcommitlint.models import Applicability, Severity

ALWAYS = Applicability.ALWAYS
NEVER = Applicability.NEVER


def rule_names(result):
    return [v.rule for v in result.violations]


def test_type_enum_rule():
    rule = TypeEnumRule()
    allowed = ("feat", "fix")

    is_valid, msg = rule.validate(parse_commit_message("foo: add login"), ALWAYS, allowed)
    assert not is_valid
    assert msg == "type must be one of [feat, fix]"

    is_valid, msg = rule.validate(parse_commit_message("fix: handle timeout"), ALWAYS, allowed)
    assert is_valid

    # No colon means no type at all
    is_valid, msg = rule.validate(parse_commit_message("add login"), ALWAYS, allowed)
    assert not is_valid

    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), NEVER, allowed)
    assert not is_valid
    assert msg == "type must not be one of [feat, fix]"


def test_type_case_rule():
    rule = TypeCaseRule()

    is_valid, msg = rule.validate(parse_commit_message("Feat: add login"), ALWAYS, ("lower-case",))
    assert not is_valid
    assert msg == "type must be lower-case"

    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), ALWAYS, ("lower-case",))
    assert is_valid

    # Any of several cases may match
    is_valid, msg = rule.validate(
        parse_commit_message("FEAT: add login"), ALWAYS, ("lower-case", "upper-case")
    )
    assert is_valid

    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), NEVER, ("lower-case",))
    assert not is_valid
    assert msg == "type must not be lower-case"

    # An empty type has no case to check
    is_valid, msg = rule.validate(parse_commit_message("add login"), ALWAYS, ("lower-case",))
    assert is_valid


@pytest.mark.parametrize("case,good,bad", [
    ("upper-case", "FEAT", "Feat"),
    ("camel-case", "breakingChange", "BreakingChange"),
    ("kebab-case", "breaking-change", "breaking_change"),
    ("pascal-case", "BreakingChange", "breakingChange"),
    ("snake-case", "breaking_change", "breaking-change"),
    ("sentence-case", "Feat", "FEAT"),
])
def test_type_case_names(case, good, bad):
    rule = TypeCaseRule()
    assert rule.validate(parse_commit_message(f"{good}: x"), ALWAYS, (case,))[0]
    assert not rule.validate(parse_commit_message(f"{bad}: x"), ALWAYS, (case,))[0]


def test_subject_empty_rule():
    rule = SubjectEmptyRule()

    is_valid, msg = rule.validate(parse_commit_message("feat: "), NEVER, None)
    assert not is_valid
    assert msg == "subject may not be empty"

    is_valid, msg = rule.validate(parse_commit_message("feat:    \t"), NEVER, None)
    assert not is_valid

    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), NEVER, None)
    assert is_valid

    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), ALWAYS, None)
    assert not is_valid
    assert msg == "subject must be empty"


def test_subject_max_length_rule():
    rule = SubjectMaxLengthRule()

    is_valid, msg = rule.validate(parse_commit_message("feat: " + "a" * 11), ALWAYS, 10)
    assert not is_valid
    assert msg == "subject must not be longer than 10 characters, current length is 11"

    is_valid, msg = rule.validate(parse_commit_message("feat: " + "a" * 10), ALWAYS, 10)
    assert is_valid


def test_header_max_length_rule():
    rule = HeaderMaxLengthRule()

    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), ALWAYS, 14)
    assert not is_valid
    assert "header must not be longer than 14 characters" in msg

    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), ALWAYS, 15)
    assert is_valid

    # Applicability does not change a length limit
    is_valid, msg = rule.validate(parse_commit_message("feat: add login"), NEVER, 15)
    assert is_valid


def test_valid_message_passes_all_rules(default_rules):
    result = validate(default_rules, "feat: add login")
    assert result.valid
    assert result.violations == ()
    assert result.input == "feat: add login"


def test_upper_case_type_fails_type_case_only(default_rules):
    result = validate(default_rules, "Feat: add login")
    assert not result.valid
    assert rule_names(result) == ["type-case"]


def test_unknown_type_fails_type_enum(default_rules):
    result = validate(default_rules, "foo: add login")
    assert not result.valid
    assert rule_names(result) == ["type-enum"]


def test_empty_subject_fails_subject_empty(default_rules):
    result = validate(default_rules, "feat: ")
    assert not result.valid
    assert rule_names(result) == ["subject-empty"]


def test_header_without_colon_collects_all_violations(default_rules):
    result = validate(default_rules, "add login")
    assert rule_names(result) == ["type-enum", "subject-empty"]
    assert all(v.severity is Severity.ERROR for v in result.violations)


def test_header_length_boundary(default_rules):
    # "feat(" + scope + "): " + 100 character subject
    at_limit = "feat(" + "s" * 12 + "): " + "a" * 100
    over_limit = "feat(" + "s" * 13 + "): " + "a" * 100
    assert len(at_limit) == 120
    assert len(over_limit) == 121

    assert validate(default_rules, at_limit).valid
    result = validate(default_rules, over_limit)
    assert rule_names(result) == ["header-max-length"]


def test_subject_length_boundary(default_rules):
    assert validate(default_rules, "fix: " + "a" * 100).valid
    result = validate(default_rules, "fix: " + "a" * 101)
    assert rule_names(result) == ["subject-max-length"]


def test_lengths_count_code_points_not_bytes(default_rules):
    assert validate(default_rules, "docs: " + "é" * 100).valid
    assert validate(default_rules, "docs: " + "\U0001F680" * 100).valid
    result = validate(default_rules, "docs: " + "é" * 101)
    assert rule_names(result) == ["subject-max-length"]


def test_surrounding_whitespace_is_trimmed(default_rules):
    padded = "   fix: " + "a" * 100 + "   \n"
    assert validate(default_rules, padded).valid


def test_warnings_do_not_fail():
    rules = RuleConfig.from_mapping({
        "type-enum": [2, "always", ["feat", "fix"]],
        "subject-max-length": [1, "always", 10],
    })
    result = validate(rules, "feat: a subject over ten characters")
    assert result.valid
    assert rule_names(result) == ["subject-max-length"]
    assert result.warnings == result.violations
    assert result.errors == ()


def test_disabled_rules_are_skipped():
    rules = RuleConfig.from_mapping({
        "type-enum": [0],
        "type-case": [0, "always", "lower-case"],
    })
    result = validate(rules, "WHATEVER")
    assert result.valid
    assert result.violations == ()


def test_violations_follow_rule_order():
    rules = RuleConfig.from_mapping({
        "header-max-length": [2, "always", 5],
        "type-enum": [1, "always", ["feat"]],
    })
    result = validate(rules, "Foo: add login")
    assert rule_names(result) == ["header-max-length", "type-enum"]
    assert [v.severity for v in result.violations] == [Severity.ERROR, Severity.WARNING]


def test_validation_is_idempotent(default_rules):
    validator = CommitMessageValidator(default_rules)
    for message in ("feat: add login", "Foo: ", "no colon here"):
        assert validator.validate(message) == validator.validate(message)


def test_result_is_frozen(default_rules):
    result = validate(default_rules, "foo: add login")
    with pytest.raises(ValidationError):
        result.valid = True
