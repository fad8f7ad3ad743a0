"""Commit message parsing and rules."""

from .parser import parse_commit_message, strip_comments
from .rules import (
    RULES,
    Rule,
    TypeEnumRule,
    TypeCaseRule,
    SubjectEmptyRule,
    SubjectMaxLengthRule,
    HeaderMaxLengthRule,
    get_rule,
)

__all__ = [
    'parse_commit_message',
    'strip_comments',
    'RULES',
    'Rule',
    'TypeEnumRule',
    'TypeCaseRule',
    'SubjectEmptyRule',
    'SubjectMaxLengthRule',
    'HeaderMaxLengthRule',
    'get_rule',
]
