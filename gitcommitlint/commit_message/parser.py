"""Split raw commit messages into header, type, scope and subject."""
import re
from typing import List

from ..models import CommitMessage

COMMENT_CHAR = "#"

# type, optional (scope), optional breaking marker, colon, subject
HEADER_PATTERN = re.compile(
    r"^(?P<type>[^\s():!]*)"
    r"(?:\((?P<scope>[^()]*)\))?"
    r"(?P<breaking>!)?"
    r":(?P<subject>.*)$"
)

SCISSORS_PATTERN = re.compile(r"^#\s*-+\s*>8\s*-+\s*$")


def strip_comments(raw: str) -> List[str]:
    """Drop git comment lines and everything below a scissors line."""
    lines = []
    for line in raw.splitlines():
        if SCISSORS_PATTERN.match(line):
            break
        if line.startswith(COMMENT_CHAR):
            continue
        lines.append(line)
    return lines


def parse_commit_message(raw: str) -> CommitMessage:
    """Parse a raw commit message.

    The header is the first non-blank line once comments are removed, with
    surrounding whitespace trimmed. Lengths downstream are measured on these
    trimmed ``str`` values, so every code point counts as one.
    """
    lines = strip_comments(raw)
    while lines and not lines[0].strip():
        lines.pop(0)

    header = lines[0].strip() if lines else ""
    body = "\n".join(lines[1:]).strip() or None

    match = HEADER_PATTERN.match(header)
    if not match:
        return CommitMessage(
            raw=raw,
            header=header,
            raw_type="",
            type="",
            scope=None,
            breaking=False,
            subject="",
            body=body,
        )

    raw_type = match.group("type")
    return CommitMessage(
        raw=raw,
        header=header,
        raw_type=raw_type,
        type=raw_type.lower(),
        scope=match.group("scope"),
        breaking=match.group("breaking") is not None,
        subject=match.group("subject").strip(),
        body=body,
    )
