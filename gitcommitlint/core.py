"""Core functionality for git-commit-lint."""
from pathlib import Path
from typing import List, Optional

from git import Repo

from .commit_message.parser import parse_commit_message
from .commit_message.validator import CommitMessageValidator
from .config import Config
from .models import CommitMessage, ValidationResult
from .observers import LintObserver

COMMIT_EDITMSG = "COMMIT_EDITMSG"


def default_edit_path(repo_path: Path) -> Path:
    """Locate the ``COMMIT_EDITMSG`` file of the repository at ``repo_path``.

    Raises:
        git.InvalidGitRepositoryError: if ``repo_path`` is not inside a repository
    """
    repo = Repo(repo_path, search_parent_directories=True)
    return Path(repo.git_dir) / COMMIT_EDITMSG


class CommitLinter:
    """Lints commit messages with a loaded configuration.

    The rule table and ignore patterns are built once, when the linter is
    created, and never change afterwards; ``lint`` can be called from any
    number of threads.
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize the linter.

        Raises:
            ConfigurationError: if the configuration is malformed
        """
        self.config = config or Config()
        self.rule_config = self.config.rule_config()
        self.ignore_patterns = self.config.ignore_patterns()
        self.validator = CommitMessageValidator(self.rule_config)
        self.observers: List[LintObserver] = []

    def add_observer(self, observer: LintObserver) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: LintObserver) -> None:
        self.observers.remove(observer)

    def is_ignored(self, message: CommitMessage) -> bool:
        text = "\n".join(line for line in (message.header, message.body) if line)
        return any(pattern.match(text) for pattern in self.ignore_patterns)

    def lint(self, raw: str) -> ValidationResult:
        """Lint a raw commit message and notify observers of the result."""
        message = parse_commit_message(raw)
        if message.header and self.is_ignored(message):
            result = ValidationResult(input=message.header, valid=True, ignored=True)
        else:
            result = self.validator.validate(message)

        for observer in self.observers:
            observer.on_lint_completed(result)
        return result
