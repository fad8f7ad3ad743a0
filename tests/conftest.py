import tempfile
from pathlib import Path

import pytest
from git import Repo

from gitcommitlint.config import Config, RuleConfig
from gitcommitlint.core import CommitLinter


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep GIT_COMMIT_LINT_* settings of the developer's shell out of tests."""
    for var in (
        "GIT_COMMIT_LINT_EXTENDS_DEFAULTS",
        "GIT_COMMIT_LINT_DEFAULT_IGNORES",
        "GIT_COMMIT_LINT_HELP_URL",
        "GIT_COMMIT_LINT_ALWAYS_LOG",
        "GIT_COMMIT_LINT_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def temp_git_repo():
    """Create a temporary git repository for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        repo = Repo.init(tmp_dir)

        test_file = Path(tmp_dir) / "test.txt"
        test_file.write_text("Initial content")

        repo.index.add(["test.txt"])
        repo.index.commit("chore: initial commit")

        yield tmp_dir


@pytest.fixture
def default_rules() -> RuleConfig:
    return Config().rule_config()


@pytest.fixture
def linter() -> CommitLinter:
    return CommitLinter(Config())


@pytest.fixture
def write_config(tmp_path):
    """Write a .gitcommitlint.toml into tmp_path and return its path."""
    def _write(content: str, name: str = ".gitcommitlint.toml") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path
    return _write
