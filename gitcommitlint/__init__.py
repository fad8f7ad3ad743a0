"""git-commit-lint: lint commit messages against a declarative rule table."""

__version__ = "0.1.0"
