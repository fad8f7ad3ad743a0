"""Exceptions raised by git-commit-lint."""


class ConfigurationError(ValueError):
    """Raised when a rule table or config file is malformed.

    Configuration errors are fatal: they surface while the configuration is
    loaded, before any commit message is validated.
    """
