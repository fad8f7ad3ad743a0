"""Version information for git-commit-lint."""

import importlib.metadata

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from . import __version__
from .commit_message.rules import RULES
from .config import CONFIG_FILENAMES

console = Console()


def get_installed_version() -> str:
    """Get the installed version from pip metadata."""
    try:
        return importlib.metadata.version("git-commit-lint")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_version_summary() -> str:
    """One-line version string, noting an installed version that differs."""
    installed_version = get_installed_version()
    if installed_version in (__version__, "unknown"):
        return f"git-commit-lint {__version__}"
    return f"git-commit-lint {__version__} (installed: {installed_version})"


def display_version_info() -> None:
    """Show the version with the rules and config files this build knows."""
    text = Text()
    text.append(f"{get_version_summary()}\n", style="bold blue")
    text.append(f"Rules: {', '.join(RULES)}\n", style="green")
    text.append(f"Config files: {', '.join(CONFIG_FILENAMES)}", style="cyan")
    console.print(Panel(text, title="Version Information", border_style="blue"))
