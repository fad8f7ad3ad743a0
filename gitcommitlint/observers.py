"""Observer pattern for lint results."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .models import Severity, ValidationResult


class LintObserver(ABC):
    """Abstract base class for lint result observers."""

    @abstractmethod
    def on_lint_completed(self, result: ValidationResult) -> None:
        """Called when a commit message has been linted."""
        pass


class ConsoleReportObserver(LintObserver):
    """Observer that reports lint results on the console.

    Problems are printed one per line, followed by a summary. Passing
    results are only reported when ``verbose`` is set.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbose: bool = False,
        help_url: Optional[str] = None,
    ):
        self.console = console or Console(stderr=True, soft_wrap=True)
        self.verbose = verbose
        self.help_url = help_url

    def on_lint_completed(self, result: ValidationResult) -> None:
        if not result.violations and not self.verbose:
            return

        self.console.print(f"⧗   input: {escape(result.input)}", highlight=False)
        if result.ignored:
            self.console.print("[dim]ⓘ   ignored[/dim]")
            return

        for violation in result.violations:
            if violation.severity is Severity.ERROR:
                sign = "[red]✖[/red]"
            else:
                sign = "[yellow]⚠[/yellow]"
            self.console.print(
                f"{sign}   {escape(violation.message)} [dim]\\[{violation.rule}][/dim]",
                highlight=False,
            )

        errors = len(result.errors)
        warnings = len(result.warnings)
        if errors:
            sign = "[red]✖[/red]"
        elif warnings:
            sign = "[yellow]⚠[/yellow]"
        else:
            sign = "[green]✔[/green]"
        self.console.print(f"\n{sign}   found {errors} problems, {warnings} warnings", highlight=False)
        if result.violations and self.help_url:
            self.console.print(f"ⓘ   Get help: {self.help_url}", highlight=False)


class FileLogObserver(LintObserver):
    """Observer that logs lint results to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a", encoding="utf-8") as f:
            f.write(f"{timestamp} - {message}\n")

    def on_lint_completed(self, result: ValidationResult) -> None:
        if result.ignored:
            status = "Ignored"
        elif result.valid:
            status = "Passed"
        else:
            status = "Failed"
        rules = ", ".join(v.rule for v in result.violations)
        suffix = f" [{rules}]" if rules else ""
        self._log(f"{status}: {result.input}{suffix}")
