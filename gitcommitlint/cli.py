#!/usr/bin/env python3
from pathlib import Path
from typing import Optional

import click
import git
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import DEFAULT_CONFIG_FILENAME, Config
from .core import CommitLinter, default_edit_path
from .errors import ConfigurationError
from .models import COMMIT_TYPE_DESCRIPTIONS, CommitType
from .observers import ConsoleReportObserver, FileLogObserver
from .version import display_version_info, get_version_summary

console = Console()
err_console = Console(stderr=True, soft_wrap=True)

EXIT_ERRORS = 1
EXIT_STRICT_WARNINGS = 2
EXIT_CONFIG_ERROR = 9


def show_config(config: Config) -> None:
    """Render the effective rule table."""
    rule_config = config.rule_config()

    console.print(f"\n[bold]{get_version_summary()}[/bold]")
    if config.source:
        console.print(f"[dim]Config file: {config.source.as_posix()}[/dim]")
    else:
        console.print("[dim]Using default values (no config file found)[/dim]")

    table = Table(title="Rules")
    table.add_column("Rule")
    table.add_column("Level")
    table.add_column("When")
    table.add_column("Value")
    for rule in rule_config.rules:
        value = rule.value
        if isinstance(value, tuple):
            value = ", ".join(value)
        table.add_row(
            rule.name,
            f"{int(rule.severity)} ({rule.severity.name.lower()})",
            rule.applicability.value,
            "" if value is None else str(value),
        )
    console.print(table)

    type_enum = rule_config.get("type-enum")
    if type_enum is not None and type_enum.value:
        types = Table(title="Commit types")
        types.add_column("Type")
        types.add_column("Description")
        for name in type_enum.value:
            try:
                description = COMMIT_TYPE_DESCRIPTIONS[CommitType(name)]
            except ValueError:
                description = ""
            types.add_row(name, description)
        console.print(types)

    console.print(f"\nDefault ignores: {config.default_ignores}")
    if config.ignores:
        console.print(f"Ignore patterns: {escape(', '.join(config.ignores))}", highlight=False)


def read_message(repo_path: Path, message: Optional[str], edit: Optional[str]) -> str:
    """Read the commit message from the option, a file or stdin."""
    if message is not None:
        return message

    if edit is not None:
        if edit:
            edit_path = Path(edit)
        else:
            try:
                edit_path = default_edit_path(repo_path)
            except (git.InvalidGitRepositoryError, git.NoSuchPathError):
                raise click.UsageError(
                    f"--edit without a file needs a git repository, {repo_path} is not one"
                ) from None
        try:
            return edit_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise click.FileError(str(edit_path), hint=str(e)) from e

    stdin = click.get_text_stream("stdin")
    if stdin.isatty():
        raise click.UsageError("No commit message given: use --message, --edit or pipe one on stdin")
    return stdin.read()


@click.command()
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to the repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Config file to use instead of searching for {DEFAULT_CONFIG_FILENAME}",
)
@click.option("-m", "--message", help="Commit message to lint")
@click.option(
    "-e",
    "--edit",
    is_flag=False,
    flag_value="",
    default=None,
    help="Lint the message in FILE (defaults to the repository's COMMIT_EDITMSG)",
)
@click.option("--strict", is_flag=True, help="Exit with code 2 when only warnings are found")
@click.option("-q", "--quiet", is_flag=True, help="Do not print the report")
@click.option("-V", "--verbose", is_flag=True, help="Also report messages without problems")
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log lint results (overrides config setting)",
)
@click.option("--help-url", help="Help URL shown after a failed report (overrides config setting)")
@click.option("--print-config", is_flag=True, help="Display the effective rule table and exit")
@click.option("--init", is_flag=True, help=f"Write the default {DEFAULT_CONFIG_FILENAME} and exit")
@click.option("--version", is_flag=True, help="Display version information and exit")
@click.pass_context
def main(
    ctx: click.Context,
    path: Path,
    config_file: Optional[Path],
    message: Optional[str],
    edit: Optional[str],
    strict: bool,
    quiet: bool,
    verbose: bool,
    log_file: Optional[Path],
    help_url: Optional[str],
    print_config: bool,
    init: bool,
    version: bool,
):
    """
    Lint a commit message against the configured rules.

    The message is taken from --message, from --edit, or from stdin. Exit
    codes: 0 when the message passes, 1 when an error-level rule is
    violated, 2 for warnings with --strict, 9 for configuration errors.

    Configuration can be set in .gitcommitlint.toml in the repository root,
    the [tool.gitcommitlint] table of pyproject.toml, or .commitlintrc.json.
    Command line options override configuration file settings.
    """
    if version:
        display_version_info()
        return

    repo_path = path.absolute()

    try:
        config = Config.load(repo_path, config_file)
        if help_url is not None:
            config.help_url = help_url
        if log_file is not None:
            config.log_file = str(log_file)
        linter = CommitLinter(config)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]", highlight=False)
        ctx.exit(EXIT_CONFIG_ERROR)

    if init:
        config_path = repo_path / DEFAULT_CONFIG_FILENAME
        if config_path.exists():
            raise click.UsageError(f"{config_path} already exists")
        config.save(repo_path)
        console.print(f"[green]Created config file with default values:[/green] {config_path}", soft_wrap=True)
        return

    if print_config:
        show_config(config)
        return

    raw = read_message(repo_path, message, edit)

    if not quiet:
        linter.add_observer(ConsoleReportObserver(err_console, verbose=verbose, help_url=config.help_url))

    log_file_path = log_file or config.get_log_file()
    if log_file_path:
        linter.add_observer(FileLogObserver(str(log_file_path)))

    result = linter.lint(raw)

    if result.errors:
        ctx.exit(EXIT_ERRORS)
    if strict and result.warnings:
        ctx.exit(EXIT_STRICT_WARNINGS)


if __name__ == "__main__":
    main()
