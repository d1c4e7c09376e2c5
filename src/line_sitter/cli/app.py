import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from line_sitter.config import load_config
from line_sitter.core.fix import EditConflictError, UnsafeBreakError
from line_sitter.core.languages import collect_source_files
from line_sitter.core.run import check_file, fix_file
from line_sitter.core.syntax import ParseError
from line_sitter.models import FileReport

EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

app = typer.Typer(
    name="line-sitter",
    help="Check and fix Clojure lines that exceed a length limit.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _select_mode(check: bool, fix: bool, stdout: bool) -> str:
    """Pick the run mode; ``--stdout`` beats ``--fix``, which beats ``--check``."""
    if stdout:
        return "stdout"
    if fix:
        return "fix"
    return "check"


def _render_violations(reports: list[FileReport]) -> int:
    table = Table(show_lines=False)
    for header in ("path", "line", "length"):
        table.add_column(header)

    count = 0
    for report in reports:
        for violation in report.violations:
            table.add_row(report.path, str(violation.line), str(violation.length))
            count += 1

    if count:
        console.print(table)
    console.print(f"({count} long lines in {len(reports)} files)")
    return count


@app.command()
def run(
    paths: Annotated[
        list[Path] | None,
        typer.Argument(help="Files or directories to process (default: current directory)."),
    ] = None,
    check: Annotated[bool, typer.Option("--check", help="Report lines that are too long (default mode).")] = False,
    fix: Annotated[bool, typer.Option("--fix", help="Break long forms and rewrite files in place.")] = False,
    stdout: Annotated[bool, typer.Option("--stdout", help="Print fixed content instead of writing files.")] = False,
    line_length: Annotated[
        int | None,
        typer.Option("--line-length", min=1, help="Maximum line length (default 80 or $LINE_SITTER_LINE_LENGTH)."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Check Clojure files for long lines, or fix them by breaking collection literals."""
    _configure_logging(verbose)
    mode = _select_mode(check, fix, stdout)

    try:
        config = load_config(line_length)
        files = collect_source_files(paths or [Path(".")])
    except (ValueError, FileNotFoundError) as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(EXIT_ERROR) from None

    reports: list[FileReport] = []
    failed = False
    for file_path in files:
        try:
            if mode == "check":
                reports.append(check_file(file_path, config))
                continue
            report, fixed = fix_file(file_path, config, write=mode == "fix")
        except (ParseError, UnsafeBreakError, EditConflictError, UnicodeDecodeError, FileNotFoundError) as exc:
            err_console.print(f"[red]{escape(str(file_path))}:[/red] {escape(str(exc))}")
            failed = True
            continue

        if mode == "stdout":
            typer.echo(fixed, nl=False)
        else:
            reports.append(report)

    if mode == "fix":
        changed = sum(1 for report in reports if report.changed)
        console.print(f"[green]Fixed[/green] {changed} of {len(reports)} files")

    remaining = _render_violations(reports) if mode != "stdout" else 0

    if failed:
        raise typer.Exit(EXIT_ERROR)
    if remaining:
        raise typer.Exit(EXIT_VIOLATIONS)


def main() -> None:
    app()
