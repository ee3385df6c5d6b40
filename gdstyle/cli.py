"""
gdstyle CLI - GDScript linter and declaration reorderer

Usage:
    gdstyle lint <paths>...        # Report style diagnostics
    gdstyle reorder <paths>...     # Rewrite declarations in style-guide order
    gdstyle rules                  # List the available rules
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from checkers.registry import RuleRegistry, create_default_registry
from gdstyle import __version__
from gdstyle.config import LinterConfig, Settings, load_project_config, parse_rule_list
from gdstyle.errors import ConfigError
from gdstyle.models.diagnostic import Severity
from gdstyle.models.lint import LintReport
from gdstyle.services.batch import StyleService
from gdstyle.utils.logging import setup_logging

app = typer.Typer(
    name="gdstyle",
    help="gdstyle - GDScript style linter and declaration reorderer",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()
error_console = Console(stderr=True)

EXIT_FINDINGS = 1
EXIT_CONFIG_ERROR = 2


def _configure(
    settings: Settings,
    config_file: Optional[Path],
    disable: Optional[str],
    max_line_length: Optional[int],
    registry: RuleRegistry
) -> LinterConfig:
    """Merge environment, project file and command line options."""
    config = load_project_config(config_file, settings)

    disabled = config.disabled_rules | parse_rule_list(disable)
    unknown = registry.validate_rule_names(disabled)
    if unknown:
        raise ConfigError(f"Unknown rule names: {', '.join(unknown)}")

    return LinterConfig(
        disabled_rules=disabled,
        max_line_length=max_line_length if max_line_length is not None else config.max_line_length,
    )


def _print_report(report: LintReport, pretty: bool) -> None:
    if not pretty:
        for result in report.results:
            for line in result.format_lines():
                typer.echo(line)
        return

    for result in report.results:
        if result.is_clean:
            continue
        console.print(f"[bold]{escape(result.file_path)}[/bold]")
        for diagnostic in result.diagnostics:
            style = "red" if diagnostic.severity == Severity.ERROR else "yellow"
            console.print(
                f"  {diagnostic.line}:{diagnostic.column}  "
                f"[{style}]{diagnostic.severity.value}[/{style}]  "
                f"{escape(diagnostic.message)}  [dim]{diagnostic.rule}[/dim]"
            )
        console.print()

    errors = sum(r.error_count for r in report.results)
    warnings = sum(r.warning_count for r in report.results)
    console.print(
        f"[bold]{len(report.results)}[/bold] files checked, "
        f"[red]{errors}[/red] errors, [yellow]{warnings}[/yellow] warnings"
    )


def _print_file_errors(errors) -> None:
    for error in errors:
        error_console.print(
            f"[red]Error:[/red] {escape(error.file_path)}: {error.error_type}: {escape(error.message)}"
        )


@app.command()
def lint(
    paths: List[Path] = typer.Argument(..., help="Files or directories to lint"),
    disable: Optional[str] = typer.Option(None, "--disable", help="Comma separated rules to disable"),
    max_line_length: Optional[int] = typer.Option(None, "--max-line-length", min=1, help="Maximum line width"),
    pretty: bool = typer.Option(False, "--pretty", help="Group diagnostics by file"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to a gdstyle.yaml file"),
    reorder: Optional[bool] = typer.Option(
        None,
        "--reorder/--no-reorder",
        help="Reorder declarations in place before linting (default from GDSTYLE_REORDER_CODE)",
    ),
):
    """Report style diagnostics for GDScript files"""
    settings = Settings()
    setup_logging(settings.log_level, settings.log_format == "json")
    registry = create_default_registry()

    try:
        config = _configure(settings, config_file, disable, max_line_length, registry)
    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    service = StyleService(config=config, registry=registry, max_workers=settings.max_workers)

    do_reorder = settings.reorder_code if reorder is None else reorder
    if do_reorder:
        reorder_report = asyncio.run(service.reorder_files(paths, write=True))
        _print_file_errors(reorder_report.errors)

    report = asyncio.run(service.lint_files(paths))
    _print_report(report, pretty)
    _print_file_errors(report.errors)

    if report.has_findings or report.errors:
        raise typer.Exit(code=EXIT_FINDINGS)


@app.command()
def reorder(
    paths: List[Path] = typer.Argument(..., help="Files or directories to reorder"),
    check: bool = typer.Option(False, "--check", help="Only report files that would change"),
    stdout: bool = typer.Option(False, "--stdout", help="Print the reordered source instead of writing it"),
):
    """Rewrite GDScript declarations in style-guide order"""
    settings = Settings()
    setup_logging(settings.log_level, settings.log_format == "json")

    service = StyleService(max_workers=settings.max_workers)
    write = not (check or stdout)
    report = asyncio.run(service.reorder_files(paths, write=write))

    for item in report.results:
        if item.result.skipped_reason:
            error_console.print(
                f"[yellow]Skipped[/yellow] {escape(item.file_path)}: {escape(item.result.skipped_reason)}"
            )
        if stdout:
            typer.echo(item.result.text, nl=False)
        elif check and item.result.changed:
            typer.echo(f"Would reorder {item.file_path}")
        elif item.written:
            typer.echo(f"Reordered {item.file_path}")
    _print_file_errors(report.errors)

    if report.errors or (check and report.changed_files):
        raise typer.Exit(code=EXIT_FINDINGS)


@app.command()
def rules():
    """List the available rules"""
    registry = create_default_registry()

    table = Table(title="gdstyle rules", box=box.ROUNDED)
    table.add_column("Rule", style="cyan bold")
    table.add_column("Severity")
    table.add_column("Description", style="white")

    for rule in registry.list_rules():
        for rule_id in rule.rule_ids:
            table.add_row(rule_id, rule.severity_for(rule_id).value, rule.description)

    console.print(table)


@app.command()
def version():
    """Show gdstyle version information"""
    typer.echo(f"gdstyle {__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
