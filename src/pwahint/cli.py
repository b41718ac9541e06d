"""CLI interface for pwahint using Typer framework."""

import asyncio
import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pwahint import __description__, __version__
from pwahint.config import LogLevel, OutputFormat, load_config
from pwahint.engine import Linter, load_document
from pwahint.fetcher import FetchError, HttpContentFetcher
from pwahint.rules import DEFAULT_RULES, LintResult

app = typer.Typer(
    name="pwahint",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS[LogLevel(level)],
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"pwahint version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """pwahint - Progressive Web App checks for HTML pages."""


async def _run_check(target: str, linter: Linter) -> LintResult:
    async with HttpContentFetcher(linter.config.fetch) as fetcher:
        linter.fetcher = fetcher
        document = await load_document(target, fetcher)
        return await linter.lint(document)


@app.command()
def check(
    target: Annotated[
        str,
        typer.Argument(help="URL or path of the HTML page to check")
    ],
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: table)")
    ] = OutputFormat.TABLE,
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .pwahint.json)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Run lint rules on a page."""
    try:
        pwahint_config = load_config(config)
        _setup_logging(LogLevel.DEBUG if verbose else pwahint_config.logging.level)

        linter = Linter(pwahint_config)
        linter.create_default_rules()

        result = asyncio.run(_run_check(target, linter))
    except (FileNotFoundError, FetchError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if format == OutputFormat.JSON:
        console.print_json(jsonlib.dumps(result.to_dict()))
    elif format == OutputFormat.MARKDOWN:
        _output_markdown(target, result)
    else:
        _output_table(result)

    raise typer.Exit(result.exit_code)


def _output_markdown(target: str, result: LintResult) -> None:
    console.print("# pwahint Report")
    console.print(f"**Target:** {target}")
    console.print(f"**Status:** {result.status.value}")
    console.print()

    if result.findings:
        console.print("## Findings")
        for finding in result.findings:
            location = f" ({finding.element})" if finding.element else ""
            console.print(f"- **{finding.severity.value.upper()}** {finding.rule}: {finding.message}{location}")
    else:
        console.print("No findings.")


def _output_table(result: LintResult) -> None:
    status_color = "green" if result.status.value == "pass" else "yellow" if result.status.value == "warn" else "red"
    console.print(f"[{status_color}]Lint Status: {result.status.value.upper()}[/{status_color}]")

    if not result.findings:
        console.print("\n[green]No issues found![/green]")
        return

    findings_table = Table()
    findings_table.add_column("Rule", style="cyan")
    findings_table.add_column("Severity", style="white")
    findings_table.add_column("Message", style="white")
    findings_table.add_column("Location", style="dim")

    for finding in result.findings:
        severity_color = "red" if finding.severity.value == "error" else "yellow"
        location = finding.element or finding.resource or ""
        findings_table.add_row(
            finding.rule,
            f"[{severity_color}]{finding.severity.value.upper()}[/{severity_color}]",
            finding.message,
            location,
        )

    console.print(findings_table)


@app.command()
def rules() -> None:
    """List the available rules."""
    table = Table(title="pwahint rules")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Category", style="white", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Recommended", justify="center")
    table.add_column("Fixable", justify="center")

    for name, rule in sorted(DEFAULT_RULES.items()):
        table.add_row(
            name,
            rule.meta.category,
            rule.meta.description,
            "yes" if rule.meta.recommended else "no",
            rule.meta.fixable or "-",
        )

    console.print(table)


if __name__ == "__main__":
    app()
