#!/usr/bin/env python3
"""
Tally CLI - Test Run Reporter

Usage:
    tally report <outcomes.yaml> [OPTIONS]
    tally diff <previous.json> <current.json>
    tally validate <outcomes.yaml>
    tally --version
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from . import __version__
from .outcomes import load_outcomes
from .reporting import Reporter, analyze_regressions, load_snapshot

app = typer.Typer(
    name="tally",
    help="🧮 Tally - compact test run reporting with regression tracking",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"🧮 Tally v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    🧮 Tally - compact test run reporting with regression tracking

    Summarize test outcomes, persist them, and flag tests that broke
    or got fixed since the previous run.
    """
    pass


def configure_logging(debug: bool) -> None:
    """Route tally's diagnostics to stderr when debugging."""
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


class ReplayClock:
    """Clock that advances by the duration of each replayed outcome."""

    def __init__(self):
        self.elapsed = 0.0

    def __call__(self) -> float:
        return self.elapsed

    def advance(self, seconds: float | None) -> None:
        if seconds:
            self.elapsed += seconds


@app.command()
def report(
    outcomes_file: Path = typer.Argument(
        ...,
        help="Path to the outcome file (YAML or JSON)",
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f",
        help="Console format: compact or verbose [env: TALLY_FORMAT]"
    ),
    results_file: Optional[Path] = typer.Option(
        None, "--results-file",
        help="Snapshot file for regression tracking [env: TALLY_RESULTS]"
    ),
    report_file: Optional[Path] = typer.Option(
        None, "--report-file",
        help="Summary document file [env: TALLY_REPORT]"
    ),
    no_regressions: bool = typer.Option(
        False, "--no-regressions",
        help="Don't compare against the previous run"
    ),
    no_write: bool = typer.Option(
        False, "--no-write",
        help="Don't write the snapshot or summary files"
    ),
    debug: bool = typer.Option(
        False, "--debug",
        help="Log diagnostics (including swallowed write errors) to stderr"
    ),
):
    """
    Replay recorded outcomes through the reporter.

    Prints the summary, updates the snapshot and writes the summary
    document. Exits 1 when any test failed or errored.
    """
    configure_logging(debug)

    outcomes, validation = load_outcomes(outcomes_file)
    if not validation.is_valid:
        console.print(f"\n[red]❌ Invalid outcome file:[/red]")
        console.print(str(validation), markup=False)
        raise typer.Exit(code=2)

    clock = ReplayClock()
    reporter = Reporter(
        console=console,
        clock=clock,
        format=output_format,
        results_file=results_file,
        report_file=report_file,
        track_regressions=not no_regressions,
        write_reports=not no_write,
        debug=debug or None,
    )

    reporter.start()
    for outcome in outcomes:
        clock.advance(outcome.duration)
        reporter.record(outcome)
    summary = reporter.report()

    raise typer.Exit(code=1 if summary.failed else 0)


@app.command()
def diff(
    previous_file: Path = typer.Argument(
        ...,
        help="Snapshot from the earlier run",
    ),
    current_file: Path = typer.Argument(
        ...,
        help="Snapshot from the later run",
    ),
):
    """
    Compare two saved snapshots.

    Lists tests that broke and tests that got fixed between the two
    runs. Exits 1 when anything broke.
    """
    previous = load_snapshot(previous_file)
    current = load_snapshot(current_file)
    regressions = analyze_regressions(previous, current)

    if regressions.is_empty:
        console.print(f"\n[green]✅ No regressions[/green] ({len(current)} tests compared)")
        raise typer.Exit(code=0)

    table = Table(title="Regressions")
    table.add_column("Change", style="magenta")
    table.add_column("Test", style="cyan")
    for location in regressions.new_failures:
        table.add_row("✅➡️❌ broke", Text(location))
    for location in regressions.fixes:
        table.add_row("🎉 fixed", Text(location))

    console.print()
    console.print(table)
    raise typer.Exit(code=1 if regressions.new_failures else 0)


@app.command()
def validate(
    outcomes_file: Path = typer.Argument(
        ...,
        help="Path to the outcome file (YAML or JSON)",
    ),
):
    """
    Validate an outcome file.

    Check the schema and report any errors without reporting on it.
    """
    console.print(f"\n📄 Validating: {outcomes_file}")

    outcomes, validation = load_outcomes(outcomes_file)

    if validation.is_valid:
        console.print(f"\n[green]✅ Valid outcome file:[/green] {len(outcomes)} outcomes")
        raise typer.Exit(code=0)
    else:
        console.print(f"\n[red]❌ Validation failed:[/red]")
        console.print(str(validation), markup=False)
        raise typer.Exit(code=1)


@app.command()
def info():
    """
    Show information about Tally.
    """
    console.print(f"""
🧮 [bold]Tally[/bold] v{__version__}

Compact test run reporting with regression tracking

[bold]Features:[/bold]
  • Compact (greppable) and verbose console summaries
  • Regression detection against the previous run
  • JSON snapshot and key-value summary document
  • pytest plugin (pytest --tally)

[bold]Quick Start:[/bold]
  tally report outcomes.yaml
  tally report outcomes.yaml --format verbose
  tally diff old_results.json tmp/test_results.json
""")


if __name__ == "__main__":
    app()
