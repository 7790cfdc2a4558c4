"""Click CLI for asyncqueue — run the demo scenarios and inspect config."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from asyncqueue.config.hierarchy import (
    load_config_hierarchy,
    load_runner_config,
    resolve_config,
)
from asyncqueue.demo import SCENARIOS, ScenarioReport, run_scenarios
from asyncqueue.errors.exceptions import AsyncQueueError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(package_name="asyncqueue")
def cli() -> None:
    """asyncqueue — bounded-concurrency async task runner."""


@cli.command()
@click.argument("scenarios", nargs=-1)
@click.option("--concurrency", type=int, default=None, help="Override each scenario's concurrency.")
@click.option("--retries", type=int, default=None, help="Override each scenario's retry attempts.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def demo(
    scenarios: tuple[str, ...],
    concurrency: int | None,
    retries: int | None,
    verbose: int,
) -> None:
    """Run demo scenarios (default: all of them)."""
    unknown = [name for name in scenarios if name not in SCENARIOS]
    if unknown:
        raise click.BadParameter(
            f"Unknown scenario(s): {', '.join(unknown)}. "
            f"Choose from: {', '.join(SCENARIOS)}",
            param_hint="SCENARIOS",
        )

    config = load_config_hierarchy()
    _setup_logging(verbose, str(config.get("log_level", "WARNING")))

    try:
        runner_config = load_runner_config(concurrency=concurrency, retry_attempts=retries)
        reports = asyncio.run(
            run_scenarios(
                list(scenarios) or list(SCENARIOS),
                concurrency=concurrency,
                retry_attempts=retries,
                backoff_base=runner_config.backoff_base,
                on_report=_print_report,
            )
        )
    except AsyncQueueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Ran {len(reports)} scenario(s).[/green]")


def _print_report(report: ScenarioReport) -> None:
    """Print one scenario's results in input order."""
    table = Table(
        title=f"{report.name}: {report.description}",
        show_header=True,
    )
    table.add_column("#", style="cyan")
    table.add_column("Status")
    table.add_column("Attempts")
    table.add_column("Value / Error")

    for i, result in enumerate(report.results):
        if result.ok:
            status = "[green]success[/green]"
            detail = str(result.value)
        elif result.cancelled:
            status = "[yellow]cancelled[/yellow]"
            detail = result.error.message if result.error else ""
        else:
            status = "[red]captured[/red]"
            detail = result.error.message if result.error else ""
        table.add_row(str(i), status, str(result.attempts), escape(detail))

    console.print(table)
    summary = report.summary
    console.print(
        f"  concurrency={report.concurrency} retries={report.retry_attempts} "
        f"peak in flight={report.max_in_flight} "
        f"succeeded={summary.succeeded} failed={summary.failed} "
        f"cancelled={summary.cancelled} ({report.elapsed_seconds:.2f}s)"
    )


@cli.command("config")
def show_config() -> None:
    """Show the resolved configuration and where each value came from."""
    config, sources = resolve_config()

    table = Table(title="Resolved Configuration", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for key in sorted(config):
        table.add_row(key, str(config[key]), sources[key])

    console.print(table)

    try:
        load_runner_config()
    except AsyncQueueError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli()
