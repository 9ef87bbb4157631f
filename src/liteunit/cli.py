"""Command-line interface for LiteUnit."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from liteunit import __version__
from liteunit.config import SuiteConfig, create_example_config, get_default_config


console = Console()


def print_banner() -> None:
    """Print the LiteUnit banner."""
    console.print(
        Panel.fit(
            "[bold blue]LiteUnit[/bold blue] - Lightweight unit-testing harness",
            subtitle=f"v{__version__}",
        )
    )


def load_config(config_path: Optional[str], verbose: bool = False) -> SuiteConfig:
    """Load the configuration file, or fall back to the defaults."""
    if config_path:
        return SuiteConfig.from_file(config_path)
    try:
        return SuiteConfig.find_and_load()
    except FileNotFoundError:
        if verbose:
            console.print("[dim]No configuration file found, using defaults[/dim]")
        return get_default_config()


@click.group()
@click.version_option(version=__version__, prog_name="liteunit")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: liteunit.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """LiteUnit - lightweight unit-testing harness.

    Discovers test methods on TestSuite subclasses, runs them, and reports
    assertions, warnings and exceptions.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="liteunit.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
@click.pass_context
def init(ctx: click.Context, output: str, force: bool) -> None:
    """Initialize a new LiteUnit configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.option("--filter", "-k", "name_filter", help="Only run tests whose name contains this text")
@click.option("--html", "html", is_flag=True, help="Write an HTML report instead of console output")
@click.option("--debug", "-d", is_flag=True, help="Show backtraces, operands and timing")
@click.pass_context
def run(
    ctx: click.Context,
    targets: tuple[str, ...],
    name_filter: Optional[str],
    html: bool,
    debug: bool,
) -> None:
    """Run the test suites in TARGETS (files or modules, optionally ::Class)."""
    from liteunit.core.errors import SuiteLoadError
    from liteunit.loader import load_suites
    from liteunit.report import ConsoleReport, HtmlReport

    config_path = ctx.obj.get("config_path")
    verbose = ctx.obj.get("verbose", False)

    try:
        config = load_config(config_path, verbose)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        sys.exit(1)

    if html:
        config.report.format = "html"
    if debug:
        config.report.debug = True
    if name_filter is not None:
        config.filter = name_filter

    suite_classes = []
    for target in targets:
        try:
            suite_classes.extend(load_suites(target))
        except SuiteLoadError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)

    base_dir = Path(config_path).parent if config_path else Path.cwd()
    paths = config.get_absolute_paths(base_dir)

    summary = []
    exit_code = 0
    for suite_class in suite_classes:
        suite = suite_class(config=config)
        if config.report.format == "html":
            report = HtmlReport(paths["report_output_dir"] / f"{suite_class.__name__}.html", debug=config.report.debug)
            if len(suite_classes) == 1:
                report.output_path = paths["report_path"]
        else:
            report = ConsoleReport(debug=config.report.debug, color=config.report.color, console=console)

        status = suite.run(report)
        results = suite.results
        if status != 0 or not results.success:
            exit_code = 1

        if isinstance(report, HtmlReport):
            console.print(f"[green]Report generated:[/green] {report.output_path}")
        if verbose:
            console.print(f"[dim]{suite.title}: {results.passed}/{results.run} passed[/dim]")

        summary.append((suite.title, results, suite.error_count()))

    if len(summary) > 1:
        _display_summary(summary)

    sys.exit(exit_code)


def _display_summary(summary: list) -> None:
    """Display a table with one row per suite."""
    table = Table(title="Suite Summary")
    table.add_column("Suite", style="cyan")
    table.add_column("Run", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Total", justify="right")
    table.add_column("Errors", justify="right", style="red")

    for title, results, errors in summary:
        table.add_row(title, str(results.run), str(results.passed), str(results.total), str(errors))

    console.print(table)


if __name__ == "__main__":
    main()
