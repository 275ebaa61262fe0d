"""CLI entry point for dependency-auditor."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal, cast

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dependency_auditor import __version__
from dependency_auditor.analysis.evaluator import PolicyEvaluator
from dependency_auditor.config import dump_config, load_config
from dependency_auditor.constants import EXIT_ERROR, EXIT_SUCCESS, EXIT_VIOLATIONS
from dependency_auditor.exceptions import AuditorError, ConfigurationError
from dependency_auditor.models.graph import DependencyGraph
from dependency_auditor.models.report import AuditOptions, AuditReport, Verbosity
from dependency_auditor.output.report_json import ReportJsonFormatter
from dependency_auditor.output.report_markdown import ReportMarkdownFormatter
from dependency_auditor.output.terminal import TerminalFormatter
from dependency_auditor.resolvers.cargo import load_cargo_metadata
from dependency_auditor.resolvers.environment import build_environment_graph
from dependency_auditor.resolvers.graph_file import load_graph_file
from dependency_auditor.resolvers.pypi import resolve_missing_licenses

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _configure_logging(level: str) -> None:
    """Send package log records to stderr through Rich."""
    package_logger = logging.getLogger("dependency_auditor")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(console=_error_console, show_path=False, markup=False)
        )


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Logging level for diagnostic messages (default: WARNING).",
)
def main(log_level: str) -> None:
    """Dependency Auditor - Enforce license, advisory and ban policies.

    Reads a deny.toml style policy and audits a resolved dependency
    graph against it.

    \b
    Examples:
        dependency-auditor check --graph graph.json
        dependency-auditor check --cargo-metadata metadata.json
        dependency-auditor check --environment --format json
        dependency-auditor show-config --format yaml
    """
    _configure_logging(log_level.upper())


@main.command()
@click.option(
    "--graph",
    "graph_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Audit a dependency graph in the native JSON format.",
)
@click.option(
    "--cargo-metadata",
    "cargo_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Audit the output of `cargo metadata --format-version 1`.",
)
@click.option(
    "--environment",
    "use_environment",
    is_flag=True,
    default=False,
    help="Audit the installed Python environment (the default source).",
)
@click.option(
    "--online",
    is_flag=True,
    default=False,
    help="Look up missing licenses on PyPI (environment source only).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "markdown", "json"], case_sensitive=False),
    default="terminal",
    help="Output format for the report (default: terminal).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write report to file instead of stdout.",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_flag",
    is_flag=True,
    default=False,
    help="Also show suppressed advisories.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Show only the status line and errors.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to the policy file.",
)
@click.argument("packages", nargs=-1)
def check(
    graph_path: str | None,
    cargo_path: str | None,
    use_environment: bool,
    online: bool,
    output_format: str,
    output_path: str | None,
    verbose_flag: bool,
    quiet_flag: bool,
    config_path: str | None,
    packages: tuple[str, ...],
) -> None:
    """Audit a dependency graph against the policy.

    Exits 0 when the graph complies, 1 when violations are found and
    2 when the policy or graph cannot be loaded.

    PACKAGES optionally names the root packages when auditing the
    Python environment.

    \b
    Examples:
        dependency-auditor check --graph graph.json
        dependency-auditor check --cargo-metadata metadata.json -c deny.toml
        dependency-auditor check --environment requests click
        dependency-auditor check --environment --online
        dependency-auditor check --graph graph.json --format markdown -o audit.md
    """
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")

    sources = [s for s in (graph_path, cargo_path) if s is not None]
    if len(sources) + int(use_environment) > 1:
        raise click.UsageError(
            "--graph, --cargo-metadata and --environment are mutually exclusive."
        )
    if sources and packages:
        raise click.UsageError("PACKAGES can only be given for the environment source.")
    if sources and online:
        raise click.UsageError("--online can only be used with the environment source.")

    if quiet_flag:
        verbosity = Verbosity.QUIET
    elif verbose_flag:
        verbosity = Verbosity.VERBOSE
    else:
        verbosity = Verbosity.NORMAL

    format_value = cast(Literal["terminal", "markdown", "json"], output_format.lower())
    options = AuditOptions(format=format_value, verbosity=verbosity)

    try:
        config = load_config(config_path)
        graph = _load_graph(graph_path, cargo_path, list(packages), online, options)
        report = PolicyEvaluator(config).evaluate(graph)
        _display_report(report, options, output_path)

        if report.has_errors:
            sys.exit(EXIT_VIOLATIONS)
        sys.exit(EXIT_SUCCESS)

    except AuditorError as e:
        _display_error(e, options.format)
        sys.exit(EXIT_ERROR)


@main.command("show-config")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to the policy file.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["toml", "yaml"], case_sensitive=False),
    default="toml",
    help="Document format to print (default: toml).",
)
def show_config(config_path: str | None, output_format: str) -> None:
    """Validate the policy and print it as loaded.

    \b
    Examples:
        dependency-auditor show-config
        dependency-auditor show-config -c deny.toml --format yaml
    """
    fmt = cast(Literal["toml", "yaml"], output_format.lower())
    try:
        config = load_config(config_path)
    except AuditorError as e:
        _display_error(e, "terminal")
        sys.exit(EXIT_ERROR)

    click.echo(dump_config(config, fmt), nl=False)


def _load_graph(
    graph_path: str | None,
    cargo_path: str | None,
    packages: list[str],
    online: bool,
    options: AuditOptions,
) -> DependencyGraph:
    """Load the dependency graph from the selected source.

    Args:
        graph_path: Native JSON graph file, if selected.
        cargo_path: Cargo metadata file, if selected.
        packages: Root package names for the environment source.
        online: Whether to look up missing licenses on PyPI.
        options: Output options, used to decide on progress display.

    Returns:
        The loaded DependencyGraph.
    """
    if graph_path is not None:
        return load_graph_file(Path(graph_path))
    if cargo_path is not None:
        return load_cargo_metadata(Path(cargo_path))

    graph = build_environment_graph(packages or None)
    if online:
        show_progress = (
            options.format == "terminal" and options.verbosity != Verbosity.QUIET
        )
        graph = asyncio.run(
            resolve_missing_licenses(
                graph,
                console=_console if show_progress else None,
                show_progress=show_progress,
            )
        )
    return graph


def _write_output_to_file(content: str, path: str) -> None:
    """Write report content to file.

    Args:
        content: The report content to write.
        path: The file path to write to.

    Raises:
        ConfigurationError: If file cannot be written.
    """
    file_path = Path(path)

    try:
        if file_path.exists():
            _console.print(
                f"[yellow]Warning: Overwriting existing file: {escape(path)}[/yellow]"
            )

        file_path.write_text(content, encoding="utf-8")
        file_path.chmod(0o644)
    except OSError as e:
        raise ConfigurationError(f"Cannot write to file '{path}': {e}") from e

    _console.print(f"[green]Report written to {escape(path)}[/green]")


def _display_report(
    report: AuditReport, options: AuditOptions, output_path: str | None = None
) -> None:
    """Display the audit report in the specified format.

    Args:
        report: The audit report to display.
        options: Output options including format.
        output_path: Optional file path to write output to.
    """
    if options.format == "json":
        content = ReportJsonFormatter().format_report(report)
    elif options.format == "markdown":
        content = ReportMarkdownFormatter().format_report(report)
    else:  # terminal
        if output_path:
            # Terminal format to file uses markdown instead
            content = ReportMarkdownFormatter().format_report(report)
        else:
            TerminalFormatter(
                console=_console, verbosity=options.verbosity
            ).format_report(report)
            return

    if output_path:
        _write_output_to_file(content, output_path)
    else:
        click.echo(content)


def _display_error(error: AuditorError, format_type: str) -> None:
    """Display error message to user.

    All errors are written to stderr for consistent CI/CD behavior.

    Args:
        error: The exception that occurred.
        format_type: Output format type for styling.
    """
    error_type = type(error).__name__
    message = f"Error: {error_type}: {error}"
    if isinstance(error, ConfigurationError) and error.field is not None:
        message += f" (field: {error.field})"

    if format_type == "terminal":
        _error_console.print(f"[red bold]{escape(message)}[/red bold]")
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
