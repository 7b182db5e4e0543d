"""Command line interface for mediastamp."""

from __future__ import annotations

import difflib
from pathlib import Path

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from mediastamp.config import (
    ConfigError,
    ConfigManager,
    MediastampConfig,
    flatten_for_env,
    without_stamp,
)
from mediastamp.errors import MediastampError
from mediastamp.gateways import ExifToolGateway
from mediastamp.log_setup import configure_logging
from mediastamp.orchestration import RunOptions, RunReport, UseCase, UseCaseOrchestrator

console = Console()


def _summary_line(report: RunReport) -> str:
    counts = ", ".join(f"{name}={count}" for name, count in report.counts().items())
    return f"[green]{report.use_case.value} summary for {report.root}: {counts}.[/green]"


def _quarantine_table(report: RunReport) -> Table:
    table = Table(title="Quarantined for review")
    table.add_column("File")
    table.add_column("Reason")
    table.add_column("Detail", overflow="fold")
    for decision in report.quarantined:
        table.add_row(decision.path.name, decision.reason.value, decision.detail or "")
    return table


def _emit_report(report: RunReport, *, quiet: bool) -> None:
    """Print failures always; print quarantined files and the summary unless quiet."""
    failures = [*report.errors, *(f"could not move {path}" for path in report.quarantine_failures)]
    if failures:
        console.print("[red]Errors encountered:[/red]")
        for entry in failures:
            console.print(f"  - {entry}")
    if quiet:
        return
    if report.quarantined:
        console.print(_quarantine_table(report))
    console.print(_summary_line(report))


def _build_orchestrator(config: MediastampConfig) -> UseCaseOrchestrator:
    """Check ExifTool and wire the default orchestrator.

    Raises:
        ExternalToolError: If ExifTool is not installed or does not respond.
    """

    gateway = ExifToolGateway(config.tools)
    gateway.ensure_available()
    gateway.ensure_config_file()
    return UseCaseOrchestrator.from_config(config, gateway=gateway)


def _execute(
    ctx: click.Context, use_case: UseCase, path: str, options: RunOptions, quiet: bool
) -> None:
    """Load configuration, run ``use_case`` over ``path``, and report the outcome.

    Raises:
        click.ClickException: If configuration, tool checks, or the directory are invalid.
    """

    try:
        config = ConfigManager().load()
        explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
        quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
        configure_logging(config.logging, quiet=quiet_enabled)
        orchestrator = _build_orchestrator(config)
        report = orchestrator.run(use_case, Path(path).expanduser(), options)
    except MediastampError as exc:
        raise click.ClickException(str(exc)) from exc

    _emit_report(report, quiet=quiet_enabled)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="mediastamp")
def cli() -> None:
    """Reconcile media capture timestamps across metadata, file names, and attributes."""


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=str))
@click.option("-r", "--rename", is_flag=True, help="Prefix file names with the timestamp.")
@click.option(
    "-s",
    "--secondary",
    is_flag=True,
    help="Ask about files that only carry secondary time tags.",
)
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def exif(ctx: click.Context, path: str, rename: bool, secondary: bool, quiet: bool) -> None:
    """Write the earliest principal metadata timestamp back to files in PATH.

    Args:
        ctx: Click context for parameter source inspection.
        path: Directory whose files are treated.
        rename: Prefix names with ``yyyyMMdd_HHmmss__``.
        secondary: Prompt for files without principal tags.
        quiet: Suppress non-error output.
    """

    options = RunOptions(rename=rename, treat_secondary=secondary)
    _execute(ctx, UseCase.EXIF, path, options, quiet)


@cli.command("file")
@click.argument("path", type=click.Path(file_okay=False, path_type=str))
@click.option("-r", "--rename", is_flag=True, help="Prefix file names with the timestamp.")
@click.option("-e", "--exif", "write_exif", is_flag=True, help="Also write metadata tags.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def file_command(
    ctx: click.Context, path: str, rename: bool, write_exif: bool, quiet: bool
) -> None:
    """Derive timestamps from file names in PATH and write them back."""

    options = RunOptions(rename=rename, treat_exif=write_exif)
    _execute(ctx, UseCase.FILENAME, path, options, quiet)


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=str))
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def validate(ctx: click.Context, path: str, quiet: bool) -> None:
    """Quarantine files in PATH whose name and metadata disagree."""

    _execute(ctx, UseCase.VALIDATE, path, RunOptions(), quiet)


@cli.group()
def config() -> None:
    """Inspect or change the configuration file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Leave out MEDIASTAMP__ environment overrides.")
@click.option(
    "--env-vars",
    is_flag=True,
    help="List the settings as MEDIASTAMP__SECTION__KEY variables instead of YAML.",
)
def config_view(no_env: bool, env_vars: bool) -> None:
    """Print the effective configuration as YAML or as environment variables."""
    manager = ConfigManager()
    try:
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(f"[dim]{manager.config_path}[/dim]")
    if env_vars:
        table = Table(title="Environment overrides")
        table.add_column("Variable", no_wrap=True)
        table.add_column("Value", overflow="fold")
        for name, value in flatten_for_env(effective).items():
            table.add_row(name, value)
        console.print(table)
        return
    rendered = yaml.safe_dump(effective.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(rendered, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML literal to store under KEY.")
def config_set(key: str, value: str) -> None:
    """Store VALUE under the dotted KEY and show the resulting file diff."""
    manager = ConfigManager()
    try:
        before, after = manager.set_value(key, value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if without_stamp(before) == without_stamp(after):
        console.print("[yellow]Value already set; configuration unchanged.[/yellow]")
        return

    diff = difflib.unified_diff(
        before.splitlines(),
        after.splitlines(),
        fromfile=str(manager.config_path),
        tofile=str(manager.config_path),
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Stored {key} in {manager.config_path}.[/green]")


def main() -> None:
    """Console-script entry point."""
    cli()


__all__ = ["cli", "main"]
