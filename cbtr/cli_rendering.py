"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and resolution traces.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from .errors import CbtrError, ConfigError, NoMatchingEntryError
from .models.datatypes import ResolvedCommand
from .resolver import EntryTrace

EXIT_FAILURE = 1
EXIT_NO_MATCHING_ENTRY = 3
EXIT_CONFIG_ERROR = 4


def exit_code_for(exc: Exception) -> int:
    """Return the process exit status reserved for an error class."""

    if isinstance(exc, NoMatchingEntryError):
        return EXIT_NO_MATCHING_ENTRY
    if isinstance(exc, ConfigError):
        return EXIT_CONFIG_ERROR
    return EXIT_FAILURE


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit."""

    if isinstance(exc, CbtrError):
        typer.secho(f"{command_name} failed: {exc.detail}", fg=typer.colors.RED, err=True)
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=exit_code_for(exc)) from exc


def echo_resolved_commands(resolved: ResolvedCommand) -> None:
    """Print resolved commands one per line, in execution order."""

    for command in resolved.commands:
        typer.echo(command)


def echo_entry_traces(applet: str, traces: list[EntryTrace]) -> None:
    """Print one row per entry showing why it was or was not chosen."""

    if not traces:
        typer.echo("No entries configured.")
        return

    width = max(len(trace.name) for trace in traces)
    for position, trace in enumerate(traces, start=1):
        matched = "yes" if trace.matched else "no"
        defines = "yes" if trace.defines_applet else "no"
        marker = "  <- selected" if trace.selected else ""
        typer.echo(
            f"{position}. {trace.name.ljust(width)}  "
            f"matched={matched} {applet}={defines}{marker}"
        )


def echo_config_sources(local_path: Path | None, global_path: Path) -> None:
    """Print config file locations in precedence order."""

    local_label = str(local_path) if local_path is not None else "(none)"
    global_suffix = "" if global_path.is_file() else " (missing)"
    typer.echo(f"local: {local_label}")
    typer.echo(f"global: {global_path}{global_suffix}")
