"""Command-line interface for cbtr.

Responsibilities:
- Dispatch multicall aliases (`f`, `c`, `b`, `t`, `r`) to applet keys.
- Expose `cbtr` subcommands that run an applet or show how it resolves.
- Map resolution and config failures to distinguished exit codes.

Key public functions:
- `app`: Typer application for the `cbtr` program name.
- `build_alias_app`: single-command Typer application for one applet alias.
- `main`: entry point shared by every installed program name.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Annotated

import typer

from .applets import applet_for_alias, applet_for_program, describe_aliases
from .cli_rendering import (
    echo_config_sources,
    echo_entry_traces,
    echo_resolved_commands,
    exit_with_command_error,
)
from .config import EffectiveConfig, global_config_path, load_effective_config, local_config_path
from .errors import CbtrError
from .executor import CommandExecutor
from .logger import RunLogger, configure_logging, resolve_log_level
from .models.datatypes import RepositoryContext
from .repository import build_repository_context
from .resolver import explain, resolve

app = typer.Typer(
    name="cbtr",
    no_args_is_help=True,
    help=f"Context-aware build/test dispatcher. Usually invoked as {describe_aliases()}.",
)

DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", "-n", help="Print what would run without running it."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log how each entry was evaluated."),
]
ConfigFileOption = Annotated[
    Path | None,
    typer.Option(
        "--config-file",
        help="User-global config file to use instead of the default location.",
    ),
]
AppletArgument = Annotated[
    str,
    typer.Argument(help="Applet key such as `build`, or a short alias such as `b`."),
]


def _prepare(
    verbose: bool, config_file: Path | None
) -> tuple[RepositoryContext, EffectiveConfig, RunLogger]:
    """Configure logging, compute the repository context, and load config."""

    configure_logging(resolve_log_level(verbose))
    run_logger = RunLogger()
    ctx = build_repository_context(Path.cwd())
    run_logger.log_repository(ctx.cwd, ctx.repo_root)
    config = load_effective_config(ctx, config_file=config_file, run_logger=run_logger)
    return ctx, config, run_logger


def run_applet(
    applet: str,
    command_name: str,
    dry_run: bool = False,
    verbose: bool = False,
    config_file: Path | None = None,
) -> int:
    """Resolve and execute one applet, returning the invocation exit status."""

    try:
        ctx, config, run_logger = _prepare(verbose, config_file)
        resolved = resolve(config.entries, applet, ctx, run_logger=run_logger)
    except CbtrError as exc:
        exit_with_command_error(command_name, exc)

    executor = CommandExecutor(
        indent=config.settings.indent,
        dry_run=dry_run,
        run_logger=run_logger,
    )
    return executor.run(resolved).exit_code


@app.command("run")
def run_command(
    applet: AppletArgument,
    dry_run: DryRunOption = False,
    verbose: VerboseOption = False,
    config_file: ConfigFileOption = None,
) -> None:
    """Resolve an applet for the current directory and run its commands."""

    applet_key = applet_for_alias(applet)
    exit_code = run_applet(applet_key, applet_key, dry_run, verbose, config_file)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)


@app.command("which")
def which_command(
    applet: AppletArgument,
    verbose: VerboseOption = False,
    config_file: ConfigFileOption = None,
) -> None:
    """Print the commands an applet resolves to, without running them."""

    applet_key = applet_for_alias(applet)
    try:
        ctx, config, run_logger = _prepare(verbose, config_file)
        resolved = resolve(config.entries, applet_key, ctx, run_logger=run_logger)
    except CbtrError as exc:
        exit_with_command_error("which", exc)

    echo_resolved_commands(resolved)


@app.command("explain")
def explain_command(
    applet: AppletArgument,
    verbose: VerboseOption = False,
    config_file: ConfigFileOption = None,
) -> None:
    """Show how every configured entry fares for an applet."""

    applet_key = applet_for_alias(applet)
    try:
        ctx, config, _ = _prepare(verbose, config_file)
        traces = explain(config.entries, applet_key, ctx)
    except CbtrError as exc:
        exit_with_command_error("explain", exc)

    typer.echo(f"Working directory: {ctx.cwd}")
    typer.echo(f"Repository root: {ctx.repo_root or '(none)'}")
    echo_entry_traces(applet_key, traces)


@app.command("config-path")
def config_path_command() -> None:
    """Print config file locations in precedence order."""

    ctx = build_repository_context(Path.cwd())
    echo_config_sources(local_config_path(ctx), global_config_path())


def build_alias_app(applet: str) -> typer.Typer:
    """Build a single-command application bound to one applet key."""

    alias_app = typer.Typer(add_completion=False)

    @alias_app.command(help=f"Run the `{applet}` tool chosen for the current directory.")
    def alias_command(
        dry_run: DryRunOption = False,
        verbose: VerboseOption = False,
        config_file: ConfigFileOption = None,
    ) -> None:
        exit_code = run_applet(applet, applet, dry_run, verbose, config_file)
        if exit_code != 0:
            raise typer.Exit(code=exit_code)

    return alias_app


def main() -> None:
    """Invoke the alias application or the `cbtr` application by program name."""

    program = sys.argv[0] if sys.argv else "cbtr"
    applet = applet_for_program(program)
    if applet is None:
        app(prog_name="cbtr")
        return
    build_alias_app(applet)(prog_name=Path(program).name)
