"""Sequential, fail-fast execution of resolved command lists.

Responsibilities:
- Run resolved commands strictly in order without a shell.
- Stream child stdout and stderr to their own streams with the indent prefix.
- Stop at the first failing or interrupted command and surface its status.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
import queue
import shlex
import subprocess
import threading
from typing import TextIO

import typer

from .logger import RunLogger
from .models.datatypes import DEFAULT_INDENT, ExecutionResult, ResolvedCommand
from .runtime_tools import resolve_executable

EXIT_NOT_EXECUTABLE = 126
EXIT_COMMAND_NOT_FOUND = 127
EXIT_INTERRUPTED = 130


class CommandExecutor:
    """Run a `ResolvedCommand` with fail-fast semantics."""

    def __init__(
        self,
        indent: str = DEFAULT_INDENT,
        dry_run: bool = False,
        run_logger: RunLogger | None = None,
        path: str | None = None,
        echo: Callable[[str], None] = typer.echo,
        echo_err: Callable[[str], None] = partial(typer.echo, err=True),
    ) -> None:
        """Initialize output sinks, dry-run mode, and PATH override."""

        self._indent = indent
        self._dry_run = dry_run
        self._run_logger = run_logger or RunLogger()
        self._path = path
        self._echo = echo
        self._echo_err = echo_err

    def run(self, resolved: ResolvedCommand) -> ExecutionResult:
        """Run each command in order and return the invocation outcome."""

        completed: list[str] = []
        for command in resolved.commands:
            self._run_logger.log_command_start(command)
            if self._dry_run:
                self._echo(f"[dryrun] Would run '{command}'")
                completed.append(command)
                continue

            exit_code = self._run_one(command)
            if exit_code != 0:
                if exit_code == EXIT_INTERRUPTED:
                    self._run_logger.log_command_interrupted(command)
                else:
                    self._run_logger.log_command_failure(command, exit_code)
                return ExecutionResult(
                    exit_code=exit_code,
                    completed=tuple(completed),
                    failed_command=command,
                )
            completed.append(command)

        return ExecutionResult(exit_code=0, completed=tuple(completed))

    def _run_one(self, command: str) -> int:
        """Spawn one command, stream its output, and return its exit status."""

        try:
            argv = shlex.split(command)
        except ValueError as exc:
            self._echo_err(f"{self._indent}cannot parse command: {exc}")
            return EXIT_COMMAND_NOT_FOUND
        if not argv:
            return 0
        argv[0] = resolve_executable(argv[0], path=self._path)

        try:
            process = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except FileNotFoundError:
            self._echo_err(f"{self._indent}command not found: {argv[0]}")
            return EXIT_COMMAND_NOT_FOUND
        except OSError as exc:
            self._echo_err(f"{self._indent}cannot execute {argv[0]}: {exc.strerror or exc}")
            return EXIT_NOT_EXECUTABLE

        try:
            self._relay_output(process)
            return_code = process.wait()
        except KeyboardInterrupt:
            process.terminate()
            process.wait()
            return EXIT_INTERRUPTED
        finally:
            for stream in (process.stdout, process.stderr):
                if stream is not None:
                    stream.close()

        if return_code < 0:
            return 128 - return_code
        return return_code

    def _relay_output(self, process: subprocess.Popen) -> None:
        """Echo child stdout and stderr lines to the matching stream as they arrive."""

        lines: queue.Queue[tuple[bool, str | None]] = queue.Queue()
        readers = [
            threading.Thread(target=_read_lines, args=(stream, is_err, lines), daemon=True)
            for stream, is_err in ((process.stdout, False), (process.stderr, True))
            if stream is not None
        ]
        for reader in readers:
            reader.start()

        open_streams = len(readers)
        while open_streams:
            is_err, line = lines.get()
            if line is None:
                open_streams -= 1
                continue
            text = self._indent + line.rstrip("\n")
            if is_err:
                self._echo_err(text)
            else:
                self._echo(text)


def _read_lines(
    stream: TextIO, is_err: bool, lines: queue.Queue[tuple[bool, str | None]]
) -> None:
    """Forward every line of one child pipe, then an end-of-stream marker."""

    try:
        for line in stream:
            lines.put((is_err, line))
    except ValueError:
        # pipe closed after an interrupt
        pass
    finally:
        lines.put((is_err, None))
