"""Structured run logging utilities.

Responsibilities:
- Configure a single `loguru` sink with colored level prefixes.
- Emit concise, deterministic event lines for resolution and execution.
"""

from __future__ import annotations

import os
from pathlib import PurePath
import sys
from typing import TextIO

from loguru import logger as _loguru_logger

LOG_LEVEL_ENV = "CBTR_LOG"
_DEFAULT_LEVEL = "INFO"
_KNOWN_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})
_LOG_FORMAT = "<level>[{level}]</level> {message}"


def resolve_log_level(verbose: bool = False, env: dict[str, str] | None = None) -> str:
    """Resolve the effective log level from `--verbose` and `CBTR_LOG`.

    A recognized `CBTR_LOG` level wins over `--verbose`; unknown values are ignored.
    """

    env_map = os.environ if env is None else env
    env_level = env_map.get(LOG_LEVEL_ENV, "").strip().upper()
    if env_level in _KNOWN_LEVELS:
        return env_level
    return "DEBUG" if verbose else _DEFAULT_LEVEL


def configure_logging(
    level: str = _DEFAULT_LEVEL,
    sink: TextIO | None = None,
    colorize: bool | None = None,
) -> None:
    """Replace existing loguru handlers with one formatted sink."""

    _loguru_logger.remove()
    _loguru_logger.add(
        sink or sys.stderr,
        format=_LOG_FORMAT,
        level=level,
        colorize=colorize,
    )


_EVENT_SAFE_CHARACTERS = frozenset("-_.:/#")


def _event_value(value: object) -> str:
    """Render one event field value as a single whitespace-free token.

    Missing or blank values become `none`; entry labels such as `#2` keep their `#`.
    """

    if value is None:
        return "none"
    text = value.as_posix() if isinstance(value, PurePath) else str(value).strip()
    if not text:
        return "none"
    return "".join(
        character if character.isalnum() or character in _EVENT_SAFE_CHARACTERS else "_"
        for character in text
    )


def _event_line(event: str, fields: dict[str, object]) -> str:
    """Render `event=<name>` followed by the fields sorted by key."""

    tokens = [f"event={event}"]
    tokens.extend(f"{key}={_event_value(fields[key])}" for key in sorted(fields))
    return " ".join(tokens)


class RunLogger:
    """Emit deterministic event logs for one invocation."""

    def _emit(self, level: str, event: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        _loguru_logger.log(level, _event_line(event, context))

    def log_repository(self, cwd: object, repo_root: object | None) -> None:
        """Emit the repository context computed for this invocation."""

        self._emit("DEBUG", "context", cwd=cwd, repo_root=repo_root)

    def log_config_source(self, tier: str, path: object, entry_count: int) -> None:
        """Emit one loaded config source."""

        self._emit("DEBUG", "config", tier=tier, path=path, entries=entry_count)

    def log_condition_failed(self, entry: str, condition: str, target: str) -> None:
        """Emit an unmet bin or file condition."""

        self._emit("DEBUG", "condition_false", entry=entry, condition=condition, target=target)

    def log_file_found(self, entry: str, path: object) -> None:
        """Emit the location where a file condition was satisfied."""

        self._emit("DEBUG", "file_found", entry=entry, path=path)

    def log_entry_skipped(self, entry: str, applet: str, reason: str) -> None:
        """Emit an entry skipped during resolution."""

        self._emit("DEBUG", "entry_skipped", entry=entry, applet=applet, reason=reason)

    def log_entry_selected(self, entry: str, applet: str, command_count: int) -> None:
        """Emit the entry chosen for an applet."""

        self._emit("DEBUG", "entry_selected", entry=entry, applet=applet, commands=command_count)

    def log_command_start(self, command: str) -> None:
        """Emit a command-start event; the command text is shown verbatim."""

        _loguru_logger.info(f"Running '{command}'")

    def log_command_failure(self, command: str, exit_code: int) -> None:
        """Emit a command failure with its exit status."""

        _loguru_logger.error(f"Subprocess '{command}' failed with exit code {exit_code}")

    def log_command_interrupted(self, command: str) -> None:
        """Emit an interrupted command."""

        _loguru_logger.warning(f"Subprocess '{command}' was interrupted")
