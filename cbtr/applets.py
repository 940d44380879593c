"""Multicall dispatch from invoked program name to applet key."""

from __future__ import annotations

from pathlib import Path

from .parsing import config_token

APPLET_ALIASES: dict[str, str] = {
    "f": "format",
    "c": "check",
    "b": "build",
    "t": "test",
    "r": "run",
}


def applet_for_alias(name: str) -> str:
    """Map a short alias to its applet key; unknown tokens pass through unchanged."""

    token = config_token(name) or ""
    return APPLET_ALIASES.get(token, token)


def applet_for_program(argv0: str) -> str | None:
    """Return the applet key for an invoked program path, if it is an alias.

    Both the short alias (`b`) and the full applet name (`build`) are
    accepted. Any other program name, including `cbtr` itself, returns `None`.
    """

    program_name = Path(argv0).name
    if program_name.lower().endswith(".exe"):
        program_name = program_name[:-4]
    if program_name in APPLET_ALIASES:
        return APPLET_ALIASES[program_name]
    if program_name in APPLET_ALIASES.values():
        return program_name
    return None


def describe_aliases() -> str:
    """Render the known aliases as `[f/format, c/check, ...]`."""

    return "[" + ", ".join(f"{alias}/{key}" for alias, key in APPLET_ALIASES.items()) + "]"
