"""Domain exceptions for configuration, resolution, and CLI diagnostics."""

from __future__ import annotations

from pathlib import Path


class CbtrError(RuntimeError):
    """Base class for user-facing cbtr failures."""

    def __init__(self, detail: str, hint: str | None = None) -> None:
        """Initialize an error with a diagnostic detail and optional hint."""

        super().__init__(detail)
        self.detail = detail
        self.hint = hint


class ConfigError(CbtrError):
    """Raised when a config file cannot be loaded or fails validation."""


class InvalidDirectionError(ConfigError):
    """Raised when a file condition declares an unsupported search direction."""

    def __init__(self, direction: object, entry_name: str | None = None) -> None:
        """Initialize with the offending direction value and optional entry name."""

        where = f" in entry `{entry_name}`" if entry_name else ""
        super().__init__(
            detail=f"Invalid search direction `{direction}`{where}.",
            hint="Use `forwards` or `backwards` for `file.search-direction`.",
        )
        self.direction = direction
        self.entry_name = entry_name


class NoMatchingEntryError(CbtrError):
    """Raised when no entry both matched and defined the requested applet."""

    def __init__(self, applet: str, cwd: Path) -> None:
        """Initialize with the requested applet key and working directory."""

        super().__init__(
            detail=f"No `{applet}` tool matched config rules in `{cwd}`.",
            hint=(
                "Add an entry defining `tools."
                f"{applet}` or install a binary required by an existing entry. "
                "Run `cbtr explain "
                f"{applet}` to see why each entry was skipped."
            ),
        )
        self.applet = applet
        self.cwd = cwd
