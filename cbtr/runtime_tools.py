"""PATH executable lookup helpers.

Responsibilities:
- Answer whether a named executable is installed on a PATH-like search string.
- Resolve program names to absolute paths before spawning child processes.
"""

from __future__ import annotations

import os
import shutil


def find_executable(command_name: str, path: str | None = None) -> str | None:
    """Return the full path of an executable file on `path`, or `None`.

    `path` defaults to the `PATH` environment variable. Missing or unreadable
    directories in the search string are skipped.
    """

    normalized = command_name.strip()
    if not normalized:
        return None
    search_path = os.environ.get("PATH", os.defpath) if path is None else path
    try:
        return shutil.which(normalized, path=search_path)
    except OSError:
        return None


def resolve_executable(command_name: str, path: str | None = None) -> str:
    """Resolve an executable on PATH, falling back to the raw name.

    Returning the raw name lets the subprocess layer raise a native
    missing-binary error.
    """

    resolved = find_executable(command_name, path=path)
    if resolved is not None:
        return resolved
    return command_name
