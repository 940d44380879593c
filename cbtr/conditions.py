"""Entry condition evaluation.

Responsibilities:
- Check bin conditions against a PATH-like search string.
- Run directional file searches between the repository root and cwd.
- Combine present conditions with logical AND, failing closed on probe errors.
"""

from __future__ import annotations

from pathlib import Path

from .errors import InvalidDirectionError
from .logger import RunLogger
from .models.datatypes import Entry, FileCondition, RepositoryContext, SearchDirection
from .runtime_tools import find_executable


def candidate_directories(
    ctx: RepositoryContext, direction: SearchDirection
) -> list[Path]:
    """Return directories to scan for a file condition, in scan order.

    Backwards yields `[cwd, parent(cwd), ..., repo_root]` and forwards yields
    the reverse. Without a repository root, or when cwd lies outside it, only
    `[cwd]` is scanned.

    Raises:
        InvalidDirectionError: If `direction` is not a `SearchDirection`.
    """

    if not isinstance(direction, SearchDirection):
        raise InvalidDirectionError(direction)

    cwd = ctx.cwd
    root = ctx.repo_root
    if root is None or not _is_within(cwd, root):
        return [cwd]

    backwards = [cwd]
    current = cwd
    while current != root:
        current = current.parent
        backwards.append(current)

    if direction is SearchDirection.BACKWARDS:
        return backwards
    return list(reversed(backwards))


def find_file(
    name: str, ctx: RepositoryContext, direction: SearchDirection
) -> Path | None:
    """Return the first existing `name` along the candidate directories."""

    for directory in candidate_directories(ctx, direction):
        candidate = directory / name
        try:
            if candidate.is_file():
                return candidate
        except OSError:
            continue
    return None


def bin_condition_holds(
    bins: tuple[str, ...],
    path: str | None = None,
    entry_name: str = "",
    run_logger: RunLogger | None = None,
) -> bool:
    """Return whether every named executable is found on the search path."""

    for name in bins:
        if find_executable(name, path=path) is None:
            if run_logger is not None:
                run_logger.log_condition_failed(entry_name, "bin", name)
            return False
    return True


def file_condition_holds(
    condition: FileCondition,
    ctx: RepositoryContext,
    entry_name: str = "",
    run_logger: RunLogger | None = None,
) -> bool:
    """Return whether every named file is found in the configured direction."""

    for name in condition.names:
        found = find_file(name, ctx, condition.direction)
        if found is None:
            if run_logger is not None:
                run_logger.log_condition_failed(entry_name, "file", name)
            return False
        if run_logger is not None:
            run_logger.log_file_found(entry_name, found)
    return True


def evaluate(
    entry: Entry,
    ctx: RepositoryContext,
    path: str | None = None,
    run_logger: RunLogger | None = None,
) -> bool:
    """Decide whether all present conditions of `entry` hold.

    Absent conditions are vacuously true. The file condition's direction is
    validated before any probing so a malformed entry is refused rather than
    evaluated with a default.

    Raises:
        InvalidDirectionError: If the entry's file condition has an unsupported
            search direction.
    """

    if entry.file is not None and not isinstance(entry.file.direction, SearchDirection):
        raise InvalidDirectionError(entry.file.direction, entry.name)

    if entry.bins and not bin_condition_holds(entry.bins, path, entry.name, run_logger):
        return False
    if entry.file is not None and not file_condition_holds(
        entry.file, ctx, entry.name, run_logger
    ):
        return False
    return True


def _is_within(path: Path, root: Path) -> bool:
    """Return whether `path` equals `root` or lies below it."""

    return path == root or root in path.parents
