"""Repository boundary discovery.

Walks upward from a starting directory looking for version-control metadata.
A missing repository is a normal outcome, never an error.
"""

from __future__ import annotations

from pathlib import Path

from .models.datatypes import RepositoryContext

VCS_METADATA_NAME = ".git"


def locate_repository_root(start_dir: Path) -> Path | None:
    """Return the nearest directory at or above `start_dir` holding `.git`.

    `.git` may be a directory or a file (worktrees and submodules use a file).
    Returns `None` once the filesystem root is passed without a match.
    """

    current = Path(start_dir).absolute()
    for candidate in (current, *current.parents):
        try:
            if (candidate / VCS_METADATA_NAME).exists():
                return candidate
        except OSError:
            continue
    return None


def build_repository_context(cwd: Path) -> RepositoryContext:
    """Compute the repository context once for an invocation."""

    absolute_cwd = Path(cwd).absolute()
    return RepositoryContext(cwd=absolute_cwd, repo_root=locate_repository_root(absolute_cwd))
