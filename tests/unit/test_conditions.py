"""Unit tests for bin and directional file condition evaluation."""

from __future__ import annotations

from collections.abc import Callable
import os
from pathlib import Path

import pytest

from cbtr.conditions import candidate_directories, evaluate, find_file
from cbtr.errors import InvalidDirectionError
from cbtr.models.datatypes import Entry, FileCondition, RepositoryContext, SearchDirection


@pytest.fixture
def nested_ctx(repo_root: Path) -> RepositoryContext:
    """Provide a context whose cwd is two levels below the repository root."""

    cwd = repo_root / "a" / "b"
    cwd.mkdir(parents=True)
    return RepositoryContext(cwd=cwd, repo_root=repo_root)


def test_candidate_directories_backwards_ascends_to_repo_root(
    nested_ctx: RepositoryContext, repo_root: Path
) -> None:
    """Backwards order should be cwd, each parent, then the repository root."""

    assert candidate_directories(nested_ctx, SearchDirection.BACKWARDS) == [
        repo_root / "a" / "b",
        repo_root / "a",
        repo_root,
    ]


def test_candidate_directories_forwards_descends_from_repo_root(
    nested_ctx: RepositoryContext, repo_root: Path
) -> None:
    """Forwards order should start at the root and end at cwd."""

    assert candidate_directories(nested_ctx, SearchDirection.FORWARDS) == [
        repo_root,
        repo_root / "a",
        repo_root / "a" / "b",
    ]


@pytest.mark.parametrize("direction", list(SearchDirection))
def test_candidate_directories_without_repository_is_cwd_only(
    tmp_path: Path, direction: SearchDirection
) -> None:
    """Without a repository root only cwd is scanned, whatever the direction."""

    ctx = RepositoryContext(cwd=tmp_path, repo_root=None)

    assert candidate_directories(ctx, direction) == [tmp_path]


def test_candidate_directories_at_repo_root_is_single_directory(repo_root: Path) -> None:
    """When cwd is the repository root both directions scan it alone."""

    ctx = RepositoryContext(cwd=repo_root, repo_root=repo_root)

    assert candidate_directories(ctx, SearchDirection.BACKWARDS) == [repo_root]
    assert candidate_directories(ctx, SearchDirection.FORWARDS) == [repo_root]


def test_candidate_directories_rejects_unknown_direction(nested_ctx: RepositoryContext) -> None:
    """Unknown directions should be refused instead of silently defaulted."""

    with pytest.raises(InvalidDirectionError, match="sideways"):
        candidate_directories(nested_ctx, "sideways")  # type: ignore[arg-type]


def test_find_file_backwards_returns_closest_match(
    nested_ctx: RepositoryContext, repo_root: Path
) -> None:
    """Backwards search should stop at the match nearest to cwd."""

    (repo_root / "Cargo.toml").write_text("", encoding="utf-8")
    (repo_root / "a" / "Cargo.toml").write_text("", encoding="utf-8")

    assert find_file("Cargo.toml", nested_ctx, SearchDirection.BACKWARDS) == (
        repo_root / "a" / "Cargo.toml"
    )


def test_find_file_forwards_returns_match_nearest_root(
    nested_ctx: RepositoryContext, repo_root: Path
) -> None:
    """Forwards search should stop at the match nearest to the repository root."""

    (repo_root / "Cargo.toml").write_text("", encoding="utf-8")
    (repo_root / "a" / "Cargo.toml").write_text("", encoding="utf-8")

    assert find_file("Cargo.toml", nested_ctx, SearchDirection.FORWARDS) == (
        repo_root / "Cargo.toml"
    )


def test_find_file_ignores_directories_with_the_same_name(
    nested_ctx: RepositoryContext, repo_root: Path
) -> None:
    """A directory named like the required file should not satisfy the condition."""

    (repo_root / "justfile").mkdir()

    assert find_file("justfile", nested_ctx, SearchDirection.BACKWARDS) is None


def test_find_file_does_not_look_above_repo_root(
    nested_ctx: RepositoryContext, repo_root: Path
) -> None:
    """Files outside the repository boundary should never be found."""

    (repo_root.parent / "flake.nix").write_text("", encoding="utf-8")

    assert find_file("flake.nix", nested_ctx, SearchDirection.BACKWARDS) is None


def test_find_file_without_repository_ignores_parent_files(tmp_path: Path) -> None:
    """Outside a repository a parent directory's file should not match."""

    cwd = tmp_path / "child"
    cwd.mkdir()
    (tmp_path / "Makefile").write_text("", encoding="utf-8")
    ctx = RepositoryContext(cwd=cwd, repo_root=None)

    assert find_file("Makefile", ctx, SearchDirection.BACKWARDS) is None


def test_evaluate_entry_without_conditions_always_matches(tmp_path: Path) -> None:
    """An entry with neither condition should be unconditionally true."""

    entry = Entry(name="always", tools={"check": ("cargo check",)})

    assert evaluate(entry, RepositoryContext(cwd=tmp_path)) is True


def test_evaluate_bin_condition_requires_every_executable(
    tmp_path: Path, install_bin: Callable[..., Path]
) -> None:
    """Bin conditions should hold only when all executables are on PATH."""

    install_bin("just")
    ctx = RepositoryContext(cwd=tmp_path)

    assert evaluate(Entry(name="just", bins=("just",)), ctx) is True
    assert evaluate(Entry(name="both", bins=("just", "cargo")), ctx) is False


def test_evaluate_bin_condition_ignores_non_executable_files(
    tmp_path: Path, bin_dir: Path
) -> None:
    """A file on PATH without the executable bit should not count."""

    (bin_dir / "cargo").write_text("#!/bin/sh\n", encoding="utf-8")

    assert evaluate(Entry(name="cargo", bins=("cargo",)), RepositoryContext(cwd=tmp_path)) is False


def test_evaluate_bin_condition_skips_missing_path_directories(
    tmp_path: Path, install_bin: Callable[..., Path], bin_dir: Path
) -> None:
    """Missing PATH entries should be skipped rather than raising."""

    install_bin("nix")
    search_path = os.pathsep.join([str(tmp_path / "does-not-exist"), str(bin_dir)])

    entry = Entry(name="nix", bins=("nix",))

    assert evaluate(entry, RepositoryContext(cwd=tmp_path), path=search_path) is True


def test_evaluate_combines_bin_and_file_with_and(
    nested_ctx: RepositoryContext, repo_root: Path, install_bin: Callable[..., Path]
) -> None:
    """Both conditions must hold when both are present."""

    entry = Entry(
        name="cargo",
        bins=("cargo",),
        file=FileCondition(names=("Cargo.toml",)),
    )
    (repo_root / "Cargo.toml").write_text("", encoding="utf-8")

    assert evaluate(entry, nested_ctx) is False

    install_bin("cargo")

    assert evaluate(entry, nested_ctx) is True


def test_evaluate_file_condition_requires_every_name(
    nested_ctx: RepositoryContext, repo_root: Path
) -> None:
    """Multiple file names should all need to be found."""

    entry = Entry(
        name="poetry",
        file=FileCondition(names=("pyproject.toml", "poetry.lock")),
    )
    (repo_root / "pyproject.toml").write_text("", encoding="utf-8")

    assert evaluate(entry, nested_ctx) is False

    (repo_root / "a" / "poetry.lock").write_text("", encoding="utf-8")

    assert evaluate(entry, nested_ctx) is True


def test_evaluate_refuses_entry_with_invalid_direction(nested_ctx: RepositoryContext) -> None:
    """Entries carrying an unsupported direction should raise a config error."""

    entry = Entry(
        name="broken",
        file=FileCondition(names=("Cargo.toml",), direction="upwards"),  # type: ignore[arg-type]
    )

    with pytest.raises(InvalidDirectionError, match="entry `broken`"):
        evaluate(entry, nested_ctx)
