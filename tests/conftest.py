"""Shared pytest fixtures for the full cbtr test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import stat

from loguru import logger
import pytest


def write_executable(directory: Path, name: str, body: str = "exit 0") -> Path:
    """Write a POSIX shell script with the executable bit set."""

    directory.mkdir(parents=True, exist_ok=True)
    script = directory / name
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture(autouse=True)
def _reset_logging() -> None:
    """Drop loguru handlers so no test writes into a stream owned by another test."""

    logger.remove()


@pytest.fixture(autouse=True)
def _isolate_global_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point the user-global config at a missing file so real user config is never read."""

    monkeypatch.setenv("CBTR_CONFIG", str(tmp_path / "no-global-config.yaml"))
    monkeypatch.delenv("CBTR_LOG", raising=False)


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Provide a repository root containing a `.git` directory."""

    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def bin_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide an empty directory that is the only entry on `PATH`."""

    directory = tmp_path / "bin"
    directory.mkdir()
    monkeypatch.setenv("PATH", str(directory))
    return directory


@pytest.fixture
def install_bin(bin_dir: Path) -> Callable[..., Path]:
    """Provide a factory that installs fake executables on the test `PATH`."""

    def _install(name: str, body: str = "exit 0") -> Path:
        """Install one executable script named `name`."""

        return write_executable(bin_dir, name, body)

    return _install
