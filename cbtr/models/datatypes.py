"""Core datatypes shared across cbtr modules.

Responsibilities:
- Represent immutable records exchanged between locator, evaluator, resolver,
  and executor.
- Keep the tool table an open mapping from applet key to command list.

Key types:
- `SearchDirection`, `FileCondition`, `Entry`, `EntryList`,
  `RepositoryContext`, `ResolvedCommand`, `Settings`, `ExecutionResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


DEFAULT_INDENT = "   "


class SearchDirection(str, Enum):
    """Order in which candidate directories are scanned for a file condition."""

    FORWARDS = "forwards"
    BACKWARDS = "backwards"


@dataclass(frozen=True, slots=True)
class FileCondition:
    """Required file names plus the direction used to search for them.

    Attributes:
        names: File names that must all be found.
        direction: Candidate directory order between repository root and cwd.
    """

    names: tuple[str, ...]
    direction: SearchDirection = SearchDirection.BACKWARDS


@dataclass(frozen=True, slots=True)
class Entry:
    """One configured rule: optional conditions plus an applet tool table.

    Attributes:
        name: Display identifier used only in diagnostics.
        bins: Executable names that must all be on `PATH`; empty means no bin condition.
        file: Optional file condition.
        tools: Mapping from applet key to ordered command strings.
    """

    name: str
    bins: tuple[str, ...] = ()
    file: FileCondition | None = None
    tools: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen_tools = MappingProxyType(
            {key: tuple(commands) for key, commands in self.tools.items()}
        )
        object.__setattr__(self, "tools", frozen_tools)

    def commands_for(self, applet: str) -> tuple[str, ...]:
        """Return commands for an applet, or an empty tuple when undefined."""

        return self.tools.get(applet, ())


@dataclass(frozen=True, slots=True)
class EntryList:
    """Ordered, immutable rule set for one invocation.

    Repository-local entries always precede user-global entries; the order is
    kept verbatim and never deduplicated.
    """

    entries: tuple[Entry, ...] = ()

    @classmethod
    def concatenate(cls, *sources: EntryList) -> EntryList:
        """Join entry lists in the given precedence order."""

        joined: list[Entry] = []
        for source in sources:
            joined.extend(source.entries)
        return cls(entries=tuple(joined))

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class RepositoryContext:
    """Working directory plus the enclosing repository root, when one exists."""

    cwd: Path
    repo_root: Path | None = None


@dataclass(frozen=True, slots=True)
class ResolvedCommand:
    """Ordered command list chosen for one invocation.

    Attributes:
        applet: Requested applet key.
        commands: Non-empty ordered command strings.
        entry_name: Name of the entry that supplied the commands.
    """

    applet: str
    commands: tuple[str, ...]
    entry_name: str


@dataclass(frozen=True, slots=True)
class Settings:
    """Presentation settings loaded from config files."""

    indent: str = DEFAULT_INDENT


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of running a resolved command list.

    Attributes:
        exit_code: Final invocation status (`0` or the first failing status).
        completed: Commands that ran to a zero exit status.
        failed_command: Command that stopped the run, if any.
    """

    exit_code: int
    completed: tuple[str, ...] = ()
    failed_command: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether every command exited successfully."""

        return self.exit_code == 0
