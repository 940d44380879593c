"""Entry resolution over an ordered rule list.

Responsibilities:
- Pick the first entry whose conditions hold and that defines the applet.
- Report a structured trace of every entry for diagnostics.

Key public functions:
- `resolve`: first-match-wins resolution.
- `explain`: per-entry trace computed with the same evaluator.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .conditions import evaluate
from .errors import NoMatchingEntryError
from .logger import RunLogger
from .models.datatypes import Entry, RepositoryContext, ResolvedCommand


@dataclass(frozen=True, slots=True)
class EntryTrace:
    """Resolution outcome for one entry.

    Attributes:
        name: Entry display name.
        matched: Whether all conditions held.
        defines_applet: Whether the entry has a non-empty command list for the applet.
        selected: Whether this entry supplied the resolved commands.
    """

    name: str
    matched: bool
    defines_applet: bool
    selected: bool = False


def resolve(
    entries: Iterable[Entry],
    applet: str,
    ctx: RepositoryContext,
    path: str | None = None,
    run_logger: RunLogger | None = None,
) -> ResolvedCommand:
    """Resolve `applet` to the command list of the first usable entry.

    Entries are visited strictly in order. Entries whose conditions fail, and
    matching entries without commands for `applet`, are skipped.

    Raises:
        NoMatchingEntryError: If no entry both matched and defined the applet.
        InvalidDirectionError: If a visited entry has an unsupported direction.
    """

    for entry in entries:
        if not evaluate(entry, ctx, path=path, run_logger=run_logger):
            if run_logger is not None:
                run_logger.log_entry_skipped(entry.name, applet, "conditions")
            continue

        commands = entry.commands_for(applet)
        if not commands:
            if run_logger is not None:
                run_logger.log_entry_skipped(entry.name, applet, "no_tool")
            continue

        if run_logger is not None:
            run_logger.log_entry_selected(entry.name, applet, len(commands))
        return ResolvedCommand(applet=applet, commands=commands, entry_name=entry.name)

    raise NoMatchingEntryError(applet, ctx.cwd)


def explain(
    entries: Iterable[Entry],
    applet: str,
    ctx: RepositoryContext,
    path: str | None = None,
) -> list[EntryTrace]:
    """Return a trace of how every entry fares for `applet`.

    Unlike `resolve`, all entries are evaluated; only the first usable entry is
    marked as selected.
    """

    traces: list[EntryTrace] = []
    selected_seen = False
    for entry in entries:
        matched = evaluate(entry, ctx, path=path)
        defines_applet = bool(entry.commands_for(applet))
        selected = matched and defines_applet and not selected_seen
        selected_seen = selected_seen or selected
        traces.append(
            EntryTrace(
                name=entry.name,
                matched=matched,
                defines_applet=defines_applet,
                selected=selected,
            )
        )
    return traces
