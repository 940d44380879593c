"""Shared typed data models for cbtr.

This package contains dataclasses used across the resolution engine and its
collaborators to avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    DEFAULT_INDENT,
    Entry,
    EntryList,
    ExecutionResult,
    FileCondition,
    RepositoryContext,
    ResolvedCommand,
    SearchDirection,
    Settings,
)

__all__ = [
    "DEFAULT_INDENT",
    "Entry",
    "EntryList",
    "ExecutionResult",
    "FileCondition",
    "RepositoryContext",
    "ResolvedCommand",
    "SearchDirection",
    "Settings",
]
