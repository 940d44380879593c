"""Shared parsing helpers for config value normalization."""

from __future__ import annotations

from collections.abc import Sequence


def config_token(value: object) -> str | None:
    """Return a trimmed config token such as an entry name or applet key.

    Missing and blank values yield `None` so callers can fall back to a default.
    """

    text = "" if value is None else str(value).strip()
    return text or None


def parse_string_or_list(value: object, field_name: str) -> tuple[str, ...]:
    """Parse a config value given as one string or a list of strings.

    A single string becomes a one-item tuple. Blank items are rejected so that
    command lists and name lists never carry empty tokens.

    Raises:
        ValueError: If the value is neither a string nor a list of strings.
    """

    if isinstance(value, str):
        items: Sequence[object] = [value]
    elif isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        items = value
    else:
        raise ValueError(f"`{field_name}` must be a string or a list of strings.")

    parsed: list[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ValueError(f"`{field_name}` must contain only strings.")
        normalized = config_token(item)
        if normalized is None:
            raise ValueError(f"`{field_name}` must not contain blank values.")
        parsed.append(normalized)
    return tuple(parsed)
