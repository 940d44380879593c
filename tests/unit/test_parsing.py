"""Unit tests for shared config value parsing helpers."""

import pytest

from cbtr.parsing import config_token, parse_string_or_list


def test_config_token_treats_missing_and_blank_values_as_absent() -> None:
    """Missing and whitespace-only names should fall through to a default."""

    assert config_token(None) is None
    assert config_token("") is None
    assert config_token("   ") is None
    assert (config_token("  ") or "#3") == "#3"


def test_config_token_strips_names_and_stringifies_scalar_keys() -> None:
    """Names should be trimmed and YAML scalar keys rendered as text."""

    assert config_token("  cargo  ") == "cargo"
    assert config_token(42) == "42"


def test_parse_string_or_list_wraps_single_string() -> None:
    """A single command string should become a one-item tuple."""

    assert parse_string_or_list(" cargo build ", "tools.build") == ("cargo build",)


def test_parse_string_or_list_keeps_list_order() -> None:
    """List values should keep their configured order."""

    assert parse_string_or_list(["cargo check", "cargo clippy"], "tools.check") == (
        "cargo check",
        "cargo clippy",
    )
    assert parse_string_or_list([], "tools.check") == ()


@pytest.mark.parametrize("value", [42, {"a": "b"}, None, b"bytes"])
def test_parse_string_or_list_rejects_non_string_values(value: object) -> None:
    """Non-string scalars and mappings should be rejected with the field name."""

    with pytest.raises(ValueError, match="`bin` must be a string or a list of strings"):
        parse_string_or_list(value, "bin")


def test_parse_string_or_list_rejects_blank_and_non_string_items() -> None:
    """Lists should not carry blank or non-string items."""

    with pytest.raises(ValueError, match="must not contain blank values"):
        parse_string_or_list(["just", "  "], "bin")
    with pytest.raises(ValueError, match="must contain only strings"):
        parse_string_or_list(["just", 3], "bin")
