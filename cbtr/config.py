"""Configuration schema and loaders for cbtr.

Responsibilities:
- Parse YAML config payloads into immutable `Entry` records.
- Locate the repository-local and user-global config files.
- Concatenate both tiers into one ordered `EntryList`, local first.

Key types:
- `LoadedConfig`: entries and settings read from one file.
- `EffectiveConfig`: merged rule set and settings for one invocation.
- `ConfigLoader`: static construction helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import typer
import yaml

from .errors import ConfigError, InvalidDirectionError
from .logger import RunLogger
from .models.datatypes import (
    DEFAULT_INDENT,
    Entry,
    EntryList,
    FileCondition,
    RepositoryContext,
    SearchDirection,
    Settings,
)
from .parsing import config_token, parse_string_or_list


APP_NAME = "cbtr"
CONFIG_ENV = "CBTR_CONFIG"
GLOBAL_CONFIG_FILENAME = "config.yaml"
LOCAL_CONFIG_FILENAMES = (".cbtr.yaml", ".cbtr.yml")


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    """Entries and explicitly set settings from a single config file.

    Attributes:
        entries: Entries in file order.
        settings: Only the setting keys present in the file.
        path: Source file, when loaded from disk.
    """

    entries: EntryList = field(default_factory=EntryList)
    settings: Mapping[str, str] = field(default_factory=dict)
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class EffectiveConfig:
    """Merged rule set and settings used for one invocation."""

    entries: EntryList = field(default_factory=EntryList)
    settings: Settings = field(default_factory=Settings)
    sources: tuple[Path, ...] = ()


class ConfigLoader:
    """Factory methods for creating `LoadedConfig` from external sources."""

    _SUPPORTED_TOP_LEVEL_KEYS = frozenset({"settings", "entry"})
    _SUPPORTED_SETTINGS_KEYS = frozenset({"indent"})
    _SUPPORTED_ENTRY_KEYS = frozenset({"name", "bin", "file", "tools"})
    _SUPPORTED_FILE_KEYS = frozenset({"name", "search-direction"})

    @staticmethod
    def from_yaml(path: Path) -> LoadedConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        loaded = ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")
        return LoadedConfig(entries=loaded.entries, settings=loaded.settings, path=path)

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str = "config") -> LoadedConfig:
        """Create a validated config from an already-parsed mapping."""

        ConfigLoader._validate_keys(
            payload, ConfigLoader._SUPPORTED_TOP_LEVEL_KEYS, source_label
        )
        settings = ConfigLoader._parse_settings(payload.get("settings"), source_label)

        raw_entries = payload.get("entry")
        if raw_entries is None:
            raw_entries = []
        if not isinstance(raw_entries, list):
            raise ValueError(f"{source_label} key `entry` must be a list of entries.")

        entries = tuple(
            ConfigLoader._parse_entry(raw_entry, index, source_label)
            for index, raw_entry in enumerate(raw_entries, start=1)
        )
        return LoadedConfig(entries=EntryList(entries=entries), settings=settings)

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        payload = yaml.safe_load(raw_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _parse_settings(raw: object, source_label: str) -> dict[str, str]:
        """Parse the optional `settings` block, keeping only keys that are set."""

        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} key `settings` must be a mapping.")
        ConfigLoader._validate_keys(
            raw, ConfigLoader._SUPPORTED_SETTINGS_KEYS, f"{source_label} `settings`"
        )

        settings: dict[str, str] = {}
        if "indent" in raw:
            indent = raw["indent"]
            if not isinstance(indent, str):
                raise ValueError(f"{source_label} `settings.indent` must be a string.")
            settings["indent"] = indent
        return settings

    @staticmethod
    def _parse_entry(raw: object, index: int, source_label: str) -> Entry:
        """Parse one `entry` item into an immutable `Entry`."""

        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} entry #{index} must be a mapping.")

        name = config_token(raw.get("name")) or f"#{index}"
        label = f"{source_label} entry `{name}`"
        ConfigLoader._validate_keys(raw, ConfigLoader._SUPPORTED_ENTRY_KEYS, label)

        bins: tuple[str, ...] = ()
        if raw.get("bin") is not None:
            bins = parse_string_or_list(raw["bin"], f"{label} `bin`")

        file_condition = None
        if raw.get("file") is not None:
            file_condition = ConfigLoader._parse_file_condition(raw["file"], name, label)

        tools = ConfigLoader._parse_tools(raw.get("tools"), label)
        return Entry(name=name, bins=bins, file=file_condition, tools=tools)

    @staticmethod
    def _parse_file_condition(raw: object, entry_name: str, label: str) -> FileCondition:
        """Parse a `file` block, defaulting the direction to backwards."""

        if not isinstance(raw, Mapping):
            raise ValueError(f"{label} `file` must be a mapping with a `name` key.")
        ConfigLoader._validate_keys(raw, ConfigLoader._SUPPORTED_FILE_KEYS, f"{label} `file`")
        if raw.get("name") is None:
            raise ValueError(f"{label} `file` is missing required key(s): name")

        names = parse_string_or_list(raw["name"], f"{label} `file.name`")
        if not names:
            raise ValueError(f"{label} `file.name` must name at least one file.")
        direction = ConfigLoader._parse_direction(raw.get("search-direction"), entry_name)
        return FileCondition(names=names, direction=direction)

    @staticmethod
    def _parse_direction(raw: object, entry_name: str) -> SearchDirection:
        """Parse a search direction token, rejecting anything unknown."""

        if raw is None:
            return SearchDirection.BACKWARDS
        if not isinstance(raw, str):
            raise InvalidDirectionError(raw, entry_name)
        try:
            return SearchDirection(raw.strip().lower())
        except ValueError as exc:
            raise InvalidDirectionError(raw, entry_name) from exc

    @staticmethod
    def _parse_tools(raw: object, label: str) -> dict[str, tuple[str, ...]]:
        """Parse the open applet-to-commands mapping."""

        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{label} `tools` must be a mapping of applet to commands.")

        tools: dict[str, tuple[str, ...]] = {}
        for key, value in raw.items():
            applet = config_token(key)
            if applet is None:
                raise ValueError(f"{label} `tools` keys must be non-empty strings.")
            if value is None:
                tools[applet] = ()
                continue
            tools[applet] = parse_string_or_list(value, f"{label} `tools.{applet}`")
        return tools

    @staticmethod
    def _validate_keys(
        payload: Mapping[str, Any], supported: frozenset[str], source_label: str
    ) -> None:
        """Reject keys outside the supported set."""

        unknown_keys = sorted(str(key) for key in payload.keys() if key not in supported)
        if unknown_keys:
            raise ValueError(
                f"{source_label} contains unsupported key(s): {', '.join(unknown_keys)}"
            )


def global_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the user-global config path, honoring `CBTR_CONFIG`."""

    env_map: Mapping[str, str] = os.environ if env is None else env
    override = config_token(env_map.get(CONFIG_ENV))
    if override is not None:
        return Path(override).expanduser()
    return Path(typer.get_app_dir(APP_NAME)) / GLOBAL_CONFIG_FILENAME


def local_config_path(ctx: RepositoryContext) -> Path | None:
    """Return the repository-local config path if such a file exists.

    The file is looked up at the repository root, or at cwd when there is no
    repository.
    """

    base = ctx.repo_root if ctx.repo_root is not None else ctx.cwd
    for filename in LOCAL_CONFIG_FILENAMES:
        candidate = base / filename
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> LoadedConfig:
    """Load one config file, mapping failures to `ConfigError`."""

    try:
        return ConfigLoader.from_yaml(path)
    except ConfigError:
        raise
    except FileNotFoundError as exc:
        raise ConfigError(
            detail=f"Config file not found: `{path}`.",
            hint="Create the file or point `--config-file` at an existing path.",
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(
            detail=f"Failed to parse config file `{path}`: {exc}",
            hint="Verify YAML syntax.",
        ) from exc
    except ValueError as exc:
        raise ConfigError(
            detail=f"Invalid config file `{path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise ConfigError(
            detail=f"Failed to read config file `{path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def load_effective_config(
    ctx: RepositoryContext,
    config_file: Path | None = None,
    env: Mapping[str, str] | None = None,
    run_logger: RunLogger | None = None,
) -> EffectiveConfig:
    """Build the ordered rule set for one invocation.

    Repository-local entries come first, then user-global entries. An explicit
    `config_file` replaces the user-global path and must exist; a missing
    default global file simply contributes nothing.
    """

    loaded: list[tuple[str, LoadedConfig]] = []

    local_path = local_config_path(ctx)
    if local_path is not None:
        loaded.append(("local", load_config_file(local_path)))

    if config_file is not None:
        loaded.append(("global", load_config_file(config_file)))
    else:
        default_global = global_config_path(env)
        if default_global.is_file():
            loaded.append(("global", load_config_file(default_global)))

    if run_logger is not None:
        for tier, config in loaded:
            run_logger.log_config_source(tier, config.path, len(config.entries))

    merged_settings: dict[str, str] = {}
    for _, config in reversed(loaded):
        merged_settings.update(config.settings)

    return EffectiveConfig(
        entries=EntryList.concatenate(*(config.entries for _, config in loaded)),
        settings=Settings(indent=merged_settings.get("indent", DEFAULT_INDENT)),
        sources=tuple(config.path for _, config in loaded if config.path is not None),
    )
