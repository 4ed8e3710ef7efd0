# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading utilities with layered precedence and traceability."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import ConfigError, DispatchConfig
from .constants import CONFIG_DIR_NAME, CONFIG_ENV, PROJECT_CONFIG_NAME, USER_CONFIG_NAME, XDG_CONFIG_ENV

LOGGER = logging.getLogger(__name__)


class ConfigSource(Protocol):
    """Source of a raw configuration fragment."""

    name: str

    def load(self) -> Mapping[str, Any]: ...

    def describe(self) -> str: ...


class TomlConfigSource:
    """Load configuration data from a TOML document; a missing file is empty."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self.path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Malformed TOML in {self.path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Unable to read {self.path}: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigError(f"Configuration at {self.path} must be a table")
        return data

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class ConfigLoadResult(BaseModel):
    """Container bundling a resolved config with the sources that shaped it."""

    model_config = ConfigDict(validate_assignment=True)

    config: DispatchConfig
    sources: list[str] = Field(default_factory=list)


def user_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the per-user configuration path.

    ``$BUILDANY_CONFIG`` wins when set; otherwise the file lives under
    ``$XDG_CONFIG_HOME`` (default ``~/.config``).
    """

    environ = os.environ if env is None else env
    if explicit := environ.get(CONFIG_ENV):
        return Path(explicit).expanduser()
    base = environ.get(XDG_CONFIG_ENV)
    root = Path(base).expanduser() if base else Path.home() / ".config"
    return root / CONFIG_DIR_NAME / USER_CONFIG_NAME


class ConfigLoader:
    """Merge configuration sources, later sources taking precedence."""

    def __init__(self, sources: Sequence[ConfigSource]) -> None:
        self._sources = list(sources)

    @classmethod
    def for_directory(cls, directory: Path, *, env: Mapping[str, str] | None = None) -> ConfigLoader:
        """Return a loader reading the user file and then ``directory``'s project file."""

        return cls(
            [
                TomlConfigSource(user_config_path(env), name="user"),
                TomlConfigSource(Path(directory) / PROJECT_CONFIG_NAME, name="project"),
            ],
        )

    def load(self) -> DispatchConfig:
        return self.load_with_trace().config

    def load_with_trace(self) -> ConfigLoadResult:
        """Load every source and validate the merged result.

        Returns:
            ConfigLoadResult: Validated configuration plus the descriptions of
            the sources that contributed data.

        Raises:
            ConfigError: If a source is unreadable or the merged data is invalid.
        """

        merged: dict[str, Any] = {}
        contributed: list[str] = []
        for source in self._sources:
            fragment = source.load()
            if not fragment:
                continue
            LOGGER.debug("config source=%s keys=%s", source.name, sorted(fragment))
            contributed.append(source.describe())
            merged = _deep_merge(merged, fragment)
        try:
            config = DispatchConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Configuration invalid: {exc}") from exc
        return ConfigLoadResult(config=config, sources=contributed)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


__all__ = [
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "TomlConfigSource",
    "user_config_path",
]
