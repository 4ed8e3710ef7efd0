# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Ordered catalog mapping marker files to build tools and their commands."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

from .constants import (
    CARGO_MARKER,
    COMPOSE_MARKER,
    DOCKER_MARKER,
    EARTHLY_MARKER,
    GO_MARKER,
    MAKE_MARKER,
    MIX_MARKER,
    TASK_MARKER,
)


class ToolIdentity(StrEnum):
    """Closed set of build tools the dispatcher knows how to drive."""

    MAKE = "make"
    TASK = "task"
    EARTHLY = "earthly"
    MIX = "mix"
    CARGO = "cargo"
    GO = "go"
    DOCKER = "docker"
    DOCKER_COMPOSE = "docker-compose"


class Verb(StrEnum):
    """Normalised actions forwarded to the underlying tool."""

    BUILD = "build"
    RUN = "run"
    TEST = "test"


class MarkerRule(BaseModel):
    """Pair a marker filename with the tool that owns directories containing it."""

    model_config = ConfigDict(frozen=True)

    marker: str
    tool: ToolIdentity


class CommandTemplate(BaseModel):
    """Executable name plus the positional arguments used for each verb."""

    model_config = ConfigDict(frozen=True)

    executable: str
    run: tuple[str, ...]
    test: tuple[str, ...]
    build: tuple[str, ...]

    @field_validator("run", "test", "build", mode="before")
    @classmethod
    def _coerce_args(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str) or not isinstance(value, Sequence):
            raise ValueError("CommandTemplate arguments must be a sequence of strings")
        args = tuple(str(entry) for entry in value)
        if not args:
            raise ValueError("CommandTemplate arguments must not be empty")
        return args

    @field_validator("executable")
    @classmethod
    def _require_executable(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("CommandTemplate.executable must not be blank")
        return value

    def args_for(self, verb: Verb) -> tuple[str, ...]:
        """Return the positional arguments registered for ``verb``.

        Args:
            verb: Normalised action requested by the caller.

        Returns:
            tuple[str, ...]: Arguments passed after the executable.
        """

        return getattr(self, Verb(verb).value)

    def argv(self, verb: Verb) -> tuple[str, ...]:
        """Return the full argument vector, executable first, for ``verb``."""

        return (self.executable, *self.args_for(verb))


def _uniform(executable: str) -> CommandTemplate:
    return CommandTemplate(executable=executable, run=("run",), test=("test",), build=("build",))


DEFAULT_RULES: Final[tuple[MarkerRule, ...]] = (
    MarkerRule(marker=MAKE_MARKER, tool=ToolIdentity.MAKE),
    MarkerRule(marker=TASK_MARKER, tool=ToolIdentity.TASK),
    MarkerRule(marker=EARTHLY_MARKER, tool=ToolIdentity.EARTHLY),
    MarkerRule(marker=MIX_MARKER, tool=ToolIdentity.MIX),
    MarkerRule(marker=CARGO_MARKER, tool=ToolIdentity.CARGO),
    MarkerRule(marker=GO_MARKER, tool=ToolIdentity.GO),
    MarkerRule(marker=DOCKER_MARKER, tool=ToolIdentity.DOCKER),
    MarkerRule(marker=COMPOSE_MARKER, tool=ToolIdentity.DOCKER_COMPOSE),
)

DEFAULT_TEMPLATES: Final[Mapping[ToolIdentity, CommandTemplate]] = MappingProxyType(
    {
        ToolIdentity.MAKE: _uniform("make"),
        ToolIdentity.TASK: _uniform("task"),
        ToolIdentity.EARTHLY: CommandTemplate(
            executable="earthly",
            run=("+run",),
            test=("+test",),
            build=("+build",),
        ),
        ToolIdentity.MIX: _uniform("mix"),
        ToolIdentity.CARGO: _uniform("cargo"),
        ToolIdentity.GO: CommandTemplate(
            executable="go",
            run=("run", "./..."),
            test=("test", "./..."),
            build=("build", "./..."),
        ),
        ToolIdentity.DOCKER: _uniform("docker"),
        ToolIdentity.DOCKER_COMPOSE: _uniform("docker-compose"),
    },
)


class ToolCatalog:
    """Immutable, ordered table of marker rules and per-tool command templates.

    Rule order is the single source of precedence: the first rule whose marker
    exists in a directory wins. Policy helpers such as :meth:`reordered` return
    new catalogs and never mutate the receiver.
    """

    def __init__(
        self,
        rules: Iterable[MarkerRule] = DEFAULT_RULES,
        templates: Mapping[ToolIdentity, CommandTemplate] = DEFAULT_TEMPLATES,
    ) -> None:
        self._rules: tuple[MarkerRule, ...] = tuple(rules)
        self._templates: Mapping[ToolIdentity, CommandTemplate] = MappingProxyType(dict(templates))
        seen: set[str] = set()
        for rule in self._rules:
            if rule.marker in seen:
                raise ValueError(f"Duplicate marker in catalog: {rule.marker}")
            seen.add(rule.marker)
            if rule.tool not in self._templates:
                raise ValueError(f"No command template registered for {rule.tool.value}")
        self._by_marker: Mapping[str, ToolIdentity] = MappingProxyType(
            {rule.marker: rule.tool for rule in self._rules},
        )

    @property
    def rules(self) -> tuple[MarkerRule, ...]:
        """Return the marker rules in priority order."""

        return self._rules

    def markers(self) -> tuple[str, ...]:
        """Return marker filenames in priority order."""

        return tuple(rule.marker for rule in self._rules)

    def lookup(self, marker: str) -> ToolIdentity | None:
        """Return the tool owning ``marker`` or ``None`` when unknown.

        Args:
            marker: Filename to look up; matching is exact and case-sensitive.

        Returns:
            ToolIdentity | None: Tool mapped to the marker, if any.
        """

        return self._by_marker.get(marker)

    def template(self, tool: ToolIdentity) -> CommandTemplate:
        """Return the command template registered for ``tool``.

        Raises:
            KeyError: If the catalog carries no template for ``tool``.
        """

        return self._templates[ToolIdentity(tool)]

    def reordered(self, priority: Sequence[str]) -> ToolCatalog:
        """Return a catalog with ``priority`` markers first, in the given order.

        Markers not named in ``priority`` keep their relative order behind the
        prioritised ones.

        Args:
            priority: Marker filenames to move to the front.

        Returns:
            ToolCatalog: New catalog with the adjusted precedence.

        Raises:
            ValueError: If ``priority`` names a marker absent from the catalog
                or repeats a marker.
        """

        if len(set(priority)) != len(priority):
            raise ValueError("priority lists a marker more than once")
        unknown = [marker for marker in priority if marker not in self._by_marker]
        if unknown:
            raise ValueError(f"Unknown marker(s) in priority: {', '.join(unknown)}")
        promoted = set(priority)
        front = [MarkerRule(marker=marker, tool=self._by_marker[marker]) for marker in priority]
        rest = [rule for rule in self._rules if rule.marker not in promoted]
        return ToolCatalog([*front, *rest], self._templates)

    def without(self, markers: Iterable[str]) -> ToolCatalog:
        """Return a catalog with the rules for ``markers`` removed."""

        dropped = set(markers)
        unknown = sorted(dropped - set(self._by_marker))
        if unknown:
            raise ValueError(f"Unknown marker(s): {', '.join(unknown)}")
        return ToolCatalog([rule for rule in self._rules if rule.marker not in dropped], self._templates)

    def with_templates(self, overrides: Mapping[ToolIdentity, CommandTemplate]) -> ToolCatalog:
        """Return a catalog whose templates are replaced by ``overrides``."""

        return ToolCatalog(self._rules, {**self._templates, **overrides})

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ToolCatalog(markers={list(self.markers())!r})"


DEFAULT_CATALOG: Final[ToolCatalog] = ToolCatalog()


__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_RULES",
    "DEFAULT_TEMPLATES",
    "CommandTemplate",
    "MarkerRule",
    "ToolCatalog",
    "ToolIdentity",
    "Verb",
]
