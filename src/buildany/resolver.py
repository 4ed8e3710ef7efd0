# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve a project directory into the builder that owns it."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .catalog import DEFAULT_CATALOG, CommandTemplate, MarkerRule, ToolCatalog, ToolIdentity, Verb
from .errors import BuilderNotFound, NotADirectory

LOGGER = logging.getLogger(__name__)


class Builder(BaseModel):
    """A working directory paired with the command templates of one tool."""

    model_config = ConfigDict(frozen=True)

    directory: Path
    tool: ToolIdentity
    template: CommandTemplate
    marker: str | None = None

    @property
    def executable(self) -> str:
        return self.template.executable

    @property
    def overridden(self) -> bool:
        """Return ``True`` when the builder was forced rather than discovered."""

        return self.marker is None

    def argv(self, verb: Verb) -> tuple[str, ...]:
        """Return the argument vector, executable first, for ``verb``."""

        return self.template.argv(verb)


class BuilderResolver:
    """Pick a builder for a directory using an ordered :class:`ToolCatalog`."""

    def __init__(self, catalog: ToolCatalog = DEFAULT_CATALOG) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> ToolCatalog:
        return self._catalog

    def resolve(self, directory: Path, override: ToolIdentity | None = None) -> Builder:
        """Return the builder for ``directory``.

        Args:
            directory: Project directory to inspect. Only its direct entries
                are considered; subdirectories are never scanned.
            override: Tool forced by the caller. When supplied, marker
                scanning is skipped entirely.

        Returns:
            Builder: Resolved builder rooted at the absolute ``directory``.

        Raises:
            NotADirectory: If ``directory`` is missing, not a directory, or
                cannot be listed.
            BuilderNotFound: If no override is given and no marker matches.
        """

        root = self._require_directory(directory)
        if override is not None:
            tool = ToolIdentity(override)
            LOGGER.debug("tool override %s for %s", tool.value, root)
            return Builder(directory=root, tool=tool, template=self._catalog.template(tool))
        builder = self._scan(root)
        if builder is None:
            raise BuilderNotFound(root, self._catalog.markers())
        return builder

    def discover(self, directory: Path) -> Builder | None:
        """Return the discovered builder for ``directory`` or ``None``.

        Raises:
            NotADirectory: If ``directory`` is missing, not a directory, or
                cannot be listed.
        """

        return self._scan(self._require_directory(directory))

    def candidates(self, directory: Path) -> list[MarkerRule]:
        """Return every rule whose marker is present, in priority order."""

        root = self._require_directory(directory)
        names = _entry_names(root)
        return [rule for rule in self._catalog.rules if rule.marker in names]

    def _scan(self, root: Path) -> Builder | None:
        names = _entry_names(root)
        for rule in self._catalog.rules:
            if rule.marker in names:
                LOGGER.debug("marker %s selects %s in %s", rule.marker, rule.tool.value, root)
                return Builder(
                    directory=root,
                    tool=rule.tool,
                    template=self._catalog.template(rule.tool),
                    marker=rule.marker,
                )
        LOGGER.debug("no marker matched in %s", root)
        return None

    @staticmethod
    def _require_directory(directory: Path) -> Path:
        path = Path(directory)
        if not path.is_dir():
            raise NotADirectory(path)
        return path.resolve()


def _entry_names(root: Path) -> set[str]:
    try:
        return {entry.name for entry in root.iterdir()}
    except OSError as exc:
        raise NotADirectory(root, exc.strerror or str(exc)) from exc


__all__ = ["Builder", "BuilderResolver"]
