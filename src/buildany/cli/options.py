# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared option declarations and normalised inputs for dispatch commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..catalog import ToolIdentity
from ..constants import PWD_ENV

PATH_ARGUMENT = Annotated[
    Path | None,
    typer.Argument(
        help="Project directory. Defaults to $PWD, then the current directory.",
        show_default=False,
    ),
]
TOOL_OPTION = Annotated[
    ToolIdentity | None,
    typer.Option(
        "--tool",
        "-t",
        help="Force a build tool instead of detecting it from marker files.",
        case_sensitive=False,
    ),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Print the command without executing it."),
]
QUIET_OPTION = Annotated[
    bool,
    typer.Option("--quiet", "-q", help="Suppress dispatcher status lines."),
]
EMOJI_OPTION = Annotated[
    bool | None,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output.", show_default=False),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Emit debug logging to stderr."),
]


@dataclass(slots=True)
class DispatchOptions:
    """Normalised CLI inputs for a verb invocation."""

    directory: Path
    tool: ToolIdentity | None
    dry_run: bool
    quiet: bool
    emoji: bool | None
    verbose: bool


def default_directory() -> Path:
    """Return ``$PWD`` when it names a directory, else the process cwd."""

    pwd = os.environ.get(PWD_ENV)
    if pwd and Path(pwd).is_dir():
        return Path(pwd)
    return Path.cwd()


def build_dispatch_options(
    path: Path | None,
    tool: ToolIdentity | None,
    dry_run: bool,
    quiet: bool,
    emoji: bool | None,
    verbose: bool,
) -> DispatchOptions:
    """Construct ``DispatchOptions`` from Typer parameters.

    Args:
        path: Optional project directory supplied on the command line.
        tool: Optional tool override.
        dry_run: Flag indicating whether commands should be executed.
        quiet: Flag suppressing dispatcher status lines.
        emoji: Emoji preference; ``None`` defers to configuration.
        verbose: Flag enabling debug logging.

    Returns:
        DispatchOptions: Structured options for the dispatch workflow.
    """

    return DispatchOptions(
        directory=path if path is not None else default_directory(),
        tool=tool,
        dry_run=dry_run,
        quiet=quiet,
        emoji=emoji,
        verbose=verbose,
    )


__all__ = [
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "PATH_ARGUMENT",
    "QUIET_OPTION",
    "TOOL_OPTION",
    "VERBOSE_OPTION",
    "DispatchOptions",
    "build_dispatch_options",
    "default_directory",
]
