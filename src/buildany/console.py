# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Stderr console used for dispatcher status lines."""

from __future__ import annotations

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=4)
def status_console(*, color: bool, emoji: bool) -> Console:
    """Return the shared stderr console for the given output preferences.

    Status lines never touch stdout, which belongs to the child. Rich checks
    on its own whether stderr is a terminal, so ``color`` can only switch
    colour off, never force it on.

    Args:
        color: ``False`` strips all styling.
        emoji: ``True`` when Rich should render ``:name:`` emoji codes.

    Returns:
        Console: Console writing to whatever :data:`sys.stderr` is at print time.
    """

    return Console(
        stderr=True,
        color_system="auto" if color else None,
        no_color=not color,
        emoji=emoji,
        soft_wrap=True,
    )


__all__ = ["status_console"]
