# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rendering helpers for the detect and tools commands."""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from rich import box
from rich.table import Table

from ..catalog import MarkerRule, ToolCatalog, Verb
from ..resolver import Builder


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in command)


def build_catalog_table(catalog: ToolCatalog) -> Table:
    """Return a table listing marker rules in priority order.

    Args:
        catalog: Catalog whose rules and templates are rendered.

    Returns:
        Table: Rich table instance ready for rendering.
    """

    table = Table(title="Build tools", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Marker", style="bold")
    table.add_column("Tool")
    for verb in Verb:
        table.add_column(verb.value.capitalize(), overflow="fold")
    for index, rule in enumerate(catalog.rules, start=1):
        template = catalog.template(rule.tool)
        table.add_row(
            str(index),
            rule.marker,
            rule.tool.value,
            *(format_command(template.argv(verb)) for verb in Verb),
        )
    return table


def build_detection_table(builder: Builder | None, candidates: Sequence[MarkerRule]) -> Table:
    """Return a table of the markers found in a directory, winner first."""

    table = Table(title=f"Detection in {builder.directory}" if builder else "Detection", box=box.SIMPLE)
    table.add_column("Marker", style="bold")
    table.add_column("Tool")
    table.add_column("Selected")
    for rule in candidates:
        selected = builder is not None and builder.marker == rule.marker
        table.add_row(rule.marker, rule.tool.value, "yes" if selected else "-")
    return table


__all__ = ["build_catalog_table", "build_detection_table", "format_command"]
