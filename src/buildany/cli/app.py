# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the verb and inspection commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from .. import __version__
from ..catalog import ToolCatalog, Verb
from ..config import ConfigError, DispatchConfig
from ..config_loader import ConfigLoader
from ..errors import DispatchError, ExitCode
from ..logging import enable_verbose_logging, fail, info, warn
from ..resolver import BuilderResolver
from ..runner import ProcessRunner
from .options import (
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    PATH_ARGUMENT,
    QUIET_OPTION,
    TOOL_OPTION,
    VERBOSE_OPTION,
    DispatchOptions,
    build_dispatch_options,
    default_directory,
)
from .rendering import build_catalog_table, build_detection_table, format_command

app = typer.Typer(
    name="buildany",
    help="Run build, run and test through whichever build tool owns a project.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"buildany {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Dispatch normalised verbs to make, cargo, go and friends."""


def _load_config(directory: Path, use_emoji: bool) -> tuple[DispatchConfig, ToolCatalog]:
    """Load layered configuration for ``directory`` and build its catalog.

    Raises:
        typer.Exit: When configuration resolution fails.
    """

    try:
        config = ConfigLoader.for_directory(directory).load()
        return config, config.build_catalog()
    except ConfigError as exc:
        fail(f"Configuration invalid: {exc}", use_emoji=use_emoji)
        raise typer.Exit(code=ExitCode.CONFIG) from exc


def _dispatch(verb: Verb, options: DispatchOptions) -> None:
    """Resolve the builder for ``options.directory`` and run ``verb`` through it.

    Args:
        verb: Normalised action requested on the command line.
        options: Parsed CLI options controlling the dispatch.

    Raises:
        typer.Exit: Carrying the child's exit code, or a dispatcher failure code.
    """

    if options.verbose:
        enable_verbose_logging()
    config, catalog = _load_config(options.directory, options.emoji is not False)
    use_emoji = config.emoji if options.emoji is None else options.emoji
    use_color = None if config.color else False

    resolver = BuilderResolver(catalog)
    runner = ProcessRunner(dry_run=options.dry_run)
    try:
        builder = resolver.resolve(options.directory, options.tool)
        command = format_command(builder.argv(verb))
        if options.dry_run:
            info(f"DRY RUN: {command} (cwd={builder.directory})", use_emoji=use_emoji, use_color=use_color)
        elif not options.quiet:
            source = builder.marker or "--tool"
            info(f"{command} ({source})", use_emoji=use_emoji, use_color=use_color)
        outcome = runner.execute(builder, verb)
    except DispatchError as exc:
        fail(exc.message, use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=int(exc.exit_code)) from exc

    if outcome.succeeded:
        return
    if not options.quiet:
        if outcome.signal is not None:
            warn(f"{command} terminated by signal {outcome.signal}", use_emoji=use_emoji, use_color=use_color)
        else:
            warn(f"{command} exited with status {outcome.returncode}", use_emoji=use_emoji, use_color=use_color)
    raise typer.Exit(code=outcome.exit_code)


@app.command("build")
def build_command(
    path: PATH_ARGUMENT = None,
    tool: TOOL_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    quiet: QUIET_OPTION = False,
    emoji: EMOJI_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Build the project with its detected tool."""

    _dispatch(Verb.BUILD, build_dispatch_options(path, tool, dry_run, quiet, emoji, verbose))


@app.command("run")
def run_command(
    path: PATH_ARGUMENT = None,
    tool: TOOL_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    quiet: QUIET_OPTION = False,
    emoji: EMOJI_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Run the project with its detected tool."""

    _dispatch(Verb.RUN, build_dispatch_options(path, tool, dry_run, quiet, emoji, verbose))


@app.command("test")
def test_command(
    path: PATH_ARGUMENT = None,
    tool: TOOL_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    quiet: QUIET_OPTION = False,
    emoji: EMOJI_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Test the project with its detected tool."""

    _dispatch(Verb.TEST, build_dispatch_options(path, tool, dry_run, quiet, emoji, verbose))


@app.command("detect")
def detect_command(path: PATH_ARGUMENT = None, emoji: EMOJI_OPTION = None) -> None:
    """Show which marker files are present and which tool would be used."""

    directory = path if path is not None else default_directory()
    config, catalog = _load_config(directory, emoji is not False)
    use_emoji = config.emoji if emoji is None else emoji
    resolver = BuilderResolver(catalog)
    try:
        builder = resolver.discover(directory)
        candidates = resolver.candidates(directory)
    except DispatchError as exc:
        fail(exc.message, use_emoji=use_emoji)
        raise typer.Exit(code=int(exc.exit_code)) from exc

    console = Console()
    if builder is None:
        fail(f"No build tool found in {directory.resolve()}", use_emoji=use_emoji)
        raise typer.Exit(code=ExitCode.NO_INPUT)
    console.print(build_detection_table(builder, candidates))
    for verb in Verb:
        console.print(f"{verb.value}: {format_command(builder.argv(verb))}", highlight=False)


@app.command("tools")
def tools_command(path: PATH_ARGUMENT = None) -> None:
    """List marker files and tool commands in priority order."""

    directory = path if path is not None else default_directory()
    _, catalog = _load_config(directory, True)
    Console().print(build_catalog_table(catalog))


def main() -> None:
    """Console-script entry point."""

    app(prog_name="buildany")


__all__ = ["app", "main"]
