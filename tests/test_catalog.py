# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the marker catalog and command templates."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from buildany.catalog import (
    DEFAULT_CATALOG,
    DEFAULT_TEMPLATES,
    CommandTemplate,
    MarkerRule,
    ToolCatalog,
    ToolIdentity,
    Verb,
)


def test_default_catalog_order_is_declared_priority() -> None:
    assert DEFAULT_CATALOG.markers() == (
        "Makefile",
        "Taskfile.yml",
        "Earthfile",
        "mix.exs",
        "Cargo.toml",
        "go.mod",
        "Dockerfile",
        "docker-compose.yml",
    )


def test_lookup_maps_markers_to_tools() -> None:
    assert DEFAULT_CATALOG.lookup("Cargo.toml") is ToolIdentity.CARGO
    assert DEFAULT_CATALOG.lookup("docker-compose.yml") is ToolIdentity.DOCKER_COMPOSE
    assert DEFAULT_CATALOG.lookup("package.json") is None
    assert DEFAULT_CATALOG.lookup("makefile") is None


def test_every_tool_has_non_empty_verb_arguments() -> None:
    for tool in ToolIdentity:
        template = DEFAULT_CATALOG.template(tool)
        for verb in Verb:
            assert template.args_for(verb)


def test_go_template_keeps_multi_token_arguments_in_order() -> None:
    template = DEFAULT_CATALOG.template(ToolIdentity.GO)
    assert template.argv(Verb.RUN) == ("go", "run", "./...")
    assert template.argv(Verb.TEST) == ("go", "test", "./...")
    assert template.argv(Verb.BUILD) == ("go", "build", "./...")


def test_earthly_targets_use_plus_prefix() -> None:
    assert DEFAULT_CATALOG.template(ToolIdentity.EARTHLY).argv(Verb.BUILD) == ("earthly", "+build")


def test_command_template_rejects_empty_arguments() -> None:
    with pytest.raises(ValidationError):
        CommandTemplate(executable="make", run=(), test=("test",), build=("build",))


def test_command_template_rejects_bare_string_arguments() -> None:
    with pytest.raises(ValidationError):
        CommandTemplate(executable="make", run="run", test=("test",), build=("build",))


def test_command_template_coerces_lists_to_tuples() -> None:
    template = CommandTemplate(executable="cargo", run=["run", "--release"], test=["test"], build=["build"])
    assert template.run == ("run", "--release")


def test_catalog_rejects_duplicate_markers() -> None:
    rules = [
        MarkerRule(marker="Makefile", tool=ToolIdentity.MAKE),
        MarkerRule(marker="Makefile", tool=ToolIdentity.TASK),
    ]
    with pytest.raises(ValueError, match="Duplicate marker"):
        ToolCatalog(rules)


def test_catalog_requires_templates_for_every_rule() -> None:
    with pytest.raises(ValueError, match="No command template"):
        ToolCatalog(
            [MarkerRule(marker="Cargo.toml", tool=ToolIdentity.CARGO)],
            {ToolIdentity.MAKE: DEFAULT_TEMPLATES[ToolIdentity.MAKE]},
        )


def test_reordered_moves_named_markers_first_without_mutating() -> None:
    reordered = DEFAULT_CATALOG.reordered(["go.mod", "Cargo.toml"])

    assert reordered.markers()[:3] == ("go.mod", "Cargo.toml", "Makefile")
    assert len(reordered) == len(DEFAULT_CATALOG)
    assert DEFAULT_CATALOG.markers()[0] == "Makefile"


def test_reordered_rejects_unknown_markers() -> None:
    with pytest.raises(ValueError, match="pom.xml"):
        DEFAULT_CATALOG.reordered(["pom.xml"])


def test_without_drops_rules() -> None:
    trimmed = DEFAULT_CATALOG.without(["Dockerfile"])

    assert "Dockerfile" not in trimmed.markers()
    assert trimmed.lookup("Dockerfile") is None
    assert len(trimmed) == len(DEFAULT_CATALOG) - 1


def test_with_templates_replaces_single_tool() -> None:
    nextest = CommandTemplate(executable="cargo", run=("run",), test=("nextest", "run"), build=("build",))
    catalog = DEFAULT_CATALOG.with_templates({ToolIdentity.CARGO: nextest})

    assert catalog.template(ToolIdentity.CARGO).argv(Verb.TEST) == ("cargo", "nextest", "run")
    assert catalog.template(ToolIdentity.MAKE) == DEFAULT_CATALOG.template(ToolIdentity.MAKE)
