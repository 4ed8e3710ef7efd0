# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

ECHO_TOOL = textwrap.dedent(
    """
    import os
    import sys

    print("cwd=" + os.getcwd())
    for arg in sys.argv[1:]:
        print("arg=" + arg)
    """,
)


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user configuration at a file that does not exist."""

    path = tmp_path / "user-config" / "config.toml"
    monkeypatch.setenv("BUILDANY_CONFIG", str(path))
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Return an empty project directory."""

    directory = tmp_path / "project"
    directory.mkdir()
    return directory


@pytest.fixture
def fake_tool(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., Path]:
    """Return a factory installing fake tool executables on ``PATH``.

    Each fake tool is a Python script; the default body prints its working
    directory and one ``arg=`` line per argument.
    """

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def _install(name: str, body: str = ECHO_TOOL) -> Path:
        script = bin_dir / name
        script.write_text(f"#!{sys.executable}\n{body}", encoding="utf-8")
        script.chmod(0o755)
        return script

    return _install

