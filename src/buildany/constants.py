# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across buildany modules."""

from __future__ import annotations

from typing import Final

MAKE_MARKER: Final[str] = "Makefile"
TASK_MARKER: Final[str] = "Taskfile.yml"
EARTHLY_MARKER: Final[str] = "Earthfile"
MIX_MARKER: Final[str] = "mix.exs"
CARGO_MARKER: Final[str] = "Cargo.toml"
GO_MARKER: Final[str] = "go.mod"
DOCKER_MARKER: Final[str] = "Dockerfile"
COMPOSE_MARKER: Final[str] = "docker-compose.yml"

PWD_ENV: Final[str] = "PWD"
CONFIG_ENV: Final[str] = "BUILDANY_CONFIG"
XDG_CONFIG_ENV: Final[str] = "XDG_CONFIG_HOME"
CONFIG_DIR_NAME: Final[str] = "buildany"
USER_CONFIG_NAME: Final[str] = "config.toml"
PROJECT_CONFIG_NAME: Final[str] = ".buildany.toml"

# Streams are relayed in chunks of at most this many bytes.
STREAM_CHUNK_SIZE: Final[int] = 64 * 1024
SIGNAL_EXIT_BASE: Final[int] = 128
