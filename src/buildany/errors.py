# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Error taxonomy shared by resolution and execution."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum, StrEnum
from pathlib import Path


class ErrorKind(StrEnum):
    """Enumerate the terminal failure kinds of a dispatch."""

    NOT_A_DIRECTORY = "not-a-directory"
    NOT_FOUND = "not-found"
    SPAWN_FAILED = "spawn-failed"
    STREAM_CAPTURE_FAILED = "stream-capture-failed"
    STREAM_IO_ERROR = "stream-io-error"


class ExitCode(IntEnum):
    """Exit statuses reserved for dispatcher failures (``sysexits.h`` values)."""

    USAGE = 64
    NO_INPUT = 66
    OS_ERROR = 71
    IO_ERROR = 74
    CONFIG = 78
    COMMAND_NOT_FOUND = 127


class DispatchError(RuntimeError):
    """Base class for failures that end a dispatch before a child outcome exists."""

    kind: ErrorKind
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotADirectory(DispatchError):
    """Raised when the requested project path is not a directory."""

    kind = ErrorKind.NOT_A_DIRECTORY
    exit_code = ExitCode.USAGE

    def __init__(self, path: Path, reason: str | None = None) -> None:
        if reason is None:
            super().__init__(f"{path} is not a directory")
        else:
            super().__init__(f"{path} is not a readable directory: {reason}")
        self.path = path
        self.reason = reason


class BuilderNotFound(DispatchError):
    """Raised when no marker file matches and no override was supplied."""

    kind = ErrorKind.NOT_FOUND
    exit_code = ExitCode.NO_INPUT

    def __init__(self, directory: Path, markers: Sequence[str]) -> None:
        expected = ", ".join(markers) or "<none>"
        super().__init__(f"No build tool found in {directory} (looked for: {expected})")
        self.directory = directory
        self.markers = tuple(markers)


class SpawnFailed(DispatchError):
    """Raised when the tool executable is missing or cannot be launched."""

    kind = ErrorKind.SPAWN_FAILED
    exit_code = ExitCode.COMMAND_NOT_FOUND

    def __init__(self, command: Sequence[str], reason: str) -> None:
        super().__init__(f"Failed to launch '{command[0]}': {reason}")
        self.command = tuple(command)
        self.reason = reason


class StreamCaptureFailed(DispatchError):
    """Raised when a standard stream of the child could not be attached."""

    kind = ErrorKind.STREAM_CAPTURE_FAILED
    exit_code = ExitCode.OS_ERROR

    def __init__(self, stream_name: str) -> None:
        super().__init__(f"Could not capture child {stream_name}")
        self.stream_name = stream_name


class StreamIOError(DispatchError):
    """Raised when relaying child output fails mid-stream."""

    kind = ErrorKind.STREAM_IO_ERROR
    exit_code = ExitCode.IO_ERROR

    def __init__(self, stream_name: str, cause: Exception) -> None:
        super().__init__(f"I/O error while relaying child {stream_name}: {cause}")
        self.stream_name = stream_name


__all__ = [
    "BuilderNotFound",
    "DispatchError",
    "ErrorKind",
    "ExitCode",
    "NotADirectory",
    "SpawnFailed",
    "StreamCaptureFailed",
    "StreamIOError",
]
