# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Launch resolved builders and relay their output while it is produced.

The runner spawns the tool with a discrete argument vector (never through a
shell) and drains the child's stdout and stderr on two worker threads. Both
pipes are read until end-of-stream before the child is waited on, so a child
that fills one pipe while the parent is blocked on the other can never stall.
"""

from __future__ import annotations

import codecs
import logging
import os
import shutil

# Bandit: subprocess usage is intentional; commands come from the tool
# catalog and are passed as argument lists without shell expansion.
import subprocess  # nosec B404
import sys
from collections.abc import Mapping, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import IO, Protocol

from .catalog import Verb
from .constants import SIGNAL_EXIT_BASE, STREAM_CHUNK_SIZE
from .errors import SpawnFailed, StreamCaptureFailed, StreamIOError
from .resolver import Builder

LOGGER = logging.getLogger(__name__)


class InvocationState(StrEnum):
    """Lifecycle of a single invocation."""

    IDLE = "idle"
    SPAWNED = "spawned"
    STREAMING = "streaming"
    DRAINED = "drained"
    COMPLETED = "completed"
    FAILED = "failed"


class ByteSink(Protocol):
    """Destination accepting relayed output chunks."""

    def write(self, data: bytes, /) -> object: ...

    def flush(self) -> None: ...


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Result of running a builder verb to completion."""

    command: tuple[str, ...]
    directory: Path
    returncode: int
    dry_run: bool = False

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    @property
    def signal(self) -> int | None:
        """Return the signal number that terminated the child, if any."""

        return -self.returncode if self.returncode < 0 else None

    @property
    def exit_code(self) -> int:
        """Return the status the dispatcher should exit with.

        Signal deaths follow the shell convention of ``128 + signal``; every
        other status is propagated unchanged.
        """

        signal = self.signal
        return SIGNAL_EXIT_BASE + signal if signal is not None else self.returncode


class _TextSink:
    """Adapt a text stream without a binary buffer to the :class:`ByteSink` protocol."""

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def write(self, data: bytes, /) -> int:
        self._stream.write(self._decoder.decode(data))
        return len(data)

    def flush(self) -> None:
        self._stream.flush()


def _binary_sink(stream: IO[str]) -> ByteSink:
    stream.flush()
    buffer = getattr(stream, "buffer", None)
    return buffer if buffer is not None else _TextSink(stream)


class ProcessRunner:
    """Execute builder verbs, streaming output to the configured sinks."""

    def __init__(
        self,
        *,
        stdout: ByteSink | None = None,
        stderr: ByteSink | None = None,
        env: Mapping[str, str] | None = None,
        dry_run: bool = False,
        chunk_size: int = STREAM_CHUNK_SIZE,
    ) -> None:
        """Create a runner.

        Args:
            stdout: Sink receiving the child's stdout. Defaults to the binary
                buffer behind :data:`sys.stdout` at execution time.
            stderr: Sink receiving the child's stderr. Defaults to the binary
                buffer behind :data:`sys.stderr` at execution time.
            env: Extra environment variables merged over :data:`os.environ`.
            dry_run: When ``True`` commands are reported but never spawned.
            chunk_size: Maximum number of bytes relayed per read.
        """

        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._stdout = stdout
        self._stderr = stderr
        self._env = dict(env) if env else None
        self._dry_run = dry_run
        self._chunk_size = chunk_size
        self._state = InvocationState.IDLE

    @property
    def state(self) -> InvocationState:
        """Return the lifecycle state reached by the most recent invocation."""

        return self._state

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def execute(self, builder: Builder, verb: Verb) -> ExecutionOutcome:
        """Run ``verb`` for ``builder`` and relay its output.

        Args:
            builder: Resolved builder providing the directory and templates.
            verb: Normalised action to forward to the tool.

        Returns:
            ExecutionOutcome: The child's status. A non-zero status is an
            outcome, not an error.

        Raises:
            SpawnFailed: If the executable is missing or cannot be launched.
            StreamCaptureFailed: If a child pipe could not be attached.
            StreamIOError: If relaying output failed part way through.
        """

        self._state = InvocationState.IDLE
        command = builder.argv(Verb(verb))
        if self._dry_run:
            LOGGER.debug("dry-run command=%s cwd=%s", command, builder.directory)
            self._state = InvocationState.COMPLETED
            return ExecutionOutcome(command=command, directory=builder.directory, returncode=0, dry_run=True)

        process = self._spawn(command, builder.directory)
        self._state = InvocationState.SPAWNED
        try:
            streams = self._attach(process)
        except StreamCaptureFailed:
            self._abort(process)
            raise

        self._state = InvocationState.STREAMING
        failure = self._drain(process, streams)
        if failure is not None:
            process.wait()
            self._state = InvocationState.FAILED
            raise failure

        self._state = InvocationState.DRAINED
        returncode = process.wait()
        self._state = InvocationState.COMPLETED
        LOGGER.debug("command=%s returncode=%s", command, returncode)
        return ExecutionOutcome(command=command, directory=builder.directory, returncode=returncode)

    def _spawn(self, command: Sequence[str], cwd: Path) -> subprocess.Popen[bytes]:
        env = None
        if self._env:
            env = os.environ.copy()
            env.update(self._env)
        executable = _locate(command[0], cwd, env)
        if executable is None:
            self._state = InvocationState.FAILED
            if _has_directory_component(command[0]):
                raise SpawnFailed(command, f"no executable file at {cwd / command[0]}")
            raise SpawnFailed(command, "executable was not found on PATH")
        LOGGER.debug("spawn command=%s cwd=%s", command, cwd)
        try:
            # Bandit: argument vector from the catalog, no shell involved.
            return subprocess.Popen(  # nosec B603
                [executable, *command[1:]],
                cwd=str(cwd),
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=0,
            )
        except OSError as exc:
            self._state = InvocationState.FAILED
            raise SpawnFailed(command, exc.strerror or str(exc)) from exc

    def _attach(self, process: subprocess.Popen[bytes]) -> list[tuple[str, IO[bytes], ByteSink]]:
        if process.stdout is None:
            raise StreamCaptureFailed("stdout")
        if process.stderr is None:
            raise StreamCaptureFailed("stderr")
        stdout_sink = self._stdout if self._stdout is not None else _binary_sink(sys.stdout)
        stderr_sink = self._stderr if self._stderr is not None else _binary_sink(sys.stderr)
        return [
            ("stdout", process.stdout, stdout_sink),
            ("stderr", process.stderr, stderr_sink),
        ]

    def _drain(
        self,
        process: subprocess.Popen[bytes],
        streams: Sequence[tuple[str, IO[bytes], ByteSink]],
    ) -> BaseException | None:
        """Relay every stream concurrently and return the first relay failure."""

        with ThreadPoolExecutor(max_workers=len(streams), thread_name_prefix="buildany-drain") as executor:
            futures: list[Future[None]] = [
                executor.submit(_relay, name, source, sink, self._chunk_size) for name, source, sink in streams
            ]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            if any(future.exception() is not None for future in done):
                # The failed stream is already closed; stop the child so the
                # remaining pipe reaches end-of-stream.
                _kill(process)
        for future in futures:
            error = future.exception()
            if error is not None:
                return error
        return None

    def _abort(self, process: subprocess.Popen[bytes]) -> None:
        self._state = InvocationState.FAILED
        for pipe in (process.stdout, process.stderr):
            if pipe is not None:
                pipe.close()
        _kill(process)
        process.wait()


def _has_directory_component(name: str) -> bool:
    return os.sep in name or (os.altsep is not None and os.altsep in name)


def _locate(name: str, cwd: Path, env: Mapping[str, str] | None) -> str | None:
    """Resolve ``name`` the way the child's own environment would.

    Names with a directory component are taken relative to ``cwd`` (the
    project), not the dispatcher's working directory. Bare names are searched
    on the ``PATH`` the child will receive.
    """

    if _has_directory_component(name):
        # An absolute name survives the join unchanged.
        return shutil.which(str((cwd / name).absolute()))
    search_path = env.get("PATH") if env is not None else None
    return shutil.which(name, path=search_path)


def _relay(name: str, source: IO[bytes], sink: ByteSink, chunk_size: int) -> None:
    try:
        with source:
            while chunk := source.read(chunk_size):
                sink.write(chunk)
                sink.flush()
    except (OSError, ValueError) as exc:
        # ValueError: the sink was closed underneath the relay.
        raise StreamIOError(name, exc) from exc


def _kill(process: subprocess.Popen[bytes]) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        LOGGER.debug("process %s already exited", process.pid)


__all__ = [
    "ByteSink",
    "ExecutionOutcome",
    "InvocationState",
    "ProcessRunner",
]
