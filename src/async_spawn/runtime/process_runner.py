"""Process runner that launches one child and reports its lifecycle as events.

async-spawn runtime module

This module provides:
- Launching with pass-through options (cwd, env, stdio, extra kwargs)
- Concurrent stdout/stderr pumping in raw byte chunks
- Exactly one terminal ``on_close`` or ``on_error`` per healthy run
- Cancel-safe cleanup using asyncio.shield

Key design points:
- Launch ``OSError`` is converted to :class:`SpawnSystemError` with a
  symbolic ``code`` ("ENOENT") and a ``syscall`` ("spawn <command>")
- POSIX: a negative return code is reported as a signal name, code ``None``
- Windows: the command is resolved through PATH/PATHEXT before launch
- A failing stream kills the child; its close is still reported afterwards
"""

from __future__ import annotations

import asyncio
import errno
import logging
import shutil
import signal
import subprocess
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from os import PathLike
from typing import IO, Any, Protocol, Union

import anyio

__all__ = [
    "IS_WINDOWS",
    "ProcessListener",
    "ProcessRunner",
    "ProcessSpec",
    "SpawnSystemError",
]

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = sys.platform == "win32"

DEFAULT_CHUNK_SIZE = 65536
DEFAULT_KILL_TIMEOUT = 1.0  # seconds to wait for a killed child to be reaped

StdioValue = Union[str, int, IO[Any], None]

_STDIO_MODES: dict[str, int | None] = {
    "pipe": subprocess.PIPE,
    "ignore": subprocess.DEVNULL,
    "inherit": None,
}


class SpawnSystemError(OSError):
    """The operating system refused to start the child.

    Attributes:
        code: Symbolic errno name, e.g. ``"ENOENT"``
        syscall: Failed operation, ``"spawn <command>"``
        path: Command that could not be started
        spawnargs: Arguments the child would have received
        message: Human readable description; callers may rewrite or delete it
    """

    def __init__(self, command: str, args: Sequence[str], cause: OSError) -> None:
        super().__init__(cause.errno, cause.strerror, command)
        self.code = errno.errorcode.get(cause.errno, "UNKNOWN") if cause.errno else "UNKNOWN"
        self.syscall = f"spawn {command}"
        self.path = command
        self.spawnargs = list(args)
        self.message = f"{self.syscall} {self.code}"

    def __str__(self) -> str:
        message = getattr(self, "message", None)
        if message:
            return message
        return super().__str__()


class ProcessListener(Protocol):
    """Receiver for the events of one child process."""

    def on_stdout(self, chunk: bytes) -> None: ...

    def on_stderr(self, chunk: bytes) -> None: ...

    def on_close(self, code: int | None, signal_name: str | None) -> None: ...

    def on_error(self, error: BaseException) -> None: ...


@dataclass(frozen=True)
class ProcessSpec:
    """Specification for a subprocess to run.

    Attributes:
        command: Executable to start
        args: Arguments passed after the executable
        cwd: Working directory (None = inherit parent)
        env: Environment variables (None = inherit parent)
        stdio: "pipe", "ignore", "inherit", or a (stdin, stdout, stderr) triple
        stdin_bytes: Optional bytes written to stdin before it is closed
        extra: Further keyword arguments for asyncio.create_subprocess_exec
    """

    command: str
    args: tuple[str, ...] = ()
    cwd: str | PathLike[str] | None = None
    env: Mapping[str, str] | None = None
    stdio: str | Sequence[StdioValue] = "pipe"
    stdin_bytes: bytes | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


def _stdio_value(value: StdioValue) -> int | IO[Any] | None:
    if isinstance(value, str):
        try:
            return _STDIO_MODES[value]
        except KeyError:
            raise ValueError(f"unknown stdio mode: {value!r}") from None
    return value


def resolve_stdio(
    stdio: str | Sequence[StdioValue],
) -> tuple[int | IO[Any] | None, int | IO[Any] | None, int | IO[Any] | None]:
    """Translate a stdio setting into (stdin, stdout, stderr) subprocess values.

    A piped stdin with nothing to write would leave the child waiting on an
    open pipe, so "pipe" maps stdin to DEVNULL.

    Args:
        stdio: A single mode for all three streams, or one value per stream

    Returns:
        Tuple of values for asyncio.create_subprocess_exec

    Raises:
        ValueError: If a mode name is unknown or the sequence is not a triple
    """
    if isinstance(stdio, str):
        values: Sequence[StdioValue] = (stdio, stdio, stdio)
    else:
        values = stdio
        if len(values) != 3:
            raise ValueError(f"stdio must have exactly 3 entries, got {len(values)}")

    stdin, stdout, stderr = (_stdio_value(value) for value in values)
    if stdin == subprocess.PIPE:
        stdin = subprocess.DEVNULL
    return stdin, stdout, stderr


def split_returncode(returncode: int | None) -> tuple[int | None, str | None]:
    """Split a return code into (exit code, signal name).

    Args:
        returncode: Value of ``Process.returncode`` after exit

    Returns:
        ``(code, None)`` for a normal exit, ``(None, "SIGKILL")`` and the like
        when a POSIX child was terminated by a signal
    """
    if returncode is None:
        return None, None
    if returncode < 0 and not IS_WINDOWS:
        signum = -returncode
        try:
            return None, signal.Signals(signum).name
        except ValueError:
            return None, f"SIG{signum}"
    return returncode, None


@dataclass
class ProcessRunner:
    """Cross-platform runner reporting one child's output and termination.

    Example:
        runner = ProcessRunner()
        spec = ProcessSpec(command="git", args=("status", "--short"))
        await runner.run(spec, listener)

    ``listener`` receives every stdout/stderr chunk in arrival order, then
    ``on_close`` once both streams reached EOF and the child was reaped.
    A launch failure produces a single ``on_error`` and no close. A stream
    that fails while reading produces ``on_error`` followed by ``on_close``
    once the killed child is reaped.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    kill_timeout: float = DEFAULT_KILL_TIMEOUT

    async def run(self, spec: ProcessSpec, listener: ProcessListener) -> None:
        """Run the subprocess to completion, reporting events to ``listener``.

        Args:
            spec: Process specification
            listener: Receiver of stream and termination events

        Raises:
            ValueError: If ``spec.stdio`` is malformed
            asyncio.CancelledError: If cancelled; the child is killed first
        """
        process: asyncio.subprocess.Process | None = None
        kwargs = self._build_subprocess_kwargs(spec)

        try:
            try:
                process = await asyncio.create_subprocess_exec(
                    self._resolve_executable(spec.command),
                    *spec.args,
                    **kwargs,
                )
            except OSError as e:
                logger.debug(f"Failed to start {spec.command!r}: {e}")
                listener.on_error(SpawnSystemError(spec.command, spec.args, e))
                return

            logger.debug(f"Started subprocess pid={process.pid} command={spec.command}")

            async with anyio.create_task_group() as tg:
                if spec.stdin_bytes is not None and process.stdin is not None:
                    tg.start_soon(self._feed_stdin, process, spec.stdin_bytes)
                if process.stdout is not None:
                    tg.start_soon(self._pump, process, process.stdout, listener.on_stdout, listener)
                if process.stderr is not None:
                    tg.start_soon(self._pump, process, process.stderr, listener.on_stderr, listener)

            returncode = await process.wait()
            code, signal_name = split_returncode(returncode)
            logger.debug(
                f"Subprocess completed pid={process.pid} "
                f"code={code} signal={signal_name}"
            )
            listener.on_close(code, signal_name)

        finally:
            # Ensure cleanup with shield to prevent cancel interruption
            await self._safe_cleanup(process)

    def _build_subprocess_kwargs(self, spec: ProcessSpec) -> dict[str, Any]:
        """Build kwargs for asyncio.create_subprocess_exec.

        Args:
            spec: Process specification

        Returns:
            Dict of kwargs; explicit spec fields win over ``spec.extra``
        """
        stdin, stdout, stderr = resolve_stdio(spec.stdio)
        if spec.stdin_bytes is not None:
            stdin = subprocess.PIPE

        kwargs: dict[str, Any] = dict(spec.extra)
        kwargs.update(stdin=stdin, stdout=stdout, stderr=stderr)
        if spec.cwd is not None:
            kwargs["cwd"] = spec.cwd
        if spec.env is not None:
            kwargs["env"] = dict(spec.env)
        return kwargs

    @staticmethod
    def _resolve_executable(command: str) -> str:
        # CreateProcess does not consult PATHEXT, so .cmd/.bat shims need a lookup
        if IS_WINDOWS and command:
            return shutil.which(command) or command
        return command

    async def _feed_stdin(self, process: asyncio.subprocess.Process, data: bytes) -> None:
        assert process.stdin is not None
        try:
            process.stdin.write(data)
            await process.stdin.drain()
            process.stdin.close()
            await process.stdin.wait_closed()
        except (BrokenPipeError, ConnectionResetError) as e:
            # Child exited or closed stdin without reading everything
            logger.debug(f"stdin closed early pid={process.pid}: {e}")

    async def _pump(
        self,
        process: asyncio.subprocess.Process,
        stream: asyncio.StreamReader,
        on_chunk: Callable[[bytes], None],
        listener: ProcessListener,
    ) -> None:
        """Forward chunks from ``stream`` until EOF.

        A read or decode failure is reported through ``listener.on_error``
        and the child is killed so the remaining stream reaches EOF.
        """
        try:
            while True:
                chunk = await stream.read(self.chunk_size)
                if not chunk:
                    break
                on_chunk(chunk)
        except (OSError, ValueError) as e:
            logger.debug(f"Stream failure pid={process.pid}: {e!r}")
            listener.on_error(e)
            self._kill(process)

    @staticmethod
    def _kill(process: asyncio.subprocess.Process) -> None:
        try:
            process.kill()
            logger.debug(f"Called kill() on pid={process.pid}")
        except ProcessLookupError:
            pass

    async def _safe_cleanup(self, process: asyncio.subprocess.Process | None) -> None:
        """Kill and reap the child if it is still running, shielded from cancellation.

        Args:
            process: The subprocess, or None if it never started
        """
        try:
            await asyncio.shield(self._do_cleanup(process))
        except asyncio.CancelledError:
            # If shield itself is cancelled, still try cleanup
            await self._do_cleanup(process)
            raise

    async def _do_cleanup(self, process: asyncio.subprocess.Process | None) -> None:
        if process is None or process.returncode is not None:
            return

        pid = process.pid
        self._kill(process)
        try:
            await asyncio.wait_for(process.wait(), timeout=self.kill_timeout)
            logger.debug(f"Subprocess killed pid={pid} returncode={process.returncode}")
        except asyncio.TimeoutError:
            logger.warning(f"Subprocess did not exit after kill pid={pid}")
