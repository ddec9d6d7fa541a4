"""Invocation options.

Pass-through process settings and the caller's extension callbacks, kept in
one frozen dataclass so every callback stays a plain, separately testable
function.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from os import PathLike
from typing import Any

from .runtime.process_runner import ProcessSpec, StdioValue

__all__ = [
    "SpawnOptions",
    "LoggerFunction",
    "UpdateErrorCallback",
    "FormatOutputCallback",
    "StringifyCommandCallback",
]

#: Receives one line such as ``"Executing command git status"``
LoggerFunction = Callable[[str], None]
#: Mutates a launch error in place; second argument tells whether a logger is set
UpdateErrorCallback = Callable[[BaseException, bool], None]
#: Turns (stdout, stderr) into the success value
FormatOutputCallback = Callable[[str, str], str]
#: Renders (command, arguments) for logs and error messages
StringifyCommandCallback = Callable[[str, Sequence[str]], str]


@dataclass(frozen=True)
class SpawnOptions:
    """Options for one :func:`async_spawn.spawn` call.

    Attributes:
        cwd: Working directory for the child
        env: Environment variables (None = inherit parent)
        stdio: "pipe" (default), "ignore", "inherit", or a per-stream triple
        input: Bytes written to the child's stdin, which is then closed
        encoding: Output encoding (None = ``Config.encoding``)
        errors: Decode error handler (None = ``Config.decode_errors``)
        extra: Further keyword arguments for asyncio.create_subprocess_exec
        logger: Called once with the rendered command before launch
        update_error_callback: Mutates the underlying launch error before it is wrapped
        return_stderr: Resolve to stderr instead of stdout
        format_output_callback: Computes the success value from stdout and stderr
        stringify_command_callback: Renders the command in logs and error messages
    """

    cwd: str | PathLike[str] | None = None
    env: Mapping[str, str] | None = None
    stdio: str | Sequence[StdioValue] = "pipe"
    input: bytes | None = None
    encoding: str | None = None
    errors: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    logger: LoggerFunction | None = None
    update_error_callback: UpdateErrorCallback | None = None
    return_stderr: bool = False
    format_output_callback: FormatOutputCallback | None = None
    stringify_command_callback: StringifyCommandCallback | None = None

    @property
    def has_logger(self) -> bool:
        return self.logger is not None

    def to_process_spec(self, cmd: str, arguments: Sequence[str]) -> ProcessSpec:
        """Build the spawning spec; extension callbacks are not passed down."""
        return ProcessSpec(
            command=cmd,
            args=tuple(arguments),
            cwd=self.cwd,
            env=self.env,
            stdio=self.stdio,
            stdin_bytes=self.input,
            extra=dict(self.extra),
        )
