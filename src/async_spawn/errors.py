"""async-spawn exception classes.

Every message is self-contained: it names the rendered command and carries
the captured output, so logging ``str(error)`` alone gives full context.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .options import SpawnOptions

__all__ = [
    "SpawnError",
    "ExitError",
    "ExitCodeError",
    "ExitSignalError",
    "LaunchError",
    "describe_error",
]


def describe_error(error: BaseException) -> str:
    """Return the most useful non-empty description of ``error``.

    Prefers a ``message`` attribute, then ``str(error)``, then the class name,
    so an error whose message was deleted still renders as something.
    """
    message = getattr(error, "message", None)
    if message:
        return str(message)
    return str(error) or type(error).__name__


class SpawnError(Exception):
    """Base class for failures raised by :func:`async_spawn.spawn`.

    Attributes:
        message: Rendered message
        cmd: Command as passed by the caller
        arguments: Arguments as passed by the caller
        stdout: Captured standard output
        stderr: Captured standard error
        options: Options of the failed invocation
    """

    def __init__(
        self,
        message: str,
        cmd: str,
        arguments: Sequence[str],
        stdout: str = "",
        stderr: str = "",
        options: SpawnOptions | None = None,
    ) -> None:
        self.message = message
        self.cmd = cmd
        self.arguments = tuple(arguments)
        self.stdout = stdout
        self.stderr = stderr
        self.options = options
        super().__init__(message)


class ExitError(SpawnError):
    """The child ran but did not exit with status zero."""


class ExitCodeError(ExitError):
    """The child exited with a non-zero return code.

    Attributes:
        code: The exit code
    """

    def __init__(
        self,
        cmd: str,
        arguments: Sequence[str],
        code: int,
        stdout: str,
        stderr: str,
        command_line: str,
        options: SpawnOptions | None = None,
    ) -> None:
        self.code = code
        message = (
            f"Command failed with a non-zero return code ({code}):\n"
            f"{command_line}\n{stdout}\n{stderr}"
        ).strip()
        super().__init__(message, cmd, arguments, stdout, stderr, options)


class ExitSignalError(ExitError):
    """The child was terminated by a signal.

    Attributes:
        signal: Signal name, e.g. ``"SIGKILL"``
    """

    def __init__(
        self,
        cmd: str,
        arguments: Sequence[str],
        signal: str,
        stdout: str,
        stderr: str,
        command_line: str,
        options: SpawnOptions | None = None,
    ) -> None:
        self.signal = signal
        message = (
            f"Command terminated via a signal ({signal}):\n"
            f"{command_line}\n{stdout}\n{stderr}"
        ).strip()
        super().__init__(message, cmd, arguments, stdout, stderr, options)


class LaunchError(SpawnError):
    """The child could not be started, or reading its output failed.

    Attributes:
        original_error: Underlying error, after ``update_error_callback`` ran
    """

    def __init__(
        self,
        cmd: str,
        arguments: Sequence[str],
        original_error: BaseException,
        stdout: str,
        stderr: str,
        command_line: str,
        options: SpawnOptions | None = None,
    ) -> None:
        self.original_error = original_error
        message = (
            f"Error executing command ({command_line}):\n"
            f"{describe_error(original_error)}\n{stderr}"
        ).strip()
        super().__init__(message, cmd, arguments, stdout, stderr, options)
