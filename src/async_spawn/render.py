"""Outcome rendering.

Turns a termination outcome plus captured output into the success value, or
into the error to raise. Command rendering is shared by the pre-launch log
line and every error message.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import ExitCodeError, ExitSignalError, LaunchError
from .options import SpawnOptions
from .outcome import CleanExit, LaunchFailure, Outcome, SignalExit

__all__ = [
    "stringify_command",
    "render_command",
    "render_output",
    "render_outcome",
]


def stringify_command(cmd: str, args: Sequence[str] | None = None) -> str:
    """Join command and arguments with single spaces.

    >>> stringify_command("git", ["log", "-1"])
    'git log -1'
    >>> stringify_command("ls")
    'ls'
    """
    if args:
        return f"{cmd} {' '.join(args)}"
    return cmd


def render_command(options: SpawnOptions, cmd: str, args: Sequence[str]) -> str:
    if options.stringify_command_callback is not None:
        return options.stringify_command_callback(cmd, args)
    return stringify_command(cmd, args)


def render_output(options: SpawnOptions, stdout: str, stderr: str) -> str:
    """Pick the success value.

    ``format_output_callback`` overrides everything; otherwise stderr when
    ``return_stderr`` is set, else stdout.
    """
    if options.format_output_callback is not None:
        return options.format_output_callback(stdout, stderr)
    if options.return_stderr:
        return stderr
    return stdout


def render_outcome(
    cmd: str,
    args: Sequence[str],
    outcome: Outcome,
    stdout: str,
    stderr: str,
    options: SpawnOptions,
) -> str:
    """Resolve an outcome to the success value or raise the matching error.

    Args:
        cmd: Command as passed by the caller
        args: Arguments as passed by the caller
        outcome: Termination outcome of the invocation
        stdout: Final stdout text
        stderr: Final stderr text
        options: Options of the invocation

    Returns:
        The rendered output for ``CleanExit(0)``

    Raises:
        ExitCodeError: For a non-zero exit code
        ExitSignalError: For signal termination
        LaunchError: For a launch or stream failure
        TypeError: For an unknown outcome type
    """
    if isinstance(outcome, CleanExit):
        if outcome.succeeded:
            return render_output(options, stdout, stderr)
        raise ExitCodeError(
            cmd, args, outcome.code, stdout, stderr,
            command_line=render_command(options, cmd, args),
            options=options,
        )
    if isinstance(outcome, SignalExit):
        raise ExitSignalError(
            cmd, args, outcome.signal, stdout, stderr,
            command_line=render_command(options, cmd, args),
            options=options,
        )
    if isinstance(outcome, LaunchFailure):
        raise LaunchError(
            cmd, args, outcome.error, stdout, stderr,
            command_line=render_command(options, cmd, args),
            options=options,
        ) from outcome.error
    raise TypeError(f"unknown outcome: {outcome!r}")
