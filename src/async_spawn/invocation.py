"""Invocation driver.

Runs one child process to completion and settles exactly one outcome:

    Created -> Running -> Succeeded | FailedExit | FailedSignal | FailedLaunch

The first terminal event wins. A stream failure followed by the killed
child's close, for instance, settles as a launch failure and the close is
ignored.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from typing import Any

from .config import get_config
from .options import SpawnOptions
from .outcome import LaunchFailure, Outcome, ProcessStateError, classify_close
from .render import render_command, render_outcome
from .runtime.process_runner import ProcessRunner
from .runtime.stream import StreamAccumulator

__all__ = ["spawn"]

logger = logging.getLogger(__name__)


class _Invocation:
    """Listener collecting one child's output and its single outcome."""

    def __init__(self, cmd: str, encoding: str, errors: str) -> None:
        self.cmd = cmd
        self.stdout = StreamAccumulator(encoding, errors)
        self.stderr = StreamAccumulator(encoding, errors)
        self.outcome: Outcome | None = None

    @property
    def settled(self) -> bool:
        return self.outcome is not None

    def on_stdout(self, chunk: bytes) -> None:
        if self.settled:
            logger.debug(f"Dropping {len(chunk)} stdout bytes of {self.cmd!r} after settlement")
            return
        self.stdout.feed(chunk)

    def on_stderr(self, chunk: bytes) -> None:
        if self.settled:
            logger.debug(f"Dropping {len(chunk)} stderr bytes of {self.cmd!r} after settlement")
            return
        self.stderr.feed(chunk)

    def on_close(self, code: int | None, signal_name: str | None) -> None:
        self.settle(classify_close(code, signal_name))

    def on_error(self, error: BaseException) -> None:
        self.settle(LaunchFailure(error))

    def settle(self, outcome: Outcome) -> bool:
        """Record ``outcome`` unless one was already recorded.

        Both buffers are frozen at the moment of settlement.

        Returns:
            True if this call settled the invocation
        """
        if self.outcome is not None:
            logger.debug(f"Ignoring {outcome!r} for {self.cmd!r}, already settled as {self.outcome!r}")
            return False
        self.outcome = outcome
        self.stdout.freeze()
        self.stderr.freeze()
        return True


async def spawn(
    cmd: str,
    args: Sequence[str] | None = None,
    options: SpawnOptions | None = None,
    *,
    runner: ProcessRunner | None = None,
    **overrides: Any,
) -> str:
    """Run ``cmd`` with ``args`` and return its output once it exits.

    Example:
        out = await spawn("git", ["rev-parse", "HEAD"], cwd=repo)
        err = await spawn("java", ["-version"], return_stderr=True)

    Args:
        cmd: Executable to run
        args: Arguments for the executable
        options: Invocation options (defaults to ``SpawnOptions()``)
        runner: Spawning primitive (defaults to a fresh ``ProcessRunner``)
        **overrides: ``SpawnOptions`` fields replacing those of ``options``

    Returns:
        stdout, stderr with ``return_stderr``, or whatever
        ``format_output_callback`` computes

    Raises:
        ExitCodeError: The child exited with a non-zero code
        ExitSignalError: The child was terminated by a signal
        LaunchError: The child could not be started or a stream failed
    """
    if options is None:
        options = SpawnOptions()
    if overrides:
        options = dataclasses.replace(options, **overrides)
    arguments = tuple(args) if args is not None else ()

    command_line = render_command(options, cmd, arguments)
    if options.logger is not None:
        options.logger(f"Executing command {command_line}")
    logger.debug(f"Executing command {command_line}")

    config = get_config()
    invocation = _Invocation(
        cmd,
        encoding=options.encoding or config.encoding,
        errors=options.errors or config.decode_errors,
    )
    runner = runner or ProcessRunner()
    await runner.run(options.to_process_spec(cmd, arguments), invocation)

    if not invocation.settled:
        invocation.on_error(ProcessStateError("process runner returned without a close or error event"))
    outcome = invocation.outcome
    assert outcome is not None

    if isinstance(outcome, LaunchFailure) and options.update_error_callback is not None:
        options.update_error_callback(outcome.error, options.has_logger)

    return render_outcome(
        cmd,
        arguments,
        outcome,
        invocation.stdout.text,
        invocation.stderr.text,
        options,
    )
