"""Termination outcome of one invocation.

Exactly one of :class:`CleanExit`, :class:`SignalExit` or
:class:`LaunchFailure` is produced per call to :func:`async_spawn.spawn`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = [
    "CleanExit",
    "SignalExit",
    "LaunchFailure",
    "Outcome",
    "ProcessStateError",
    "classify_close",
]


class ProcessStateError(RuntimeError):
    """The child closed without reporting either an exit code or a signal."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class CleanExit:
    """The child exited on its own with ``code``; only 0 counts as success."""

    code: int

    @property
    def succeeded(self) -> bool:
        return self.code == 0


@dataclass(frozen=True)
class SignalExit:
    """The child was terminated by ``signal`` (e.g. ``"SIGKILL"``)."""

    signal: str


@dataclass(frozen=True, eq=False)
class LaunchFailure:
    """The child never started, or one of its streams failed."""

    error: BaseException


Outcome = Union[CleanExit, SignalExit, LaunchFailure]


def classify_close(code: int | None, signal_name: str | None) -> Outcome:
    """Classify a close event.

    Args:
        code: Exit code, or None when the child was signalled
        signal_name: Terminating signal, or None

    Returns:
        CleanExit when a code is present, SignalExit when only a signal is,
        and LaunchFailure(ProcessStateError) when neither is
    """
    if code is not None:
        return CleanExit(code)
    if signal_name:
        return SignalExit(signal_name)
    return LaunchFailure(
        ProcessStateError("process closed without an exit code or a terminating signal")
    )
