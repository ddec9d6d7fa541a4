"""Run an external command and await its captured output.

    from async_spawn import spawn

    head = await spawn("git", ["rev-parse", "HEAD"])
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, configure_logging, get_config, reload_config
from .errors import ExitCodeError, ExitError, ExitSignalError, LaunchError, SpawnError
from .invocation import spawn
from .options import SpawnOptions
from .outcome import CleanExit, LaunchFailure, Outcome, ProcessStateError, SignalExit
from .render import stringify_command
from .runtime import ProcessRunner, ProcessSpec, SpawnSystemError

__all__ = [
    "spawn",
    "SpawnOptions",
    "SpawnError",
    "ExitError",
    "ExitCodeError",
    "ExitSignalError",
    "LaunchError",
    "SpawnSystemError",
    "ProcessStateError",
    "CleanExit",
    "SignalExit",
    "LaunchFailure",
    "Outcome",
    "ProcessRunner",
    "ProcessSpec",
    "stringify_command",
    "Config",
    "configure_logging",
    "get_config",
    "reload_config",
]
