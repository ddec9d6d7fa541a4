"""Runtime module for subprocess launching and output capture.

This module provides the spawning primitive used by :func:`async_spawn.spawn`
and the per-stream decoding buffer.
"""

from __future__ import annotations

from .process_runner import IS_WINDOWS, ProcessListener, ProcessRunner, ProcessSpec, SpawnSystemError
from .stream import StreamAccumulator

__all__ = [
    "IS_WINDOWS",
    "ProcessListener",
    "ProcessRunner",
    "ProcessSpec",
    "SpawnSystemError",
    "StreamAccumulator",
]
