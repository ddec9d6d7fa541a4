"""async-spawn environment configuration.

Environment variables:
    ASYNC_SPAWN_ENCODING: default encoding for captured output
        - default utf-8
        - unknown codec names fall back to the default

    ASYNC_SPAWN_DECODE_ERRORS: default decode error handler
        - strict / replace (default) / ignore / backslashreplace / surrogateescape

    ASYNC_SPAWN_LOG_DEBUG: debug logging mode
        - true/1/yes/on = configure_logging() writes DEBUG logs to a temp file
        - false/0/no = off (default, INFO logs go to stderr)
"""

from __future__ import annotations

import codecs
import logging
import os
import sys
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

__all__ = ["Config", "load_config", "get_config", "reload_config", "configure_logging"]

DEFAULT_ENCODING = "utf-8"
DEFAULT_DECODE_ERRORS = "replace"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

SUPPORTED_DECODE_ERRORS = frozenset(
    {"strict", "replace", "ignore", "backslashreplace", "surrogateescape"}
)


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_encoding(value: str | None) -> str:
    if not value or not value.strip():
        return DEFAULT_ENCODING
    try:
        return codecs.lookup(value.strip()).name
    except LookupError:
        return DEFAULT_ENCODING


def _parse_decode_errors(value: str | None) -> str:
    if not value:
        return DEFAULT_DECODE_ERRORS
    value = value.lower().strip()
    if value in SUPPORTED_DECODE_ERRORS:
        return value
    return DEFAULT_DECODE_ERRORS


def _generate_log_file_path() -> str:
    """Build a timestamped log file path under the system temp directory."""
    log_dir = Path(tempfile.gettempdir()) / "async-spawn"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"async_spawn_debug_{timestamp}.log"

    return str(log_file.resolve())


@dataclass
class Config:
    """async-spawn configuration.

    Attributes:
        encoding: Default encoding of captured output
        decode_errors: Default decode error handler
        log_debug: Write DEBUG logs to ``log_file``
        log_file: Log file path (set automatically when log_debug=True)
    """

    encoding: str = DEFAULT_ENCODING
    decode_errors: str = DEFAULT_DECODE_ERRORS
    log_debug: bool = False
    log_file: str | None = None


def load_config() -> Config:
    """Load configuration from environment variables."""
    log_debug = _parse_bool(os.environ.get("ASYNC_SPAWN_LOG_DEBUG"), default=False)
    log_file = _generate_log_file_path() if log_debug else None

    return Config(
        encoding=_parse_encoding(os.environ.get("ASYNC_SPAWN_ENCODING")),
        decode_errors=_parse_decode_errors(os.environ.get("ASYNC_SPAWN_DECODE_ERRORS")),
        log_debug=log_debug,
        log_file=log_file,
    )


# Global config instance (lazily loaded)
_config: Config | None = None


def get_config() -> Config:
    """Return the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Re-read the environment (used by tests)."""
    global _config
    _config = load_config()
    return _config


def configure_logging(config: Config | None = None) -> logging.Handler:
    """Attach a handler to the ``async_spawn`` logger namespace.

    The library never calls this itself; applications opt in.

    Args:
        config: Configuration to use (defaults to :func:`get_config`)

    Returns:
        The installed handler, so callers can remove it again
    """
    config = config or get_config()

    handler: logging.Handler
    if config.log_debug and config.log_file:
        handler = logging.FileHandler(config.log_file, encoding="utf-8")
        level = logging.DEBUG
    else:
        handler = logging.StreamHandler(sys.stderr)
        level = logging.INFO
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("async_spawn")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
