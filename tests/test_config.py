"""Config module tests.

Tests ASYNC_SPAWN_* environment variable parsing and logging setup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from unittest import mock

import pytest

from async_spawn.config import Config, configure_logging, get_config, load_config, reload_config


class TestParseEncoding:
    """ASYNC_SPAWN_ENCODING parsing."""

    def test_default(self):
        config = load_config()
        assert config.encoding == "utf-8"

    def test_normalized_codec_name(self):
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_ENCODING": "Latin-1"}):
            config = load_config()
            assert config.encoding == "iso8859-1"

    def test_unknown_codec_falls_back(self):
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_ENCODING": "not-a-codec"}):
            config = load_config()
            assert config.encoding == "utf-8"

    def test_blank_value(self):
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_ENCODING": "  "}):
            assert load_config().encoding == "utf-8"


class TestParseDecodeErrors:
    """ASYNC_SPAWN_DECODE_ERRORS parsing."""

    def test_default(self):
        assert load_config().decode_errors == "replace"

    @pytest.mark.parametrize("value", ["strict", "IGNORE", " backslashreplace "])
    def test_supported_values(self, value):
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_DECODE_ERRORS": value}):
            assert load_config().decode_errors == value.strip().lower()

    def test_invalid_value_falls_back(self):
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_DECODE_ERRORS": "explode"}):
            assert load_config().decode_errors == "replace"


class TestLogDebug:
    """ASYNC_SPAWN_LOG_DEBUG parsing."""

    def test_default_off(self):
        config = load_config()
        assert config.log_debug is False
        assert config.log_file is None

    @pytest.mark.parametrize("value", ["true", "1", "yes", "on", "TRUE"])
    def test_enabled(self, value):
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_LOG_DEBUG": value}):
            config = load_config()
            assert config.log_debug is True
            assert config.log_file is not None
            assert Path(config.log_file).parent.name == "async-spawn"

    def test_disabled(self):
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_LOG_DEBUG": "no"}):
            assert load_config().log_debug is False


class TestGlobalConfig:
    """Cached global configuration."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_config(self):
        first = get_config()
        with mock.patch.dict(os.environ, {"ASYNC_SPAWN_ENCODING": "ascii"}):
            second = reload_config()
        assert second is not first
        assert second.encoding == "ascii"
        assert get_config() is second


class TestConfigureLogging:
    """Opt-in logging handlers."""

    def test_stderr_handler_at_info(self):
        handler = configure_logging(Config())
        package_logger = logging.getLogger("async_spawn")
        try:
            assert isinstance(handler, logging.StreamHandler)
            assert package_logger.level == logging.INFO
        finally:
            package_logger.removeHandler(handler)
            package_logger.setLevel(logging.NOTSET)

    def test_file_handler_at_debug(self, tmp_path):
        log_file = tmp_path / "debug.log"
        handler = configure_logging(Config(log_debug=True, log_file=str(log_file)))
        package_logger = logging.getLogger("async_spawn")
        try:
            assert isinstance(handler, logging.FileHandler)
            logging.getLogger("async_spawn.invocation").debug("hello from test")
            handler.flush()
            assert "[DEBUG] async_spawn.invocation: hello from test" in log_file.read_text()
        finally:
            package_logger.removeHandler(handler)
            package_logger.setLevel(logging.NOTSET)
            handler.close()
