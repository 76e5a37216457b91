"""Tests for runtime configuration and logging setup.

These tests never call init_runtime(); Taichi is initialized once per
session by conftest.py.
"""

import logging

import pytest
import taichi as ti


class TestRuntimeConfig:
    """Tests for RuntimeConfig."""

    def test_defaults(self, monkeypatch):
        """Test from_env with no variables set."""
        from scenehit.config import DEFAULT_LOG_FORMAT, RuntimeConfig

        for name in (
            "SCENEHIT_ARCH",
            "SCENEHIT_RANDOM_SEED",
            "SCENEHIT_DEBUG",
            "SCENEHIT_LOG_LEVEL",
            "SCENEHIT_LOG_FORMAT",
        ):
            monkeypatch.delenv(name, raising=False)

        config = RuntimeConfig.from_env()
        assert config == RuntimeConfig()
        assert config.arch == "cpu"
        assert config.log_format == DEFAULT_LOG_FORMAT

    def test_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        from scenehit.config import RuntimeConfig

        monkeypatch.setenv("SCENEHIT_ARCH", "Vulkan")
        monkeypatch.setenv("SCENEHIT_RANDOM_SEED", "17")
        monkeypatch.setenv("SCENEHIT_DEBUG", "TRUE")
        monkeypatch.setenv("SCENEHIT_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SCENEHIT_LOG_FORMAT", "%(message)s")

        config = RuntimeConfig.from_env()
        assert config.arch == "vulkan"
        assert config.random_seed == 17
        assert config.debug is True
        assert config.log_level == "DEBUG"
        assert config.log_format == "%(message)s"

    def test_taichi_arch(self):
        """Test backend names resolve to Taichi archs."""
        from scenehit.config import RuntimeConfig

        assert RuntimeConfig(arch="cpu").taichi_arch() == ti.cpu
        assert RuntimeConfig(arch="cuda").taichi_arch() == ti.cuda

    def test_unknown_arch_raises(self):
        """Test an unsupported backend name raises ValueError."""
        from scenehit.config import RuntimeConfig

        with pytest.raises(ValueError, match="Unknown Taichi arch"):
            RuntimeConfig(arch="tpu").taichi_arch()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_single_handler_on_repeat_calls(self):
        """Test repeated setup does not stack handlers."""
        from scenehit.config import setup_logging

        logger = setup_logging("INFO")
        before = len(logger.handlers)
        logger = setup_logging("DEBUG", "%(levelname)s %(message)s")

        assert len(logger.handlers) == before
        assert logger.level == logging.DEBUG
        assert logger.name == "scenehit"

        setup_logging("WARNING")

    def test_unknown_level_falls_back_to_warning(self):
        """Test an unknown level name maps to WARNING."""
        from scenehit.config import setup_logging

        logger = setup_logging("CHATTY")
        assert logger.level == logging.WARNING
