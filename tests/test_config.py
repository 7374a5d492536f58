"""Tests for runtime configuration and logging setup."""

import logging

import pytest

from src.phong.config import LOG_FORMAT, RuntimeConfig, configure_logging


class TestRuntimeConfig:
    """Tests for RuntimeConfig."""

    def test_defaults(self):
        """Test that the defaults select the CPU backend without fast math."""
        config = RuntimeConfig()
        assert config.arch == "cpu"
        assert config.fast_math is False
        assert config.debug is False
        assert config.log_level == "INFO"

    def test_unknown_arch(self):
        """Test that an unsupported arch raises ValueError."""
        with pytest.raises(ValueError, match="Unknown Taichi arch"):
            RuntimeConfig(arch="tpu")

    def test_unknown_log_level(self):
        """Test that an unknown log level raises ValueError."""
        with pytest.raises(ValueError, match="Unknown log level"):
            RuntimeConfig(log_level="LOUD")

    def test_from_env(self, monkeypatch):
        """Test reading every setting from the environment."""
        monkeypatch.setenv("PHONG_ARCH", "vulkan")
        monkeypatch.setenv("PHONG_FAST_MATH", "TRUE")
        monkeypatch.setenv("PHONG_DEBUG", "false")
        monkeypatch.setenv("PHONG_LOG_LEVEL", "debug")
        config = RuntimeConfig.from_env()
        assert config.arch == "vulkan"
        assert config.fast_math is True
        assert config.debug is False
        assert config.log_level == "debug"

    def test_from_env_defaults(self, monkeypatch):
        """Test the fallbacks when nothing is set."""
        for name in ("PHONG_ARCH", "PHONG_FAST_MATH", "PHONG_DEBUG", "PHONG_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        assert RuntimeConfig.from_env() == RuntimeConfig()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture
    def package_logger(self):
        """Restore the package logger after each test."""
        package_logger = logging.getLogger("src.phong")
        handlers = list(package_logger.handlers)
        level = package_logger.level
        yield package_logger
        package_logger.handlers = handlers
        package_logger.setLevel(level)

    def test_sets_level_and_handler(self, package_logger):
        """Test that one formatted handler is attached."""
        package_logger.handlers = []
        result = configure_logging("debug")
        assert result is package_logger
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert package_logger.handlers[0].formatter._fmt == LOG_FORMAT

    def test_does_not_stack_handlers(self, package_logger):
        """Test that repeated calls only change the level."""
        package_logger.handlers = []
        configure_logging("INFO")
        configure_logging("WARNING")
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.WARNING
