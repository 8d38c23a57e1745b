"""
Test suite for configuration and logging setup.
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from arango_batch import config as config_module
from arango_batch.config import BatchConfig, get_config, set_config
from arango_batch.core.coordinator import BatchCoordinator
from arango_batch.logging_config import PACKAGE_LOGGER, setup_logging
from arango_batch.transport.target import Server


class TestBatchConfig:
    """Tests for BatchConfig."""

    def test_defaults(self, monkeypatch):
        for name in ("ENDPOINT", "DATABASE", "PASSWORD", "BATCH_BOUNDARY"):
            monkeypatch.delenv(f"ARANGO_{name}", raising=False)

        config = BatchConfig(_env_file=None)

        assert config.endpoint == "http://localhost:8529"
        assert config.batch_boundary == "ArangoDriverRequestPart"
        assert config.database is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("ARANGO_ENDPOINT", "https://db.example:8529/")
        monkeypatch.setenv("ARANGO_BATCH_BOUNDARY", "XYZ")
        monkeypatch.setenv("ARANGO_TIMEOUT_SECONDS", "2.5")

        config = BatchConfig(_env_file=None)

        assert config.base_url == "https://db.example:8529"
        assert config.batch_boundary == "XYZ"
        assert config.timeout_seconds == 2.5

    def test_validation(self):
        with pytest.raises(ValidationError):
            BatchConfig(_env_file=None, timeout_seconds=0)
        with pytest.raises(ValidationError):
            BatchConfig(_env_file=None, batch_boundary="")

    def test_global_config(self, monkeypatch, test_config):
        monkeypatch.setattr(config_module, "_config", None)

        set_config(test_config)

        assert get_config() is test_config

    def test_boundary_from_config(self, mock_transport, test_config):
        test_config.batch_boundary = "XYZ"
        batch = BatchCoordinator(server=Server(mock_transport, test_config), config=test_config)
        batch.add_operation("GET", "/_api/version")

        assert batch.headers == {"Content-Type": "multipart/form-data; boundary=XYZ"}
        assert batch.encode().startswith("--XYZ\r\n")
        assert batch.encode().endswith("--XYZ--\r\n\r\n")


class TestLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        level = package_logger.level
        yield
        structlog.reset_defaults()
        package_logger.setLevel(level)

    def test_config_drives_json_renderer_and_level(self, test_config):
        test_config.log_level = "warning"
        test_config.log_json = True

        setup_logging(test_config)

        assert structlog.is_configured()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING

    def test_config_drives_console_renderer(self, test_config):
        test_config.log_json = False

        setup_logging(test_config)

        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_arguments_override_config(self, test_config):
        test_config.log_json = True

        setup_logging(test_config, level="ERROR", json_format=False)

        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR

    def test_server_from_config_configures_logging(self, test_config):
        test_config.log_level = "INFO"
        test_config.log_json = True

        Server.from_config(test_config, configure_logging=True)

        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO

    def test_server_from_config_leaves_logging_alone_by_default(self, test_config):
        structlog.reset_defaults()

        Server.from_config(test_config)

        assert structlog.is_configured() is False
