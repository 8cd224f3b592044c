"""
Unit tests for configuration module.

Tests configuration loading, path resolution, and validation.
"""

import os
import logging
from pathlib import Path
from unittest.mock import patch

from config import Config, DEFAULT_SHEET_DEPLOYMENT_ID


class TestConfig:
    """Test suite for Config class."""

    def test_default_configuration(self):
        """Test that default configuration values are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

            assert config.log_level == "INFO"
            assert config.log_file is None
            assert config.server_name == "job-tracker-mcp-server"
            assert config.remote_timeout_seconds == 15.0
            assert config.remote_retry_count == 2
            assert config.scrape_timeout_seconds == 10.0
            assert config.export_dir == "data/exports"

            assert config.repo_root.exists()
            assert config.repo_root.is_dir()

    def test_db_path_from_env_absolute(self):
        """Test database path resolution from JOBTRACKER_DB (absolute)."""
        test_path = "/absolute/path/to/jobs.db"
        with patch.dict(os.environ, {"JOBTRACKER_DB": test_path}, clear=True):
            config = Config()
            assert str(config.db_path) == test_path

    def test_db_path_from_env_relative(self):
        """Test database path resolution from JOBTRACKER_DB (relative)."""
        with patch.dict(os.environ, {"JOBTRACKER_DB": "custom/jobs.db"}, clear=True):
            config = Config()
            assert config.db_path == config.repo_root / "custom" / "jobs.db"

    def test_db_path_from_jobtracker_root(self):
        """Test database path resolution from JOBTRACKER_ROOT."""
        with patch.dict(os.environ, {"JOBTRACKER_ROOT": "/opt/jobtracker"}, clear=True):
            config = Config()
            assert config.db_path == Path("/opt/jobtracker") / "data" / "jobs.db"

    def test_db_path_default(self):
        """Test default database path resolution."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            assert config.db_path == config.repo_root / "data" / "jobs.db"

    def test_db_path_priority(self):
        """Test that JOBTRACKER_DB takes priority over JOBTRACKER_ROOT."""
        with patch.dict(os.environ, {
            "JOBTRACKER_DB": "/custom/db.db",
            "JOBTRACKER_ROOT": "/opt/jobtracker"
        }, clear=True):
            config = Config()
            assert str(config.db_path) == "/custom/db.db"

    def test_log_level_case_insensitive(self):
        """Test that log level is converted to uppercase."""
        with patch.dict(os.environ, {"JOBTRACKER_LOG_LEVEL": "debug"}, clear=True):
            config = Config()
            assert config.log_level == "DEBUG"

    def test_log_file_from_env_relative(self):
        """Test log file path from environment (relative)."""
        with patch.dict(os.environ, {"JOBTRACKER_LOG_FILE": "logs/server.log"}, clear=True):
            config = Config()
            assert config.log_file == config.repo_root / "logs" / "server.log"

    def test_sheet_url_derived_from_deployment_id(self):
        """Test the sheet base URL follows the configured deployment id."""
        with patch.dict(os.environ, {"JOBTRACKER_SHEET_DEPLOYMENT_ID": "abc123"}, clear=True):
            config = Config()
            assert config.sheet_base_url == "https://script.google.com/macros/s/abc123/"

    def test_sheet_url_default_deployment(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            assert DEFAULT_SHEET_DEPLOYMENT_ID in config.sheet_base_url

    def test_sheet_base_url_override(self):
        """Test an explicit base URL wins over the deployment id."""
        with patch.dict(os.environ, {
            "JOBTRACKER_SHEET_DEPLOYMENT_ID": "abc123",
            "JOBTRACKER_SHEET_BASE_URL": "http://localhost:8080/sheet/",
        }, clear=True):
            config = Config()
            assert config.sheet_base_url == "http://localhost:8080/sheet/"

    def test_remote_settings_from_env(self):
        with patch.dict(os.environ, {
            "JOBTRACKER_REMOTE_TIMEOUT_SECONDS": "3.5",
            "JOBTRACKER_REMOTE_RETRY_COUNT": "5",
            "JOBTRACKER_SCRAPE_TIMEOUT_SECONDS": "4",
        }, clear=True):
            config = Config()
            assert config.remote_timeout_seconds == 3.5
            assert config.remote_retry_count == 5
            assert config.scrape_timeout_seconds == 4.0

    def test_invalid_numeric_env_falls_back_to_default(self):
        """Test that unparsable numbers keep the defaults."""
        with patch.dict(os.environ, {
            "JOBTRACKER_REMOTE_TIMEOUT_SECONDS": "soon",
            "JOBTRACKER_REMOTE_RETRY_COUNT": "many",
        }, clear=True):
            config = Config()
            assert config.remote_timeout_seconds == 15.0
            assert config.remote_retry_count == 2

    def test_resolve_repo_path(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            assert config.resolve_repo_path("data/exports") == config.repo_root / "data" / "exports"
            assert config.resolve_repo_path("/tmp/out.csv") == Path("/tmp/out.csv")

    def test_validate_missing_database(self, tmp_path):
        """Test validation warns when database doesn't exist."""
        non_existent = tmp_path / "missing.db"
        with patch.dict(os.environ, {"JOBTRACKER_DB": str(non_existent)}, clear=True):
            config = Config()
            warnings = config.validate()

            assert len(warnings) == 1
            assert "Database file not found" in warnings[0]
            assert str(non_existent) in warnings[0]

    def test_validate_bad_sheet_url_and_timeout(self, tmp_path):
        """Test validation warns about a non-http sheet URL and a non-positive timeout."""
        db_file = tmp_path / "jobs.db"
        db_file.touch()
        with patch.dict(os.environ, {
            "JOBTRACKER_DB": str(db_file),
            "JOBTRACKER_SHEET_BASE_URL": "ftp://example.com/",
            "JOBTRACKER_REMOTE_TIMEOUT_SECONDS": "0",
        }, clear=True):
            config = Config()
            warnings = config.validate()

            assert any("not an http(s) URL" in w for w in warnings)
            assert any("Remote timeout must be positive" in w for w in warnings)

    def test_setup_logging_default(self):
        """Test logging setup with default configuration."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            config.setup_logging()

            root_logger = logging.getLogger()
            assert root_logger.level == logging.INFO
            assert len(root_logger.handlers) >= 1

    def test_setup_logging_creates_directory(self, tmp_path):
        """Test that logging setup creates log directory if needed."""
        log_file = tmp_path / "nested" / "logs" / "test.log"

        with patch.dict(os.environ, {"JOBTRACKER_LOG_FILE": str(log_file)}, clear=True):
            config = Config()
            config.setup_logging()

            assert log_file.parent.is_dir()

    def test_setup_logging_invalid_level(self):
        """Test logging setup with invalid log level falls back to INFO."""
        with patch.dict(os.environ, {"JOBTRACKER_LOG_LEVEL": "INVALID"}, clear=True):
            config = Config()
            config.setup_logging()

            assert logging.getLogger().level == logging.INFO


class TestConfigIntegration:
    """Integration tests for configuration module."""

    def test_full_configuration_workflow(self, tmp_path):
        """Test complete configuration workflow."""
        db_file = tmp_path / "data" / "jobs.db"
        db_file.parent.mkdir(parents=True)
        db_file.touch()

        log_file = tmp_path / "logs" / "server.log"

        with patch.dict(os.environ, {
            "JOBTRACKER_DB": str(db_file),
            "JOBTRACKER_LOG_LEVEL": "DEBUG",
            "JOBTRACKER_LOG_FILE": str(log_file),
            "JOBTRACKER_SERVER_NAME": "test-server"
        }, clear=True):
            config = Config()

            assert config.validate() == []

            config.setup_logging()

            assert config.db_path == db_file
            assert config.log_level == "DEBUG"
            assert config.log_file == log_file
            assert config.server_name == "test-server"

            logger = logging.getLogger("test")
            logger.info("Test message")

            assert log_file.exists()
            assert "Test message" in log_file.read_text()
