"""Tests for configuration module"""
import os
from pathlib import Path
from unittest.mock import patch
import pytest
from pydantic import ValidationError

from config import Config


class TestConfig:
    """Test configuration validation and parsing"""

    def test_default_config(self):
        """Test default configuration values"""
        config = Config()

        assert config.perf_counters_engine == "legacy"
        assert config.perfdata_dir == Path("/opt/dhcp-metrics-exporter/perfdata")
        assert config.metrics_port == 9182
        assert config.metrics_host == "0.0.0.0"
        assert config.metrics_namespace == "windows"
        assert config.log_level == "INFO"
        assert config.log_format == "json"
        assert config.log_file is None
        assert config.enabled_collectors == ["dhcp"]

    def test_environment_override(self):
        """Test configuration override from environment variables"""
        env_vars = {
            "PERF_COUNTERS_ENGINE": "direct",
            "PERFDATA_DIR": "/var/lib/perfdata",
            "METRICS_PORT": "8080",
            "METRICS_HOST": "127.0.0.1",
            "LOG_LEVEL": "debug",
            "LOG_FORMAT": "CONSOLE",
            "ENABLED_COLLECTORS": "dhcp, cpu"
        }

        with patch.dict(os.environ, env_vars):
            config = Config()

            assert config.perf_counters_engine == "direct"
            assert config.perfdata_dir == Path("/var/lib/perfdata")
            assert config.metrics_port == 8080
            assert config.metrics_host == "127.0.0.1"
            assert config.log_level == "DEBUG"
            assert config.log_format == "console"
            assert config.enabled_collectors == ["dhcp", "cpu"]

    def test_unknown_engine_is_accepted(self):
        """Unrecognized engines are resolved by the collector, not rejected here"""
        with patch.dict(os.environ, {"PERF_COUNTERS_ENGINE": "pdh-v2"}):
            assert Config().perf_counters_engine == "pdh-v2"

    def test_validation_metrics_port(self):
        """Test validation of metrics port"""
        with patch.dict(os.environ, {"METRICS_PORT": "0"}):
            with pytest.raises(ValidationError):
                Config()

        with patch.dict(os.environ, {"METRICS_PORT": "70000"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_log_level(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "verbose"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_scrape_timeout(self):
        with patch.dict(os.environ, {"SCRAPE_TIMEOUT_SECONDS": "0"}):
            with pytest.raises(ValidationError):
                Config()

    def test_trusted_hosts_parsing(self):
        with patch.dict(os.environ, {"TRUSTED_HOSTS": "localhost, metrics.local"}):
            assert Config().trusted_hosts == ["localhost", "metrics.local"]

    def test_is_collector_enabled(self):
        """Test collector enabled check"""
        config = Config()

        assert config.is_collector_enabled("dhcp") is True
        assert config.is_collector_enabled("nonexistent") is False

    def test_directory_creation(self, tmp_path):
        """Test that parent directories are created for the log file"""
        log_file = tmp_path / "subdir" / "test.log"

        with patch.dict(os.environ, {"LOG_FILE": str(log_file)}):
            config = Config()

            assert config.log_file.parent.exists()
