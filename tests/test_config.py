"""
Tests for configuration management.
"""

import logging

import pytest
from utap.config import Config, Settings


@pytest.fixture
def sample_config():
    """Get custom configuration."""
    return str(
        {
            "trends": {
                "metric": "stability",
                "period": "weekly",
            },
            "report": {
                "format": "txt",
                "output_dir": "custom_reports",
            },
            "logging": {
                "level": "DEBUG",
                "format": "%(levelname)s - %(message)s",
            },
        }
    )


class TestConfig:
    """Tests for Config class."""

    def test_default_config(self):
        """Test loading default configuration."""
        config = Config(config_path="non_existent_config.yaml")
        assert config.trend_metric == Settings.DEFAULT_TREND_METRIC
        assert config.trend_period == "daily"
        assert config.report_format == "json"

        config = Config(config_path=None)
        assert config.trend_metric == "accuracy"
        assert config.report_dir == "reports"
        assert config.log_level == "INFO"

    def test_custom_config(self, tmp_path, sample_config):
        """Test loading custom configuration from YAML file."""
        custom_config_path = tmp_path / "custom_config.yaml"
        custom_config_path.write_text(sample_config)
        config = Config(config_path=str(custom_config_path))
        assert config.trend_metric == "stability"
        assert config.trend_period == "weekly"
        assert config.report_format == "txt"
        assert config.report_dir == "custom_reports"
        assert config.log_level == "DEBUG"
        assert config.log_format == "%(levelname)s - %(message)s"

    def test_save_config(self, tmp_path, sample_config):
        """Test saving configuration to YAML file."""
        custom_config_path = tmp_path / "custom_config.yaml"
        custom_config_path.write_text(sample_config)
        config = Config(config_path=str(custom_config_path))

        # Modify a value and save
        config.set("trends.period", "monthly")
        config.save_config()

        # Reload and verify change
        reloaded_config = Config(config_path=str(custom_config_path))
        assert reloaded_config.trend_period == "monthly"

    def test_save_without_path(self):
        """Saving without a config path is an error."""
        config = Config()
        with pytest.raises(ValueError):
            config.save_config()

    def test_malformed_config(self, tmp_path):
        """Test handling of malformed configuration file."""
        malformed_config_path = tmp_path / "malformed_config.yaml"
        malformed_config_content = """
trends:
  metric: not_a_metric
  period: daily
report:
  format: json
"""
        malformed_config_path.write_text(malformed_config_content)
        config = Config(config_path=str(malformed_config_path))
        # Should fall back to default config
        assert config.trend_metric == "accuracy"
        assert config.report_dir == "reports"

    def test_unparsable_config(self, tmp_path):
        """Invalid YAML falls back to defaults."""
        broken_path = tmp_path / "broken.yaml"
        broken_path.write_text("trends: [unclosed\n")
        config = Config(config_path=str(broken_path))
        assert config.trend_period == "daily"

    def test_speed_unit(self, tmp_path):
        """Speed unit defaults to m/s and rejects unknown units."""
        assert Config().speed_unit == "ms"

        config_path = tmp_path / "kmh.yaml"
        config_path.write_text(
            "trends: {metric: accuracy, period: daily}\n"
            "report: {format: json, speed_unit: kmh}\n"
        )
        assert Config(config_path=str(config_path)).speed_unit == "kmh"

        config_path.write_text(
            "trends: {metric: accuracy, period: daily}\n"
            "report: {format: json, speed_unit: knots}\n"
        )
        assert Config(config_path=str(config_path)).speed_unit == "ms"

    def test_get_and_set(self):
        """Dot notation access."""
        config = Config()
        assert config.get("report.format") == "json"
        assert config.get("report.missing", "fallback") == "fallback"
        assert config.get("trends.metric.deeper", 1) == 1

        config.set("extra.nested.value", 42)
        assert config.get("extra.nested.value") == 42

    def test_configure_logging(self, monkeypatch):
        """Logging is configured from the logging section."""
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

        config = Config()
        config.set("logging.level", "warning")
        config.configure_logging()

        assert calls["level"] == "WARNING"
        assert calls["format"] == Settings.DEFAULT_LOG_FORMAT


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
