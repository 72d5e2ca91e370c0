"""
UTAP Configuration Management

This module provides configuration management for the UTAP trajectory analysis
platform. It includes unit conversion constants, command line and trend
defaults, and runtime configuration loaded from YAML files.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# =============================================================================
# Physical Constants
# =============================================================================


class Constants:
    """Unit conversion constants used for display formatting."""

    MS_TO_KMH: float = 3.6  # Velocity conversion: m/s to km/h
    DEGREES_HALF_TURN: float = 180.0  # Largest possible heading change


# =============================================================================
# Runtime Defaults
# =============================================================================


class Settings:
    """Defaults for command line runs and cross-flight trend queries."""

    # --- Performance Trends ---
    DEFAULT_TREND_METRIC: str = "accuracy"  # accuracy | stability | efficiency | response_time
    DEFAULT_TREND_PERIOD: str = "daily"  # daily | weekly | monthly
    TREND_METRICS = ("accuracy", "stability", "efficiency", "response_time")
    TREND_PERIODS = ("daily", "weekly", "monthly")

    # --- Reports ---
    DEFAULT_REPORT_FORMAT: str = "json"  # json | txt
    REPORT_FORMATS = ("json", "txt")
    DEFAULT_SPEED_UNIT: str = "ms"  # ms | kmh
    SPEED_UNITS = ("ms", "kmh")

    # --- Logging ---
    DEFAULT_LOG_LEVEL: str = "INFO"
    DEFAULT_LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# =============================================================================
# Runtime Configuration
# =============================================================================


class Config:
    """
    Runtime configuration manager for UTAP.

    Loads settings from YAML files or uses sensible defaults.
    Provides property-based access to common settings.

    Example:
        >>> config = Config('utap.yaml')
        >>> config.configure_logging()
        >>> print(f"Trend period: {config.trend_period}")
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file. If None or missing,
                        uses default configuration.
        """
        self.config_path = config_path
        self._config: Dict[str, Any] = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from YAML file or return defaults.

        Returns:
            Configuration dictionary
        """
        if self.config_path is None or not os.path.exists(self.config_path):
            return self._get_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load config file %s: %s", self.config_path, e)
            return self._get_default_config()

        if self._validate_config(config):
            return config

        logger.warning("Invalid config structure in %s, using defaults", self.config_path)
        return self._get_default_config()

    def _validate_config(self, config: Dict[str, Any]) -> bool:
        """
        Validate configuration structure and required fields.

        Args:
            config: Configuration dictionary to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            # Required: trends section
            assert "trends" in config
            assert config["trends"]["metric"] in Settings.TREND_METRICS
            assert config["trends"]["period"] in Settings.TREND_PERIODS

            # Required: report section
            assert "report" in config
            assert config["report"]["format"] in Settings.REPORT_FORMATS
            assert config["report"].get("speed_unit", Settings.DEFAULT_SPEED_UNIT) in Settings.SPEED_UNITS

            # Optional: logging section
            if "logging" in config:
                assert isinstance(config["logging"], dict)
                level = config["logging"].get("level", Settings.DEFAULT_LOG_LEVEL)
                assert isinstance(logging.getLevelName(str(level).upper()), int)

            return True
        except (AssertionError, KeyError, TypeError):
            return False

    def _get_default_config(self) -> Dict[str, Any]:
        """
        Get default configuration.

        Returns:
            Default configuration dictionary
        """
        return {
            "trends": {
                "metric": Settings.DEFAULT_TREND_METRIC,
                "period": Settings.DEFAULT_TREND_PERIOD,
            },
            "report": {
                "format": Settings.DEFAULT_REPORT_FORMAT,
                "output_dir": "reports",
                "speed_unit": Settings.DEFAULT_SPEED_UNIT,
            },
            "logging": {
                "level": Settings.DEFAULT_LOG_LEVEL,
                "format": Settings.DEFAULT_LOG_FORMAT,
            },
        }

    def save_config(self) -> None:
        """
        Save current configuration to YAML file.

        Raises:
            ValueError: If config_path is not set
        """
        if self.config_path is None:
            raise ValueError("Cannot save config: no config_path specified")

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self._config, f, default_flow_style=False)

    def configure_logging(self) -> None:
        """Install a root handler using the configured level and format."""
        logging.basicConfig(level=self.log_level, format=self.log_format)

    # --- Property Accessors ---

    @property
    def trend_metric(self) -> str:
        """Get default metric for performance trends."""
        return self._config["trends"]["metric"]

    @property
    def trend_period(self) -> str:
        """Get default bucketing period for performance trends."""
        return self._config["trends"]["period"]

    @property
    def report_format(self) -> str:
        """Get default report format."""
        return self._config["report"]["format"]

    @property
    def report_dir(self) -> str:
        """Get directory for generated reports."""
        return self._config["report"].get("output_dir", "reports")

    @property
    def speed_unit(self) -> str:
        """Get unit for displayed speeds."""
        return self._config["report"].get("speed_unit", Settings.DEFAULT_SPEED_UNIT)

    @property
    def log_level(self) -> str:
        """Get logging level name."""
        return str(self.get("logging.level", Settings.DEFAULT_LOG_LEVEL)).upper()

    @property
    def log_format(self) -> str:
        """Get logging format string."""
        return self.get("logging.format", Settings.DEFAULT_LOG_FORMAT)

    # --- Generic Accessors ---

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'trends.period')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('trends.period', 'daily')
            'weekly'
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'report.format')
            value: Value to set

        Example:
            >>> config.set('report.format', 'txt')
        """
        keys = key.split(".")
        config = self._config

        # Navigate to parent of target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
