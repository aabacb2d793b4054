"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

import yaml

from .defaults import (
    DEFAULT_TREND_THRESHOLD,
    DEFAULT_MIN_TREND_POINTS,
    DEFAULT_FORECAST_HORIZON,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_HISTORY_DB,
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_FIELD_LOG_LENGTH,
    DEFAULT_REPORT_DIR,
    DEFAULT_REPORT_FORMATS,
)


@dataclass
class ForecastConfig:
    """Trend forecasting configuration."""
    threshold: float = DEFAULT_TREND_THRESHOLD
    min_points: int = DEFAULT_MIN_TREND_POINTS
    horizon: int = DEFAULT_FORECAST_HORIZON


@dataclass
class HistoryConfig:
    """Score history configuration."""
    max_reports: Optional[int] = DEFAULT_HISTORY_LIMIT
    db_path: Optional[str] = DEFAULT_HISTORY_DB


@dataclass
class AuditConfig:
    """Audit logging configuration."""
    enabled: bool = True
    log_dir: str = DEFAULT_LOG_DIR
    console_output: bool = True
    max_field_length: int = DEFAULT_MAX_FIELD_LOG_LENGTH


@dataclass
class ReportConfig:
    """Report generation configuration."""
    output_dir: str = DEFAULT_REPORT_DIR
    formats: List[str] = field(default_factory=lambda: DEFAULT_REPORT_FORMATS.copy())
    template_dir: Optional[str] = None


@dataclass
class AnalyticsConfig:
    """Main analytics configuration."""
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


class Settings:
    """
    Application settings manager.

    Handles configuration from:
    - Environment variables
    - YAML config files
    - Programmatic overrides
    """

    def __init__(self):
        self._config: Optional[AnalyticsConfig] = None

    @property
    def config(self) -> AnalyticsConfig:
        """Get current configuration."""
        if self._config is None:
            self._config = self._load_defaults()
        return self._config

    def reset(self) -> None:
        """Drop the loaded configuration so defaults are re-read."""
        self._config = None

    def _load_defaults(self) -> AnalyticsConfig:
        """Load default configuration."""
        config = AnalyticsConfig()

        # Override from environment
        self._apply_env_overrides(config)

        return config

    def _apply_env_overrides(self, config: AnalyticsConfig) -> None:
        """Apply environment variable overrides."""
        if os.environ.get("ARCH_HEALTH_TREND_THRESHOLD"):
            config.forecast.threshold = float(os.environ["ARCH_HEALTH_TREND_THRESHOLD"])

        if os.environ.get("ARCH_HEALTH_HORIZON"):
            config.forecast.horizon = int(os.environ["ARCH_HEALTH_HORIZON"])

        if os.environ.get("ARCH_HEALTH_HISTORY_DB"):
            config.history.db_path = os.environ["ARCH_HEALTH_HISTORY_DB"]

        if os.environ.get("ARCH_HEALTH_LOG_DIR"):
            config.audit.log_dir = os.environ["ARCH_HEALTH_LOG_DIR"]

        if os.environ.get("ARCH_HEALTH_REPORT_DIR"):
            config.report.output_dir = os.environ["ARCH_HEALTH_REPORT_DIR"]

    def load_from_file(self, filepath: str) -> AnalyticsConfig:
        """
        Load configuration from YAML file.

        Args:
            filepath: Path to YAML config file

        Returns:
            Loaded configuration
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = self._parse_config(data)
        self._apply_env_overrides(config)
        self._config = config

        return config

    def _parse_config(self, data: Dict[str, Any]) -> AnalyticsConfig:
        """Parse config dictionary into AnalyticsConfig."""
        config = AnalyticsConfig()

        if "forecast" in data:
            forecast_data = data["forecast"] or {}
            config.forecast = ForecastConfig(
                threshold=float(forecast_data.get("threshold", DEFAULT_TREND_THRESHOLD)),
                min_points=int(forecast_data.get("min_points", DEFAULT_MIN_TREND_POINTS)),
                horizon=int(forecast_data.get("horizon", DEFAULT_FORECAST_HORIZON)),
            )

        if "history" in data:
            history_data = data["history"] or {}
            config.history = HistoryConfig(
                max_reports=history_data.get("max_reports", DEFAULT_HISTORY_LIMIT),
                db_path=history_data.get("db_path", DEFAULT_HISTORY_DB),
            )

        if "audit" in data:
            audit_data = data["audit"] or {}
            config.audit = AuditConfig(
                enabled=audit_data.get("enabled", True),
                log_dir=audit_data.get("log_dir", DEFAULT_LOG_DIR),
                console_output=audit_data.get("console_output", True),
                max_field_length=audit_data.get("max_field_length", DEFAULT_MAX_FIELD_LOG_LENGTH),
            )

        if "report" in data:
            report_data = data["report"] or {}
            config.report = ReportConfig(
                output_dir=report_data.get("output_dir", DEFAULT_REPORT_DIR),
                formats=report_data.get("formats", DEFAULT_REPORT_FORMATS.copy()),
                template_dir=report_data.get("template_dir"),
            )

        return config

    def save_to_file(self, filepath: str) -> None:
        """Save current configuration to YAML file."""
        data = self._config_to_dict(self.config)

        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

    def _config_to_dict(self, config: AnalyticsConfig) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "forecast": {
                "threshold": config.forecast.threshold,
                "min_points": config.forecast.min_points,
                "horizon": config.forecast.horizon,
            },
            "history": {
                "max_reports": config.history.max_reports,
                "db_path": config.history.db_path,
            },
            "audit": {
                "enabled": config.audit.enabled,
                "log_dir": config.audit.log_dir,
                "console_output": config.audit.console_output,
                "max_field_length": config.audit.max_field_length,
            },
            "report": {
                "output_dir": config.report.output_dir,
                "formats": config.report.formats,
                "template_dir": config.report.template_dir,
            },
        }


# Global settings instance
settings = Settings()
