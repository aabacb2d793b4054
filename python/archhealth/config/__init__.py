"""Configuration components."""

from .settings import (
    Settings,
    AnalyticsConfig,
    ForecastConfig,
    HistoryConfig,
    AuditConfig,
    ReportConfig,
    settings,
)
from .defaults import (
    SCORE_WEIGHTS,
    SEVERITY_LEVELS,
    DEFAULT_TREND_THRESHOLD,
    DEFAULT_MIN_TREND_POINTS,
    DEFAULT_FORECAST_HORIZON,
    DEFAULT_HISTORY_LIMIT,
)

__all__ = [
    "Settings",
    "AnalyticsConfig",
    "ForecastConfig",
    "HistoryConfig",
    "AuditConfig",
    "ReportConfig",
    "settings",
    "SCORE_WEIGHTS",
    "SEVERITY_LEVELS",
    "DEFAULT_TREND_THRESHOLD",
    "DEFAULT_MIN_TREND_POINTS",
    "DEFAULT_FORECAST_HORIZON",
    "DEFAULT_HISTORY_LIMIT",
]
