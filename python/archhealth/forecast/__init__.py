"""Trend forecasting components."""

from .trend_forecaster import (
    TrendForecaster,
    TrendResult,
    TrendDirection,
    Prediction,
    NO_TREND,
    fit_trend,
)

__all__ = [
    "TrendForecaster",
    "TrendResult",
    "TrendDirection",
    "Prediction",
    "NO_TREND",
    "fit_trend",
]
