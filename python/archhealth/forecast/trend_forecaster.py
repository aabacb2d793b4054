"""Linear-regression trend detection and score forecasting."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from ..config.defaults import (
    DEFAULT_TREND_THRESHOLD,
    DEFAULT_MIN_TREND_POINTS,
    DEFAULT_FORECAST_HORIZON,
)
from ..results import ReportHistory, clamp_score, round_half_up

logger = logging.getLogger(__name__)


class TrendDirection(Enum):
    """Qualitative direction of a score history."""
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class Prediction:
    """Forecast score for a position after the known history."""
    offset: int
    predicted_score: int

    def to_dict(self) -> Dict[str, int]:
        return {"offset": self.offset, "predicted_score": self.predicted_score}


@dataclass(frozen=True)
class TrendResult:
    """Fitted trend over a score history."""
    slope: float = 0.0
    trend: TrendDirection = TrendDirection.STABLE
    predictions: Tuple[Prediction, ...] = ()
    intercept: float = 0.0
    sample_size: int = 0

    @property
    def has_trend(self) -> bool:
        """False for the neutral result of a too-short history."""
        return self.sample_size > 0

    @property
    def final_prediction(self) -> Optional[Prediction]:
        return self.predictions[-1] if self.predictions else None

    def describe(self) -> str:
        """One-sentence narrative of the trend."""
        if not self.has_trend:
            return "Not enough history to forecast a trend."

        last = self.final_prediction
        if self.trend is TrendDirection.STABLE or last is None:
            return (
                "Score is stable. Continue monitoring and improving weak "
                "areas to see an upward trend."
            )

        projection = (
            f"At this rate it is projected to be around {last.predicted_score} "
            f"in the next {last.offset} validations."
        )
        if self.trend is TrendDirection.IMPROVING:
            return f"Score is improving. {projection}"
        return (
            f"Score is declining. {projection} "
            "Consider addressing critical issues to reverse the trend."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slope": self.slope,
            "trend": self.trend.value,
            "predictions": [p.to_dict() for p in self.predictions],
            "intercept": self.intercept,
            "sample_size": self.sample_size,
        }


NO_TREND = TrendResult()


class TrendForecaster:
    """
    Fits an ordinary least-squares line of score against history index.

    The slope is compared with a fixed threshold in score points per step;
    it is not scaled by the variance or length of the history.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_TREND_THRESHOLD,
        min_points: int = DEFAULT_MIN_TREND_POINTS,
        default_horizon: int = DEFAULT_FORECAST_HORIZON,
    ):
        if threshold < 0:
            raise ValueError(f"threshold must not be negative, got {threshold}")
        self.threshold = threshold
        # a line needs at least two points
        self.min_points = max(2, min_points)
        self.default_horizon = default_horizon

    @classmethod
    def from_config(cls, config) -> "TrendForecaster":
        """Build from a ForecastConfig."""
        return cls(
            threshold=config.threshold,
            min_points=config.min_points,
            default_horizon=config.horizon,
        )

    def classify(self, slope: float) -> TrendDirection:
        if slope > self.threshold:
            return TrendDirection.IMPROVING
        if slope < -self.threshold:
            return TrendDirection.DECLINING
        return TrendDirection.STABLE

    def fit_trend(self, scores: Sequence[float], horizon: Optional[int] = None) -> TrendResult:
        """
        Fit the trend of a score history and project future scores.

        Args:
            scores: Scores ordered oldest first
            horizon: Number of future points to project

        Returns:
            TrendResult; the neutral stable result when the history is
            shorter than min_points
        """
        if horizon is None:
            horizon = self.default_horizon

        n = len(scores)
        if n < self.min_points:
            logger.debug(f"Skipping trend fit: {n} point(s), need {self.min_points}")
            return NO_TREND

        sum_x = sum_y = sum_xy = sum_xx = 0.0
        for x, y in enumerate(scores):
            sum_x += x
            sum_y += y
            sum_xy += x * y
            sum_xx += x * x

        denominator = n * sum_xx - sum_x * sum_x
        if denominator == 0:
            return NO_TREND

        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n

        predictions = tuple(
            Prediction(
                offset=i + 1,
                predicted_score=round_half_up(clamp_score(intercept + slope * (n + i))),
            )
            for i in range(max(0, horizon))
        )

        result = TrendResult(
            slope=slope,
            trend=self.classify(slope),
            predictions=predictions,
            intercept=intercept,
            sample_size=n,
        )
        logger.debug(f"Fitted {result.trend.value} trend over {n} points (slope={slope:.3f})")
        return result

    def fit_history(self, history: ReportHistory, horizon: Optional[int] = None) -> TrendResult:
        """Fit the trend of a report history's overall scores."""
        return self.fit_trend(history.scores(), horizon=horizon)


_default_forecaster = TrendForecaster()


def fit_trend(scores: Sequence[float], horizon: int = DEFAULT_FORECAST_HORIZON) -> TrendResult:
    """Fit a trend with the default threshold of one score point per step."""
    return _default_forecaster.fit_trend(scores, horizon=horizon)
