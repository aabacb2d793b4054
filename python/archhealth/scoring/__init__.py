"""Health scoring components."""

from .score_aggregator import (
    ScoreAggregator,
    compute_overall_score,
    compute_severity_counts,
)

__all__ = [
    "ScoreAggregator",
    "compute_overall_score",
    "compute_severity_counts",
]
