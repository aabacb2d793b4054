"""Result models and history."""

from .finding import Finding, FindingCategory, Severity
from .score_report import (
    ScoreReport,
    SubScores,
    clamp_score,
    round_half_up,
    health_status,
    score_band,
    empty_severity_counts,
)
from .report_history import ReportHistory

__all__ = [
    "Finding",
    "FindingCategory",
    "Severity",
    "ScoreReport",
    "SubScores",
    "clamp_score",
    "round_half_up",
    "health_status",
    "score_band",
    "empty_severity_counts",
    "ReportHistory",
]
