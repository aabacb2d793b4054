"""Weighted health scoring and severity aggregation."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config.defaults import SCORE_WEIGHTS
from ..results import (
    Finding,
    ScoreReport,
    Severity,
    SubScores,
    clamp_score,
    empty_severity_counts,
    round_half_up,
)

logger = logging.getLogger(__name__)

FindingLike = Union[Finding, Mapping[str, Any]]
SubScoresLike = Union[SubScores, Mapping[str, Any], None]


def _raw_severity(finding: FindingLike) -> Any:
    if isinstance(finding, Finding):
        return finding.severity
    if isinstance(finding, Mapping):
        return finding.get("severity")
    return getattr(finding, "severity", None)


class ScoreAggregator:
    """
    Reduces findings and sub-scores into one scored report.

    Both reductions are fail-soft: out-of-range sub-scores are clamped and
    findings with a non-canonical severity are left out of every count.
    """

    weights = SCORE_WEIGHTS

    def compute_overall_score(self, sub_scores: SubScoresLike) -> int:
        """
        Compute the weighted overall score.

        Args:
            sub_scores: SubScores or a mapping with security, performance,
                reliability and maintainability (missing ones count as 0)

        Returns:
            Integer score in [0, 100]
        """
        if not isinstance(sub_scores, SubScores):
            sub_scores = SubScores.from_dict(sub_scores)

        clamped = sub_scores.clamped()
        weighted = sum(
            weight * getattr(clamped, name)
            for name, weight in self.weights.items()
        )

        return int(clamp_score(round_half_up(weighted)))

    def compute_severity_counts(self, findings: Iterable[FindingLike]) -> Dict[str, int]:
        """
        Count findings per canonical severity.

        Args:
            findings: Findings or dicts carrying a severity field

        Returns:
            Mapping with exactly critical, high, medium and low
        """
        counts = empty_severity_counts()

        for finding in findings:
            level = Severity.parse(_raw_severity(finding))
            if level is None:
                logger.debug(f"Excluding finding with severity {_raw_severity(finding)!r}")
                continue
            counts[level.value] += 1

        return counts

    def unrecognized_findings(self, findings: Iterable[FindingLike]) -> List[FindingLike]:
        """Findings whose severity is left out of the counts."""
        return [f for f in findings if Severity.parse(_raw_severity(f)) is None]

    def count_unrecognized(self, findings: Iterable[FindingLike]) -> int:
        return len(self.unrecognized_findings(findings))

    def build_report(
        self,
        findings: Iterable[FindingLike],
        sub_scores: SubScoresLike,
        project_id: str = "",
        summary: str = "",
        services_count: int = 0,
        timestamp: Optional[datetime] = None,
    ) -> ScoreReport:
        """Score one analysis run into an immutable report."""
        normalized_list: List[Finding] = []
        for finding in findings:
            if isinstance(finding, Finding):
                normalized_list.append(finding)
            elif isinstance(finding, Mapping):
                normalized_list.append(Finding.from_dict(finding))
            else:
                logger.warning(f"Skipping malformed finding: {finding!r:.80}")
        normalized = tuple(normalized_list)
        if not isinstance(sub_scores, SubScores):
            sub_scores = SubScores.from_dict(sub_scores)

        kwargs: Dict[str, Any] = {}
        if timestamp is not None:
            kwargs["timestamp"] = timestamp

        report = ScoreReport(
            overall_score=self.compute_overall_score(sub_scores),
            severity_counts=self.compute_severity_counts(normalized),
            project_id=project_id,
            findings=normalized,
            sub_scores=sub_scores,
            summary=summary,
            services_count=services_count,
            **kwargs,
        )

        excluded = self.count_unrecognized(normalized)
        if excluded:
            logger.warning(
                f"{excluded} finding(s) with unrecognized severity left out of report {report.id[:8]}"
            )

        logger.debug(
            f"Report {report.id[:8]} scored {report.overall_score} "
            f"({report.status}) from {len(normalized)} finding(s)"
        )
        return report


_default_aggregator = ScoreAggregator()


def compute_overall_score(sub_scores: SubScoresLike) -> int:
    """Weighted overall score using the fixed category weights."""
    return _default_aggregator.compute_overall_score(sub_scores)


def compute_severity_counts(findings: Iterable[FindingLike]) -> Dict[str, int]:
    """Per-severity finding counts; non-canonical severities are excluded."""
    return _default_aggregator.compute_severity_counts(findings)
