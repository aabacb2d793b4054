"""Chronological history of score reports."""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

from ..config.defaults import DEFAULT_HISTORY_LIMIT
from .score_report import ScoreReport


class ReportHistory:
    """
    Ordered history of score reports, oldest first.

    Features:
    - Deduplication by report id
    - Timestamp ordering regardless of insertion order
    - Bounded to the most recent reports
    """

    def __init__(self, max_reports: Optional[int] = DEFAULT_HISTORY_LIMIT):
        if max_reports is not None and max_reports < 1:
            raise ValueError(f"max_reports must be positive, got {max_reports}")
        self.max_reports = max_reports
        self._reports: List[ScoreReport] = []
        self._seen_ids: Set[str] = set()

    def add(self, report: ScoreReport) -> bool:
        """
        Add a report, keeping the history ordered and bounded.

        Args:
            report: Report to add

        Returns:
            True if the report was added (not a duplicate)
        """
        if report.id in self._seen_ids:
            return False

        self._seen_ids.add(report.id)
        self._reports.append(report)
        self._reports.sort(key=lambda r: r.timestamp)

        if self.max_reports is not None:
            while len(self._reports) > self.max_reports:
                dropped = self._reports.pop(0)
                self._seen_ids.discard(dropped.id)

        return report.id in self._seen_ids

    def add_all(self, reports: Iterable[ScoreReport]) -> int:
        """Add multiple reports, returning count of new reports kept."""
        return sum(1 for r in reports if self.add(r))

    def scores(self) -> List[int]:
        """Overall scores, oldest first."""
        return [r.overall_score for r in self._reports]

    def reports(self) -> List[ScoreReport]:
        return list(self._reports)

    def latest(self) -> Optional[ScoreReport]:
        return self._reports[-1] if self._reports else None

    def for_project(self, project_id: str) -> "ReportHistory":
        """Sub-history holding only one project's reports."""
        history = ReportHistory(max_reports=self.max_reports)
        history.add_all(r for r in self._reports if r.project_id == project_id)
        return history

    def clear(self) -> None:
        self._reports.clear()
        self._seen_ids.clear()

    def get_summary(self) -> Dict[str, Any]:
        """Get history summary."""
        scores = self.scores()
        if not scores:
            return {
                "total_reports": 0,
                "latest_score": None,
                "average_score": None,
                "best_score": None,
                "worst_score": None,
                "total_critical": 0,
                "total_high": 0,
            }

        return {
            "total_reports": len(scores),
            "latest_score": scores[-1],
            "average_score": round(sum(scores) / len(scores), 1),
            "best_score": max(scores),
            "worst_score": min(scores),
            "total_critical": sum(r.critical_count for r in self._reports),
            "total_high": sum(r.high_count for r in self._reports),
        }

    def __len__(self) -> int:
        return len(self._reports)

    def __iter__(self) -> Iterator[ScoreReport]:
        return iter(list(self._reports))
