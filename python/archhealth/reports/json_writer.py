"""JSON report writer."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .. import __version__
from ..forecast import TrendResult
from ..results import ReportHistory, ScoreReport


class JSONWriter:
    """Writes score reports to JSON format."""

    def __init__(self, pretty_print: bool = True, include_findings: bool = True):
        self.pretty_print = pretty_print
        self.include_findings = include_findings

    def write(
        self,
        report: ScoreReport,
        output_path: str,
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None
    ) -> str:
        """
        Write score report to JSON file.

        Args:
            report: Report to write
            output_path: Output file path
            trend: Optional fitted trend
            history: Optional report history

        Returns:
            Path to written file
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_string(report, trend=trend, history=history))

        return str(path)

    def _format_report(
        self,
        report: ScoreReport,
        trend: Optional[TrendResult],
        history: Optional[ReportHistory]
    ) -> Dict[str, Any]:
        """Format score report for JSON output."""
        data: Dict[str, Any] = {
            "metadata": {
                "report_type": "architecture_health",
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "report_id": report.id,
                "version": __version__,
            },
            "summary": report.get_summary(),
            "report": report.to_dict(),
            "trend": trend.to_dict() if trend else None,
            "trend_summary": trend.describe() if trend else None,
            "history": history.get_summary() if history is not None else None,
        }

        if self.include_findings:
            data["by_severity"] = {
                level: [f.to_dict() for f in findings]
                for level, findings in report.get_findings_by_severity().items()
            }
            data["by_category"] = {
                category: [f.to_dict() for f in findings]
                for category, findings in report.get_findings_by_category().items()
            }
        else:
            data["report"].pop("findings", None)

        return data

    def to_string(
        self,
        report: ScoreReport,
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None
    ) -> str:
        """Convert score report to JSON string."""
        data = self._format_report(report, trend, history)
        if self.pretty_print:
            return json.dumps(data, indent=2, default=str)
        return json.dumps(data, default=str)
