"""Markdown report writer."""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..forecast import TrendDirection, TrendResult
from ..results import ReportHistory, ScoreReport, Severity


class MarkdownWriter:
    """Writes score reports to Markdown format."""

    def __init__(self, include_toc: bool = True, include_findings: bool = True):
        self.include_toc = include_toc
        self.include_findings = include_findings

    def write(
        self,
        report: ScoreReport,
        output_path: str,
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None
    ) -> str:
        """
        Write score report to Markdown file.

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

        md = self._render(report, trend, history)

        with open(path, "w", encoding="utf-8") as f:
            f.write(md)

        return str(path)

    def _render(
        self,
        report: ScoreReport,
        trend: Optional[TrendResult],
        history: Optional[ReportHistory]
    ) -> str:
        """Render Markdown report."""
        lines: List[str] = []
        summary = report.get_summary()

        # Header
        lines.append("# Architecture Health Report")
        lines.append("")
        lines.append(f"**Generated:** {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}")
        lines.append(f"**Project:** {report.project_id or 'N/A'}")
        lines.append(f"**Report ID:** `{report.id[:8]}`")
        lines.append("")

        if self.include_toc:
            lines.append("## Table of Contents")
            lines.append("")
            lines.append("- [Summary](#summary)")
            lines.append("- [Sub-scores](#sub-scores)")
            if trend is not None:
                lines.append("- [Trend](#trend)")
            if self.include_findings:
                lines.append("- [Findings](#findings)")
            lines.append("")

        # Summary
        lines.append("## Summary")
        lines.append("")
        if report.summary:
            lines.append(report.summary)
            lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Overall Score | {summary['overall_score']} |")
        lines.append(f"| Status | {summary['status']} |")
        lines.append(f"| Total Findings | {summary['total_findings']} |")
        lines.append(f"| Critical | {summary['critical']} |")
        lines.append(f"| High | {summary['high']} |")
        lines.append(f"| Medium | {summary['medium']} |")
        lines.append(f"| Low | {summary['low']} |")
        lines.append(f"| Services | {summary['services_count']} |")
        lines.append("")

        # Sub-scores
        lines.append("## Sub-scores")
        lines.append("")
        lines.append("| Category | Score |")
        lines.append("|----------|-------|")
        for name, value in report.sub_scores.to_dict().items():
            lines.append(f"| {name.capitalize()} | {value:g} |")
        lines.append("")

        # Trend
        if trend is not None:
            lines.extend(self._render_trend(trend, history))

        # Findings
        if self.include_findings:
            lines.append("## Findings")
            lines.append("")

            if not report.findings:
                lines.append("**No findings reported**")
                lines.append("")
            else:
                for i, finding in enumerate(report.findings, 1):
                    marker = self._severity_marker(finding.severity_level)
                    lines.append(f"### {marker} Finding {i}: {finding.title or 'Untitled'}")
                    lines.append("")
                    lines.append(f"**Severity:** {finding.severity.upper() or 'N/A'}")
                    lines.append(f"**Category:** {finding.category or 'N/A'}")
                    if finding.affected_services:
                        lines.append(f"**Affected services:** {', '.join(finding.affected_services)}")
                    lines.append("")
                    if finding.description:
                        lines.append(finding.description)
                        lines.append("")
                    if finding.recommendation:
                        lines.append("**Recommendation:**")
                        lines.append(f"> {finding.recommendation}")
                        lines.append("")
                    lines.append("---")
                    lines.append("")

        # Footer
        lines.append("*Report generated by Architecture Health Analytics*")

        return "\n".join(lines)

    def _render_trend(self, trend: TrendResult, history: Optional[ReportHistory]) -> List[str]:
        lines = ["## Trend", ""]
        lines.append(f"**Direction:** {self._trend_arrow(trend.trend)} {trend.trend.value.capitalize()}")
        if trend.has_trend:
            lines.append(f"**Slope:** {trend.slope:.2f} points per validation")
        lines.append("")
        lines.append(trend.describe())
        lines.append("")

        if trend.predictions:
            lines.append("| Validation | Predicted Score |")
            lines.append("|------------|-----------------|")
            for prediction in trend.predictions:
                lines.append(f"| +{prediction.offset} | {prediction.predicted_score} |")
            lines.append("")

        if history is not None and len(history):
            history_summary = history.get_summary()
            lines.append(
                f"History: {history_summary['total_reports']} reports, "
                f"average {history_summary['average_score']}, "
                f"best {history_summary['best_score']}, "
                f"worst {history_summary['worst_score']}"
            )
            lines.append("")

        return lines

    def _severity_marker(self, severity: Optional[Severity]) -> str:
        markers = {
            Severity.CRITICAL: "🔴",
            Severity.HIGH: "🟠",
            Severity.MEDIUM: "🟡",
            Severity.LOW: "🔵",
        }
        return markers.get(severity, "⚪")

    def _trend_arrow(self, direction: TrendDirection) -> str:
        arrows = {
            TrendDirection.IMPROVING: "↗",
            TrendDirection.DECLINING: "↘",
            TrendDirection.STABLE: "→",
        }
        return arrows[direction]

    def to_string(
        self,
        report: ScoreReport,
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None
    ) -> str:
        """Render score report to Markdown string."""
        return self._render(report, trend, history)
