"""Multi-format report generator."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from .json_writer import JSONWriter
from .html_writer import HTMLWriter
from .markdown_writer import MarkdownWriter
from .sqlite_writer import SQLiteWriter
from ..config.defaults import DEFAULT_REPORT_DIR, DEFAULT_REPORT_FORMATS
from ..forecast import TrendResult
from ..results import ReportHistory, ScoreReport


class ReportGenerator:
    """
    Generates architecture health reports in multiple formats.

    Supported formats:
    - JSON: Machine-readable with full details
    - HTML: Styled report
    - Markdown: Human-readable documentation
    - SQLite: Queryable score history
    """

    def __init__(
        self,
        output_dir: str = DEFAULT_REPORT_DIR,
        template_dir: Optional[str] = None
    ):
        self.output_dir = Path(output_dir)
        self.template_dir = template_dir

        self._json_writer = JSONWriter()
        self._html_writer = HTMLWriter(template_dir=template_dir)
        self._markdown_writer = MarkdownWriter()
        self._sqlite_writer = SQLiteWriter()

    def generate(
        self,
        report: ScoreReport,
        formats: Optional[List[str]] = None,
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None,
        base_name: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Generate reports in specified formats.

        Args:
            report: Score report to render
            formats: List of formats (json, html, markdown, sqlite)
            trend: Optional fitted trend
            history: Optional report history
            base_name: Base filename (default: report ID and time)

        Returns:
            Dict mapping format to output path
        """
        if formats is None:
            formats = DEFAULT_REPORT_FORMATS

        timestamp = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
        base_name = base_name or f"health_{report.id[:8]}_{timestamp}"

        self.output_dir.mkdir(parents=True, exist_ok=True)

        paths = {}

        for fmt in formats:
            fmt = fmt.lower().strip()

            if fmt == "json":
                path = self.output_dir / f"{base_name}.json"
                paths["json"] = self._json_writer.write(report, str(path), trend=trend, history=history)

            elif fmt == "html":
                path = self.output_dir / f"{base_name}.html"
                paths["html"] = self._html_writer.write(report, str(path), trend=trend, history=history)

            elif fmt in ("markdown", "md"):
                path = self.output_dir / f"{base_name}.md"
                paths["markdown"] = self._markdown_writer.write(report, str(path), trend=trend, history=history)

            elif fmt in ("sqlite", "db"):
                path = self.output_dir / f"{base_name}.db"
                paths["sqlite"] = self._sqlite_writer.write(report, str(path))

            else:
                raise ValueError(f"Unsupported report format: {fmt}")

        return paths

    def save_to_history(self, report: ScoreReport, db_path: str) -> str:
        """Append a report to a history database."""
        return self._sqlite_writer.write(report, db_path)

    def to_string(
        self,
        report: ScoreReport,
        format: str = "json",
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None
    ) -> str:
        """Convert report to string in specified format."""
        format = format.lower()

        if format == "json":
            return self._json_writer.to_string(report, trend=trend, history=history)
        elif format == "html":
            return self._html_writer.to_string(report, trend=trend, history=history)
        elif format in ("markdown", "md"):
            return self._markdown_writer.to_string(report, trend=trend, history=history)
        else:
            raise ValueError(f"Unsupported string format: {format}")
