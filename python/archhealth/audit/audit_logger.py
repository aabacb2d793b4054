"""Structured audit logging for analysis runs."""

import json
import logging
import sys
import threading
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class LogType(Enum):
    """Types of audit log entries."""
    SESSION = "session"
    REPORT = "report"
    TREND = "trend"
    EXCLUDED = "excluded"
    ERROR = "error"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLogger:
    """
    Structured audit logger for scoring and forecasting runs.

    Features:
    - JSONL format for machine parsing
    - Console output for human readability
    - Session tracking with correlation IDs
    - Thread-safe writes
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        session_id: Optional[str] = None,
        console_output: bool = True,
        log_level: int = logging.INFO,
        max_field_length: int = 500
    ):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for log files (None = no file logging)
            session_id: Session ID (auto-generated if not provided)
            console_output: Enable console output
            log_level: Logging level
            max_field_length: Max length for free-text truncation
        """
        self.session_id = session_id or str(uuid.uuid4())
        self.console_output = console_output
        self.max_field_length = max_field_length

        self._log_dir = Path(log_dir) if log_dir else None
        self._log_file: Optional[Path] = None
        self._lock = threading.Lock()
        self._entries: List[Dict[str, Any]] = []
        self._stats = {
            "reports": 0,
            "trends": 0,
            "excluded": 0,
            "errors": 0,
        }

        self._console_logger = logging.getLogger(f"audit.{self.session_id[:8]}")
        self._console_logger.setLevel(log_level)

        if console_output and not self._console_logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(AuditFormatter())
            self._console_logger.addHandler(handler)
            self._console_logger.propagate = False

        if self._log_dir:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
            self._log_file = self._log_dir / f"audit_{timestamp}_{self.session_id[:8]}.jsonl"

    def start_session(self, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Log session start."""
        self._log_entry(LogType.SESSION, {
            "type": LogType.SESSION.value,
            "event": "session_start",
            "session_id": self.session_id,
            "timestamp": _now(),
            "metadata": metadata or {},
        })

    def end_session(self, summary: Optional[Dict[str, Any]] = None) -> None:
        """Log session end with summary."""
        self._log_entry(LogType.SESSION, {
            "type": LogType.SESSION.value,
            "event": "session_end",
            "session_id": self.session_id,
            "timestamp": _now(),
            "stats": dict(self._stats),
            "summary": summary or {},
        })

    def log_report(self, report) -> None:
        """Log a scored report."""
        self._stats["reports"] += 1

        entry = {
            "type": LogType.REPORT.value,
            "timestamp": _now(),
            "session_id": self.session_id,
            "report_id": report.id,
            "project_id": report.project_id,
            "overall_score": report.overall_score,
            "status": report.status,
            "severity_counts": dict(report.severity_counts),
            "finding_count": report.finding_count,
            "sub_scores": report.sub_scores.to_dict(),
            "summary": self._truncate(report.summary),
        }

        self._log_entry(LogType.REPORT, entry)

    def log_trend(self, trend, project_id: str = "") -> None:
        """Log a fitted trend."""
        self._stats["trends"] += 1

        entry = {
            "type": LogType.TREND.value,
            "timestamp": _now(),
            "session_id": self.session_id,
            "project_id": project_id,
            **trend.to_dict(),
        }

        self._log_entry(LogType.TREND, entry)

    def log_excluded_finding(self, finding: Dict[str, Any], report_id: str = "") -> None:
        """Log a finding left out of the severity counts."""
        self._stats["excluded"] += 1

        entry = {
            "type": LogType.EXCLUDED.value,
            "timestamp": _now(),
            "session_id": self.session_id,
            "report_id": report_id,
            "severity": str(finding.get("severity", "")),
            "category": str(finding.get("category", "")),
            "title": self._truncate(str(finding.get("title", ""))),
        }

        self._log_entry(LogType.EXCLUDED, entry)

    def log_error(self, data: Dict[str, Any]) -> None:
        """Log error."""
        self._stats["errors"] += 1

        entry = {
            "type": LogType.ERROR.value,
            "timestamp": _now(),
            "session_id": data.get("session_id", self.session_id),
            "error": self._truncate(str(data.get("error", ""))),
            "context": data.get("context", {}),
        }

        self._log_entry(LogType.ERROR, entry)

    def _log_entry(self, log_type: LogType, entry: Dict[str, Any]) -> None:
        """Write log entry to file and console."""
        with self._lock:
            self._entries.append(entry)

            if self._log_file:
                with open(self._log_file, "a") as f:
                    f.write(json.dumps(entry, default=str) + "\n")

            if self.console_output:
                self._log_to_console(log_type, entry)

    def _log_to_console(self, log_type: LogType, entry: Dict[str, Any]) -> None:
        """Format and log entry to console."""
        if log_type == LogType.REPORT:
            counts = entry.get("severity_counts", {})
            self._console_logger.info(
                f"[{entry.get('project_id') or '-'}] REPORT "
                f"score={entry.get('overall_score', 0)} "
                f"status={entry.get('status', '?')} "
                f"critical={counts.get('critical', 0)} high={counts.get('high', 0)}"
            )
        elif log_type == LogType.TREND:
            self._console_logger.info(
                f"[{entry.get('project_id') or '-'}] TREND "
                f"{entry.get('trend', '?')} slope={entry.get('slope', 0):.2f} "
                f"points={entry.get('sample_size', 0)}"
            )
        elif log_type == LogType.EXCLUDED:
            self._console_logger.warning(
                f"[{entry.get('report_id', '?')[:8]}] EXCLUDED "
                f"severity={entry.get('severity')!r} title={entry.get('title', '')[:50]}"
            )
        elif log_type == LogType.ERROR:
            self._console_logger.error(f"ERROR {entry.get('error', 'Unknown error')}")
        elif log_type == LogType.SESSION:
            event = entry.get("event", "")
            if event == "session_start":
                self._console_logger.info(f"=== Session Started: {entry.get('session_id', '?')[:8]} ===")
            elif event == "session_end":
                self._console_logger.info(
                    f"=== Session Ended: reports={self._stats['reports']} "
                    f"errors={self._stats['errors']} ==="
                )

    def _truncate(self, text: str) -> str:
        """Truncate text to max length."""
        if len(text) > self.max_field_length:
            return text[:self.max_field_length] + "..."
        return text

    def get_entries(self, log_type: Optional[LogType] = None) -> List[Dict[str, Any]]:
        """Get log entries, optionally filtered by type."""
        if log_type:
            return [e for e in self._entries if e.get("type") == log_type.value]
        return self._entries.copy()

    def get_stats(self) -> Dict[str, Any]:
        """Get logging statistics."""
        return {
            **self._stats,
            "total_entries": len(self._entries),
            "session_id": self.session_id,
            "log_file": str(self._log_file) if self._log_file else None,
        }


class AuditFormatter(logging.Formatter):
    """Custom formatter for audit log console output."""

    COLORS = {
        logging.DEBUG: "\033[36m",    # Cyan
        logging.INFO: "\033[32m",     # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S")
        return f"{color}[{timestamp}] {record.getMessage()}{self.RESET}"
