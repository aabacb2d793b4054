"""Tests for the audit logger."""

import json

import pytest

from archhealth.audit import AuditLogger, LogType
from archhealth.forecast import fit_trend


@pytest.fixture
def audit_logger(tmp_path):
    """Audit logger writing JSONL into a temp dir, no console output."""
    return AuditLogger(log_dir=str(tmp_path), console_output=False, max_field_length=20)


class TestAuditLogger:
    """Tests for audit log entries."""

    def test_session_entries(self, audit_logger):
        audit_logger.start_session({"input": "analysis.json"})
        audit_logger.end_session({"overall_score": 80})

        sessions = audit_logger.get_entries(LogType.SESSION)
        assert [e["event"] for e in sessions] == ["session_start", "session_end"]
        assert sessions[0]["metadata"] == {"input": "analysis.json"}
        assert sessions[1]["summary"] == {"overall_score": 80}

    def test_log_report(self, audit_logger, make_report):
        report = make_report(72, counts={"critical": 1, "high": 0, "medium": 2, "low": 0})
        audit_logger.log_report(report)

        entry = audit_logger.get_entries(LogType.REPORT)[0]
        assert entry["report_id"] == report.id
        assert entry["overall_score"] == 72
        assert entry["status"] == "warning"
        assert entry["severity_counts"]["medium"] == 2
        assert audit_logger.get_stats()["reports"] == 1

    def test_log_trend(self, audit_logger):
        audit_logger.log_trend(fit_trend([10, 20, 30]), project_id="shop")

        entry = audit_logger.get_entries(LogType.TREND)[0]
        assert entry["project_id"] == "shop"
        assert entry["trend"] == "improving"
        assert entry["sample_size"] == 3

    def test_log_excluded_finding_truncates(self, audit_logger):
        """Test excluded findings are recorded with truncated titles."""
        audit_logger.log_excluded_finding(
            {"severity": "blocker", "title": "A very long finding title indeed"},
            report_id="abc",
        )

        entry = audit_logger.get_entries(LogType.EXCLUDED)[0]
        assert entry["severity"] == "blocker"
        assert entry["title"] == "A very long finding t..."
        assert audit_logger.get_stats()["excluded"] == 1

    def test_log_error(self, audit_logger):
        audit_logger.log_error({"error": "boom", "context": {"step": "load"}})

        entry = audit_logger.get_entries(LogType.ERROR)[0]
        assert entry["error"] == "boom"
        assert entry["context"] == {"step": "load"}
        assert audit_logger.get_stats()["errors"] == 1

    def test_jsonl_file(self, audit_logger):
        """Test every entry is written as one JSON line."""
        audit_logger.start_session()
        audit_logger.log_error({"error": "boom"})
        audit_logger.end_session()

        log_file = audit_logger.get_stats()["log_file"]
        assert log_file is not None
        with open(log_file) as f:
            lines = [json.loads(line) for line in f]

        assert len(lines) == 3
        assert [line["type"] for line in lines] == ["session", "error", "session"]

    def test_no_file_without_log_dir(self):
        logger = AuditLogger(console_output=False)
        logger.start_session()
        assert logger.get_stats()["log_file"] is None
        assert logger.get_stats()["total_entries"] == 1
