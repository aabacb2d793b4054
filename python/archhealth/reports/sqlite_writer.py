"""SQLite writer for queryable, reloadable score history."""

import json
import sqlite3
from datetime import timezone
from pathlib import Path
from typing import Optional

from ..config.defaults import DEFAULT_HISTORY_LIMIT
from ..results import ReportHistory, ScoreReport


class SQLiteWriter:
    """Writes score reports to a SQLite database."""

    def __init__(self):
        self._connection: Optional[sqlite3.Connection] = None

    def write(self, report: ScoreReport, output_path: str) -> str:
        """
        Write score report to SQLite database.

        Reports are appended; writing the same report twice replaces it.

        Args:
            report: Report to write
            output_path: Output file path

        Returns:
            Path to written file
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        self._connection = sqlite3.connect(str(path))

        try:
            self._create_tables()
            self._insert_report(report)
            self._insert_findings(report)
            self._connection.commit()
        finally:
            self._connection.close()
            self._connection = None

        return str(path)

    def _create_tables(self) -> None:
        """Create database schema."""
        cursor = self._connection.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS score_reports (
                id TEXT PRIMARY KEY,
                project_id TEXT,
                timestamp TEXT,
                overall_score INTEGER,
                status TEXT,
                critical_count INTEGER,
                high_count INTEGER,
                medium_count INTEGER,
                low_count INTEGER,
                finding_count INTEGER,
                services_count INTEGER,
                sub_scores TEXT,
                summary TEXT
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS findings (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                report_id TEXT,
                position INTEGER,
                category TEXT,
                severity TEXT,
                title TEXT,
                description TEXT,
                recommendation TEXT,
                affected_services TEXT,
                status TEXT,
                feedback TEXT,
                FOREIGN KEY (report_id) REFERENCES score_reports(id)
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_report_project ON score_reports(project_id)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_report_time ON score_reports(timestamp)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_finding_report ON findings(report_id)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_finding_severity ON findings(severity)')

    def _insert_report(self, report: ScoreReport) -> None:
        """Insert report record."""
        cursor = self._connection.cursor()

        cursor.execute('''
            INSERT OR REPLACE INTO score_reports
            (id, project_id, timestamp, overall_score, status,
             critical_count, high_count, medium_count, low_count,
             finding_count, services_count, sub_scores, summary)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            report.id,
            report.project_id,
            # stored in UTC so text ordering matches time ordering
            report.timestamp.astimezone(timezone.utc).isoformat(),
            report.overall_score,
            report.status,
            report.critical_count,
            report.high_count,
            report.medium_count,
            report.low_count,
            report.finding_count,
            report.services_count,
            json.dumps(report.sub_scores.to_dict()),
            report.summary,
        ))

    def _insert_findings(self, report: ScoreReport) -> None:
        """Insert finding records."""
        cursor = self._connection.cursor()
        cursor.execute('DELETE FROM findings WHERE report_id = ?', (report.id,))

        for position, finding in enumerate(report.findings):
            cursor.execute('''
                INSERT INTO findings
                (report_id, position, category, severity, title, description,
                 recommendation, affected_services, status, feedback)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', (
                report.id,
                position,
                finding.category,
                finding.severity,
                finding.title,
                finding.description,
                finding.recommendation,
                json.dumps(finding.affected_services),
                finding.status,
                finding.feedback,
            ))


def load_history(
    db_path: str,
    project_id: Optional[str] = None,
    limit: Optional[int] = DEFAULT_HISTORY_LIMIT
) -> ReportHistory:
    """
    Load the most recent stored reports into a ReportHistory.

    Args:
        db_path: Path to SQLite database
        project_id: Only load this project's reports
        limit: Maximum number of most recent reports (None = all)

    Returns:
        History ordered oldest first; empty when the database does not exist
    """
    history = ReportHistory(max_reports=limit)
    if not Path(db_path).exists():
        return history

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row

    try:
        cursor = conn.cursor()
        query = 'SELECT * FROM score_reports'
        params: tuple = ()
        if project_id is not None:
            query += ' WHERE project_id = ?'
            params = (project_id,)
        query += ' ORDER BY timestamp DESC'
        if limit is not None:
            query += ' LIMIT ?'
            params += (limit,)

        cursor.execute(query, params)
        rows = cursor.fetchall()

        for row in rows:
            cursor.execute(
                'SELECT * FROM findings WHERE report_id = ? ORDER BY position',
                (row["id"],)
            )
            findings = [
                {
                    **dict(f),
                    "affected_services": json.loads(f["affected_services"] or "[]"),
                }
                for f in cursor.fetchall()
            ]

            history.add(ScoreReport.from_dict({
                "id": row["id"],
                "project_id": row["project_id"],
                "timestamp": row["timestamp"],
                "overall_score": row["overall_score"],
                "severity_counts": {
                    "critical": row["critical_count"],
                    "high": row["high_count"],
                    "medium": row["medium_count"],
                    "low": row["low_count"],
                },
                "findings": findings,
                "sub_scores": json.loads(row["sub_scores"] or "{}"),
                "summary": row["summary"],
                "services_count": row["services_count"],
            }))
    finally:
        conn.close()

    return history


def query_database(db_path: str, query: str) -> list:
    """
    Execute a query on the results database.

    Args:
        db_path: Path to SQLite database
        query: SQL query to execute

    Returns:
        List of result rows as dictionaries
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row

    try:
        cursor = conn.cursor()
        cursor.execute(query)
        return [dict(row) for row in cursor.fetchall()]
    finally:
        conn.close()
