"""Tests for result models and report history."""

from datetime import datetime, timezone

import pytest

from archhealth.results import (
    Finding,
    FindingCategory,
    ReportHistory,
    ScoreReport,
    Severity,
    SubScores,
    health_status,
    score_band,
)


class TestSeverity:
    """Tests for severity parsing."""

    def test_parse_case_insensitive(self):
        """Test any casing maps to the canonical member."""
        assert Severity.parse("CRITICAL") is Severity.CRITICAL
        assert Severity.parse("Medium") is Severity.MEDIUM

    def test_parse_rejects_unknown(self):
        """Test non-canonical values give None."""
        assert Severity.parse("info") is None
        assert Severity.parse(None) is None
        assert Severity.parse(2) is None

    def test_canonical_order(self):
        """Test severities are ordered most severe first."""
        assert [s.value for s in Severity] == ["critical", "high", "medium", "low"]


class TestFinding:
    """Tests for the finding model."""

    def test_from_dict(self, sample_findings):
        """Test building from analysis output."""
        finding = Finding.from_dict(sample_findings[0])
        assert finding.severity == "Critical"
        assert finding.severity_level is Severity.CRITICAL
        assert finding.category_level is FindingCategory.SECURITY
        assert finding.affected_services == ["orders", "payments"]
        assert finding.status == "open"

    def test_from_dict_is_lenient(self):
        """Test odd shapes are normalized rather than rejected."""
        finding = Finding.from_dict({"affected_services": "gateway", "category": "observability"})
        assert finding.affected_services == ["gateway"]
        assert finding.category == "observability"
        assert finding.category_level is None
        assert finding.severity_level is None

    def test_to_dict_round_trip_fields(self, sample_findings):
        """Test serialization keeps descriptive payload."""
        data = Finding.from_dict(sample_findings[1]).to_dict()
        assert data["title"] == "Chatty interface"
        assert data["recommendation"] == "Batch inventory lookups."
        assert data["feedback"] is None


class TestSubScores:
    """Tests for sub-score normalization."""

    def test_missing_values_are_zero(self):
        """Test defaults for absent categories."""
        scores = SubScores.from_dict({"security": 75})
        assert scores.security == 75
        assert scores.performance == 0
        assert scores.reliability == 0
        assert scores.maintainability == 0

    def test_canonical_key_wins_over_alias(self):
        """Test reliability is used when both it and resilience are given."""
        scores = SubScores.from_dict({"resilience": 10, "reliability": 90})
        assert scores.reliability == 90

    def test_nan_is_zero(self):
        """Test NaN sub-scores normalize to 0."""
        assert SubScores(security=float("nan")).security == 0

    def test_clamped(self):
        """Test clamping to [0, 100]."""
        scores = SubScores(security=120, performance=-5).clamped()
        assert scores.security == 100
        assert scores.performance == 0


class TestStatusAndBand:
    """Tests for score labels."""

    @pytest.mark.parametrize("score, expected", [
        (100, "healthy"), (80, "healthy"), (79, "warning"), (60, "warning"), (59, "critical"), (0, "critical"),
    ])
    def test_health_status(self, score, expected):
        assert health_status(score) == expected

    @pytest.mark.parametrize("score, expected", [
        (95, "excellent"), (80, "excellent"), (65, "good"), (40, "fair"), (39, "poor"), (0, "poor"),
    ])
    def test_score_band(self, score, expected):
        assert score_band(score) == expected


class TestScoreReport:
    """Tests for the score report model."""

    def test_counts_properties(self):
        """Test per-severity convenience properties."""
        report = ScoreReport(
            overall_score=55,
            severity_counts={"critical": 1, "high": 2, "medium": 3, "low": 4},
        )
        assert report.critical_count == 1
        assert report.high_count == 2
        assert report.medium_count == 3
        assert report.low_count == 4
        assert report.status == "critical"
        assert report.band == "fair"

    def test_default_counts_are_zero(self):
        """Test a new report starts with an empty histogram."""
        report = ScoreReport(overall_score=90)
        assert report.severity_counts == {"critical": 0, "high": 0, "medium": 0, "low": 0}
        assert report.timestamp.tzinfo is not None

    def test_dict_round_trip(self):
        """Test serialization and reload keep identity and ordering data."""
        original = ScoreReport(
            overall_score=72,
            severity_counts={"critical": 0, "high": 1, "medium": 0, "low": 0},
            project_id="shop",
            findings=(Finding(severity="high", title="Single gateway"),),
            sub_scores=SubScores(security=70, performance=75),
            summary="OK",
            services_count=3,
        )
        restored = ScoreReport.from_dict(original.to_dict())

        assert restored.id == original.id
        assert restored.timestamp == original.timestamp
        assert restored.overall_score == 72
        assert restored.high_count == 1
        assert restored.findings[0].title == "Single gateway"
        assert restored.sub_scores.performance == 75

    @pytest.mark.parametrize("raw, expected", [
        (250, 100), (-40, 0), (79.5, 80), ("n/a", 0), (float("nan"), 0), (float("inf"), 100),
    ])
    def test_overall_score_clamped(self, raw, expected):
        """Test out-of-range and noisy scores are normalized on construction."""
        assert ScoreReport(overall_score=raw).overall_score == expected

    def test_from_dict_clamps_stored_score(self):
        """Test stored reports cannot carry a score outside [0, 100]."""
        report = ScoreReport.from_dict({"overall_score": 250})
        assert report.overall_score == 100
        assert report.status == "healthy"

    def test_from_dict_naive_timestamp_assumed_utc(self):
        """Test stored naive timestamps are treated as UTC."""
        report = ScoreReport.from_dict({"overall_score": 50, "timestamp": "2024-03-01T12:00:00"})
        assert report.timestamp == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)

    def test_grouping(self):
        """Test grouping findings by severity and category."""
        report = ScoreReport(
            overall_score=50,
            findings=(
                Finding(category="security", severity="HIGH"),
                Finding(category="security", severity="weird"),
                Finding(severity="low"),
            ),
        )
        by_severity = report.get_findings_by_severity()
        assert len(by_severity["high"]) == 1
        assert len(by_severity["unrecognized"]) == 1

        by_category = report.get_findings_by_category()
        assert len(by_category["security"]) == 2
        assert len(by_category["uncategorized"]) == 1


class TestReportHistory:
    """Tests for the report history."""

    def test_orders_by_timestamp(self, make_report):
        """Test scores come out oldest first regardless of insertion order."""
        history = ReportHistory()
        history.add(make_report(70, day=3))
        history.add(make_report(50, day=1))
        history.add(make_report(60, day=2))

        assert history.scores() == [50, 60, 70]
        assert history.latest().overall_score == 70

    def test_deduplicates_by_id(self, make_report):
        """Test the same report is only added once."""
        history = ReportHistory()
        report = make_report(80)
        assert history.add(report) is True
        assert history.add(report) is False
        assert len(history) == 1

    def test_bounded_to_most_recent(self, make_report):
        """Test the oldest reports are dropped beyond the limit."""
        history = ReportHistory(max_reports=3)
        added = history.add_all(make_report(score, day=day) for day, score in enumerate([10, 20, 30, 40, 50]))

        assert history.scores() == [30, 40, 50]
        assert added == 5

    def test_adding_older_than_window_is_not_kept(self, make_report):
        """Test a report older than a full window is trimmed at once."""
        history = ReportHistory(max_reports=2)
        history.add_all([make_report(50, day=5), make_report(60, day=6)])

        assert history.add(make_report(10, day=0)) is False
        assert history.scores() == [50, 60]

    def test_default_limit_is_ten(self, make_report):
        """Test the default window keeps ten reports."""
        history = ReportHistory()
        history.add_all(make_report(i, day=i) for i in range(15))
        assert len(history) == 10
        assert history.scores()[0] == 5

    def test_invalid_limit(self):
        """Test a non-positive limit is rejected."""
        with pytest.raises(ValueError):
            ReportHistory(max_reports=0)

    def test_for_project(self, make_report):
        """Test filtering to one project."""
        history = ReportHistory(max_reports=None)
        history.add_all([
            make_report(50, day=0, project_id="shop"),
            make_report(90, day=1, project_id="blog"),
            make_report(60, day=2, project_id="shop"),
        ])

        assert history.for_project("shop").scores() == [50, 60]

    def test_summary(self, make_report):
        """Test history summary statistics."""
        history = ReportHistory()
        history.add_all([
            make_report(50, day=0, counts={"critical": 2, "high": 1, "medium": 0, "low": 0}),
            make_report(65, day=1, counts={"critical": 0, "high": 3, "medium": 0, "low": 0}),
            make_report(70, day=2),
        ])

        summary = history.get_summary()
        assert summary["total_reports"] == 3
        assert summary["latest_score"] == 70
        assert summary["average_score"] == 61.7
        assert summary["best_score"] == 70
        assert summary["worst_score"] == 50
        assert summary["total_critical"] == 2
        assert summary["total_high"] == 4

    def test_empty_summary(self):
        """Test summary of an empty history."""
        summary = ReportHistory().get_summary()
        assert summary["total_reports"] == 0
        assert summary["latest_score"] is None

    def test_clear(self, make_report):
        """Test clearing allows re-adding."""
        history = ReportHistory()
        report = make_report(40)
        history.add(report)
        history.clear()
        assert len(history) == 0
        assert history.add(report) is True
