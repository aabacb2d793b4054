"""Tests for weighted scoring and severity aggregation."""

import pytest

from archhealth.results import Finding, ScoreReport, SubScores
from archhealth.scoring import (
    ScoreAggregator,
    compute_overall_score,
    compute_severity_counts,
)


class TestComputeOverallScore:
    """Tests for the weighted overall score."""

    def test_weighted_scenario(self, sample_sub_scores):
        """Test 0.4*90 + 0.3*80 + 0.2*70 + 0.1*60 = 80."""
        assert compute_overall_score(sample_sub_scores) == 80

    def test_all_maximum(self):
        """Test weights sum to one at the top of the range."""
        scores = {"security": 100, "performance": 100, "reliability": 100, "maintainability": 100}
        assert compute_overall_score(scores) == 100

    def test_all_zero(self):
        """Test zero sub-scores give zero."""
        scores = {"security": 0, "performance": 0, "reliability": 0, "maintainability": 0}
        assert compute_overall_score(scores) == 0

    def test_missing_sub_scores_default_to_zero(self):
        """Test missing categories count as 0."""
        assert compute_overall_score({"security": 100}) == 40
        assert compute_overall_score({}) == 0
        assert compute_overall_score(None) == 0

    @pytest.mark.parametrize("scores", [
        {"security": 500, "performance": 300, "reliability": 1000, "maintainability": 101},
        {"security": -50, "performance": -1, "reliability": -100, "maintainability": -7},
        {"security": 150, "performance": -20, "reliability": 99, "maintainability": 0},
        {"security": float("inf"), "performance": float("-inf")},
    ])
    def test_result_always_in_range(self, scores):
        """Test out-of-range inputs still give an integer in [0, 100]."""
        result = compute_overall_score(scores)
        assert isinstance(result, int)
        assert 0 <= result <= 100

    def test_sub_scores_clamped_before_weighting(self):
        """Test an oversized category cannot compensate for others."""
        # security clamped to 100 -> 40, not 0.4 * 250 = 100
        assert compute_overall_score({"security": 250}) == 40
        # negative performance clamped to 0
        assert compute_overall_score({"security": 100, "performance": -100}) == 40

    def test_rounds_half_up(self):
        """Test half points round up."""
        # 0.1 * 5 = 0.5
        assert compute_overall_score({"maintainability": 5}) == 1
        # 0.4 * 51 + 0.1 * 1 = 20.5
        assert compute_overall_score({"security": 51, "maintainability": 1}) == 21

    def test_accepts_sub_scores_object(self):
        """Test SubScores instances are accepted directly."""
        scores = SubScores(security=90, performance=80, reliability=70, maintainability=60)
        assert compute_overall_score(scores) == 80

    def test_accepts_category_aliases(self):
        """Test resilience/architecture map to reliability/maintainability."""
        scores = {"security": 90, "performance": 80, "resilience": 70, "architecture": 60}
        assert compute_overall_score(scores) == 80

    def test_non_numeric_sub_scores_count_as_zero(self):
        """Test noisy upstream values do not raise."""
        scores = {"security": "n/a", "performance": None, "reliability": "70", "maintainability": []}
        assert compute_overall_score(scores) == 14


class TestComputeSeverityCounts:
    """Tests for the severity histogram."""

    def test_case_insensitive_with_exclusion(self):
        """Test mixed case matches and unknown severities are dropped."""
        findings = [
            {"severity": "Critical"},
            {"severity": "critical"},
            {"severity": "HIGH"},
            {"severity": "unknown"},
        ]
        assert compute_severity_counts(findings) == {
            "critical": 2,
            "high": 1,
            "medium": 0,
            "low": 0,
        }

    def test_empty_findings(self):
        """Test empty input yields all zero counts."""
        assert compute_severity_counts([]) == {"critical": 0, "high": 0, "medium": 0, "low": 0}

    def test_exact_keys(self):
        """Test only the four canonical keys are produced."""
        counts = compute_severity_counts([{"severity": "info"}, {"severity": "LOW"}])
        assert set(counts) == {"critical", "high", "medium", "low"}
        assert counts["low"] == 1

    def test_totals_match_canonical_findings(self, sample_findings):
        """Test counts sum to the number of canonical findings."""
        counts = compute_severity_counts(sample_findings)
        assert sum(counts.values()) == len(sample_findings)

    def test_missing_and_non_string_severity_excluded(self):
        """Test absent or non-string severities are not counted."""
        findings = [{}, {"severity": None}, {"severity": 3}, {"severity": " high"}]
        assert sum(compute_severity_counts(findings).values()) == 0

    def test_accepts_finding_objects(self):
        """Test Finding instances are counted like dicts."""
        findings = [Finding(severity="Medium"), Finding(severity="medium"), Finding(severity="bogus")]
        assert compute_severity_counts(findings)["medium"] == 2

    def test_count_unrecognized(self):
        """Test the aggregator reports how many findings were excluded."""
        aggregator = ScoreAggregator()
        findings = [{"severity": "high"}, {"severity": "urgent"}, {"severity": ""}]
        assert aggregator.count_unrecognized(findings) == 2


class TestBuildReport:
    """Tests for combining findings and sub-scores into a report."""

    def test_builds_report(self, sample_findings, sample_sub_scores):
        """Test report fields come from both reductions."""
        report = ScoreAggregator().build_report(
            sample_findings,
            sample_sub_scores,
            project_id="shop",
            summary="Mostly sound.",
            services_count=4,
        )

        assert isinstance(report, ScoreReport)
        assert report.overall_score == 80
        assert report.severity_counts == {"critical": 1, "high": 1, "medium": 1, "low": 1}
        assert report.project_id == "shop"
        assert report.services_count == 4
        assert report.finding_count == 4
        assert all(isinstance(f, Finding) for f in report.findings)
        assert report.status == "healthy"

    def test_unrecognized_findings_kept_but_not_counted(self):
        """Test excluded findings stay attached to the report."""
        report = ScoreAggregator().build_report(
            [{"severity": "high"}, {"severity": "blocker"}],
            {},
        )
        assert report.finding_count == 2
        assert sum(report.severity_counts.values()) == 1

    def test_malformed_entries_skipped(self):
        """Test entries that are not objects are dropped."""
        report = ScoreAggregator().build_report(["oops", 42, {"severity": "low"}], {})
        assert report.finding_count == 1
        assert report.low_count == 1

    def test_report_is_immutable(self, sample_sub_scores):
        """Test reports cannot be modified once created."""
        report = ScoreAggregator().build_report([], sample_sub_scores)
        with pytest.raises(AttributeError):
            report.overall_score = 10
