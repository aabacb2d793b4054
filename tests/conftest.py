"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add python source to path
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))


@pytest.fixture
def sample_findings():
    """Findings as returned by an architecture analysis."""
    return [
        {
            "category": "security",
            "severity": "Critical",
            "title": "No authentication between services",
            "description": "Internal calls are unauthenticated.",
            "recommendation": "Introduce mTLS between services.",
            "affected_services": ["orders", "payments"],
        },
        {
            "category": "performance",
            "severity": "high",
            "title": "Chatty interface",
            "description": "Orders calls inventory once per line item.",
            "recommendation": "Batch inventory lookups.",
            "affected_services": ["orders"],
        },
        {
            "category": "resilience",
            "severity": "medium",
            "title": "No circuit breaker",
            "recommendation": "Wrap outbound calls in a circuit breaker.",
        },
        {
            "category": "architecture",
            "severity": "low",
            "title": "Shared database",
        },
    ]


@pytest.fixture
def sample_sub_scores():
    """Sub-scores giving an overall score of 80."""
    return {
        "security": 90,
        "performance": 80,
        "reliability": 70,
        "maintainability": 60,
    }


@pytest.fixture
def make_report():
    """Factory for score reports at increasing timestamps."""
    from archhealth.results import ScoreReport

    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(score, day=0, project_id="shop", counts=None):
        kwargs = {}
        if counts is not None:
            kwargs["severity_counts"] = counts
        return ScoreReport(
            overall_score=score,
            project_id=project_id,
            timestamp=base + timedelta(days=day),
            **kwargs,
        )

    return _make
