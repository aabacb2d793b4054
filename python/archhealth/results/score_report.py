"""Score report data model."""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from ..config.defaults import (
    MIN_SCORE,
    MAX_SCORE,
    SEVERITY_LEVELS,
    SUB_SCORE_ALIASES,
    STATUS_HEALTHY,
    STATUS_WARNING,
    SCORE_BANDS,
)
from .finding import Finding


def clamp_score(value: float) -> float:
    """Clamp a score to the closed interval [0, 100]."""
    return max(MIN_SCORE, min(MAX_SCORE, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (80.5 -> 81)."""
    return int(math.floor(value + 0.5))


def health_status(score: float) -> str:
    """Map an overall score to healthy / warning / critical."""
    if score >= STATUS_HEALTHY:
        return "healthy"
    if score >= STATUS_WARNING:
        return "warning"
    return "critical"


def score_band(score: float) -> str:
    """Map an overall score to its display band."""
    for lower_bound, band in SCORE_BANDS:
        if score >= lower_bound:
            return band
    return SCORE_BANDS[-1][1]


def _coerce_score(value: Any) -> float:
    """Missing, non-numeric and NaN sub-scores count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


@dataclass(frozen=True)
class SubScores:
    """The four category scores an overall score is weighted from."""
    security: float = 0.0
    performance: float = 0.0
    reliability: float = 0.0
    maintainability: float = 0.0

    def __post_init__(self):
        for name in ("security", "performance", "reliability", "maintainability"):
            object.__setattr__(self, name, _coerce_score(getattr(self, name)))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SubScores":
        """Build sub-scores from a mapping, accepting category aliases."""
        values: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            name = SUB_SCORE_ALIASES.get(key, key)
            # canonical keys win over aliases
            if name in values and key != name:
                continue
            values[name] = value

        return cls(
            security=values.get("security"),
            performance=values.get("performance"),
            reliability=values.get("reliability"),
            maintainability=values.get("maintainability"),
        )

    def clamped(self) -> "SubScores":
        return SubScores(
            security=clamp_score(self.security),
            performance=clamp_score(self.performance),
            reliability=clamp_score(self.reliability),
            maintainability=clamp_score(self.maintainability),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "security": self.security,
            "performance": self.performance,
            "reliability": self.reliability,
            "maintainability": self.maintainability,
        }


def empty_severity_counts() -> Dict[str, int]:
    return {level: 0 for level in SEVERITY_LEVELS}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif value:
        parsed = datetime.fromisoformat(str(value))
    else:
        return _utcnow()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class ScoreReport:
    """Result of one analysis run. Immutable once created."""
    overall_score: int
    severity_counts: Dict[str, int] = field(default_factory=empty_severity_counts)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    project_id: str = ""
    timestamp: datetime = field(default_factory=_utcnow)
    findings: Tuple[Finding, ...] = ()
    sub_scores: SubScores = field(default_factory=SubScores)
    summary: str = ""
    services_count: int = 0

    def __post_init__(self):
        # overall_score is always a whole number in [0, 100]
        score = round_half_up(clamp_score(_coerce_score(self.overall_score)))
        object.__setattr__(self, "overall_score", int(score))

    @property
    def critical_count(self) -> int:
        return self.severity_counts.get("critical", 0)

    @property
    def high_count(self) -> int:
        return self.severity_counts.get("high", 0)

    @property
    def medium_count(self) -> int:
        return self.severity_counts.get("medium", 0)

    @property
    def low_count(self) -> int:
        return self.severity_counts.get("low", 0)

    @property
    def finding_count(self) -> int:
        """Number of findings attached, canonical severity or not."""
        return len(self.findings)

    @property
    def status(self) -> str:
        return health_status(self.overall_score)

    @property
    def band(self) -> str:
        return score_band(self.overall_score)

    def get_findings_by_severity(self) -> Dict[str, list]:
        """Group findings by canonical severity; others go under 'unrecognized'."""
        by_severity: Dict[str, list] = {}
        for finding in self.findings:
            level = finding.severity_level
            key = level.value if level else "unrecognized"
            by_severity.setdefault(key, []).append(finding)
        return by_severity

    def get_findings_by_category(self) -> Dict[str, list]:
        """Group findings by their category string."""
        by_category: Dict[str, list] = {}
        for finding in self.findings:
            by_category.setdefault(finding.category or "uncategorized", []).append(finding)
        return by_category

    def get_summary(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "overall_score": self.overall_score,
            "status": self.status,
            "band": self.band,
            "total_findings": self.finding_count,
            "critical": self.critical_count,
            "high": self.high_count,
            "medium": self.medium_count,
            "low": self.low_count,
            "services_count": self.services_count,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "overall_score": self.overall_score,
            "severity_counts": dict(self.severity_counts),
            "timestamp": self.timestamp.isoformat(),
            "findings": [f.to_dict() for f in self.findings],
            "sub_scores": self.sub_scores.to_dict(),
            "summary": self.summary,
            "services_count": self.services_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoreReport":
        """Rebuild a stored report."""
        counts = empty_severity_counts()
        for level, count in (data.get("severity_counts") or {}).items():
            if level in counts:
                counts[level] = int(count)

        kwargs: Dict[str, Any] = {}
        if data.get("id"):
            kwargs["id"] = str(data["id"])

        return cls(
            overall_score=data.get("overall_score", 0),
            severity_counts=counts,
            project_id=data.get("project_id") or "",
            timestamp=_parse_timestamp(data.get("timestamp")),
            findings=tuple(Finding.from_dict(f) for f in data.get("findings") or []),
            sub_scores=SubScores.from_dict(data.get("sub_scores")),
            summary=data.get("summary") or "",
            services_count=int(data.get("services_count") or 0),
            **kwargs,
        )
