"""Finding data model for architecture analysis results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class Severity(Enum):
    """Finding severity levels, most severe first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: Any) -> Optional["Severity"]:
        """
        Match a raw severity case-insensitively.

        Returns None for anything that is not one of the four canonical
        values, including non-string input.
        """
        if isinstance(value, Severity):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


class FindingCategory(Enum):
    """Validation categories an analysis reports findings under."""
    SECURITY = "security"
    PERFORMANCE = "performance"
    RESILIENCE = "resilience"
    ARCHITECTURE = "architecture"

    @classmethod
    def parse(cls, value: Any) -> Optional["FindingCategory"]:
        if not isinstance(value, str):
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


@dataclass
class Finding:
    """A single reported architecture issue."""
    category: str = ""
    severity: str = ""
    title: str = ""
    description: str = ""
    recommendation: str = ""
    affected_services: List[str] = field(default_factory=list)
    status: str = "open"
    feedback: Optional[str] = None

    @property
    def severity_level(self) -> Optional[Severity]:
        """Parsed severity, or None when it is not canonical."""
        return Severity.parse(self.severity)

    @property
    def category_level(self) -> Optional[FindingCategory]:
        """Parsed category, or None for free-form categories."""
        return FindingCategory.parse(self.category)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Finding":
        """Build a finding from loosely shaped analysis output."""
        affected = data.get("affected_services") or []
        if isinstance(affected, str):
            affected = [affected]
        elif not isinstance(affected, (list, tuple)):
            affected = [str(affected)]

        feedback = data.get("feedback")

        return cls(
            category=_as_text(data.get("category")),
            severity=_as_text(data.get("severity")),
            title=_as_text(data.get("title")),
            description=_as_text(data.get("description")),
            recommendation=_as_text(data.get("recommendation")),
            affected_services=[str(s) for s in affected],
            status=_as_text(data.get("status")) or "open",
            feedback=str(feedback) if feedback is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation,
            "affected_services": list(self.affected_services),
            "status": self.status,
            "feedback": self.feedback,
        }


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
