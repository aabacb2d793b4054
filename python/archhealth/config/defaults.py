"""Default configuration values."""

# Overall score weights (sum to 1.0)
WEIGHT_SECURITY = 0.40
WEIGHT_PERFORMANCE = 0.30
WEIGHT_RELIABILITY = 0.20
WEIGHT_MAINTAINABILITY = 0.10

SCORE_WEIGHTS = {
    "security": WEIGHT_SECURITY,
    "performance": WEIGHT_PERFORMANCE,
    "reliability": WEIGHT_RELIABILITY,
    "maintainability": WEIGHT_MAINTAINABILITY,
}

# Sub-score aliases used by upstream analysis output
SUB_SCORE_ALIASES = {
    "resilience": "reliability",
    "architecture": "maintainability",
}

MIN_SCORE = 0
MAX_SCORE = 100

# Severities in canonical order
SEVERITY_LEVELS = ["critical", "high", "medium", "low"]


# Trend forecasting
DEFAULT_TREND_THRESHOLD = 1.0  # score points per validation
DEFAULT_MIN_TREND_POINTS = 3
DEFAULT_FORECAST_HORIZON = 3

# History
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_HISTORY_DB = None

# Health status cut-offs (lower bounds)
STATUS_HEALTHY = 80
STATUS_WARNING = 60

# Score bands (lower bounds)
SCORE_BANDS = [
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
    (0, "poor"),
]

# Audit logging
DEFAULT_LOG_DIR = "./logs"
DEFAULT_MAX_FIELD_LOG_LENGTH = 500

# Report defaults
DEFAULT_REPORT_DIR = "./reports"
DEFAULT_REPORT_FORMATS = ["json", "html", "markdown"]
SUPPORTED_REPORT_FORMATS = ["json", "html", "markdown", "md", "sqlite", "db"]
