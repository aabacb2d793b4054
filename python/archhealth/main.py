#!/usr/bin/env python3
"""
Architecture Health Analytics

Scores an architecture analysis, forecasts the score trend and writes reports.
"""

import argparse
import copy
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from archhealth.audit import AuditLogger
from archhealth.config import AnalyticsConfig, settings
from archhealth.forecast import TrendForecaster, TrendResult
from archhealth.reports import ReportGenerator, load_history
from archhealth.results import ReportHistory, ScoreReport, clamp_score
from archhealth.scoring import ScoreAggregator


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger("arch-health")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Architecture Health Analytics - score and forecast architecture health",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Score one analysis
  arch-health --input analysis.json

  # Keep a per-project history and forecast five validations ahead
  arch-health --input analysis.json --project shop --history-db history.db --horizon 5

  # Output reports in multiple formats
  arch-health --input analysis.json --output ./reports --formats json,html,md

  # Use config file
  arch-health --input analysis.json --config config.yaml
        """
    )

    parser.add_argument(
        "--input", "-i",
        required=True,
        help="JSON file with findings and sub_scores"
    )
    parser.add_argument(
        "--project", "-p",
        help="Project ID (overrides project_id in the input)"
    )

    # History and forecasting
    parser.add_argument(
        "--history-db",
        help="SQLite history database to read past scores from and append to"
    )
    parser.add_argument(
        "--horizon",
        type=int,
        help="Number of future validations to forecast (default: 3)"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Slope in points per validation beyond which a trend is not stable (default: 1.0)"
    )

    # Output configuration
    parser.add_argument(
        "--output", "-o",
        help="Output directory for reports (default: ./reports)"
    )
    parser.add_argument(
        "--formats", "-f",
        help="Report formats: json,html,md,sqlite (default: json,html,md)"
    )

    # Logging
    parser.add_argument(
        "--log-dir",
        help="Directory for audit logs"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress console output"
    )

    # Config file
    parser.add_argument(
        "--config",
        help="Path to YAML config file"
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalyticsConfig:
    """Build configuration from file, environment and arguments."""
    if args.config:
        config = copy.deepcopy(settings.load_from_file(args.config))
    else:
        config = copy.deepcopy(settings.config)

    if args.horizon is not None:
        config.forecast.horizon = args.horizon
    if args.threshold is not None:
        config.forecast.threshold = args.threshold
    if args.history_db:
        config.history.db_path = args.history_db
    if args.output:
        config.report.output_dir = args.output
    if args.formats:
        config.report.formats = [f.strip() for f in args.formats.split(",") if f.strip()]
    if args.log_dir:
        config.audit.log_dir = args.log_dir

    return config


def load_analysis(filepath: str) -> Dict[str, Any]:
    """Load and sanity-check an analysis document."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("Analysis input must be a JSON object")
    if not isinstance(data.get("findings", []), list):
        raise ValueError("'findings' must be a list")
    if not isinstance(data.get("history", []), list):
        raise ValueError("'history' must be a list of past scores")

    return data


def build_report(data: Dict[str, Any], project_id: Optional[str] = None) -> ScoreReport:
    """Score an analysis document."""
    aggregator = ScoreAggregator()
    return aggregator.build_report(
        findings=data.get("findings", []),
        sub_scores=data.get("sub_scores", data.get("scores")),
        project_id=project_id or data.get("project_id") or "",
        summary=data.get("summary") or "",
        services_count=int(data.get("services_count") or 0),
    )


def build_history(report: ScoreReport, config: AnalyticsConfig) -> Optional[ReportHistory]:
    """Stored history with the new report appended, when a history DB is set."""
    if not config.history.db_path:
        return None

    history = load_history(
        config.history.db_path,
        project_id=report.project_id,
        limit=config.history.max_reports,
    )
    history.add(report)
    return history


def history_scores(data: Dict[str, Any]) -> List[float]:
    """Past scores from the input, finite numbers only, clamped to [0, 100]."""
    scores = []
    for value in data.get("history", []):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if not math.isfinite(value):
            logger.warning(f"Ignoring non-finite history score: {value}")
            continue
        scores.append(clamp_score(value))
    return scores


def fit_scores(
    report: ScoreReport,
    data: Dict[str, Any],
    history: Optional[ReportHistory],
    config: AnalyticsConfig
) -> TrendResult:
    """Fit the trend over past scores plus the new report."""
    forecaster = TrendForecaster.from_config(config.forecast)

    if history is not None:
        return forecaster.fit_history(history)

    scores = history_scores(data)
    scores.append(report.overall_score)
    return forecaster.fit_trend(scores)


def run_analysis(args: argparse.Namespace) -> int:
    """Run one scoring and forecasting pass."""
    try:
        config = build_config(args)
        audit = AuditLogger(
            log_dir=config.audit.log_dir if (config.audit.enabled and args.log_dir) else None,
            console_output=config.audit.console_output and not args.quiet,
            max_field_length=config.audit.max_field_length,
        )
    except Exception as e:
        logger.error(f"Invalid configuration: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 3

    audit.start_session({"input": args.input})

    try:
        data = load_analysis(args.input)
        report = build_report(data, project_id=args.project)
        audit.log_report(report)

        for finding in report.findings:
            if finding.severity_level is None:
                audit.log_excluded_finding(finding.to_dict(), report_id=report.id)

        history = build_history(report, config)
        trend = fit_scores(report, data, history, config)
        audit.log_trend(trend, project_id=report.project_id)

        summary = report.get_summary()
        logger.info("=" * 50)
        logger.info("ANALYSIS COMPLETE")
        logger.info(f"Overall score: {summary['overall_score']} ({summary['status']})")
        logger.info(f"Findings: {summary['total_findings']}")
        logger.info(f"  Critical: {summary['critical']}")
        logger.info(f"  High: {summary['high']}")
        logger.info(f"  Medium: {summary['medium']}")
        logger.info(f"  Low: {summary['low']}")
        logger.info(f"Trend: {trend.describe()}")
        logger.info("=" * 50)

        report_gen = ReportGenerator(
            output_dir=config.report.output_dir,
            template_dir=config.report.template_dir,
        )
        paths = report_gen.generate(
            report,
            formats=config.report.formats,
            trend=trend,
            history=history,
        )

        for fmt, path in paths.items():
            logger.info(f"Report generated: {path}")

        if config.history.db_path:
            report_gen.save_to_history(report, config.history.db_path)
            logger.info(f"History updated: {config.history.db_path}")

        audit.end_session(summary)

        # Return exit code based on findings
        if report.critical_count > 0 or report.high_count > 0:
            return 2
        elif report.finding_count > 0:
            return 1
        return 0

    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        audit.log_error({"error": str(e), "context": {"input": args.input}})
        audit.end_session()
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 3


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    return run_analysis(args)


if __name__ == "__main__":
    sys.exit(main())
