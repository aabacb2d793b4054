"""HTML report writer using Jinja2 templates."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from ..forecast import TrendResult
from ..results import ReportHistory, ScoreReport


# Inline template for when template file not found
DEFAULT_HTML_TEMPLATE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Architecture Health Report - {{ report.id[:8] }}</title>
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; background: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        header { background: #1a1a2e; color: white; padding: 30px 0; margin-bottom: 30px; }
        header h1 { text-align: center; }
        .summary { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 20px; margin-bottom: 30px; }
        .card { background: white; border-radius: 8px; padding: 20px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .card h3 { margin-bottom: 10px; color: #666; font-size: 0.9em; text-transform: uppercase; }
        .card .value { font-size: 2em; font-weight: bold; }
        .excellent, .healthy { color: #388e3c; }
        .good, .warning { color: #fbc02d; }
        .fair { color: #f57c00; }
        .poor { color: #d32f2f; }
        .critical { color: #d32f2f; }
        .high { color: #f57c00; }
        .medium { color: #fbc02d; }
        .low { color: #1565c0; }
        table { width: 100%; border-collapse: collapse; margin-top: 10px; }
        th, td { text-align: left; padding: 8px; border-bottom: 1px solid #eee; }
        .trend { margin-bottom: 30px; }
        .finding { background: white; border-radius: 8px; margin-bottom: 20px; overflow: hidden; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .finding-header { padding: 15px 20px; display: flex; justify-content: space-between; align-items: center; border-left: 4px solid #999; }
        .finding-header.critical { background: #ffebee; border-left-color: #d32f2f; }
        .finding-header.high { background: #fff3e0; border-left-color: #f57c00; }
        .finding-header.medium { background: #fffde7; border-left-color: #fbc02d; }
        .finding-header.low { background: #e3f2fd; border-left-color: #1565c0; }
        .finding-body { padding: 20px; border-top: 1px solid #eee; }
        .badge { padding: 4px 12px; border-radius: 20px; font-size: 0.8em; font-weight: bold; text-transform: uppercase; background: #eee; }
        .recommendation { background: #e3f2fd; padding: 15px; border-radius: 4px; margin-top: 15px; }
        .recommendation h4 { color: #1565c0; margin-bottom: 8px; }
        footer { text-align: center; padding: 30px; color: #666; font-size: 0.9em; }
    </style>
</head>
<body>
    <header>
        <div class="container">
            <h1>Architecture Health Report</h1>
            <p style="text-align:center; opacity:0.8; margin-top:10px;">
                Generated: {{ generated_at }} | Project: {{ report.project_id or 'N/A' }}
            </p>
        </div>
    </header>

    <div class="container">
        <div class="summary">
            <div class="card">
                <h3>Overall Score</h3>
                <div class="value {{ summary.band }}">{{ summary.overall_score }}</div>
            </div>
            <div class="card">
                <h3>Status</h3>
                <div class="value {{ summary.status }}" style="font-size:1.5em;">{{ summary.status|capitalize }}</div>
            </div>
            <div class="card">
                <h3>Critical</h3>
                <div class="value critical">{{ summary.critical }}</div>
            </div>
            <div class="card">
                <h3>High</h3>
                <div class="value high">{{ summary.high }}</div>
            </div>
            <div class="card">
                <h3>Medium</h3>
                <div class="value medium">{{ summary.medium }}</div>
            </div>
            <div class="card">
                <h3>Low</h3>
                <div class="value low">{{ summary.low }}</div>
            </div>
        </div>

        <div class="card" style="margin-bottom:30px;">
            <h3>Sub-scores</h3>
            <table>
                {% for name, value in sub_scores.items() %}
                <tr><td>{{ name|capitalize }}</td><td>{{ "%g"|format(value) }}</td></tr>
                {% endfor %}
            </table>
        </div>

        {% if trend %}
        <div class="card trend">
            <h3>Trend</h3>
            <p><strong>{{ trend.trend.value|capitalize }}</strong>{% if trend.has_trend %} (slope {{ "%.2f"|format(trend.slope) }}){% endif %}</p>
            <p>{{ trend.describe() }}</p>
            {% if trend.predictions %}
            <table>
                <tr><th>Validation</th><th>Predicted Score</th></tr>
                {% for prediction in trend.predictions %}
                <tr><td>+{{ prediction.offset }}</td><td>{{ prediction.predicted_score }}</td></tr>
                {% endfor %}
            </table>
            {% endif %}
            {% if history_summary and history_summary.total_reports %}
            <p style="margin-top:10px;">History: {{ history_summary.total_reports }} reports, average {{ history_summary.average_score }}</p>
            {% endif %}
        </div>
        {% endif %}

        <div class="findings">
            <h2 style="margin-bottom: 20px;">Findings</h2>
            {% for finding in findings %}
            <div class="finding">
                <div class="finding-header {{ finding.severity|lower }}">
                    <div>
                        <strong>{{ finding.title or 'Untitled' }}</strong> - {{ finding.category or 'uncategorized' }}
                    </div>
                    <span class="badge">{{ finding.severity|upper or 'N/A' }}</span>
                </div>
                <div class="finding-body">
                    {% if finding.description %}<p>{{ finding.description }}</p>{% endif %}
                    {% if finding.affected_services %}
                    <p style="margin-top:10px;"><strong>Affected services:</strong> {{ finding.affected_services|join(', ') }}</p>
                    {% endif %}
                    {% if finding.recommendation %}
                    <div class="recommendation">
                        <h4>Recommendation</h4>
                        <p>{{ finding.recommendation }}</p>
                    </div>
                    {% endif %}
                </div>
            </div>
            {% else %}
            <div class="card" style="text-align:center; padding:40px;">
                <p style="color:#388e3c; font-size:1.2em;">No findings reported</p>
            </div>
            {% endfor %}
        </div>
    </div>

    <footer>
        <p>Generated by Architecture Health Analytics</p>
    </footer>
</body>
</html>
'''


class HTMLWriter:
    """Writes score reports to HTML format."""

    def __init__(
        self,
        template_dir: Optional[str] = None,
        template_name: str = "report.html.jinja2"
    ):
        self.template_dir = template_dir
        self.template_name = template_name

    def write(
        self,
        report: ScoreReport,
        output_path: str,
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None
    ) -> str:
        """
        Write score report to HTML file.

        Args:
            report: Report to write
            output_path: Output file path
            trend: Optional fitted trend
            history: Optional report history

        Returns:
            Path to written file
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        html = self._render(report, trend, history)

        with open(path, "w", encoding="utf-8") as f:
            f.write(html)

        return str(path)

    def _load_template(self):
        """Load the template from template_dir, falling back to the inline one."""
        if self.template_dir:
            env = Environment(
                loader=FileSystemLoader(self.template_dir),
                autoescape=select_autoescape(['html', 'xml', 'jinja2'])
            )
            try:
                return env.get_template(self.template_name)
            except TemplateNotFound:
                pass

        env = Environment(autoescape=True)
        return env.from_string(DEFAULT_HTML_TEMPLATE)

    def _render(
        self,
        report: ScoreReport,
        trend: Optional[TrendResult],
        history: Optional[ReportHistory]
    ) -> str:
        """Render HTML report."""
        template = self._load_template()

        data = {
            "report": report,
            "summary": report.get_summary(),
            "sub_scores": report.sub_scores.to_dict(),
            "findings": report.findings,
            "trend": trend,
            "history_summary": history.get_summary() if history is not None else None,
            "generated_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
        }

        return template.render(**data)

    def to_string(
        self,
        report: ScoreReport,
        trend: Optional[TrendResult] = None,
        history: Optional[ReportHistory] = None
    ) -> str:
        """Render score report to HTML string."""
        return self._render(report, trend, history)
