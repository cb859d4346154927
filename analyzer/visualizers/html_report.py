"""Generate HTML reports for analysis results."""

from datetime import datetime
from pathlib import Path

from jinja2 import Environment, select_autoescape

from analyzer.core.events import UNKNOWN_ID, UNKNOWN_LABEL
from analyzer.core.pipeline import AnalysisResult
from analyzer.visualizers.text_report import format_currency

TEMPLATE_STR = """
<!DOCTYPE html>
<html>
<head>
    <title>Gaming Logs Analysis - {{ summary.time_span or "no activity" }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; }
        .header { background: #2c3e50; color: white; padding: 20px; border-radius: 5px; }
        .metrics { display: grid; grid-template-columns: repeat(4, 1fr); gap: 20px; margin: 20px 0; }
        .metric-card { background: #ecf0f1; padding: 20px; border-radius: 5px; text-align: center; }
        .metric-value { font-size: 2em; font-weight: bold; color: #3498db; }
        .status-pass { color: #27ae60; }
        .status-fail { color: #e74c3c; }
        table { border-collapse: collapse; margin: 20px 0; }
        th, td { border: 1px solid #bdc3c7; padding: 6px 12px; text-align: right; }
        th:first-child, td:first-child { text-align: left; }
    </style>
</head>
<body>
    <div class="header">
        <h1>Gaming Logs Analysis Report</h1>
        <p>{{ summary.time_span }}</p>
        <p><small>Generated: {{ timestamp }}</small></p>
    </div>
    <div class="metrics">
        <div class="metric-card">
            <div class="metric-value">{{ money(summary.total_bet_amount) }}</div>
            <div>Bet Volume ({{ currency }})</div>
        </div>
        <div class="metric-card">
            <div class="metric-value">{{ money(summary.total_win_amount) }}</div>
            <div>Win Volume ({{ currency }})</div>
        </div>
        <div class="metric-card">
            <div class="metric-value">{{ "%.2f"|format(summary.rtp) }}%</div>
            <div>RTP</div>
        </div>
        <div class="metric-card">
            <div class="metric-value">{{ summary.unique_players }}</div>
            <div>Unique Players</div>
        </div>
    </div>
    {% if diagnostics.has_duplicates %}
    <p class="status-fail">Duplicates skipped: {{ diagnostics.duplicate_bets }} bets, {{ diagnostics.duplicate_wins }} wins</p>
    {% endif %}
    <h2>Players</h2>
    <table>
        <tr><th>Player</th><th>Bets</th><th>Wins</th><th>Bet Volume</th><th>Win Volume</th><th>Net</th><th>RTP</th><th>Balance</th></tr>
        {% for pid, p in players %}
        <tr>
            <td>{{ label(pid) }}</td><td>{{ p.total_bets }}</td><td>{{ p.total_wins }}</td>
            <td>{{ money(p.total_bet_amount) }}</td><td>{{ money(p.total_win_amount) }}</td>
            <td>{{ money(p.net_result) }}</td><td>{{ "%.2f"|format(p.rtp) }}%</td><td>{{ money(p.last_balance) }}</td>
        </tr>
        {% endfor %}
    </table>
    <h2>Games</h2>
    <table>
        <tr><th>Game</th><th>Bets</th><th>Wins</th><th>Bet Volume</th><th>Win Volume</th><th>RTP</th><th>Players</th></tr>
        {% for gid, g in games %}
        <tr>
            <td>{{ label(gid) }}</td><td>{{ g.total_bets }}</td><td>{{ g.total_wins }}</td>
            <td>{{ money(g.total_bet_amount) }}</td><td>{{ money(g.total_win_amount) }}</td>
            <td>{{ "%.2f"|format(g.rtp) }}%</td><td>{{ g.players }}</td>
        </tr>
        {% endfor %}
    </table>
    <h2>Hourly Activity</h2>
    <table>
        <tr><th>Hour</th><th>Bets</th><th>Wins</th><th>Bet Volume</th><th>Win Volume</th></tr>
        {% for h in hourly %}
        <tr>
            <td>{{ "%02d"|format(h.hour) }}:00</td><td>{{ h.total_bets }}</td><td>{{ h.total_wins }}</td>
            <td>{{ money(h.total_bet_amount) }}</td><td>{{ money(h.total_win_amount) }}</td>
        </tr>
        {% endfor %}
    </table>
    <h2>Suspicious Activity:
        <span class="{% if suspicious %}status-fail{% else %}status-pass{% endif %}">
            {% if suspicious %}{{ suspicious|length }} FLAGGED{% else %}NONE{% endif %}
        </span>
    </h2>
    {% if suspicious %}
    <ul>
    {% for event in suspicious %}
        <li class="status-fail">{{ event.type }} - {{ label(event.player_id) }}: {{ event.description }} ({{ event.details }})</li>
    {% endfor %}
    </ul>
    {% endif %}
</body>
</html>
"""


def _label(identifier: str) -> str:
    return UNKNOWN_LABEL if identifier == UNKNOWN_ID else identifier


class HtmlReportGenerator:
    """Generate HTML reports for analysis results."""

    def __init__(self) -> None:
        env = Environment(autoescape=select_autoescape(default_for_string=True))
        self.template = env.from_string(TEMPLATE_STR)

    def render(self, result: AnalysisResult) -> str:
        report = result.report
        players = sorted(report.players.items(), key=lambda item: (-item[1].total_bet_amount, item[0]))
        return self.template.render(
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            summary=report.summary,
            currency=result.currency,
            diagnostics=result.diagnostics,
            players=players,
            games=sorted(report.games.items()),
            hourly=report.hourly,
            suspicious=report.suspicious_events,
            money=format_currency,
            label=_label,
        )

    def generate_html(self, result: AnalysisResult, output_path: str) -> None:
        html = self.render(result)
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html)
