from __future__ import annotations

from datetime import timezone

from analyzer.core.pipeline import analyze
from analyzer.visualizers.html_report import HtmlReportGenerator
from analyzer.visualizers.text_report import format_currency, render_daily_report, render_report
from tests.payloads import bet_line, win_line


def _result(**kwargs):
    lines = [
        bet_line("b1", 1500000, player_id="whale", balance=10, currency="NGN"),
        bet_line("b1", 1500000, player_id="whale", balance=10, currency="NGN"),
        win_line("w1", 200, player_id="whale", balance=210),
        bet_line("b2", 300, player_id="", game_id="g2"),
    ]
    return analyze(lines, tz=timezone.utc, **kwargs)


def test_format_currency() -> None:
    assert format_currency(0) == "0"
    assert format_currency(1234567) == "1,234,567"
    assert format_currency(-1234567) == "-1,234,567"


def test_render_report_sections() -> None:
    text = render_report(_result())
    assert "GAMING LOGS ANALYSIS REPORT" in text
    assert "├─ Total Bet Amount: 1,500,300 NGN" in text
    assert "Duplicate bets found and skipped: 1" in text
    assert "PLAYER ANALYSIS (2 unique players):" in text
    assert "Player #1: whale" in text
    assert "Player #2: (unknown)" in text
    assert "Game: g1" in text
    assert "10:00 - Bets:    2" in text
    assert "GAME INTEGRITY STATUS:" in text
    assert text.rstrip().endswith("=" * 60)


def test_render_report_limits_players() -> None:
    text = render_report(_result(), top_players=1)
    assert "Player #1: whale" in text
    assert "Player #2" not in text


def test_clean_run_reports_integrity() -> None:
    text = render_report(analyze([bet_line("b1", 100)], tz=timezone.utc))
    assert "DATA INTEGRITY: No duplicate transactions detected" in text
    assert "└─ No wins recorded" in text


def test_suspicious_section() -> None:
    lines = [bet_line(f"b{i}", 10, player_id="lucky") for i in range(101)]
    lines.append(win_line("w1", 5000, player_id="lucky"))
    text = render_report(analyze(lines, tz=timezone.utc))
    assert "SUSPICIOUS ACTIVITY:" in text
    assert "1. HighRTP" in text
    assert "Player: lucky" in text


def test_render_daily_report() -> None:
    text = render_daily_report("25.12.2025", _result())
    assert "DAILY REPORT - 25.12.2025" in text
    assert "TOP PLAYER OF THE DAY:" in text
    assert "Game: g1 - RTP:" in text


def test_html_report_escapes_identifiers(tmp_path) -> None:
    result = analyze([bet_line("b1", 100, player_id="<script>")], tz=timezone.utc)
    html = HtmlReportGenerator().render(result)
    assert "&lt;script&gt;" in html
    assert "<script>" not in html

    out = tmp_path / "reports" / "report.html"
    HtmlReportGenerator().generate_html(result, str(out))
    assert "<!DOCTYPE html>" in out.read_text(encoding="utf-8")
