"""Render analysis results as plain text for the terminal."""

from __future__ import annotations

from typing import List, Optional, Tuple

from analyzer.core.events import UNKNOWN_ID, UNKNOWN_LABEL
from analyzer.core.pipeline import AnalysisResult
from analyzer.core.stats import PlayerStatistics

WIDTH = 60


def format_currency(amount: int) -> str:
    """Thousands separators, sign kept in front: ``-1234567`` -> ``-1,234,567``."""
    return f"{amount:,}"


def _label(identifier: str) -> str:
    return UNKNOWN_LABEL if identifier == UNKNOWN_ID else identifier


def _banner(title: str) -> List[str]:
    return ["", "=" * WIDTH, title.center(WIDTH).rstrip(), "=" * WIDTH]


def _ranked_players(result: AnalysisResult) -> List[Tuple[str, PlayerStatistics]]:
    # Highest bet volume first; player id breaks ties so output is stable.
    return sorted(
        result.report.players.items(),
        key=lambda item: (-item[1].total_bet_amount, item[0]),
    )


def _summary_lines(result: AnalysisResult, heading: str) -> List[str]:
    s = result.report.summary
    cur = result.currency
    return [
        "",
        heading,
        f"├─ Analysis Period: {s.time_span}",
        f"├─ Total Bets: {s.total_bets}",
        f"├─ Total Wins: {s.total_wins}",
        f"├─ Total Bet Amount: {format_currency(s.total_bet_amount)} {cur}",
        f"├─ Total Win Amount: {format_currency(s.total_win_amount)} {cur}",
        f"├─ Net Result: {format_currency(s.net_result)} {cur}",
        f"├─ RTP (Return to Player): {s.rtp:.2f}%",
        f"├─ Unique Players: {s.unique_players}",
        f"└─ Unique Games: {s.unique_games}",
    ]


def _duplicate_lines(result: AnalysisResult) -> List[str]:
    d = result.diagnostics
    lines = [""]
    if d.has_duplicates:
        lines.append("DUPLICATE DETECTION:")
        if d.duplicate_bets:
            lines.append(f"├─ Duplicate bets found and skipped: {d.duplicate_bets}")
        if d.duplicate_wins:
            lines.append(f"├─ Duplicate wins found and skipped: {d.duplicate_wins}")
        lines.append("└─ Only unique transactions included in analysis")
    else:
        lines.append("DATA INTEGRITY: No duplicate transactions detected")
    if d.invalid_payloads:
        lines.append(f"Malformed payloads skipped: {d.invalid_payloads}")
    return lines


def _player_lines(index: int, player_id: str, p: PlayerStatistics, currency: str) -> List[str]:
    trend = "down" if p.net_result < 0 else "up"
    lines = [
        f"Player #{index}: {_label(player_id)}",
        f"├─ Activity: {p.total_bets} bets, {p.total_wins} wins",
        f"├─ Volume: Bet {format_currency(p.total_bet_amount)} {currency}, "
        f"Win {format_currency(p.total_win_amount)} {currency}",
        f"├─ Net Profit ({trend}): {format_currency(p.net_result)} {currency} ({p.profit_percent:.2f}%)",
        f"├─ RTP: {p.rtp:.2f}%, Current Balance: {format_currency(p.last_balance)} {currency}",
    ]
    if p.top_bets:
        bets = ", ".join(f"{format_currency(b.amount)} {currency}" for b in p.top_bets[:3])
        lines.append(f"├─ Largest Bets: {bets}")
    wins = [w for w in p.top_wins[:3] if w.amount > 0]
    if wins:
        lines.append("└─ Biggest Wins: " + ", ".join(f"{format_currency(w.amount)} {currency}" for w in wins))
    else:
        lines.append("└─ No wins recorded")
    return lines


def render_report(result: AnalysisResult, top_players: int = 10, title: Optional[str] = None) -> str:
    report = result.report
    cur = result.currency
    lines = _banner(title or "GAMING LOGS ANALYSIS REPORT")
    lines += _summary_lines(result, "GENERAL STATISTICS:")
    lines += _duplicate_lines(result)

    ranked = _ranked_players(result)
    lines += ["", f"PLAYER ANALYSIS ({len(ranked)} unique players):"]
    shown = ranked[:top_players]
    for i, (player_id, stat) in enumerate(shown, start=1):
        lines += _player_lines(i, player_id, stat, cur)
        if i < len(shown):
            lines.append("")

    lines += ["", "GAME STATISTICS:"]
    for game_id in sorted(report.games):
        g = report.games[game_id]
        lines += [
            f"Game: {_label(game_id)}",
            f"├─ Bets: {g.total_bets}, Wins: {g.total_wins}",
            f"├─ Bet Volume: {format_currency(g.total_bet_amount)} {cur}",
            f"├─ Win Volume: {format_currency(g.total_win_amount)} {cur}",
            f"├─ RTP: {g.rtp:.2f}%",
            f"└─ Players: {g.players}",
        ]

    lines += ["", "HOURLY ACTIVITY:"]
    for h in report.hourly:
        if h.total_bets > 0:
            lines.append(
                f"{h.hour:02d}:00 - Bets: {h.total_bets:4d}, Wins: {h.total_wins:4d}, "
                f"Volume: {format_currency(h.total_bet_amount)} {cur}"
            )

    if report.suspicious_events:
        lines += ["", "SUSPICIOUS ACTIVITY:"]
        for i, event in enumerate(report.suspicious_events, start=1):
            lines += [
                f"{i}. {event.type}",
                f"   ├─ Player: {_label(event.player_id)}",
                f"   ├─ Description: {event.description}",
                f"   └─ Details: {event.details}",
            ]
    else:
        lines += [
            "",
            "GAME INTEGRITY STATUS:",
            "├─ No suspicious activity detected",
            "├─ All player RTP values are within normal ranges",
            f"└─ Overall RTP: {report.summary.rtp:.2f}%",
        ]

    lines += _banner("END OF REPORT")
    return "\n".join(lines) + "\n"


def render_daily_report(date: str, result: AnalysisResult) -> str:
    report = result.report
    cur = result.currency
    lines = _banner(f"DAILY REPORT - {date}")
    lines += _summary_lines(result, "DAILY STATISTICS:")

    ranked = _ranked_players(result)
    if ranked:
        player_id, top = ranked[0]
        lines += ["", "TOP PLAYER OF THE DAY:"]
        lines += _player_lines(1, player_id, top, cur)

    lines += ["", "GAME PERFORMANCE:"]
    for game_id in sorted(report.games):
        g = report.games[game_id]
        lines.append(
            f"Game: {_label(game_id)} - RTP: {g.rtp:.2f}%, Volume: {format_currency(g.total_bet_amount)} {cur}"
        )
    lines.append("-" * WIDTH)
    return "\n".join(lines) + "\n"


__all__ = ["format_currency", "render_daily_report", "render_report"]
