"""
Report value and assembler.

``assemble_report`` is the last step of a run: it ranks every player and
game in the snapshot, screens the players and computes the global summary.
The resulting ``Report`` is read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from analyzer.core.aggregator import AggregationSnapshot
from analyzer.core.events import format_timestamp
from analyzer.core.ranker import DEFAULT_TOP_N, compute_rtp, rank_game, rank_player
from analyzer.core.screener import FraudScreener
from analyzer.core.stats import (
    GameStatistics,
    HourlyStatistics,
    PlayerStatistics,
    Summary,
    SuspiciousEvent,
)


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class Report:
    summary: Summary = field(default_factory=Summary)
    players: Mapping[str, PlayerStatistics] = field(default_factory=_empty_mapping)
    games: Mapping[str, GameStatistics] = field(default_factory=_empty_mapping)
    hourly: Tuple[HourlyStatistics, ...] = ()
    suspicious_events: Tuple[SuspiciousEvent, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "player_stats": {pid: p.to_dict() for pid, p in self.players.items()},
            "game_stats": {gid: g.to_dict() for gid, g in self.games.items()},
            "time_stats": [h.to_dict() for h in self.hourly],
            "suspicious_events": [e.to_dict() for e in self.suspicious_events],
        }


def format_time_span(snapshot: AggregationSnapshot) -> str:
    """``"<start> - <end>"``, or empty for no events or a zero-length span."""
    lo, hi = snapshot.min_timestamp, snapshot.max_timestamp
    if lo is None or hi is None or not hi > lo:
        return ""
    return f"{format_timestamp(lo, snapshot.tz)} - {format_timestamp(hi, snapshot.tz)}"


def assemble_report(
    snapshot: AggregationSnapshot,
    screener: Optional[FraudScreener] = None,
    top_n: int = DEFAULT_TOP_N,
) -> Report:
    screener = screener if screener is not None else FraudScreener()

    players = {pid: rank_player(acc, top_n) for pid, acc in snapshot.players.items()}
    games = {
        gid: rank_game(acc, snapshot.game_players.get(gid, 0))
        for gid, acc in snapshot.games.items()
    }
    hourly = tuple(
        HourlyStatistics(
            hour=h.hour,
            total_bets=h.total_bets,
            total_wins=h.total_wins,
            total_bet_amount=h.total_bet_amount,
            total_win_amount=h.total_win_amount,
        )
        for h in sorted(snapshot.hours, key=lambda h: h.hour)
    )

    totals = snapshot.totals
    summary = Summary(
        total_bets=totals.total_bets,
        total_wins=totals.total_wins,
        total_bet_amount=totals.total_bet_amount,
        total_win_amount=totals.total_win_amount,
        net_result=totals.total_win_amount - totals.total_bet_amount,
        rtp=compute_rtp(totals.total_win_amount, totals.total_bet_amount),
        unique_players=snapshot.unique_players,
        unique_games=snapshot.unique_games,
        time_span=format_time_span(snapshot),
    )

    return Report(
        summary=summary,
        players=MappingProxyType(players),
        games=MappingProxyType(games),
        hourly=hourly,
        suspicious_events=tuple(screener.screen_all(players)),
    )


__all__ = ["Report", "assemble_report", "format_time_span"]
