"""Derived per-entity figures: RTP, net result and top-N lists."""

from __future__ import annotations

from typing import Iterable, Tuple

from analyzer.core.aggregator import GameAccumulator, PlayerAccumulator
from analyzer.core.events import TopEntry
from analyzer.core.stats import GameStatistics, PlayerStatistics

DEFAULT_TOP_N = 5


def compute_rtp(total_win_amount: int, total_bet_amount: int) -> float:
    """Return-to-player in percent; 0.0 when nothing was wagered."""
    if total_bet_amount <= 0:
        return 0.0
    return total_win_amount / total_bet_amount * 100


def top_entries(entries: Iterable[TopEntry], limit: int = DEFAULT_TOP_N) -> Tuple[TopEntry, ...]:
    """Largest amounts first; equal amounts keep their insertion order."""
    # sorted() is stable, reverse=True included.
    ranked = sorted(entries, key=lambda e: e.amount, reverse=True)
    return tuple(ranked[:limit])


def rank_player(acc: PlayerAccumulator, limit: int = DEFAULT_TOP_N) -> PlayerStatistics:
    return PlayerStatistics(
        player_id=acc.player_id,
        total_bets=acc.total_bets,
        total_wins=acc.total_wins,
        total_bet_amount=acc.total_bet_amount,
        total_win_amount=acc.total_win_amount,
        net_result=acc.total_win_amount - acc.total_bet_amount,
        rtp=compute_rtp(acc.total_win_amount, acc.total_bet_amount),
        last_balance=acc.last_balance,
        top_bets=top_entries(acc.bet_candidates, limit),
        top_wins=top_entries(acc.win_candidates, limit),
    )


def rank_game(acc: GameAccumulator, players: int = 0) -> GameStatistics:
    return GameStatistics(
        game_id=acc.game_id,
        total_bets=acc.total_bets,
        total_wins=acc.total_wins,
        total_bet_amount=acc.total_bet_amount,
        total_win_amount=acc.total_win_amount,
        net_result=acc.total_win_amount - acc.total_bet_amount,
        rtp=compute_rtp(acc.total_win_amount, acc.total_bet_amount),
        players=players,
    )


__all__ = ["DEFAULT_TOP_N", "compute_rtp", "rank_game", "rank_player", "top_entries"]
