"""Immutable statistics produced at finalization."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Tuple

from analyzer.core.events import TopEntry


@dataclass(frozen=True)
class PlayerStatistics:
    player_id: str
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0
    net_result: int = 0
    rtp: float = 0.0
    last_balance: int = 0
    top_bets: Tuple[TopEntry, ...] = field(default_factory=tuple)
    top_wins: Tuple[TopEntry, ...] = field(default_factory=tuple)

    @property
    def profit_percent(self) -> float:
        """Net result relative to the amount wagered, 0 without bets."""
        if self.total_bet_amount <= 0:
            return 0.0
        return self.net_result / self.total_bet_amount * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "rtp_percentage": self.rtp,
            "total_bet_amount": self.total_bet_amount,
            "total_win_amount": self.total_win_amount,
            "net_result": self.net_result,
            "last_balance": self.last_balance,
            "total_bets": self.total_bets,
            "total_wins": self.total_wins,
            "top_bets": [asdict(e) for e in self.top_bets],
            "top_wins": [asdict(e) for e in self.top_wins],
        }


@dataclass(frozen=True)
class GameStatistics:
    game_id: str
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0
    net_result: int = 0
    rtp: float = 0.0
    players: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "rtp_percentage": self.rtp,
            "total_bet_amount": self.total_bet_amount,
            "total_win_amount": self.total_win_amount,
            "net_result": self.net_result,
            "total_bets": self.total_bets,
            "total_wins": self.total_wins,
            "unique_players": self.players,
        }


@dataclass(frozen=True)
class HourlyStatistics:
    hour: int
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SuspiciousEvent:
    type: str
    description: str
    player_id: str
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Summary:
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0
    net_result: int = 0
    rtp: float = 0.0
    unique_players: int = 0
    unique_games: int = 0
    time_span: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_bets": self.total_bets,
            "total_wins": self.total_wins,
            "total_bet_amount": self.total_bet_amount,
            "total_win_amount": self.total_win_amount,
            "net_result": self.net_result,
            "rtp_percentage": self.rtp,
            "unique_players": self.unique_players,
            "unique_games": self.unique_games,
            "time_span": self.time_span,
        }


__all__ = [
    "GameStatistics",
    "HourlyStatistics",
    "PlayerStatistics",
    "Summary",
    "SuspiciousEvent",
    "TopEntry",
]
