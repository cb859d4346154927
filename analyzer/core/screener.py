"""
Fixed-threshold fraud heuristics over finalized player statistics.

A rule is any callable taking a ``PlayerStatistics`` and returning zero or
more ``SuspiciousEvent`` values. Rules run in registration order and players
are screened in player-id order, so the output is reproducible.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from analyzer.core.stats import PlayerStatistics, SuspiciousEvent

Rule = Callable[[PlayerStatistics], Iterable[SuspiciousEvent]]

HIGH_RTP = "HighRTP"


def high_rtp_rule(min_bets: int = 100, min_rtp: float = 150.0) -> Rule:
    """Flag players with more than ``min_bets`` bets and RTP above ``min_rtp`` percent."""

    def _rule(player: PlayerStatistics) -> List[SuspiciousEvent]:
        if player.total_bets > min_bets and player.rtp > min_rtp:
            return [
                SuspiciousEvent(
                    type=HIGH_RTP,
                    description="Player has suspiciously high RTP",
                    player_id=player.player_id,
                    details=f"RTP: {player.rtp:.2f}%, Bets: {player.total_bets}",
                )
            ]
        return []

    _rule.__name__ = "high_rtp"
    return _rule


class FraudScreener:
    """Apply an ordered set of rules to player statistics."""

    def __init__(self, rules: Optional[Sequence[Rule]] = None) -> None:
        self.rules: List[Rule] = list(rules) if rules is not None else [high_rtp_rule()]

    @classmethod
    def from_config(cls, cfg) -> "FraudScreener":
        """Build the default rule set from an ``AnalysisConfig``."""
        return cls([high_rtp_rule(cfg.high_rtp_min_bets, cfg.high_rtp_threshold)])

    def screen(self, player: PlayerStatistics) -> List[SuspiciousEvent]:
        flags: List[SuspiciousEvent] = []
        for rule in self.rules:
            flags.extend(rule(player))
        return flags

    def screen_all(self, players: Mapping[str, PlayerStatistics]) -> List[SuspiciousEvent]:
        flags: List[SuspiciousEvent] = []
        for player_id in sorted(players):
            flags.extend(self.screen(players[player_id]))
        return flags


__all__ = ["HIGH_RTP", "FraudScreener", "Rule", "high_rtp_rule"]
