"""Tests for the fraud heuristics."""

from __future__ import annotations

from analyzer.core.screener import HIGH_RTP, FraudScreener, high_rtp_rule
from analyzer.core.stats import PlayerStatistics, SuspiciousEvent
from common.config import AnalysisConfig


def _player(player_id: str, bets: int, rtp: float) -> PlayerStatistics:
    return PlayerStatistics(player_id=player_id, total_bets=bets, rtp=rtp)


def test_boundary_is_not_flagged() -> None:
    rule = high_rtp_rule()
    assert rule(_player("p1", 100, 200.0)) == []
    assert rule(_player("p1", 150, 150.0)) == []


def test_just_above_both_thresholds_is_flagged() -> None:
    flags = high_rtp_rule()(_player("p1", 101, 150.01))
    assert len(flags) == 1
    event = flags[0]
    assert event.type == HIGH_RTP
    assert event.player_id == "p1"
    assert event.description == "Player has suspiciously high RTP"
    assert event.details == "RTP: 150.01%, Bets: 101"


def test_screen_all_is_sorted_by_player_id() -> None:
    players = {
        "zed": _player("zed", 200, 300.0),
        "amy": _player("amy", 200, 300.0),
        "bob": _player("bob", 10, 900.0),
    }
    flags = FraudScreener().screen_all(players)
    assert [f.player_id for f in flags] == ["amy", "zed"]


def test_custom_rules_run_in_order() -> None:
    def big_loser(player: PlayerStatistics):
        if player.rtp < 10:
            return [SuspiciousEvent("BigLoser", "Player keeps losing", player.player_id, "")]
        return []

    screener = FraudScreener([big_loser, high_rtp_rule(min_bets=0, min_rtp=0)])
    flags = screener.screen(_player("p1", 5, 5.0))
    assert [f.type for f in flags] == ["BigLoser", HIGH_RTP]


def test_from_config_uses_thresholds() -> None:
    screener = FraudScreener.from_config(AnalysisConfig(high_rtp_min_bets=5, high_rtp_threshold=100.0))
    assert len(screener.screen(_player("p1", 6, 120.0))) == 1
    assert screener.screen(_player("p1", 5, 120.0)) == []
