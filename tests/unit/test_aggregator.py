"""Tests for the single-pass aggregator."""

from __future__ import annotations

from datetime import timezone

from analyzer.core.aggregator import Aggregator
from analyzer.core.events import TransactionEvent, TransactionKind

BASE_TS = 1735120800.0  # 2024-12-25 10:00:00 UTC


def _bet(tid: str, amount: int, player: str = "p1", game: str = "g1", ts: float = BASE_TS, balance: int = 0, **kw):
    return TransactionEvent(
        kind=TransactionKind.BET,
        player_id=player,
        game_id=game,
        transaction_id=tid,
        amount=amount,
        balance_after=balance,
        timestamp_seconds=ts,
        **kw,
    )


def _win(tid: str, amount: int, player: str = "p1", game: str = "g1", ts: float = BASE_TS, balance: int = 0, **kw):
    return TransactionEvent(
        kind=TransactionKind.WIN,
        player_id=player,
        game_id=game,
        transaction_id=tid,
        amount=amount,
        balance_after=balance,
        timestamp_seconds=ts,
        **kw,
    )


class TestFolding:
    def test_bets_and_wins_move_every_level(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([_bet("b1", 100), _bet("b2", 200, player="p2"), _win("w1", 500)])
        snap = agg.finalize()

        assert snap.totals.total_bets == 2
        assert snap.totals.total_wins == 1
        assert snap.totals.total_bet_amount == 300
        assert snap.totals.total_win_amount == 500
        assert snap.players["p1"].total_bet_amount == 100
        assert snap.players["p1"].total_win_amount == 500
        assert snap.players["p2"].total_bets == 1
        assert snap.games["g1"].total_bets == 2
        assert snap.games["g1"].total_wins == 1
        assert [h.hour for h in snap.hours] == [10]
        assert snap.hours[0].total_bet_amount == 300

    def test_duplicate_bet_counted_once(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([_bet("b1", 100), _bet("b1", 100)])
        snap = agg.finalize()
        assert snap.totals.total_bets == 1
        assert snap.totals.total_bet_amount == 100
        assert snap.duplicate_bets == 1
        assert agg.duplicate_bets == 1

    def test_duplicate_win_counted_once(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([_win("w1", 100), _win("w1", 300)])
        snap = agg.finalize()
        assert snap.totals.total_win_amount == 100
        assert snap.duplicate_wins == 1

    def test_events_without_identifier_always_count(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([_bet("", 100), _bet("", 100)])
        snap = agg.finalize()
        assert snap.totals.total_bets == 2
        assert snap.duplicate_bets == 0

    def test_non_positive_amounts_only_touch_presence(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([_bet("b1", 0, player="p9", game="g9"), _win("w1", -5, player="p9", game="g9")])
        snap = agg.finalize()
        assert snap.totals.total_bets == 0
        assert snap.totals.total_wins == 0
        assert snap.players == {}
        assert snap.games == {}
        assert snap.unique_players == 1
        assert snap.unique_games == 1
        assert [h.hour for h in snap.hours] == [10]
        assert snap.hours[0].total_bets == 0

    def test_zero_amount_does_not_consume_identifier(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([_bet("b1", 0), _bet("b1", 100)])
        snap = agg.finalize()
        assert snap.totals.total_bet_amount == 100
        assert snap.duplicate_bets == 0

    def test_other_events_widen_span_and_presence(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold(_bet("b1", 100, ts=BASE_TS))
        agg.fold(TransactionEvent(kind=TransactionKind.OTHER, player_id="p7", game_id="g7", timestamp_seconds=BASE_TS + 7200))
        snap = agg.finalize()
        assert snap.max_timestamp == BASE_TS + 7200
        assert snap.unique_players == 2
        assert snap.game_players == {"g1": 1, "g7": 1}
        assert [h.hour for h in snap.hours] == [10, 12]

    def test_last_balance_follows_stream_order(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([
            _bet("b1", 100, ts=BASE_TS + 60, balance=900),
            _bet("b2", 100, ts=BASE_TS, balance=800),
        ])
        assert agg.finalize().players["p1"].last_balance == 800

    def test_game_players_counted_per_game(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([
            _bet("b1", 10, player="p1", game="g1"),
            _bet("b2", 10, player="p2", game="g1"),
            _bet("b3", 10, player="p1", game="g1"),
            _bet("b4", 10, player="p1", game="g2"),
        ])
        snap = agg.finalize()
        assert snap.game_players == {"g1": 2, "g2": 1}
        assert snap.unique_players == 2
        assert snap.unique_games == 2

    def test_unique_counts_never_decrease(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        events = [
            _bet("b1", 100, player="a", game="g1"),
            _bet("b2", 100, player="b", game="g2"),
            _bet("b1", 100, player="a", game="g1"),
            _bet("b3", 0, player="", game=""),
            TransactionEvent(kind=TransactionKind.OTHER, player_id="c", game_id="g1", timestamp_seconds=BASE_TS),
            _win("w1", 50, player="b", game="g2"),
        ]
        players, games = [], []
        for event in events:
            agg.fold(event)
            players.append(agg.unique_players)
            games.append(agg.unique_games)

        assert players == sorted(players)
        assert games == sorted(games)
        assert players[-1] == 4
        assert games[-1] == 3

    def test_first_non_empty_currency_wins(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold_all([_bet("b1", 10), _bet("b2", 10, currency_label="NGN"), _bet("b3", 10, currency_label="EUR")])
        assert agg.finalize().currency == "NGN"

    def test_top_entry_time_uses_timezone(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold(_bet("b1", 100, ts=BASE_TS + 0.9, round_id="r1"))
        entry = agg.finalize().players["p1"].bet_candidates[0]
        assert entry.round_id == "r1"
        assert entry.time == "2024-12-25 10:00:00"


class TestSnapshot:
    def test_empty_stream(self) -> None:
        snap = Aggregator(tz=timezone.utc).finalize()
        assert snap.players == {}
        assert snap.hours == []
        assert snap.min_timestamp is None
        assert snap.max_timestamp is None
        assert snap.events_folded == 0

    def test_finalize_does_not_disturb_further_folding(self) -> None:
        agg = Aggregator(tz=timezone.utc)
        agg.fold(_bet("b1", 100))
        first = agg.finalize()
        agg.fold(_bet("b2", 50))
        second = agg.finalize()
        assert first.players["p1"].total_bet_amount == 100
        assert second.players["p1"].total_bet_amount == 150
        assert first.events_folded == 1
        assert second.events_folded == 2
