"""
Single-pass accumulator over decoded transaction events.

An ``Aggregator`` is the explicit context of one analysis run: it owns the
identifier ledger and every running total, and nothing else mutates them.
Events are folded in the order supplied; no sorting happens here, so
"last balance" is last-write-wins in stream order.

Every event, whatever its kind or amount, widens the time span, joins the
unique player/game sets and instantiates its hour bucket. Only positive,
non-duplicate bets and wins move money counters.
"""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import DefaultDict, Dict, List, Optional, Set

from analyzer.core.events import (
    TopEntry,
    TransactionEvent,
    TransactionKind,
    format_timestamp,
    hour_of,
)
from analyzer.core.ledger import IdentifierLedger, Verdict

logger = logging.getLogger(__name__)


@dataclass
class PlayerAccumulator:
    player_id: str
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0
    last_balance: int = 0
    # Unbounded candidate lists; the ranker sorts and truncates them.
    bet_candidates: List[TopEntry] = field(default_factory=list)
    win_candidates: List[TopEntry] = field(default_factory=list)


@dataclass
class GameAccumulator:
    game_id: str
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0


@dataclass
class HourAccumulator:
    hour: int
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0


@dataclass(frozen=True)
class GlobalTotals:
    total_bets: int = 0
    total_wins: int = 0
    total_bet_amount: int = 0
    total_win_amount: int = 0


@dataclass(frozen=True)
class AggregationSnapshot:
    """Finalized aggregation state handed to the ranker, screener and assembler."""

    players: Dict[str, PlayerAccumulator]
    games: Dict[str, GameAccumulator]
    hours: List[HourAccumulator]
    totals: GlobalTotals
    unique_players: int
    unique_games: int
    game_players: Dict[str, int]
    min_timestamp: Optional[float]
    max_timestamp: Optional[float]
    currency: str = ""
    duplicate_bets: int = 0
    duplicate_wins: int = 0
    events_folded: int = 0
    tz: Optional[tzinfo] = None


class Aggregator:
    """
    Running per-player, per-game, per-hour and global totals.

    Parameters
    ----------
    ledger:
        Identifier ledger for duplicate detection. A fresh one is created when
        omitted; pass one explicitly only to inspect it afterwards.
    tz:
        Zone used for hour buckets and top-entry times. ``None`` uses the
        local wall clock.
    """

    def __init__(self, ledger: Optional[IdentifierLedger] = None, tz: Optional[tzinfo] = None) -> None:
        self._ledger = ledger if ledger is not None else IdentifierLedger()
        self._tz = tz

        self._players: Dict[str, PlayerAccumulator] = {}
        self._games: Dict[str, GameAccumulator] = {}
        self._hours: Dict[int, HourAccumulator] = {}

        self._seen_players: Set[str] = set()
        self._seen_games: Set[str] = set()
        self._game_players: DefaultDict[str, Set[str]] = defaultdict(set)

        self._total_bets = 0
        self._total_wins = 0
        self._total_bet_amount = 0
        self._total_win_amount = 0

        self._min_ts: Optional[float] = None
        self._max_ts: Optional[float] = None
        self._currency = ""

        self._duplicate_bets = 0
        self._duplicate_wins = 0
        self._events_folded = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fold(self, event: TransactionEvent) -> None:
        """Fold one event into the running state."""
        self._events_folded += 1
        self._seen_players.add(event.player_id)
        self._seen_games.add(event.game_id)
        self._game_players[event.game_id].add(event.player_id)

        ts = event.timestamp_seconds
        if self._max_ts is None or ts > self._max_ts:
            self._max_ts = ts
        if self._min_ts is None or ts < self._min_ts:
            self._min_ts = ts

        if not self._currency and event.currency_label:
            self._currency = event.currency_label

        hour = hour_of(ts, self._tz)
        bucket = self._hours.get(hour)
        if bucket is None:
            bucket = self._hours[hour] = HourAccumulator(hour=hour)

        if not event.is_countable:
            return

        if self._ledger.accept(event.kind, event.transaction_id) is Verdict.DUPLICATE:
            if event.kind is TransactionKind.BET:
                self._duplicate_bets += 1
                logger.warning("Skipping duplicate bet ID: %s", event.transaction_id)
            else:
                self._duplicate_wins += 1
                logger.warning("Skipping duplicate win ID: %s", event.transaction_id)
            return

        if event.kind is TransactionKind.BET:
            self._fold_bet(event, bucket)
        else:
            self._fold_win(event, bucket)

    def fold_all(self, events) -> "Aggregator":
        for event in events:
            self.fold(event)
        return self

    def finalize(self) -> AggregationSnapshot:
        """
        Return a snapshot of the current state.

        The snapshot is a deep copy, so folding may continue afterwards
        without disturbing values already handed out.
        """
        return AggregationSnapshot(
            players=copy.deepcopy(self._players),
            games=copy.deepcopy(self._games),
            hours=[copy.copy(self._hours[h]) for h in sorted(self._hours)],
            totals=GlobalTotals(
                total_bets=self._total_bets,
                total_wins=self._total_wins,
                total_bet_amount=self._total_bet_amount,
                total_win_amount=self._total_win_amount,
            ),
            unique_players=len(self._seen_players),
            unique_games=len(self._seen_games),
            game_players={gid: len(pids) for gid, pids in self._game_players.items()},
            min_timestamp=self._min_ts,
            max_timestamp=self._max_ts,
            currency=self._currency,
            duplicate_bets=self._duplicate_bets,
            duplicate_wins=self._duplicate_wins,
            events_folded=self._events_folded,
            tz=self._tz,
        )

    @property
    def unique_players(self) -> int:
        return len(self._seen_players)

    @property
    def unique_games(self) -> int:
        return len(self._seen_games)

    @property
    def duplicate_bets(self) -> int:
        return self._duplicate_bets

    @property
    def duplicate_wins(self) -> int:
        return self._duplicate_wins

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _player(self, player_id: str) -> PlayerAccumulator:
        acc = self._players.get(player_id)
        if acc is None:
            acc = self._players[player_id] = PlayerAccumulator(player_id=player_id)
        return acc

    def _game(self, game_id: str) -> GameAccumulator:
        acc = self._games.get(game_id)
        if acc is None:
            acc = self._games[game_id] = GameAccumulator(game_id=game_id)
        return acc

    def _entry(self, event: TransactionEvent) -> TopEntry:
        return TopEntry(
            amount=event.amount,
            round_id=event.round_id,
            time=format_timestamp(event.timestamp_seconds, self._tz),
        )

    def _fold_bet(self, event: TransactionEvent, bucket: HourAccumulator) -> None:
        amount = event.amount
        self._total_bets += 1
        self._total_bet_amount += amount

        player = self._player(event.player_id)
        player.total_bets += 1
        player.total_bet_amount += amount
        player.last_balance = event.balance_after
        player.bet_candidates.append(self._entry(event))

        game = self._game(event.game_id)
        game.total_bets += 1
        game.total_bet_amount += amount

        bucket.total_bets += 1
        bucket.total_bet_amount += amount

    def _fold_win(self, event: TransactionEvent, bucket: HourAccumulator) -> None:
        amount = event.amount
        self._total_wins += 1
        self._total_win_amount += amount

        player = self._player(event.player_id)
        player.total_wins += 1
        player.total_win_amount += amount
        player.last_balance = event.balance_after
        player.win_candidates.append(self._entry(event))

        game = self._game(event.game_id)
        game.total_wins += 1
        game.total_win_amount += amount

        bucket.total_wins += 1
        bucket.total_win_amount += amount


__all__ = [
    "AggregationSnapshot",
    "Aggregator",
    "GameAccumulator",
    "GlobalTotals",
    "HourAccumulator",
    "PlayerAccumulator",
]
