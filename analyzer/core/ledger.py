"""Identifier ledger guaranteeing at-most-once accounting of bet/win ids."""

from __future__ import annotations

from enum import Enum
from typing import Set

from analyzer.core.events import TransactionKind


class Verdict(str, Enum):
    FRESH = "fresh"
    DUPLICATE = "duplicate"


class IdentifierLedger:
    """
    Remembers accepted bet and win identifiers in two disjoint sets.

    Events without an identifier are always fresh and never recorded, so
    duplicates are only caught when the upstream service supplies an id.
    """

    def __init__(self) -> None:
        self._bets: Set[str] = set()
        self._wins: Set[str] = set()

    def _bucket(self, kind: TransactionKind) -> Set[str]:
        if kind is TransactionKind.BET:
            return self._bets
        if kind is TransactionKind.WIN:
            return self._wins
        raise ValueError(f"Ledger only tracks bets and wins, got {kind.value}")

    def accept(self, kind: TransactionKind, transaction_id: str) -> Verdict:
        bucket = self._bucket(kind)
        if not transaction_id:
            return Verdict.FRESH
        if transaction_id in bucket:
            return Verdict.DUPLICATE
        bucket.add(transaction_id)
        return Verdict.FRESH

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        kind, transaction_id = item
        try:
            return transaction_id in self._bucket(kind)
        except ValueError:
            return False

    @property
    def bet_count(self) -> int:
        return len(self._bets)

    @property
    def win_count(self) -> int:
        return len(self._wins)


__all__ = ["IdentifierLedger", "Verdict"]
