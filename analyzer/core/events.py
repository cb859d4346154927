"""Typed transaction events produced by the decoder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Optional

# Bucket key for events that carry no player/game identifier. Reports keep
# "" as the key; only the presentation layer gives it a readable label.
UNKNOWN_ID = ""
UNKNOWN_LABEL = "(unknown)"

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class TransactionKind(str, Enum):
    BET = "Bet"
    WIN = "Win"
    OTHER = "Other"

    @classmethod
    def from_message(cls, message: str) -> "TransactionKind":
        if message == "SendBet":
            return cls.BET
        if message == "SendWin":
            return cls.WIN
        return cls.OTHER


@dataclass(frozen=True)
class TransactionEvent:
    """One decoded bet, win or other game service event."""

    kind: TransactionKind
    player_id: str = UNKNOWN_ID
    game_id: str = UNKNOWN_ID
    round_id: str = ""
    transaction_id: str = ""
    amount: int = 0
    balance_after: int = 0
    timestamp_seconds: float = 0.0
    currency_label: str = ""

    @property
    def is_countable(self) -> bool:
        """True when the event may contribute to bet/win totals."""
        return self.kind is not TransactionKind.OTHER and self.amount > 0


@dataclass(frozen=True)
class TopEntry:
    """A candidate for a player's largest bets or wins."""

    amount: int
    round_id: str
    time: str


def to_datetime(timestamp_seconds: float, tz: Optional[tzinfo] = None) -> datetime:
    """Truncate to whole seconds and convert; ``tz=None`` uses the local clock."""
    return datetime.fromtimestamp(int(timestamp_seconds), tz=tz)


def format_timestamp(timestamp_seconds: float, tz: Optional[tzinfo] = None) -> str:
    return to_datetime(timestamp_seconds, tz).strftime(TIME_FORMAT)


def hour_of(timestamp_seconds: float, tz: Optional[tzinfo] = None) -> int:
    return to_datetime(timestamp_seconds, tz).hour


__all__ = [
    "TIME_FORMAT",
    "TopEntry",
    "UNKNOWN_ID",
    "UNKNOWN_LABEL",
    "TransactionEvent",
    "TransactionKind",
    "format_timestamp",
    "hour_of",
    "to_datetime",
]
