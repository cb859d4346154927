"""
Decode raw game service payloads into ``TransactionEvent`` values.

Only shape is validated here. Business rules (non-positive amounts, missing
identifiers, duplicates) are the aggregator's concern.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from analyzer.core.events import TransactionEvent, TransactionKind
from analyzer.models import GameLine

_EXCERPT_LENGTH = 120


class DecodeError(ValueError):
    """A payload could not be parsed as a game service JSON object."""

    def __init__(
        self,
        reason: str,
        payload: str,
        position: Optional[int] = None,
        source: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.payload = payload
        self.position = position
        self.source = source
        super().__init__(self._format())

    @property
    def excerpt(self) -> str:
        if len(self.payload) <= _EXCERPT_LENGTH:
            return self.payload
        return self.payload[:_EXCERPT_LENGTH] + "..."

    def _format(self) -> str:
        where = []
        if self.source:
            where.append(f"source={self.source}")
        if self.position is not None:
            where.append(f"position={self.position}")
        location = f" ({', '.join(where)})" if where else ""
        return f"cannot decode payload{location}: {self.reason}; payload={self.excerpt!r}"


def _reason(exc: ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    msg = first.get("msg", "invalid payload")
    return f"{loc}: {msg}" if loc else msg


def decode_event(
    payload: str,
    *,
    position: Optional[int] = None,
    source: Optional[str] = None,
) -> TransactionEvent:
    """
    Decode one raw payload.

    Raises ``DecodeError`` when the payload is not a JSON object or a field
    has an incompatible type. Absent or null fields take their zero value.
    """
    try:
        line = GameLine.model_validate_json(payload)
    except ValidationError as e:
        text = payload if isinstance(payload, str) else repr(payload)
        raise DecodeError(_reason(e), text, position=position, source=source) from e

    kind = TransactionKind.from_message(line.message)
    if kind is TransactionKind.BET:
        transaction_id, amount = line.bet_id, line.bet
    elif kind is TransactionKind.WIN:
        transaction_id, amount = line.win_id, line.win
    else:
        transaction_id, amount = "", 0

    return TransactionEvent(
        kind=kind,
        player_id=line.player_id,
        game_id=line.game_id,
        round_id=line.round_id,
        transaction_id=transaction_id,
        amount=amount,
        balance_after=line.balance,
        timestamp_seconds=line.ts,
        currency_label=line.currency,
    )


__all__ = ["DecodeError", "decode_event"]
