"""
Wire shapes for game service logs.

``LogEntry`` is one element of a saved log window (the JSON array written by
the Loki fetcher or exported from Grafana). Its ``line`` holds the raw JSON
payload emitted by the game service, described by ``GameLine``.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, ValidationInfo, field_validator


class LogEntry(BaseModel):
    """One log line as stored in a resources file."""

    model_config = ConfigDict(extra="ignore")

    line: str = ""
    timestamp: str = ""
    fields: Dict[str, Any] = Field(default_factory=dict)
    # File name or time-window label the entry was read from; not serialized.
    source: str = Field(default="", exclude=True)

    @field_validator("line", "timestamp", mode="before")
    @classmethod
    def _none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("fields", mode="before")
    @classmethod
    def _none_to_dict(cls, v: object) -> object:
        return {} if v is None else v


class GameLine(BaseModel):
    """Payload of a game service log line (``SendBet`` / ``SendWin`` / other)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    level: str = ""
    logger: str = ""
    caller: str = ""
    message: str = Field(default="", alias="msg")
    command: str = ""
    version: str = ""
    hostname: str = ""
    platform_id: str = ""
    operator_id: str = ""
    game_id: str = ""
    currency: str = ""
    player_id: str = ""
    room_id: str = ""
    mod_id: str = ""
    round_id: str = ""

    # Numbers must arrive as JSON numbers; "100" or true is a decode error.
    ts: StrictFloat = 0.0

    bet_id: str = ""
    win_id: str = ""

    bet: StrictInt = 0
    win: StrictInt = 0
    balance: StrictInt = 0

    step_number: StrictInt = 0

    @field_validator("*", mode="before")
    @classmethod
    def _null_means_zero(cls, v: object, info: ValidationInfo) -> object:
        # JSON null decodes to the field's zero value, like an absent key.
        if v is None and info.field_name is not None:
            return cls.model_fields[info.field_name].default
        return v


__all__ = ["GameLine", "LogEntry"]
