"""
Deterministic synthetic game service logs.

Produces resources-file entries (``{"line", "timestamp", "fields"}``) whose
``line`` is a SendBet or SendWin payload, so demos and tests exercise the
same decoding path as real Loki exports. Optional knobs inject duplicate
transaction ids and "lucky" players whose RTP trips the HighRTP rule.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import numpy as np

BET_SIZES = np.array([100, 200, 500, 1_000, 2_000, 5_000, 10_000])


def _init_rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)


def _line(
    msg: str,
    player_id: str,
    game_id: str,
    round_id: str,
    ts: float,
    balance: int,
    currency: str,
    **extra: Any,
) -> Dict[str, Any]:
    return {
        "level": "info",
        "logger": "game",
        "msg": msg,
        "command": msg,
        "game_id": game_id,
        "currency": currency,
        "player_id": player_id,
        "round_id": round_id,
        "ts": ts,
        "balance": balance,
        **extra,
    }


def _entry(payload: Dict[str, Any]) -> Dict[str, Any]:
    ts = datetime.fromtimestamp(payload["ts"], tz=timezone.utc)
    return {
        "line": json.dumps(payload, separators=(",", ":")),
        "timestamp": ts.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "fields": {"level": payload["level"], "game_id": payload["game_id"]},
    }


def generate_seed_entries(
    seed: int = 42,
    n_players: int = 20,
    n_games: int = 3,
    n_rounds: int = 500,
    start: Optional[datetime] = None,
    hours: int = 24,
    duplicate_rate: float = 0.0,
    lucky_players: int = 0,
    currency: str = "NGN",
) -> List[Dict[str, Any]]:
    """
    Generate ``n_rounds`` bet rounds (a SendBet, and a SendWin when the round pays).

    Regular players win roughly 45% of rounds at ~2x the stake (RTP near
    90%). The first ``lucky_players`` players win 90% of rounds at ~2x,
    which keeps their RTP well above 150%. ``duplicate_rate`` is the chance
    that an emitted line is immediately re-emitted with the same id.
    Entries are returned sorted by timestamp.
    """
    rng = _init_rng(seed)
    if start is None:
        start = datetime(2025, 12, 25, tzinfo=timezone.utc)
    base_ts = start.timestamp()

    players = [f"player-{i:04d}" for i in range(1, n_players + 1)]
    games = [f"game-{i:02d}" for i in range(1, n_games + 1)]
    balances = {p: int(rng.integers(10_000, 500_000)) for p in players}
    lucky = set(players[: max(0, min(lucky_players, n_players))])

    chosen_players = rng.choice(players, size=n_rounds, replace=True)
    chosen_games = rng.choice(games, size=n_rounds, replace=True)
    offsets = np.sort(rng.uniform(0, hours * 3600, size=n_rounds))
    stakes = rng.choice(BET_SIZES, size=n_rounds, replace=True)
    draws = rng.random(size=n_rounds)
    multipliers = rng.uniform(1.5, 2.5, size=n_rounds)
    dupe_draws = rng.random(size=(n_rounds, 2))

    payloads: List[Dict[str, Any]] = []
    for i in range(n_rounds):
        player = str(chosen_players[i])
        game = str(chosen_games[i])
        round_id = f"round-{i:06d}"
        ts = round(base_ts + float(offsets[i]), 3)
        stake = int(stakes[i])

        balances[player] -= stake
        bet = _line("SendBet", player, game, round_id, ts, balances[player], currency,
                    bet_id=f"bet-{i:06d}", bet=stake)
        payloads.append(bet)
        if dupe_draws[i, 0] < duplicate_rate:
            payloads.append(dict(bet))

        win_chance = 0.9 if player in lucky else 0.45
        if draws[i] < win_chance:
            win = int(round(stake * float(multipliers[i])))
            balances[player] += win
            win_line = _line("SendWin", player, game, round_id, round(ts + 1.5, 3), balances[player],
                             currency, win_id=f"win-{i:06d}", win=win)
            payloads.append(win_line)
            if dupe_draws[i, 1] < duplicate_rate:
                payloads.append(dict(win_line))

    payloads.sort(key=lambda p: p["ts"])
    return [_entry(p) for p in payloads]


__all__ = ["generate_seed_entries"]
