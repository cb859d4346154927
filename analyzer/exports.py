"""
Tabular and JSON export of a finished report.

Each table is a pandas DataFrame so the same frames can be written to CSV,
loaded into a notebook, or joined with other reconciliation data.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd

from analyzer.core.pipeline import AnalysisResult
from analyzer.core.report import Report

logger = logging.getLogger(__name__)

PLAYER_COLUMNS = [
    "player_id",
    "total_bets",
    "total_wins",
    "total_bet_amount",
    "total_win_amount",
    "net_result",
    "rtp_percentage",
    "last_balance",
]
GAME_COLUMNS = [
    "game_id",
    "total_bets",
    "total_wins",
    "total_bet_amount",
    "total_win_amount",
    "net_result",
    "rtp_percentage",
    "unique_players",
]
HOURLY_COLUMNS = ["hour", "total_bets", "total_wins", "total_bet_amount", "total_win_amount"]
SUSPICIOUS_COLUMNS = ["type", "description", "player_id", "details"]


def report_frames(report: Report) -> Dict[str, pd.DataFrame]:
    """Return ``players``, ``games``, ``hourly`` and ``suspicious`` tables."""
    players = pd.DataFrame(
        [{k: p.to_dict()[k] for k in PLAYER_COLUMNS} for p in report.players.values()],
        columns=PLAYER_COLUMNS,
    )
    if not players.empty:
        players = players.sort_values(
            ["total_bet_amount", "player_id"], ascending=[False, True], kind="stable"
        ).reset_index(drop=True)

    games = pd.DataFrame(
        [{k: g.to_dict()[k] for k in GAME_COLUMNS} for g in report.games.values()],
        columns=GAME_COLUMNS,
    )
    if not games.empty:
        games = games.sort_values("game_id", kind="stable").reset_index(drop=True)

    hourly = pd.DataFrame([h.to_dict() for h in report.hourly], columns=HOURLY_COLUMNS)
    suspicious = pd.DataFrame([e.to_dict() for e in report.suspicious_events], columns=SUSPICIOUS_COLUMNS)
    return {"players": players, "games": games, "hourly": hourly, "suspicious": suspicious}


def write_csv(report: Report, out_dir: str | Path) -> List[Path]:
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for name, frame in report_frames(report).items():
        path = out / f"{name}.csv"
        frame.to_csv(path, index=False)
        written.append(path)
    logger.info("Wrote %d CSV tables to %s", len(written), out)
    return written


def result_to_dict(result: AnalysisResult) -> Dict[str, object]:
    data: Dict[str, object] = result.report.to_dict()
    data["currency"] = result.currency
    data["diagnostics"] = {
        "duplicate_bets": result.diagnostics.duplicate_bets,
        "duplicate_wins": result.diagnostics.duplicate_wins,
        "invalid_payloads": result.diagnostics.invalid_payloads,
        "events_decoded": result.diagnostics.events_decoded,
    }
    return data


def write_json(result: AnalysisResult, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(result_to_dict(result), indent=2), encoding="utf-8")
    return p


__all__ = ["report_frames", "result_to_dict", "write_csv", "write_json"]
