"""
Prometheus export of report headline figures.

The analyzer is a batch job, so instead of serving ``/metrics`` it writes
gauges to a file for the node-exporter textfile collector. A private
registry is used per call so repeated runs in one process never collide
with the default registry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from prometheus_client import CollectorRegistry, Gauge, write_to_textfile

from analyzer.core.pipeline import AnalysisResult

logger = logging.getLogger(__name__)


def extract_metrics(result: AnalysisResult) -> Dict[str, float]:
    """Headline figures keyed by metric name (without prefix)."""
    s = result.report.summary
    d = result.diagnostics
    return {
        "bets_total": float(s.total_bets),
        "wins_total": float(s.total_wins),
        "bet_amount_total": float(s.total_bet_amount),
        "win_amount_total": float(s.total_win_amount),
        "net_result": float(s.net_result),
        "rtp_percent": float(s.rtp),
        "unique_players": float(s.unique_players),
        "unique_games": float(s.unique_games),
        "duplicate_bets": float(d.duplicate_bets),
        "duplicate_wins": float(d.duplicate_wins),
        "invalid_payloads": float(d.invalid_payloads),
        "suspicious_events": float(len(result.report.suspicious_events)),
    }


def build_registry(result: AnalysisResult, prefix: str = "gamelog_") -> CollectorRegistry:
    registry = CollectorRegistry()
    for name, value in extract_metrics(result).items():
        gauge = Gauge(
            f"{prefix}{name}",
            f"Gaming log analysis: {name.replace('_', ' ')}",
            labelnames=("currency",),
            registry=registry,
        )
        gauge.labels(currency=result.currency).set(value)
    return registry


def write_metrics_textfile(result: AnalysisResult, path: str | Path, prefix: str = "gamelog_") -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    write_to_textfile(str(p), build_registry(result, prefix=prefix))
    logger.info("Wrote Prometheus metrics to %s", p)
    return p


__all__ = ["build_registry", "extract_metrics", "write_metrics_textfile"]
