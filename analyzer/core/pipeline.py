"""
End-to-end analysis of one event stream.

raw payloads -> decoder -> aggregator (+ ledger) -> ranker/screener -> report
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

from analyzer.core.aggregator import Aggregator
from analyzer.core.decoder import DecodeError, decode_event
from analyzer.core.report import Report, assemble_report
from analyzer.core.screener import FraudScreener

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from analyzer.models import LogEntry
    from common.config import AppConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisDiagnostics:
    """Side-channel counts shown next to the report; none of them are errors."""

    duplicate_bets: int = 0
    duplicate_wins: int = 0
    invalid_payloads: int = 0
    events_decoded: int = 0

    @property
    def has_duplicates(self) -> bool:
        return self.duplicate_bets > 0 or self.duplicate_wins > 0


@dataclass(frozen=True)
class AnalysisResult:
    report: Report
    diagnostics: AnalysisDiagnostics
    currency: str


def _resolve_currency(explicit: Optional[str], discovered: str, config: Optional["AppConfig"]) -> str:
    if explicit:
        return explicit
    if discovered:
        return discovered
    if config is not None:
        return config.report.default_currency
    return "NGN"


def _run(
    items: Iterable[Tuple[str, int, Optional[str]]],
    *,
    config: Optional["AppConfig"],
    currency: Optional[str],
    tz: Optional[tzinfo],
    skip_invalid: Optional[bool],
) -> AnalysisResult:
    if config is not None:
        if tz is None:
            tz = config.analysis.tzinfo()
        if skip_invalid is None:
            skip_invalid = config.analysis.skip_invalid
        screener = FraudScreener.from_config(config.analysis)
        top_n = config.analysis.top_n
    else:
        screener = FraudScreener()
        top_n = 5

    aggregator = Aggregator(tz=tz)
    invalid = 0
    decoded = 0
    for payload, position, source in items:
        try:
            event = decode_event(payload, position=position, source=source)
        except DecodeError as e:
            if not skip_invalid:
                raise
            invalid += 1
            logger.warning("Skipping malformed payload: %s", e)
            continue
        decoded += 1
        aggregator.fold(event)

    snapshot = aggregator.finalize()
    report = assemble_report(snapshot, screener=screener, top_n=top_n)

    if snapshot.duplicate_bets or snapshot.duplicate_wins:
        logger.info(
            "Duplicate transactions skipped: %d bets, %d wins",
            snapshot.duplicate_bets,
            snapshot.duplicate_wins,
        )

    diagnostics = AnalysisDiagnostics(
        duplicate_bets=snapshot.duplicate_bets,
        duplicate_wins=snapshot.duplicate_wins,
        invalid_payloads=invalid,
        events_decoded=decoded,
    )
    return AnalysisResult(
        report=report,
        diagnostics=diagnostics,
        currency=_resolve_currency(currency, snapshot.currency, config),
    )


def analyze(
    payloads: Iterable[str],
    *,
    config: Optional["AppConfig"] = None,
    currency: Optional[str] = None,
    tz: Optional[tzinfo] = None,
    skip_invalid: Optional[bool] = None,
) -> AnalysisResult:
    """
    Analyze raw payload strings in the order given.

    A malformed payload aborts the run with ``DecodeError`` unless
    ``skip_invalid`` (or ``config.analysis.skip_invalid``) is set.
    """
    return _run(
        ((payload, i, None) for i, payload in enumerate(payloads)),
        config=config,
        currency=currency,
        tz=tz,
        skip_invalid=skip_invalid,
    )


def analyze_entries(
    entries: Iterable["LogEntry"],
    *,
    config: Optional["AppConfig"] = None,
    currency: Optional[str] = None,
    tz: Optional[tzinfo] = None,
    skip_invalid: Optional[bool] = None,
) -> AnalysisResult:
    """Analyze log entries; entries with an empty ``line`` are ignored."""
    return _run(
        (
            (entry.line, i, entry.source or None)
            for i, entry in enumerate(entries)
            if entry.line
        ),
        config=config,
        currency=currency,
        tz=tz,
        skip_invalid=skip_invalid,
    )


__all__ = ["AnalysisDiagnostics", "AnalysisResult", "analyze", "analyze_entries"]
