"""Aggregation and fraud-signal engine - decoder, ledger, aggregator, ranker, screener, report."""

from analyzer.core.aggregator import AggregationSnapshot, Aggregator
from analyzer.core.decoder import DecodeError, decode_event
from analyzer.core.events import TopEntry, TransactionEvent, TransactionKind
from analyzer.core.ledger import IdentifierLedger, Verdict
from analyzer.core.pipeline import AnalysisDiagnostics, AnalysisResult, analyze, analyze_entries
from analyzer.core.report import Report, assemble_report
from analyzer.core.screener import FraudScreener, high_rtp_rule

__all__ = [
    "AggregationSnapshot",
    "Aggregator",
    "AnalysisDiagnostics",
    "AnalysisResult",
    "DecodeError",
    "FraudScreener",
    "IdentifierLedger",
    "Report",
    "TopEntry",
    "TransactionEvent",
    "TransactionKind",
    "Verdict",
    "analyze",
    "analyze_entries",
    "assemble_report",
    "decode_event",
    "high_rtp_rule",
]
