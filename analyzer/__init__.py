"""Gamelog analyzer - reconciliation and fraud triage report over game service bet/win logs."""

__version__ = "0.1.0"
