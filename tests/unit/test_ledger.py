from __future__ import annotations

import pytest

from analyzer.core.events import TransactionKind
from analyzer.core.ledger import IdentifierLedger, Verdict


def test_first_sighting_is_fresh_then_duplicate() -> None:
    ledger = IdentifierLedger()
    assert ledger.accept(TransactionKind.BET, "b1") is Verdict.FRESH
    assert ledger.accept(TransactionKind.BET, "b1") is Verdict.DUPLICATE
    assert ledger.bet_count == 1


def test_bet_and_win_namespaces_are_disjoint() -> None:
    ledger = IdentifierLedger()
    assert ledger.accept(TransactionKind.BET, "x1") is Verdict.FRESH
    assert ledger.accept(TransactionKind.WIN, "x1") is Verdict.FRESH
    assert (TransactionKind.BET, "x1") in ledger
    assert (TransactionKind.WIN, "x1") in ledger
    assert ledger.bet_count == 1
    assert ledger.win_count == 1


def test_empty_identifier_is_never_recorded() -> None:
    ledger = IdentifierLedger()
    assert ledger.accept(TransactionKind.WIN, "") is Verdict.FRESH
    assert ledger.accept(TransactionKind.WIN, "") is Verdict.FRESH
    assert ledger.win_count == 0
    assert (TransactionKind.WIN, "") not in ledger


def test_other_kind_is_rejected() -> None:
    ledger = IdentifierLedger()
    with pytest.raises(ValueError):
        ledger.accept(TransactionKind.OTHER, "o1")
    assert (TransactionKind.OTHER, "o1") not in ledger
    assert "b1" not in ledger
