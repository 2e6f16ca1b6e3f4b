"""
tests/test_pairwise.py — попарный реестр по областям с разным составом участников.
"""

from __future__ import annotations

from settleup.utils.balance import build_pair_ledger, pairwise_transfers
from settleup.utils.records import ExpenseRecord, ScopeLedger, SettlementRecord, Split
from settleup.utils.settle import settle_across_scopes, settle_scope

from helpers import expense


def _triples(transfers):
    return [(t.from_id, t.to_id, t.amount) for t in transfers]


def test_each_scope_independent_and_pair_combined():
    s1 = ScopeLedger(scope_id=1, expenses=(expense("A", A=50, B=50),))
    s2 = ScopeLedger(scope_id=2, expenses=(expense("B", A=30, B=30),))

    assert _triples(settle_scope(s1.expenses).transfers) == [("B", "A", 50)]
    assert _triples(settle_scope(s2.expenses).transfers) == [("A", "B", 30)]
    assert _triples(pairwise_transfers([s1, s2])) == [("B", "A", 20)]


def test_no_transfer_invented_through_intermediary():
    # B должен A в одной группе, C должен B — в другой; A и C вместе ничего не тратили
    s1 = ScopeLedger(scope_id="trip", expenses=(expense("A", B=100),))
    s2 = ScopeLedger(scope_id="flat", expenses=(expense("B", C=100),))

    netted = settle_scope(s1.expenses + s2.expenses)
    assert _triples(netted.transfers) == [("C", "A", 100)]

    pairwise = pairwise_transfers([s1, s2])
    assert _triples(pairwise) == [("B", "A", 100), ("C", "B", 100)]
    assert not any({t.from_id, t.to_id} == {"A", "C"} for t in pairwise)


def test_canonical_pair_accumulator():
    s1 = ScopeLedger(scope_id=1, expenses=(expense("A", A=50, B=50),))
    # B должен A → для пары (A, B) отрицательное значение
    assert build_pair_ledger([s1]) == {("A", "B"): -50}


def test_settlements_adjust_pair():
    settlements = (
        SettlementRecord(from_id="B", to_id="A", amount=30, status="completed"),
        SettlementRecord(from_id="B", to_id="A", amount=20, status="pending"),
    )
    s1 = ScopeLedger(scope_id=1, expenses=(expense("A", A=50, B=50),), settlements=settlements)
    assert _triples(pairwise_transfers([s1])) == [("B", "A", 20)]


def test_fully_offset_pair_is_dropped():
    s1 = ScopeLedger(scope_id=1, expenses=(expense("A", A=50, B=50),))
    s2 = ScopeLedger(scope_id=2, expenses=(expense("B", A=50, B=50),))
    assert pairwise_transfers([s1, s2]) == ()


def test_participant_filter():
    s1 = ScopeLedger(scope_id=1, expenses=(expense("A", B=100),))
    s2 = ScopeLedger(scope_id=2, expenses=(expense("B", C=100),))
    assert _triples(pairwise_transfers([s1, s2], participant_id="C")) == [("C", "B", 100)]
    assert _triples(pairwise_transfers([s1, s2], participant_id="A")) == [("B", "A", 100)]


def test_names_resolved_from_payers_and_mapping():
    rec = ExpenseRecord(payer_id="A", payer_name="Alice", splits=(Split("B", 10),))
    (t,) = pairwise_transfers([ScopeLedger(scope_id=1, expenses=(rec,))], names={"B": "Bob"})
    assert (t.from_name, t.to_name) == ("Bob", "Alice")


def test_cross_scope_settlement_view():
    s1 = ScopeLedger(scope_id=1, name="Trip", expenses=(expense("A", A=300, B=300, C=300),))
    s2 = ScopeLedger(scope_id=2, name="Flat", expenses=(expense("C", C=100, D=100),))

    view = settle_across_scopes([s1, s2])

    assert [(s.scope_id, s.name) for s in view.scopes] == [(1, "Trip"), (2, "Flat")]
    assert _triples(view.scopes[0].result.transfers) == [("B", "A", 300), ("C", "A", 300)]
    assert _triples(view.scopes[1].result.transfers) == [("D", "C", 100)]
    assert _triples(view.pairwise) == [("B", "A", 300), ("C", "A", 300), ("D", "C", 100)]


def test_empty_cross_scope_view():
    view = settle_across_scopes([])
    assert view.scopes == ()
    assert view.pairwise == ()
