"""
tests/test_settle.py — жадный и оптимизированный план переводов одной области.
"""

from __future__ import annotations

import random

import pytest

from settleup.utils.balance import NOISE_THRESHOLD
from settleup.utils.records import Transfer
from settleup.utils.settle import (
    choose_transfers,
    minimize_transfers,
    optimize_transfers,
    settle_scope,
)

from helpers import apply_transfers, balances_of, expense


def _random_balances(rnd):
    n = rnd.randint(2, 10)
    values = [rnd.randint(-5000, 5000) for _ in range(n - 1)]
    values.append(-sum(values))
    return balances_of(**{f"p{i}": v for i, v in enumerate(values)})


# ── Сквозной сценарий ───────────────────────────────────────────────────────

def test_three_person_trip():
    result = settle_scope([expense("A", A=300, B=300, C=300)])

    assert [(b.user_id, b.balance) for b in result.balances] == [("A", 600), ("B", -300), ("C", -300)]
    assert [(t.from_id, t.to_id, t.amount) for t in result.transfers] == [("B", "A", 300), ("C", "A", 300)]
    assert result.total_spent == 900
    assert result.per_person_avg == 300
    assert result.optimization_savings == 0


def test_empty_scope():
    result = settle_scope([])
    assert result.balances == ()
    assert result.transfers == ()
    assert result.total_spent == 0
    assert result.per_person_avg == 0


def test_single_participant_has_no_transfers():
    result = settle_scope([expense("A", A=100)])
    assert result.transfers == ()
    assert [b.balance for b in result.balances] == [0]


def test_recomputing_is_identical():
    expenses = [expense("A", A=300, B=300, C=300), expense("C", A=120, C=80)]
    first = settle_scope(expenses)
    second = settle_scope(expenses)
    assert first == second
    assert repr(first) == repr(second)


def test_names_flow_into_transfers():
    result = settle_scope([expense("A", A=50, B=50)], names={"A": "Alice", "B": "Bob"})
    assert result.transfers == (Transfer("B", "A", 50, from_name="Bob", to_name="Alice"),)


# ── Жадный ──────────────────────────────────────────────────────────────────

def test_greedy_pairs_largest_first():
    balances = balances_of(P=5, Q=3, X=-4, Y=-3, Z=-1)
    transfers = minimize_transfers(balances)
    assert [(t.from_id, t.to_id, t.amount) for t in transfers] == [
        ("X", "P", 4),
        ("Y", "P", 1),
        ("Y", "Q", 2),
        ("Z", "Q", 1),
    ]


def test_greedy_ties_keep_input_order():
    balances = balances_of(A=200, B=-100, C=-100)
    assert [t.from_id for t in minimize_transfers(balances)] == ["B", "C"]
    balances = balances_of(A=200, C=-100, B=-100)
    assert [t.from_id for t in minimize_transfers(balances)] == ["C", "B"]


def test_balance_of_one_unit_still_settles():
    balances = balances_of(A=2, B=-1, C=-1)
    transfers = minimize_transfers(balances)
    assert [(t.from_id, t.to_id, t.amount) for t in transfers] == [("B", "A", 1), ("C", "A", 1)]


def test_larger_threshold_treats_dust_as_settled():
    balances = balances_of(A=3, B=-2, C=-1)
    assert minimize_transfers(balances, threshold=5) == ()


def test_threshold_below_one_is_clamped():
    balances = balances_of(A=300, B=-300)
    assert minimize_transfers(balances, threshold=0) == minimize_transfers(balances)


@pytest.mark.parametrize("seed", range(30))
def test_greedy_transfer_count_bound(seed):
    balances = _random_balances(random.Random(seed))
    debtors = sum(1 for b in balances if b.balance < 0)
    creditors = sum(1 for b in balances if b.balance > 0)
    transfers = minimize_transfers(balances)
    assert len(transfers) <= max(debtors + creditors - 1, 0)


# ── Оптимизированный ────────────────────────────────────────────────────────

def test_exact_matches_close_two_participants_each():
    balances = balances_of(A=500, B=-500, C=300, D=-300)
    transfers = optimize_transfers(balances)
    assert [(t.from_id, t.to_id, t.amount) for t in transfers] == [("B", "A", 500), ("D", "C", 300)]


def test_optimizer_beats_greedy_and_is_chosen():
    balances = balances_of(P=5, Q=3, X=-4, Y=-3, Z=-1)

    optimized = optimize_transfers(balances)
    assert [(t.from_id, t.to_id, t.amount) for t in optimized] == [
        ("Y", "Q", 3),
        ("X", "P", 4),
        ("Z", "P", 1),
    ]

    chosen, savings = choose_transfers(balances)
    assert chosen == optimized
    assert savings == 1


def test_choose_accepts_mapping():
    balances = balances_of(A=500, B=-500)
    chosen, savings = choose_transfers({b.user_id: b for b in balances})
    assert [(t.from_id, t.to_id, t.amount) for t in chosen] == [("B", "A", 500)]
    assert savings == 0


@pytest.mark.parametrize("seed", range(50))
def test_plans_settle_everyone(seed):
    balances = _random_balances(random.Random(seed))
    positive_mass = sum(b.balance for b in balances if b.balance > 0)

    naive = minimize_transfers(balances)
    optimized = optimize_transfers(balances)
    chosen, savings = choose_transfers(balances)

    for plan in (naive, optimized, chosen):
        assert sum(t.amount for t in plan) == positive_mass
        assert all(t.amount > 0 and t.from_id != t.to_id for t in plan)
        net = apply_transfers(balances, plan)
        assert all(abs(v) < NOISE_THRESHOLD for v in net.values())

    assert len(chosen) <= len(naive)
    assert savings == len(naive) - len(chosen)
