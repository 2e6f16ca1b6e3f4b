"""
tests/test_balance.py — сворачивание расходов и переводов в балансы одной области.
"""

from __future__ import annotations

import random

import pytest

from settleup.utils.balance import (
    NOISE_THRESHOLD,
    compute_balances,
    effective_threshold,
    is_settled,
    per_person_avg,
    total_spent,
)
from settleup.utils.records import ExpenseRecord, SettlementRecord, Split

from helpers import expense


def test_empty_input_gives_no_balances():
    assert compute_balances([]) == {}


def test_three_way_equal_split():
    balances = compute_balances([expense("A", A=300, B=300, C=300)])

    assert list(balances) == ["A", "B", "C"]
    assert balances["A"].paid == 900
    assert balances["A"].owes == 300
    assert [b.balance for b in balances.values()] == [600, -300, -300]


def test_payer_credited_with_split_sum_not_declared_total():
    rec = ExpenseRecord(payer_id="A", splits=(Split("B", 40), Split("C", 50)), total=100)
    balances = compute_balances([rec])
    assert balances["A"].paid == 90
    assert balances["A"].balance == 90


@pytest.mark.parametrize("status", ["completed", "confirmed"])
def test_counted_settlement_reduces_debt(status):
    balances = compute_balances(
        [expense("A", A=300, B=300, C=300)],
        [SettlementRecord(from_id="B", to_id="A", amount=300, status=status)],
    )
    assert balances["B"].balance == 0
    assert balances["B"].paid == 300
    assert balances["A"].balance == 300
    assert balances["A"].owes == 600


@pytest.mark.parametrize("status", ["pending", "initiated", "paid_pending"])
def test_uncounted_settlement_is_ignored(status):
    balances = compute_balances(
        [expense("A", A=300, B=300, C=300)],
        [SettlementRecord(from_id="B", to_id="A", amount=300, status=status)],
    )
    assert balances["B"].balance == -300
    assert balances["A"].balance == 600


def test_names_from_records_and_overrides():
    rec = ExpenseRecord(payer_id="A", payer_name="Alice", splits=(Split("A", 5), Split("B", 5)))
    balances = compute_balances([rec], names={"B": "Bob"})
    assert balances["A"].name == "Alice"
    assert balances["B"].name == "Bob"

    overridden = compute_balances([rec], names={"A": "Ally"})
    assert overridden["A"].name == "Ally"
    assert overridden["B"].name is None


@pytest.mark.parametrize("seed", range(20))
def test_balances_sum_to_zero(seed):
    rnd = random.Random(seed)
    people = [f"p{i}" for i in range(rnd.randint(1, 8))]
    expenses = []
    for _ in range(rnd.randint(0, 15)):
        payer = rnd.choice(people)
        involved = rnd.sample(people, rnd.randint(1, len(people)))
        expenses.append(expense(payer, **{p: rnd.randint(0, 5000) for p in involved}))
    settlements = [
        SettlementRecord(
            from_id=rnd.choice(people),
            to_id=rnd.choice(people),
            amount=rnd.randint(1, 3000),
            status=rnd.choice(["completed", "confirmed", "pending"]),
        )
        for _ in range(rnd.randint(0, 5))
    ]

    balances = compute_balances(expenses, settlements)
    assert abs(sum(b.balance for b in balances.values())) < NOISE_THRESHOLD


def test_threshold_helpers():
    assert is_settled(0)
    assert not is_settled(1)
    assert not is_settled(-1)
    assert is_settled(4, threshold=5)
    assert effective_threshold(0) == 1
    assert effective_threshold(-3) == 1


def test_totals():
    expenses = [expense("A", A=300, B=300, C=300), expense("B", A=50, B=50)]
    assert total_spent(expenses) == 1000
    assert per_person_avg(1000, 3) == 333
    assert per_person_avg(5, 2) == 3
    assert per_person_avg(900, 3) == 300
    assert per_person_avg(100, 0) == 0
