# tests/helpers.py
# Хелперы для тестов движка.

from __future__ import annotations

from settleup.utils.records import Balance, ExpenseRecord, Split


def expense(payer, **shares):
    return ExpenseRecord(
        payer_id=payer,
        splits=tuple(Split(user_id=uid, amount=amt) for uid, amt in shares.items()),
    )


def balances_of(**values):
    """Balance по знаку: >0 — paid, <0 — owes."""
    return [
        Balance(user_id=uid, name=None, paid=max(v, 0), owes=max(-v, 0))
        for uid, v in values.items()
    ]


def apply_transfers(balances, transfers):
    net = {b.user_id: b.balance for b in balances}
    for t in transfers:
        net[t.from_id] += t.amount
        net[t.to_id] -= t.amount
    return net
