# settleup/utils/balance.py
# -----------------------------------------------------------------------------
# УТИЛИТЫ РАСЧЁТА БАЛАНСОВ / ПАРНЫХ ДОЛГОВ
# -----------------------------------------------------------------------------
# Политика:
#   • Деньги — целые минорные единицы, только сложение/вычитание.
#   • Семантика balance:
#       balance > 0 — участнику ДОЛЖНЫ; balance < 0 — он ДОЛЖЕН.
#   • Расход: плательщику paid += сумма долей; каждому участнику owes += доля.
#   • Перевод (settlement) — ПОГАШЕНИЕ долга, учитываем только completed/confirmed:
#       from.paid += X, to.owes += X (тот же знак, что у расходов → балансы аддитивны).
#   • Парный реестр — «как в транзакциях», без неттинга через третьих лиц:
#       один знаковый аккумулятор на неупорядоченную пару (lo, hi),
#       > 0 — lo должен hi; < 0 — hi должен lo.
#   • Ничего не храним между вызовами, входные данные не мутируем.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Tuple

from settleup.utils.records import (
    Balance,
    ExpenseRecord,
    ScopeLedger,
    SettlementRecord,
    Transfer,
)

# Порог «шума»: |balance| < NOISE_THRESHOLD считается погашенным
NOISE_THRESHOLD = 1

PairKey = Tuple[str, str]


# =========================
# ВСПОМОГАТЕЛЬНОЕ
# =========================

def effective_threshold(threshold: int) -> int:
    # порог ниже одной минорной единицы не имеет смысла для целых денег
    return max(int(threshold), 1)


def is_settled(amount: int, threshold: int = NOISE_THRESHOLD) -> bool:
    return abs(amount) < effective_threshold(threshold)


def collect_names(expenses: Iterable[ExpenseRecord]) -> Dict[str, str]:
    """Имена плательщиков, пришедшие вместе с расходами (первое встреченное побеждает)."""
    names: Dict[str, str] = {}
    for exp in expenses:
        if exp.payer_name and exp.payer_id not in names:
            names[exp.payer_id] = exp.payer_name
    return names


def total_spent(expenses: Iterable[ExpenseRecord]) -> int:
    return sum(exp.split_total for exp in expenses)


def per_person_avg(total: int, participants: int) -> int:
    """Среднее на человека с округлением половины вверх, в целых."""
    if participants <= 0:
        return 0
    return (2 * total + participants) // (2 * participants)


# =========================
# NET-БАЛАНСЫ ОДНОЙ ОБЛАСТИ
# =========================

def compute_balances(
    expenses: Iterable[ExpenseRecord],
    settlements: Iterable[SettlementRecord] = (),
    names: Optional[Mapping[str, str]] = None,
) -> Dict[str, Balance]:
    """
    Сворачивает расходы и учтённые переводы одной области в балансы.

    Возвращает {user_id: Balance} в порядке первого появления участника
    (плательщик раньше своих долей, расходы раньше переводов).
    Суммы долей с суммой транзакции не сверяем — это ответственность вызывающего.
    """
    expenses = tuple(expenses)
    resolved = dict(collect_names(expenses))
    resolved.update(names or {})

    paid: Dict[str, int] = {}
    owes: Dict[str, int] = {}

    def _touch(uid: str) -> None:
        if uid not in paid:
            paid[uid] = 0
            owes[uid] = 0

    for exp in expenses:
        _touch(exp.payer_id)
        paid[exp.payer_id] += exp.split_total
        for split in exp.splits:
            _touch(split.user_id)
            owes[split.user_id] += split.amount

    for st in settlements:
        if not st.counted:
            continue
        _touch(st.from_id)
        _touch(st.to_id)
        paid[st.from_id] += st.amount
        owes[st.to_id] += st.amount

    return {
        uid: Balance(user_id=uid, name=resolved.get(uid), paid=paid[uid], owes=owes[uid])
        for uid in paid
    }


# =========================
# ПАРНЫЙ РЕЕСТР (МЕЖДУ ОБЛАСТЯМИ)
# =========================

def _add_debt(ledger: Dict[PairKey, int], debtor: str, creditor: str, amount: int) -> None:
    if debtor == creditor:
        return
    if debtor < creditor:
        key, signed = (debtor, creditor), amount
    else:
        key, signed = (creditor, debtor), -amount
    ledger[key] = ledger.get(key, 0) + signed


def build_pair_ledger(scopes: Iterable[ScopeLedger]) -> Dict[PairKey, int]:
    """
    Точный парный реестр по всем областям:
      • за каждую долю — участник должен плательщику её сумму;
      • учтённый перевод from -> to на X — «анти-долг» to -> from на X.
    """
    ledger: Dict[PairKey, int] = {}
    for scope in scopes:
        for exp in scope.expenses:
            for split in exp.splits:
                _add_debt(ledger, split.user_id, exp.payer_id, split.amount)
        for st in scope.settlements:
            if st.counted:
                _add_debt(ledger, st.to_id, st.from_id, st.amount)
    return ledger


def pairwise_transfers(
    scopes: Iterable[ScopeLedger],
    threshold: int = NOISE_THRESHOLD,
    names: Optional[Mapping[str, str]] = None,
    participant_id: Optional[str] = None,
) -> Tuple[Transfer, ...]:
    """
    Один направленный перевод на пару с |net| >= threshold.
    Жадное сведение НЕ применяется: переводы только между теми, кто реально
    делил расходы. participant_id — оставить только пары с этим участником.
    """
    scopes = tuple(scopes)
    resolved: Dict[str, str] = {}
    for scope in scopes:
        for uid, name in collect_names(scope.expenses).items():
            resolved.setdefault(uid, name)
    resolved.update(names or {})

    ledger = build_pair_ledger(scopes)

    out = []
    for lo, hi in sorted(ledger):
        net = ledger[(lo, hi)]
        if is_settled(net, threshold):
            continue
        if participant_id is not None and participant_id not in (lo, hi):
            continue
        from_id, to_id = (lo, hi) if net > 0 else (hi, lo)
        out.append(
            Transfer(
                from_id=from_id,
                to_id=to_id,
                amount=abs(net),
                from_name=resolved.get(from_id),
                to_name=resolved.get(to_id),
            )
        )
    return tuple(out)
