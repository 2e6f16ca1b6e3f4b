# settleup/utils/settle.py
# -----------------------------------------------------------------------------
# АЛГОРИТМЫ ВЫДАЧИ ПЛАНА ПЕРЕВОДОВ
# -----------------------------------------------------------------------------
#   1) minimize_transfers — жадное сведение: крупнейший должник ↔ крупнейший кредитор.
#   2) optimize_transfers — сначала точные совпадения сумм (одна выплата закрывает
#      двоих), затем то же жадное сведение по остатку.
#   Для одной области считаем оба и берём тот, где переводов меньше (при равенстве — 2).
#   Это эвристика: минимальное число переводов в общем случае NP-трудно.
#
#   Между областями с разным составом участников неттинг недопустим — там только
#   парный реестр (settle_across_scopes), отдельная функция без флага режима.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from settleup.utils.balance import (
    NOISE_THRESHOLD,
    compute_balances,
    effective_threshold,
    pairwise_transfers,
    per_person_avg,
    total_spent,
)
from settleup.utils.records import (
    Balance,
    CrossScopeSettlement,
    ExpenseRecord,
    ScopeLedger,
    ScopeSettlement,
    SettlementRecord,
    SettlementResult,
    Transfer,
)

log = logging.getLogger(__name__)

Side = Tuple[str, int]
Balances = Union[Iterable[Balance], Mapping[str, Balance]]


# =========================
# ВСПОМОГАТЕЛЬНОЕ
# =========================

def _as_list(balances: Balances) -> List[Balance]:
    if isinstance(balances, Mapping):
        return list(balances.values())
    return list(balances)


def _partition(balances: List[Balance], threshold: int) -> Tuple[List[Side], List[Side]]:
    """(должники, кредиторы) в исходном порядке; суммы должников положительные."""
    debtors = [(b.user_id, -b.balance) for b in balances if b.balance <= -threshold]
    creditors = [(b.user_id, b.balance) for b in balances if b.balance >= threshold]
    return debtors, creditors


def _by_amount_desc(sides: List[Side]) -> List[Side]:
    # sorted стабилен: при равных суммах сохраняется исходный порядок
    return sorted(sides, key=lambda x: -x[1])


def _transfer(from_id: str, to_id: str, amount: int, names: Dict[str, Optional[str]]) -> Transfer:
    return Transfer(
        from_id=from_id,
        to_id=to_id,
        amount=amount,
        from_name=names.get(from_id),
        to_name=names.get(to_id),
    )


def _merge(
    debtors: List[Side],
    creditors: List[Side],
    threshold: int,
    names: Dict[str, Optional[str]],
) -> List[Transfer]:
    debtors = _by_amount_desc(debtors)
    creditors = _by_amount_desc(creditors)

    transfers: List[Transfer] = []
    i, j = 0, 0
    while i < len(debtors) and j < len(creditors):
        debtor_id, debt = debtors[i]
        creditor_id, credit = creditors[j]

        amount = min(debt, credit)
        if amount > 0:
            transfers.append(_transfer(debtor_id, creditor_id, amount, names))

        debtors[i] = (debtor_id, debt - amount)
        creditors[j] = (creditor_id, credit - amount)

        if debtors[i][1] < threshold:
            i += 1
        if creditors[j][1] < threshold:
            j += 1

    return transfers


# =========================
# ЖАДНЫЙ / ОПТИМИЗИРОВАННЫЙ
# =========================

def minimize_transfers(
    balances: Balances,
    threshold: int = NOISE_THRESHOLD,
) -> Tuple[Transfer, ...]:
    """
    Жадный settle-up для ОДНОЙ области.
    Переводов не больше, чем #должников + #кредиторов - 1.
    """
    threshold = effective_threshold(threshold)
    items = _as_list(balances)
    names = {b.user_id: b.name for b in items}
    debtors, creditors = _partition(items, threshold)
    return tuple(_merge(debtors, creditors, threshold, names))


def optimize_transfers(
    balances: Balances,
    threshold: int = NOISE_THRESHOLD,
) -> Tuple[Transfer, ...]:
    """
    Точные совпадения + жадное сведение остатка.

    Проход 1: для каждого должника (в исходном порядке) ищем первого свободного
    кредитора с той же суммой — один перевод закрывает обоих.
    Проход 2: _merge по всем, кто не нашёл пару. Квадратично по числу участников,
    что приемлемо для групп в десятки человек.
    """
    threshold = effective_threshold(threshold)
    items = _as_list(balances)
    names = {b.user_id: b.name for b in items}
    debtors, creditors = _partition(items, threshold)

    transfers: List[Transfer] = []
    matched_debtors = set()
    matched_creditors = set()

    for di, (debtor_id, debt) in enumerate(debtors):
        for ci, (creditor_id, credit) in enumerate(creditors):
            if ci in matched_creditors:
                continue
            if credit == debt:
                transfers.append(_transfer(debtor_id, creditor_id, debt, names))
                matched_debtors.add(di)
                matched_creditors.add(ci)
                break

    rest_debtors = [d for di, d in enumerate(debtors) if di not in matched_debtors]
    rest_creditors = [c for ci, c in enumerate(creditors) if ci not in matched_creditors]
    transfers.extend(_merge(rest_debtors, rest_creditors, threshold, names))
    return tuple(transfers)


def choose_transfers(
    balances: Balances,
    threshold: int = NOISE_THRESHOLD,
) -> Tuple[Tuple[Transfer, ...], int]:
    """
    Считает оба плана и возвращает (план с меньшим числом переводов, экономия).
    При равенстве побеждает оптимизированный. Экономия = naive - chosen >= 0.
    """
    items = _as_list(balances)
    naive = minimize_transfers(items, threshold)
    optimized = optimize_transfers(items, threshold)
    chosen = optimized if len(optimized) <= len(naive) else naive
    return chosen, len(naive) - len(chosen)


# =========================
# ТОЧКИ ВХОДА
# =========================

def settle_scope(
    expenses: Iterable[ExpenseRecord],
    settlements: Iterable[SettlementRecord] = (),
    names: Optional[Mapping[str, str]] = None,
    threshold: int = NOISE_THRESHOLD,
) -> SettlementResult:
    """
    Балансы и план переводов для ОДНОЙ области (группы/поездки).
    Неттинг допустим только здесь: участники области общие.
    """
    expenses = tuple(expenses)
    by_user = compute_balances(expenses, settlements, names)
    in_order = list(by_user.values())

    transfers, savings = choose_transfers(in_order, threshold)
    spent = total_spent(expenses)

    log.debug(
        "settle_scope: participants=%d transfers=%d savings=%d",
        len(in_order), len(transfers), savings,
    )
    return SettlementResult(
        balances=tuple(sorted(in_order, key=lambda b: -b.balance)),
        transfers=transfers,
        total_spent=spent,
        per_person_avg=per_person_avg(spent, len(in_order)),
        optimization_savings=savings,
    )


def settle_across_scopes(
    scopes: Iterable[ScopeLedger],
    threshold: int = NOISE_THRESHOLD,
    names: Optional[Mapping[str, str]] = None,
    participant_id: Optional[str] = None,
) -> CrossScopeSettlement:
    """
    Сводный вид по нескольким областям с РАЗНЫМ составом участников.

    Каждая область считается отдельно через settle_scope; общий список —
    только парный реестр (pairwise_transfers), без жадного сведения, чтобы не
    «изобрести» перевод между людьми, которые ничего вместе не тратили.
    """
    scopes = tuple(scopes)
    per_scope = tuple(
        ScopeSettlement(
            scope_id=scope.scope_id,
            name=scope.name,
            result=settle_scope(scope.expenses, scope.settlements, names, threshold),
        )
        for scope in scopes
    )
    pairwise = pairwise_transfers(scopes, threshold, names, participant_id)

    log.debug("settle_across_scopes: scopes=%d pairwise=%d", len(per_scope), len(pairwise))
    return CrossScopeSettlement(scopes=per_scope, pairwise=pairwise)
