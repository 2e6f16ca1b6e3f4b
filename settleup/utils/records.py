# settleup/utils/records.py
# -----------------------------------------------------------------------------
# ЗАПИСИ ДВИЖКА ВЗАИМОРАСЧЁТОВ
# -----------------------------------------------------------------------------
# Политика:
#   • Деньги — целые минорные единицы (копейки/пайсы/центы). Никаких float.
#   • Входные записи — одна явная форма; нормализация «грязных» данных
#     (плательщик строкой/объектом и т.п.) — задача слоя загрузки, не движка.
#   • Все результаты — неизменяемые (frozen dataclass + кортежи).
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Статусы переводов, которые уже уменьшили долг в реальном мире
COUNTED_SETTLEMENT_STATUSES = frozenset({"completed", "confirmed"})


# =========================
# ВХОД
# =========================

@dataclass(frozen=True)
class Split:
    user_id: str
    amount: int


@dataclass(frozen=True)
class ExpenseRecord:
    """
    Один общий расход: payer_id оплатил всю сумму, splits — доли участников.
    total — сумма транзакции для справки; движок её не сверяет со splits.
    """
    payer_id: str
    splits: Tuple[Split, ...] = ()
    payer_name: Optional[str] = None
    total: Optional[int] = None

    @property
    def split_total(self) -> int:
        return sum(s.amount for s in self.splits)


@dataclass(frozen=True)
class SettlementRecord:
    """Реальный платёж from_id -> to_id, записанный вне движка."""
    from_id: str
    to_id: str
    amount: int
    status: str = "completed"

    @property
    def counted(self) -> bool:
        return self.status in COUNTED_SETTLEMENT_STATUSES


@dataclass(frozen=True)
class ScopeLedger:
    """Все записи одной области (группы/поездки)."""
    scope_id: object
    expenses: Tuple[ExpenseRecord, ...] = ()
    settlements: Tuple[SettlementRecord, ...] = ()
    name: Optional[str] = None


# =========================
# ВЫХОД
# =========================

@dataclass(frozen=True)
class Balance:
    user_id: str
    name: Optional[str]
    paid: int
    owes: int

    @property
    def balance(self) -> int:
        # > 0 — участнику должны; < 0 — он должен
        return self.paid - self.owes


@dataclass(frozen=True)
class Transfer:
    from_id: str
    to_id: str
    amount: int
    from_name: Optional[str] = None
    to_name: Optional[str] = None


@dataclass(frozen=True)
class SettlementResult:
    balances: Tuple[Balance, ...] = ()
    transfers: Tuple[Transfer, ...] = ()
    total_spent: int = 0
    per_person_avg: int = 0
    optimization_savings: int = 0


@dataclass(frozen=True)
class ScopeSettlement:
    scope_id: object
    name: Optional[str]
    result: SettlementResult


@dataclass(frozen=True)
class CrossScopeSettlement:
    scopes: Tuple[ScopeSettlement, ...] = ()
    pairwise: Tuple[Transfer, ...] = ()
