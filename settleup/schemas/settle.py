# settleup/schemas/settle.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: вход/выход движка взаиморасчётов
# -----------------------------------------------------------------------------
# Цели:
#   • Деньги — строго целые минорные единицы (float отклоняем на входе).
#   • Схемы только сериализуют; все вычисления — в settleup.utils.*.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, conint

from settleup.utils.records import ExpenseRecord, ScopeLedger, SettlementRecord, Split

# Денежное поле: целое число минорных единиц, без float
Money = conint(strict=True, ge=0)


# =========================
# ВХОД
# =========================

class SplitIn(BaseModel):
    user_id: str = Field(..., description="ID участника")
    amount: Money = Field(..., description="Доля участника (минорные единицы)")


class ExpenseRecordIn(BaseModel):
    payer_id: str = Field(..., description="Кто оплатил всю сумму")
    payer_name: Optional[str] = None
    splits: List[SplitIn] = Field(default_factory=list)

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(
            payer_id=self.payer_id,
            payer_name=self.payer_name,
            splits=tuple(Split(user_id=s.user_id, amount=s.amount) for s in self.splits),
        )


class SettlementRecordIn(BaseModel):
    from_id: str
    to_id: str
    amount: Money
    status: str = Field(default="completed", description="Учитываются только completed/confirmed")

    def to_record(self) -> SettlementRecord:
        return SettlementRecord(
            from_id=self.from_id, to_id=self.to_id, amount=self.amount, status=self.status
        )


class SettleRequest(BaseModel):
    """Одна область: расходы + уже совершённые переводы."""
    expenses: List[ExpenseRecordIn] = Field(default_factory=list)
    settlements: List[SettlementRecordIn] = Field(default_factory=list)
    names: Dict[str, str] = Field(default_factory=dict, description="user_id → отображаемое имя")


class ScopeLedgerIn(BaseModel):
    scope_id: Union[int, str]
    name: Optional[str] = None
    expenses: List[ExpenseRecordIn] = Field(default_factory=list)
    settlements: List[SettlementRecordIn] = Field(default_factory=list)

    def to_ledger(self) -> ScopeLedger:
        return ScopeLedger(
            scope_id=self.scope_id,
            name=self.name,
            expenses=tuple(e.to_record() for e in self.expenses),
            settlements=tuple(s.to_record() for s in self.settlements),
        )


class CrossScopeRequest(BaseModel):
    scopes: List[ScopeLedgerIn] = Field(default_factory=list)
    names: Dict[str, str] = Field(default_factory=dict)
    participant_id: Optional[str] = Field(
        default=None,
        description="Оставить в общем списке только пары с этим участником",
    )


class EqualSplitRequest(BaseModel):
    total: Money
    count: conint(strict=True, ge=1)


# =========================
# ВЫХОД
# =========================

class BalanceOut(BaseModel):
    user_id: str
    name: Optional[str] = None
    paid: int
    owes: int
    balance: int  # > 0 — участнику должны; < 0 — он должен

    class Config:
        from_attributes = True


class TransferOut(BaseModel):
    """Перевод from_id → to_id (amount > 0, from_id != to_id)."""
    from_id: str
    to_id: str
    amount: int
    from_name: Optional[str] = None
    to_name: Optional[str] = None

    class Config:
        from_attributes = True


class SettlementResultOut(BaseModel):
    balances: List[BalanceOut] = Field(default_factory=list)
    transfers: List[TransferOut] = Field(default_factory=list)
    total_spent: int = 0
    per_person_avg: int = 0
    optimization_savings: int = Field(default=0, description="На сколько переводов меньше, чем у жадного")

    class Config:
        from_attributes = True


class ScopeSettlementOut(BaseModel):
    scope_id: Union[int, str]
    name: Optional[str] = None
    result: SettlementResultOut

    class Config:
        from_attributes = True


class CrossScopeOut(BaseModel):
    scopes: List[ScopeSettlementOut] = Field(default_factory=list)
    pairwise: List[TransferOut] = Field(default_factory=list)

    class Config:
        from_attributes = True


class EqualSplitOut(BaseModel):
    shares: List[int]
