# settleup/schemas/expense.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: Expense
# -----------------------------------------------------------------------------
# Проверку ТОЧНОЙ суммы долей против amount делаем в роутере (граница API),
# движок её не выполняет.
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, conint, field_validator, ValidationInfo

from settleup.schemas.settle import Money


class ExpenseSplitIn(BaseModel):
    user_id: str
    amount: Optional[Money] = Field(default=None, description="Для split_type='custom'")
    shares: Optional[conint(strict=True, ge=1)] = Field(default=None, description="Для split_type='shares'")


class ExpenseCreate(BaseModel):
    payer_id: str
    amount: Money
    description: Optional[str] = None
    split_type: Literal["equal", "shares", "custom"] = "equal"
    # для split_type='equal': между кем делим (по умолчанию — все участники области)
    participant_ids: Optional[List[str]] = None
    splits: Optional[List[ExpenseSplitIn]] = Field(default=None, validate_default=True)

    @field_validator("splits")
    @classmethod
    def _require_splits_when_needed(cls, splits: Optional[List[ExpenseSplitIn]], info: ValidationInfo):
        split_type = info.data.get("split_type")
        if split_type in ("custom", "shares") and not splits:
            raise ValueError("Для split_type='custom' или 'shares' необходимо передать список 'splits'")
        for s in splits or []:
            if split_type == "custom" and s.amount is None:
                raise ValueError("Для split_type='custom' у каждой доли нужен amount")
            if split_type == "shares" and s.shares is None:
                raise ValueError("Для split_type='shares' у каждой доли нужен shares")
        return splits


class ExpenseSplitOut(BaseModel):
    user_id: str
    amount: int
    shares: Optional[int] = None

    class Config:
        from_attributes = True


class ExpenseOut(BaseModel):
    id: int
    scope_id: int
    payer_id: str
    amount: int
    description: Optional[str] = None
    split_type: str
    created_at: datetime
    splits: List[ExpenseSplitOut] = Field(default_factory=list)

    class Config:
        from_attributes = True
