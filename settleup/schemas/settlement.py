# settleup/schemas/settlement.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, conint

from settleup.schemas.scope import ParticipantOut
from settleup.schemas.settle import SettlementResultOut, TransferOut


class SettlementCreate(BaseModel):
    """Запись реального платежа должника (from_id) кредитору (to_id)."""
    scope_id: int
    from_id: str
    to_id: str
    amount: conint(strict=True, gt=0)
    method: str = "upi"
    note: Optional[str] = None


class SettlementConfirm(BaseModel):
    actor_id: str = Field(..., description="Кто подтверждает (должен быть должником)")
    utr_number: Optional[str] = None


class SettlementOut(BaseModel):
    id: int
    scope_id: int
    from_id: str
    to_id: str
    amount: int
    status: str
    method: Optional[str] = None
    note: Optional[str] = None
    utr_number: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class GroupSettlementOut(BaseModel):
    scope_id: Union[int, str]
    name: Optional[str] = None
    emoji: Optional[str] = None
    members: List[ParticipantOut] = Field(default_factory=list)
    result: SettlementResultOut
    recorded: List[SettlementOut] = Field(default_factory=list)


class GlobalSettlementOut(BaseModel):
    computed: List[TransferOut] = Field(default_factory=list)
    recorded: List[SettlementOut] = Field(default_factory=list)


class ByGroupOut(BaseModel):
    """Ответ «все группы»: по-групповые планы + общий попарный список."""
    groups: List[GroupSettlementOut] = Field(default_factory=list)
    global_: GlobalSettlementOut = Field(default_factory=GlobalSettlementOut, alias="global")

    class Config:
        populate_by_name = True
