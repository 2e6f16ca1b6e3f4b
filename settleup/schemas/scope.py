# settleup/schemas/scope.py
# СХЕМЫ Pydantic: участники и области (группы/поездки)

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ParticipantCreate(BaseModel):
    id: Optional[str] = Field(default=None, description="Внешний id (если нет — сгенерируем)")
    name: Optional[str] = None
    upi_id: Optional[str] = None


class ParticipantOut(BaseModel):
    id: str
    name: Optional[str] = None
    upi_id: Optional[str] = None

    class Config:
        from_attributes = True


class ScopeCreate(BaseModel):
    name: str = Field(..., description="Название группы/поездки")
    emoji: Optional[str] = None
    member_ids: List[str] = Field(default_factory=list)


class ScopeMemberAdd(BaseModel):
    participant_id: str


class ScopeOut(BaseModel):
    id: int
    name: str
    emoji: Optional[str] = None
    member_ids: List[str] = Field(default_factory=list)
