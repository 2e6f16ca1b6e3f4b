# settleup/models/scope.py
# -----------------------------------------------------------------------------
# МОДЕЛЬ: Scope (группа/поездка) + ScopeMember
# -----------------------------------------------------------------------------
# Область — граница, внутри которой балансы можно неттить друг против друга.
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from settleup.db import Base


class Scope(Base):
    __tablename__ = "scopes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, comment="Название группы/поездки")
    emoji = Column(String(16), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    members = relationship(
        "ScopeMember",
        back_populates="scope",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ScopeMember(Base):
    __tablename__ = "scope_members"

    id = Column(Integer, primary_key=True, index=True)
    scope_id = Column(Integer, ForeignKey("scopes.id", ondelete="CASCADE"), nullable=False)
    participant_id = Column(String(64), ForeignKey("participants.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("scope_id", "participant_id", name="uq_scope_members_scope_participant"),
        Index("ix_scope_members_participant", "participant_id"),
    )

    scope = relationship("Scope", back_populates="members")
    participant = relationship("Participant", lazy="joined")
