# settleup/models/settlement.py
# -----------------------------------------------------------------------------
# МОДЕЛЬ: Settlement — записанный реальный платёж должника кредитору
# -----------------------------------------------------------------------------
# Статусы: pending → initiated → paid_pending → completed/confirmed.
# В балансах учитываются только completed/confirmed.
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship

from settleup.db import Base

SETTLEMENT_STATUSES = ("pending", "initiated", "paid_pending", "completed", "confirmed")


class Settlement(Base):
    __tablename__ = "settlements"

    id = Column(Integer, primary_key=True, index=True)
    scope_id = Column(Integer, ForeignKey("scopes.id"), nullable=False)
    from_id = Column(String(64), ForeignKey("participants.id"), nullable=False, comment="Должник")
    to_id = Column(String(64), ForeignKey("participants.id"), nullable=False, comment="Кредитор")
    amount = Column(BigInteger, nullable=False, comment="Сумма в минорных единицах")
    status = Column(String(16), nullable=False, default="pending")
    method = Column(String, nullable=True)
    note = Column(String, nullable=True)
    utr_number = Column(String, nullable=True, comment="Номер платежа из банка (если есть)")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        # под проверку окна дедупликации
        Index("ix_settlements_dedup", "scope_id", "from_id", "to_id", "amount", "created_at"),
    )

    from_participant = relationship("Participant", foreign_keys=[from_id], lazy="joined")
    to_participant = relationship("Participant", foreign_keys=[to_id], lazy="joined")
