# settleup/models/expense.py
# -----------------------------------------------------------------------------
# МОДЕЛЬ: Expense + ExpenseSplit (SQLAlchemy)
# -----------------------------------------------------------------------------
# Суммы — BigInteger в минорных единицах (копейки/пайсы), без Numeric/float.
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    ForeignKey,
    DateTime,
    Boolean,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from settleup.db import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)

    scope_id = Column(
        Integer,
        ForeignKey("scopes.id"),
        nullable=False,
        comment="Область (группа/поездка) расхода",
    )

    payer_id = Column(
        String(64),
        ForeignKey("participants.id"),
        nullable=False,
        comment="Кто оплатил всю сумму",
    )

    amount = Column(
        BigInteger,
        nullable=False,
        comment="Сумма транзакции в минорных единицах",
    )

    description = Column(String, nullable=True)

    split_type = Column(
        String,
        nullable=False,
        default="equal",
        comment="Тип деления ('equal', 'shares', 'custom')",
    )

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    is_deleted = Column(Boolean, nullable=False, default=False, comment="Soft-delete флаг")

    __table_args__ = (
        Index("ix_expenses_scope_created", "scope_id", "created_at"),
    )

    payer = relationship("Participant", foreign_keys=[payer_id], lazy="joined")

    splits = relationship(
        "ExpenseSplit",
        back_populates="expense",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ExpenseSplit.id",
    )


class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True, index=True)

    expense_id = Column(
        Integer,
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
    )

    user_id = Column(String(64), ForeignKey("participants.id"), nullable=False)

    amount = Column(BigInteger, nullable=False, comment="Доля участника в минорных единицах")

    shares = Column(Integer, nullable=True, comment="Количество долей (если split_type='shares')")

    __table_args__ = (
        UniqueConstraint("expense_id", "user_id", name="uq_expense_splits_expense_user"),
        Index("ix_expense_splits_user", "user_id"),
    )

    expense = relationship("Expense", back_populates="splits")
