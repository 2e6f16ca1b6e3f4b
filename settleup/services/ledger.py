# settleup/services/ledger.py
# -----------------------------------------------------------------------------
# ГРАНИЦА ЗАГРУЗКИ ДАННЫХ: строки БД → записи движка
# -----------------------------------------------------------------------------
# Здесь и только здесь приводим данные к одной явной форме
# (ExpenseRecord / SettlementRecord / ScopeLedger). Движок получает готовые записи.
# Soft-deleted расходы не попадают в расчёт.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from settleup.models.expense import Expense
from settleup.models.participant import Participant
from settleup.models.scope import Scope, ScopeMember
from settleup.models.settlement import Settlement
from settleup.utils.records import ExpenseRecord, ScopeLedger, SettlementRecord, Split


def get_scope_member_ids(db: Session, scope_id: int) -> List[str]:
    rows = (
        db.query(ScopeMember.participant_id)
        .filter(ScopeMember.scope_id == scope_id)
        .order_by(ScopeMember.id)
        .all()
    )
    return [r[0] for r in rows]


def get_scope_expenses(db: Session, scope_id: int) -> List[Expense]:
    return (
        db.query(Expense)
        .filter(
            Expense.scope_id == scope_id,
            or_(Expense.is_deleted.is_(False), Expense.is_deleted.is_(None)),
        )
        .order_by(Expense.created_at, Expense.id)
        .all()
    )


def get_scope_settlements(db: Session, scope_id: int) -> List[Settlement]:
    return (
        db.query(Settlement)
        .filter(Settlement.scope_id == scope_id)
        .order_by(Settlement.created_at.desc(), Settlement.id.desc())
        .all()
    )


def to_expense_record(expense: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        payer_id=expense.payer_id,
        payer_name=expense.payer.name if expense.payer is not None else None,
        splits=tuple(Split(user_id=s.user_id, amount=int(s.amount)) for s in expense.splits),
        total=int(expense.amount),
    )


def to_settlement_record(settlement: Settlement) -> SettlementRecord:
    return SettlementRecord(
        from_id=settlement.from_id,
        to_id=settlement.to_id,
        amount=int(settlement.amount),
        status=settlement.status,
    )


def load_scope_ledger(db: Session, scope: Scope) -> ScopeLedger:
    # Порядок строк фиксирован (created_at, id) → результат движка детерминирован
    expenses = get_scope_expenses(db, scope.id)
    settlements = sorted(get_scope_settlements(db, scope.id), key=lambda s: (s.created_at, s.id))
    return ScopeLedger(
        scope_id=scope.id,
        name=scope.name,
        expenses=tuple(to_expense_record(e) for e in expenses),
        settlements=tuple(to_settlement_record(s) for s in settlements),
    )


def get_participant_scopes(db: Session, participant_id: str) -> List[Scope]:
    return (
        db.query(Scope)
        .join(ScopeMember, ScopeMember.scope_id == Scope.id)
        .filter(ScopeMember.participant_id == participant_id)
        .order_by(Scope.created_at.desc(), Scope.id.desc())
        .all()
    )


def get_names(db: Session, participant_ids: Optional[Iterable[str]] = None) -> Dict[str, str]:
    """Карта id → отображаемое имя (только у кого имя задано)."""
    query = db.query(Participant.id, Participant.name)
    if participant_ids is not None:
        ids = list(participant_ids)
        if not ids:
            return {}
        query = query.filter(Participant.id.in_(ids))
    return {pid: name for pid, name in query.all() if name}
