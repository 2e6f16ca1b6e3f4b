# settleup/routers/scopes.py
# -----------------------------------------------------------------------------
# РОУТЕР: Области (группы/поездки), балансы и settle-up по сохранённым данным
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from starlette import status
from sqlalchemy.orm import Session

from settleup.config import SETTLE_NOISE_THRESHOLD
from settleup.db import get_db
from settleup.models.participant import Participant
from settleup.models.scope import Scope, ScopeMember
from settleup.schemas.scope import ScopeCreate, ScopeMemberAdd, ScopeOut
from settleup.schemas.settle import BalanceOut, SettlementResultOut
from settleup.services.ledger import get_names, get_scope_member_ids, load_scope_ledger
from settleup.utils.balance import compute_balances
from settleup.utils.settle import settle_scope

router = APIRouter()

# ===== Вспомогательные =======================================================

def get_scope_or_404(db: Session, scope_id: int) -> Scope:
    scope = db.get(Scope, scope_id)
    if scope is None:
        raise HTTPException(status_code=404, detail="Группа не найдена")
    return scope


def _scope_out(scope: Scope) -> ScopeOut:
    return ScopeOut(
        id=scope.id,
        name=scope.name,
        emoji=scope.emoji,
        member_ids=[m.participant_id for m in sorted(scope.members, key=lambda m: m.id)],
    )


def _require_participants(db: Session, ids: List[str]) -> None:
    found = {p.id for p in db.query(Participant).filter(Participant.id.in_(ids)).all()} if ids else set()
    missing = [pid for pid in ids if pid not in found]
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown participants: {', '.join(missing)}")

# ===== Создание / чтение =====================================================

@router.post("/", response_model=ScopeOut, status_code=status.HTTP_201_CREATED)
def create_scope(payload: ScopeCreate, db: Session = Depends(get_db)):
    member_ids = list(dict.fromkeys(payload.member_ids))
    _require_participants(db, member_ids)

    scope = Scope(name=payload.name, emoji=payload.emoji)
    db.add(scope)
    db.flush()
    for pid in member_ids:
        db.add(ScopeMember(scope_id=scope.id, participant_id=pid))
    db.commit()
    db.refresh(scope)
    return _scope_out(scope)


@router.get("/{scope_id}", response_model=ScopeOut)
def get_scope(scope_id: int, db: Session = Depends(get_db)):
    return _scope_out(get_scope_or_404(db, scope_id))


@router.post("/{scope_id}/members", response_model=ScopeOut)
def add_scope_member(scope_id: int, payload: ScopeMemberAdd, db: Session = Depends(get_db)):
    scope = get_scope_or_404(db, scope_id)
    _require_participants(db, [payload.participant_id])

    if payload.participant_id not in get_scope_member_ids(db, scope_id):
        db.add(ScopeMember(scope_id=scope_id, participant_id=payload.participant_id))
        db.commit()
        db.refresh(scope)
    return _scope_out(scope)

# ===== Балансы / Settle-up ====================================================

@router.get("/{scope_id}/balances", response_model=List[BalanceOut])
def get_scope_balances(scope_id: int, db: Session = Depends(get_db)):
    """
    Балансы участников области. Участники без расходов — с нулями в конце списка.
    """
    scope = get_scope_or_404(db, scope_id)
    ledger = load_scope_ledger(db, scope)
    member_ids = get_scope_member_ids(db, scope_id)
    names = get_names(db, member_ids)

    balances = compute_balances(ledger.expenses, ledger.settlements, names)
    out = [BalanceOut.model_validate(b) for b in balances.values()]
    for uid in member_ids:
        if uid not in balances:
            out.append(BalanceOut(user_id=uid, name=names.get(uid), paid=0, owes=0, balance=0))
    return out


@router.get("/{scope_id}/settle-up", response_model=SettlementResultOut)
def get_scope_settle_up(scope_id: int, db: Session = Depends(get_db)):
    """План взаиморасчётов области: меньшее из жадного и оптимизированного."""
    scope = get_scope_or_404(db, scope_id)
    ledger = load_scope_ledger(db, scope)
    names = get_names(db, get_scope_member_ids(db, scope_id))

    result = settle_scope(
        ledger.expenses,
        ledger.settlements,
        names=names,
        threshold=SETTLE_NOISE_THRESHOLD,
    )
    return SettlementResultOut.model_validate(result)
