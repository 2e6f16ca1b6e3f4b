# settleup/routers/settlements.py
# -----------------------------------------------------------------------------
# РОУТЕР: Переводы (погашения) и сводный вид по всем группам
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette import status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from settleup.config import SETTLE_NOISE_THRESHOLD
from settleup.db import get_db
from settleup.models.participant import Participant
from settleup.models.settlement import Settlement
from settleup.routers.scopes import get_scope_or_404
from settleup.schemas.scope import ParticipantOut
from settleup.schemas.settle import SettlementResultOut, TransferOut
from settleup.schemas.settlement import (
    ByGroupOut,
    GlobalSettlementOut,
    GroupSettlementOut,
    SettlementConfirm,
    SettlementCreate,
    SettlementOut,
)
from settleup.services.ledger import (
    get_names,
    get_participant_scopes,
    get_scope_settlements,
    load_scope_ledger,
)
from settleup.services.settlements import (
    DuplicateSettlementError,
    SettlementForbiddenError,
    SettlementStateError,
    SettlementValidationError,
    confirm_settlement,
    record_settlement,
)
from settleup.utils.settle import settle_across_scopes

router = APIRouter()


def get_settlement_or_404(db: Session, settlement_id: int) -> Settlement:
    settlement = db.get(Settlement, settlement_id)
    if settlement is None:
        raise HTTPException(status_code=404, detail="Settlement not found")
    return settlement


@router.get("/", response_model=List[SettlementOut])
def list_settlements(
    scope_id: Optional[int] = Query(None, description="Фильтр по области"),
    participant_id: Optional[str] = Query(None, description="Только переводы с участием"),
    db: Session = Depends(get_db),
):
    query = db.query(Settlement)
    if scope_id is not None:
        query = query.filter(Settlement.scope_id == scope_id)
    if participant_id is not None:
        query = query.filter(or_(Settlement.from_id == participant_id, Settlement.to_id == participant_id))
    return query.order_by(Settlement.created_at.desc(), Settlement.id.desc()).all()


@router.get("/by-group", response_model=ByGroupOut)
def get_settlements_by_group(
    participant_id: str = Query(..., description="Чей сводный вид строим"),
    db: Session = Depends(get_db),
):
    """
    Все группы участника разом:
      • groups — план по каждой группе отдельно (неттинг внутри группы);
      • global — попарные долги участника по всем группам, БЕЗ неттинга через
        третьих лиц (составы групп разные).
    """
    if db.get(Participant, participant_id) is None:
        raise HTTPException(status_code=404, detail="Участник не найден")

    scopes = get_participant_scopes(db, participant_id)
    ledgers = [load_scope_ledger(db, s) for s in scopes]
    member_ids = {m.participant_id for s in scopes for m in s.members}
    names = get_names(db, member_ids)

    cross = settle_across_scopes(
        ledgers,
        threshold=SETTLE_NOISE_THRESHOLD,
        names=names,
        participant_id=participant_id,
    )

    groups: List[GroupSettlementOut] = []
    recorded_all: List[Settlement] = []
    for scope, per_scope in zip(scopes, cross.scopes):
        recorded = get_scope_settlements(db, scope.id)
        recorded_all.extend(
            s for s in recorded if participant_id in (s.from_id, s.to_id)
        )
        groups.append(
            GroupSettlementOut(
                scope_id=scope.id,
                name=scope.name,
                emoji=scope.emoji,
                members=[
                    ParticipantOut.model_validate(m.participant)
                    for m in sorted(scope.members, key=lambda m: m.id)
                ],
                result=SettlementResultOut.model_validate(per_scope.result),
                recorded=[SettlementOut.model_validate(s) for s in recorded],
            )
        )

    recorded_all.sort(key=lambda s: (s.created_at, s.id), reverse=True)
    return ByGroupOut(
        groups=groups,
        global_=GlobalSettlementOut(
            computed=[TransferOut.model_validate(t) for t in cross.pairwise],
            recorded=[SettlementOut.model_validate(s) for s in recorded_all],
        ),
    )


@router.post("/", response_model=SettlementOut, status_code=status.HTTP_201_CREATED)
def create_settlement(payload: SettlementCreate, db: Session = Depends(get_db)):
    get_scope_or_404(db, payload.scope_id)
    try:
        settlement = record_settlement(
            db,
            scope_id=payload.scope_id,
            from_id=payload.from_id,
            to_id=payload.to_id,
            amount=payload.amount,
            method=payload.method,
            note=payload.note,
        )
    except SettlementValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateSettlementError as e:
        raise HTTPException(
            status_code=409,
            detail={"message": "Duplicate settlement", "existing_id": e.existing.id},
        )
    db.commit()
    db.refresh(settlement)
    return settlement


@router.post("/{settlement_id}/confirm", response_model=SettlementOut)
def confirm(settlement_id: int, payload: SettlementConfirm, db: Session = Depends(get_db)):
    settlement = get_settlement_or_404(db, settlement_id)
    try:
        confirm_settlement(db, settlement, actor_id=payload.actor_id, utr_number=payload.utr_number)
    except SettlementForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except SettlementStateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    db.refresh(settlement)
    return settlement
