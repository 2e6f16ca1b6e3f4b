# settleup/routers/settle.py
# -----------------------------------------------------------------------------
# РОУТЕР: расчёт без хранения (всё приходит в теле запроса)
# -----------------------------------------------------------------------------
#   POST /settle              — одна область: балансы + план переводов
#   POST /settle/cross-scope  — несколько областей: планы по каждой + попарный общий
#   POST /split/equal         — равное деление суммы
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter

from settleup.config import SETTLE_NOISE_THRESHOLD
from settleup.schemas.settle import (
    CrossScopeOut,
    CrossScopeRequest,
    EqualSplitOut,
    EqualSplitRequest,
    SettleRequest,
    SettlementResultOut,
)
from settleup.utils.settle import settle_across_scopes, settle_scope
from settleup.utils.split import equal_split

router = APIRouter()


@router.post("/settle", response_model=SettlementResultOut)
def settle_single_scope(payload: SettleRequest):
    result = settle_scope(
        [e.to_record() for e in payload.expenses],
        [s.to_record() for s in payload.settlements],
        names=payload.names,
        threshold=SETTLE_NOISE_THRESHOLD,
    )
    return SettlementResultOut.model_validate(result)


@router.post("/settle/cross-scope", response_model=CrossScopeOut)
def settle_cross_scope(payload: CrossScopeRequest):
    """
    Сводный вид по областям с разным составом: общий список — только попарные долги.
    """
    result = settle_across_scopes(
        [s.to_ledger() for s in payload.scopes],
        threshold=SETTLE_NOISE_THRESHOLD,
        names=payload.names,
        participant_id=payload.participant_id,
    )
    return CrossScopeOut.model_validate(result)


@router.post("/split/equal", response_model=EqualSplitOut)
def split_equal(payload: EqualSplitRequest):
    return EqualSplitOut(shares=equal_split(payload.total, payload.count))
