# settleup/routers/expenses.py
# -----------------------------------------------------------------------------
# РОУТЕР: Расходы области
# -----------------------------------------------------------------------------
# Здесь (на границе API) считаем доли по split_type и сверяем сумму долей
# с amount для 'custom'. Движок эти проверки не делает.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from starlette import status
from sqlalchemy.orm import Session

from settleup.db import get_db
from settleup.models.expense import Expense, ExpenseSplit
from settleup.routers.scopes import get_scope_or_404
from settleup.schemas.expense import ExpenseCreate, ExpenseOut
from settleup.services.ledger import get_scope_expenses, get_scope_member_ids
from settleup.utils.split import equal_split_among, shares_split

router = APIRouter()


def _compute_split_amounts(payload: ExpenseCreate, member_ids: List[str]) -> Dict[str, Dict[str, int]]:
    """{user_id: {"amount": int, "shares": int|None}} по типу деления."""
    members = set(member_ids)

    if payload.split_type == "equal":
        ids = payload.participant_ids if payload.participant_ids else member_ids
        for uid in ids:
            if uid not in members:
                raise HTTPException(status_code=400, detail=f"User {uid} is not a member of the group")
        if not ids:
            raise HTTPException(status_code=422, detail="Nobody to split the expense between")
        return {uid: {"amount": amt, "shares": None} for uid, amt in equal_split_among(payload.amount, ids).items()}

    aggregated: Dict[str, Dict[str, int]] = {}
    for s in payload.splits or []:
        if s.user_id not in members:
            raise HTTPException(status_code=400, detail=f"User {s.user_id} is not a member of the group")
        entry = aggregated.setdefault(s.user_id, {"amount": 0, "shares": 0})
        entry["amount"] += s.amount or 0
        entry["shares"] += s.shares or 0

    if payload.split_type == "shares":
        amounts = shares_split(payload.amount, {uid: p["shares"] for uid, p in aggregated.items()})
        return {uid: {"amount": amounts.get(uid, 0), "shares": p["shares"]} for uid, p in aggregated.items()}

    # custom
    total_shares = sum(p["amount"] for p in aggregated.values())
    if total_shares != payload.amount:
        raise HTTPException(
            status_code=422,
            detail=f"Sum of splits ({total_shares}) must equal expense amount ({payload.amount})",
        )
    return {uid: {"amount": p["amount"], "shares": None} for uid, p in aggregated.items()}


@router.post("/{scope_id}/expenses", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(scope_id: int, payload: ExpenseCreate, db: Session = Depends(get_db)):
    get_scope_or_404(db, scope_id)
    member_ids = get_scope_member_ids(db, scope_id)
    if payload.payer_id not in member_ids:
        raise HTTPException(status_code=400, detail="payer_id must be a member of the group")

    split_amounts = _compute_split_amounts(payload, member_ids)

    expense = Expense(
        scope_id=scope_id,
        payer_id=payload.payer_id,
        amount=payload.amount,
        description=payload.description,
        split_type=payload.split_type,
    )
    db.add(expense)
    db.flush()  # получим expense.id

    db.add_all(
        ExpenseSplit(
            expense_id=expense.id,
            user_id=uid,
            amount=p["amount"],
            shares=p["shares"] or None,
        )
        for uid, p in split_amounts.items()
    )
    db.commit()
    db.refresh(expense)
    return expense


@router.get("/{scope_id}/expenses", response_model=List[ExpenseOut])
def list_expenses(scope_id: int, db: Session = Depends(get_db)):
    get_scope_or_404(db, scope_id)
    return get_scope_expenses(db, scope_id)


@router.delete("/{scope_id}/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(scope_id: int, expense_id: int, db: Session = Depends(get_db)):
    expense = db.get(Expense, expense_id)
    if expense is None or expense.scope_id != scope_id or expense.is_deleted:
        raise HTTPException(status_code=404, detail="Расход не найден")
    expense.is_deleted = True
    db.commit()
