# settleup/services/settlements.py
# -----------------------------------------------------------------------------
# ЗАПИСЬ И ПОДТВЕРЖДЕНИЕ ПЕРЕВОДОВ (вне движка)
# -----------------------------------------------------------------------------
# Окно дедупликации: новый перевод, совпадающий по (scope, from, to, amount)
# с записанным за последние SETTLEMENT_DEDUP_WINDOW_SECONDS, отклоняется.
# Это защита от двойного нажатия «Оплатил» и гонки двух одинаковых запросов
# на уровне API; движок о ней ничего не знает.
# Не делаем commit — это решает вызывающий (роутер).
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from settleup.config import SETTLEMENT_DEDUP_WINDOW_SECONDS
from settleup.models.settlement import Settlement
from settleup.services.ledger import get_scope_member_ids
from settleup.utils.records import COUNTED_SETTLEMENT_STATUSES

log = logging.getLogger(__name__)


class SettlementError(Exception):
    """Базовая ошибка записи перевода."""


class DuplicateSettlementError(SettlementError):
    def __init__(self, existing: Settlement):
        super().__init__(f"Duplicate settlement within dedup window (existing id={existing.id})")
        self.existing = existing


class SettlementValidationError(SettlementError):
    pass


class SettlementForbiddenError(SettlementError):
    pass


class SettlementStateError(SettlementError):
    pass


def _utc_now() -> datetime:
    # naive UTC — как в колонках created_at
    return datetime.utcnow()


def find_recent_duplicate(
    db: Session,
    *,
    scope_id: int,
    from_id: str,
    to_id: str,
    amount: int,
    now: Optional[datetime] = None,
    window_seconds: int = SETTLEMENT_DEDUP_WINDOW_SECONDS,
) -> Optional[Settlement]:
    if window_seconds <= 0:
        return None
    since = (now or _utc_now()) - timedelta(seconds=window_seconds)
    return (
        db.query(Settlement)
        .filter(
            Settlement.scope_id == scope_id,
            Settlement.from_id == from_id,
            Settlement.to_id == to_id,
            Settlement.amount == amount,
            Settlement.created_at >= since,
        )
        .order_by(Settlement.created_at.desc())
        .first()
    )


def record_settlement(
    db: Session,
    *,
    scope_id: int,
    from_id: str,
    to_id: str,
    amount: int,
    method: Optional[str] = "upi",
    note: Optional[str] = None,
    now: Optional[datetime] = None,
    window_seconds: int = SETTLEMENT_DEDUP_WINDOW_SECONDS,
) -> Settlement:
    """
    Создаёт перевод со статусом pending (в той же сессии, без commit).
    Raises: SettlementValidationError, DuplicateSettlementError.
    """
    if from_id == to_id:
        raise SettlementValidationError("from_id and to_id must differ")
    if amount <= 0:
        raise SettlementValidationError("amount must be positive")

    member_ids = set(get_scope_member_ids(db, scope_id))
    if from_id not in member_ids or to_id not in member_ids:
        raise SettlementValidationError("Both parties must be members of the scope")

    now = now or _utc_now()
    existing = find_recent_duplicate(
        db,
        scope_id=scope_id,
        from_id=from_id,
        to_id=to_id,
        amount=amount,
        now=now,
        window_seconds=window_seconds,
    )
    if existing is not None:
        log.info(
            "duplicate settlement rejected: scope=%s %s->%s amount=%s (existing id=%s)",
            scope_id, from_id, to_id, amount, existing.id,
        )
        raise DuplicateSettlementError(existing)

    settlement = Settlement(
        scope_id=scope_id,
        from_id=from_id,
        to_id=to_id,
        amount=amount,
        status="pending",
        method=method,
        note=note,
        created_at=now,
    )
    db.add(settlement)
    db.flush()
    return settlement


def confirm_settlement(
    db: Session,
    settlement: Settlement,
    *,
    actor_id: str,
    utr_number: Optional[str] = None,
) -> Settlement:
    """
    Должник подтверждает «Я оплатил» → перевод сразу completed.
    Raises: SettlementForbiddenError (не должник), SettlementStateError (уже завершён).
    """
    if settlement.from_id != actor_id:
        raise SettlementForbiddenError("Only the person who owes can confirm payment")
    if settlement.status in COUNTED_SETTLEMENT_STATUSES:
        raise SettlementStateError("This settlement has already been completed")

    settlement.status = "completed"
    if utr_number:
        settlement.utr_number = utr_number
    db.flush()
    log.info("settlement %s completed by %s", settlement.id, actor_id)
    return settlement
