"""
tests/test_settlement_service.py — запись переводов: окно дедупликации и подтверждение.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from settleup.services.settlements import (
    DuplicateSettlementError,
    SettlementForbiddenError,
    SettlementStateError,
    SettlementValidationError,
    confirm_settlement,
    record_settlement,
)

T0 = datetime(2026, 10, 18, 12, 0, 0)


def _record(db, scope, now=T0, **overrides):
    params = dict(scope_id=scope.id, from_id="b", to_id="a", amount=300, now=now)
    params.update(overrides)
    return record_settlement(db, **params)


def test_new_settlement_is_pending(db_session, scope_abc):
    s = _record(db_session, scope_abc)
    assert s.id is not None
    assert s.status == "pending"
    assert s.created_at == T0


def test_duplicate_within_window_rejected(db_session, scope_abc):
    first = _record(db_session, scope_abc)
    with pytest.raises(DuplicateSettlementError) as exc:
        _record(db_session, scope_abc, now=T0 + timedelta(seconds=30))
    assert exc.value.existing.id == first.id


def test_same_tuple_allowed_after_window(db_session, scope_abc):
    _record(db_session, scope_abc)
    later = _record(db_session, scope_abc, now=T0 + timedelta(seconds=61))
    assert later.status == "pending"


def test_different_amount_or_receiver_is_not_duplicate(db_session, scope_abc):
    _record(db_session, scope_abc)
    _record(db_session, scope_abc, amount=301, now=T0 + timedelta(seconds=1))
    _record(db_session, scope_abc, to_id="c", now=T0 + timedelta(seconds=2))


def test_zero_window_disables_dedup(db_session, scope_abc):
    _record(db_session, scope_abc, window_seconds=0)
    _record(db_session, scope_abc, window_seconds=0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"to_id": "b"},
        {"amount": 0},
        {"from_id": "zed"},
    ],
)
def test_invalid_settlements(db_session, scope_abc, overrides):
    with pytest.raises(SettlementValidationError):
        _record(db_session, scope_abc, **overrides)


def test_only_debtor_confirms(db_session, scope_abc):
    s = _record(db_session, scope_abc)
    with pytest.raises(SettlementForbiddenError):
        confirm_settlement(db_session, s, actor_id="a")

    confirm_settlement(db_session, s, actor_id="b", utr_number="UTR123")
    assert s.status == "completed"
    assert s.utr_number == "UTR123"

    with pytest.raises(SettlementStateError):
        confirm_settlement(db_session, s, actor_id="b")
