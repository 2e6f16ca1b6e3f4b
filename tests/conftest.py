# tests/conftest.py
# Общие фикстуры: отдельная in-memory sqlite на каждый тест + TestClient с подменой get_db.

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from settleup.db import Base, get_db
from settleup.main import app
from settleup.models.participant import Participant
from settleup.models.scope import Scope, ScopeMember


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def scope_abc(db_session):
    """Область с тремя участниками a, b, c."""
    for pid, name in (("a", "Alice"), ("b", "Bob"), ("c", "Carol")):
        db_session.add(Participant(id=pid, name=name))
    scope = Scope(name="Goa trip")
    db_session.add(scope)
    db_session.flush()
    for pid in ("a", "b", "c"):
        db_session.add(ScopeMember(scope_id=scope.id, participant_id=pid))
    db_session.commit()
    return scope


