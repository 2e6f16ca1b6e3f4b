# settleup/models/participant.py
# Участник: непрозрачный id + отображаемое имя. Движок идентичностью не владеет.

from __future__ import annotations

import uuid

from sqlalchemy import Column, String, DateTime, func

from settleup.db import Base


def _new_participant_id() -> str:
    return uuid.uuid4().hex


class Participant(Base):
    __tablename__ = "participants"

    id = Column(String(64), primary_key=True, default=_new_participant_id)
    name = Column(String, index=True, nullable=True, comment="Отображаемое имя")
    upi_id = Column(String, nullable=True, comment="Платёжный идентификатор получателя (необязательно)")
    created_at = Column(DateTime, nullable=False, default=func.now())

    def __repr__(self):
        return f"<Participant(id={self.id}, name={self.name})>"
