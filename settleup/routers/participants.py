# settleup/routers/participants.py
# РОУТЕР: Участники

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from starlette import status
from sqlalchemy.orm import Session

from settleup.db import get_db
from settleup.models.participant import Participant
from settleup.schemas.scope import ParticipantCreate, ParticipantOut

router = APIRouter()


@router.post("/", response_model=ParticipantOut, status_code=status.HTTP_201_CREATED)
def create_participant(payload: ParticipantCreate, db: Session = Depends(get_db)):
    if payload.id and db.get(Participant, payload.id) is not None:
        raise HTTPException(status_code=409, detail="Participant already exists")
    participant = Participant(name=payload.name, upi_id=payload.upi_id)
    if payload.id:
        participant.id = payload.id
    db.add(participant)
    db.commit()
    db.refresh(participant)
    return participant


@router.get("/{participant_id}", response_model=ParticipantOut)
def get_participant(participant_id: str, db: Session = Depends(get_db)):
    participant = db.get(Participant, participant_id)
    if participant is None:
        raise HTTPException(status_code=404, detail="Участник не найден")
    return participant
