# settleup/main.py
# Главная точка входа FastAPI для SettleUp.
#  • Расчёт без хранения: /api/settle, /api/settle/cross-scope, /api/split/equal
#  • Хранимые области/расходы/переводы: /api/participants, /api/scopes, /api/settlements
#  • Создание таблиц на старте только по флагу (ENV: AUTO_CREATE_TABLES=1), иначе — alembic.

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from settleup.config import LOG_LEVEL, cors_origins
from settleup.db import Base, engine

from settleup.routers.settle import router as settle_router
from settleup.routers.participants import router as participants_router
from settleup.routers.scopes import router as scopes_router
from settleup.routers.expenses import router as expenses_router
from settleup.routers.settlements import router as settlements_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(
    title="SettleUp Backend",
    description="Разделение общих расходов: балансы участников и минимальный план переводов.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Подключение роутеров ---
app.include_router(settle_router,       prefix="/api",              tags=["Расчёт"])
app.include_router(participants_router, prefix="/api/participants", tags=["Участники"])
app.include_router(scopes_router,       prefix="/api/scopes",       tags=["Группы"])
app.include_router(expenses_router,     prefix="/api/scopes",       tags=["Расходы"])
app.include_router(settlements_router,  prefix="/api/settlements",  tags=["Переводы"])


@app.get("/")
def root():
    """Простой healthcheck."""
    return {"message": "SettleUp backend работает!", "docs": "/docs"}


@app.on_event("startup")
def _startup_tables():
    if os.getenv("AUTO_CREATE_TABLES") == "1":
        log.info("AUTO_CREATE_TABLES=1: creating tables without migrations")
        Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("settleup.main:app", host="0.0.0.0", port=8000, reload=False)
