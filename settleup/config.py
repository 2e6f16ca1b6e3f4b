# settleup/config.py
# Настройки из окружения (.env подхватывается python-dotenv).

from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

from settleup.utils.balance import NOISE_THRESHOLD

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


DATABASE_URL: str = os.getenv("DATABASE_URL") or "sqlite:///./settleup.db"

# Порог «шума» в минорных единицах (переопределяет NOISE_THRESHOLD движка)
SETTLE_NOISE_THRESHOLD: int = _int_env("SETTLE_NOISE_THRESHOLD", NOISE_THRESHOLD)

# Окно дедупликации одинаковых переводов (scope, from, to, amount), секунды
SETTLEMENT_DEDUP_WINDOW_SECONDS: int = _int_env("SETTLEMENT_DEDUP_WINDOW_SECONDS", 60)

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").upper()


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS") or "http://localhost:3000,http://localhost:5173"
    return [o.strip() for o in raw.split(",") if o.strip()]
