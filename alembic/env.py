# alembic/env.py

from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

# --- Импортируем Base и ВСЕ МОДЕЛИ (DATABASE_URL и .env — через settleup.config) ---
from settleup.config import DATABASE_URL
from settleup.db import Base
from settleup.models import (  # noqa: F401
    participant,
    scope,
    expense,
    settlement,
    # если будут новые модели — обязательно допиши сюда!
)

# --- Конфигурируем Alembic ---
config = context.config

# --- Логирование Alembic ---
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

db_url = DATABASE_URL


def run_migrations_offline():
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        compare_server_default=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(
        db_url,
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
