"""initial: participants, scopes, scope_members, expenses, expense_splits, settlements

<описание: исходная схема хранения областей, расходов и переводов; деньги — BigInteger
в минорных единицах>
"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261018_initial_ledger"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "participants",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(), nullable=True, comment="Отображаемое имя"),
        sa.Column("upi_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_participants_name", "participants", ["name"])

    op.create_table(
        "scopes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("emoji", sa.String(16), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_scopes_id", "scopes", ["id"])

    op.create_table(
        "scope_members",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("scope_id", sa.Integer(), sa.ForeignKey("scopes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("participant_id", sa.String(64), sa.ForeignKey("participants.id"), nullable=False),
        sa.UniqueConstraint("scope_id", "participant_id", name="uq_scope_members_scope_participant"),
    )
    op.create_index("ix_scope_members_id", "scope_members", ["id"])
    op.create_index("ix_scope_members_participant", "scope_members", ["participant_id"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("scope_id", sa.Integer(), sa.ForeignKey("scopes.id"), nullable=False),
        sa.Column("payer_id", sa.String(64), sa.ForeignKey("participants.id"), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False, comment="Сумма в минорных единицах"),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("split_type", sa.String(), nullable=False, server_default=sa.text("'equal'")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_expenses_id", "expenses", ["id"])
    op.create_index("ix_expenses_scope_created", "expenses", ["scope_id", "created_at"])

    op.create_table(
        "expense_splits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("expense_id", sa.Integer(), sa.ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("participants.id"), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("shares", sa.Integer(), nullable=True),
        sa.UniqueConstraint("expense_id", "user_id", name="uq_expense_splits_expense_user"),
    )
    op.create_index("ix_expense_splits_id", "expense_splits", ["id"])
    op.create_index("ix_expense_splits_user", "expense_splits", ["user_id"])

    op.create_table(
        "settlements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("scope_id", sa.Integer(), sa.ForeignKey("scopes.id"), nullable=False),
        sa.Column("from_id", sa.String(64), sa.ForeignKey("participants.id"), nullable=False),
        sa.Column("to_id", sa.String(64), sa.ForeignKey("participants.id"), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("method", sa.String(), nullable=True),
        sa.Column("note", sa.String(), nullable=True),
        sa.Column("utr_number", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_settlements_id", "settlements", ["id"])
    op.create_index(
        "ix_settlements_dedup",
        "settlements",
        ["scope_id", "from_id", "to_id", "amount", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_settlements_dedup", table_name="settlements")
    op.drop_index("ix_settlements_id", table_name="settlements")
    op.drop_table("settlements")
    op.drop_index("ix_expense_splits_user", table_name="expense_splits")
    op.drop_index("ix_expense_splits_id", table_name="expense_splits")
    op.drop_table("expense_splits")
    op.drop_index("ix_expenses_scope_created", table_name="expenses")
    op.drop_index("ix_expenses_id", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("ix_scope_members_participant", table_name="scope_members")
    op.drop_index("ix_scope_members_id", table_name="scope_members")
    op.drop_table("scope_members")
    op.drop_index("ix_scopes_id", table_name="scopes")
    op.drop_table("scopes")
    op.drop_index("ix_participants_name", table_name="participants")
    op.drop_table("participants")
