"""Initial schema — streams, ledger_state, custody_transfers.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "ledger_state",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("owner", sa.String(128), nullable=False),
        sa.Column("next_stream_id", sa.BigInteger, nullable=False, server_default="1"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_table(
        "streams",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=False),
        sa.Column("payer", sa.String(128), nullable=False),
        sa.Column("recipient", sa.String(128), nullable=False),
        sa.Column("original_balance", sa.String(40), nullable=False),
        sa.Column("current_balance", sa.String(40), nullable=False),
        sa.Column("start_date", sa.BigInteger, nullable=False),
        sa.Column("end_date", sa.BigInteger, nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_streams_payer", "streams", ["payer"])
    op.create_index("ix_streams_recipient", "streams", ["recipient"])
    op.create_table(
        "custody_transfers",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "stream_id", sa.BigInteger, sa.ForeignKey("streams.id"),
            nullable=False,
        ),
        sa.Column("direction", sa.String(10), nullable=False),
        sa.Column("account", sa.String(128), nullable=False),
        sa.Column("amount", sa.String(40), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_custody_transfers_stream_id", "custody_transfers", ["stream_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_custody_transfers_stream_id", table_name="custody_transfers")
    op.drop_table("custody_transfers")
    op.drop_index("ix_streams_recipient", table_name="streams")
    op.drop_index("ix_streams_payer", table_name="streams")
    op.drop_table("streams")
    op.drop_table("ledger_state")
