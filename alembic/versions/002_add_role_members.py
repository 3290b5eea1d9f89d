"""Add role membership.

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "role_member",
        sa.Column("role_id", sa.BigInteger(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.BigInteger(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_role_member_user_id", "role_member", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_role_member_user_id", table_name="role_member")
    op.drop_table("role_member")
