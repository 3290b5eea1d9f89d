"""Initial schema - role with soft-state timestamps and unique name/handle.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "role",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("handle", sa.String(64), nullable=False, server_default=""),
        sa.Column("organisation_id", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    # Empty name/handle are allowed more than once
    op.create_index(
        "ix_role_name_unique",
        "role",
        ["name"],
        unique=True,
        postgresql_where=sa.text("name <> ''"),
    )
    op.create_index(
        "ix_role_handle_unique",
        "role",
        ["handle"],
        unique=True,
        postgresql_where=sa.text("handle <> ''"),
    )


def downgrade() -> None:
    op.drop_index("ix_role_handle_unique", table_name="role")
    op.drop_index("ix_role_name_unique", table_name="role")
    op.drop_table("role")
