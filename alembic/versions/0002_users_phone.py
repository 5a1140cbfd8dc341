"""Add optional phone column to users."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0002_users_phone"
down_revision = "0001_users"
branch_labels = None
depends_on = None


def _has_phone_column() -> bool:
    columns = sa.inspect(op.get_bind()).get_columns("users")
    return any(column["name"] == "phone" for column in columns)


def upgrade() -> None:
    """Add phone; an existing column counts as already migrated."""

    if _has_phone_column():
        return
    op.add_column("users", sa.Column("phone", sa.String(20), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("users") as batch_op:
        batch_op.drop_column("phone")
