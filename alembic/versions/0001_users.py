"""Create users table for account credentials."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_users"
down_revision = None
branch_labels = None
depends_on = None


def _updated_at_default() -> sa.TextClause:
    if op.get_bind().dialect.name == "mysql":
        return sa.text("CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP")
    return sa.text("CURRENT_TIMESTAMP")


def upgrade() -> None:
    """Create users, or adopt the table a legacy install already created."""

    inspector = sa.inspect(op.get_bind())
    if inspector.has_table("users"):
        columns = {column["name"] for column in inspector.get_columns("users")}
        if "password" in columns and "password_hash" not in columns:
            with op.batch_alter_table("users") as batch_op:
                batch_op.alter_column(
                    "password",
                    new_column_name="password_hash",
                    existing_type=sa.String(255),
                    existing_nullable=False,
                )
        return

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=_updated_at_default(),
        ),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )


def downgrade() -> None:
    op.drop_table("users")
