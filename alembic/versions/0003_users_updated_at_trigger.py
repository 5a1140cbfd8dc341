"""Refresh users.updated_at on every row update."""

from __future__ import annotations

from alembic import op

revision = "0003_users_updated_at_trigger"
down_revision = "0002_users_phone"
branch_labels = None
depends_on = None

TRIGGER_NAME = "trg_users_updated_at"


def upgrade() -> None:
    """Install the trigger; MySQL columns carry ON UPDATE CURRENT_TIMESTAMP instead."""

    dialect = op.get_bind().dialect.name
    if dialect == "sqlite":
        # Guarded on an unchanged value so explicit updated_at writes are kept.
        op.execute(
            f"CREATE TRIGGER IF NOT EXISTS {TRIGGER_NAME} "
            "AFTER UPDATE ON users FOR EACH ROW "
            "WHEN NEW.updated_at IS OLD.updated_at "
            "BEGIN "
            "UPDATE users SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id; "
            "END"
        )
    elif dialect == "postgresql":
        op.execute(
            "CREATE OR REPLACE FUNCTION set_users_updated_at() RETURNS trigger AS $$ "
            "BEGIN NEW.updated_at = CURRENT_TIMESTAMP; RETURN NEW; END; "
            "$$ LANGUAGE plpgsql"
        )
        op.execute(f"DROP TRIGGER IF EXISTS {TRIGGER_NAME} ON users")
        op.execute(
            f"CREATE TRIGGER {TRIGGER_NAME} BEFORE UPDATE ON users "
            "FOR EACH ROW EXECUTE FUNCTION set_users_updated_at()"
        )


def downgrade() -> None:
    dialect = op.get_bind().dialect.name
    if dialect == "sqlite":
        op.execute(f"DROP TRIGGER IF EXISTS {TRIGGER_NAME}")
    elif dialect == "postgresql":
        op.execute(f"DROP TRIGGER IF EXISTS {TRIGGER_NAME} ON users")
        op.execute("DROP FUNCTION IF EXISTS set_users_updated_at()")
