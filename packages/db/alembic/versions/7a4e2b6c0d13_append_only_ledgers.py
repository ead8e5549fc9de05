# This project was developed with assistance from AI tools.
"""append-only triggers on audit_events and lock_history

Revision ID: 7a4e2b6c0d13
Revises: 3c1f8a2d9e01
Create Date: 2026-10-19 09:40:05.772150
"""

from alembic import op

revision = "7a4e2b6c0d13"
down_revision = "3c1f8a2d9e01"
branch_labels = None
depends_on = None

_TABLES = ("audit_events", "lock_history")

TRIGGER_FUNCTION = """
CREATE OR REPLACE FUNCTION prevent_ledger_mutation()
RETURNS TRIGGER AS $$
BEGIN
    RAISE EXCEPTION '% is append-only: % denied for row %', TG_TABLE_NAME, TG_OP, OLD.id;
    RETURN NULL;
END;
$$ LANGUAGE plpgsql;
"""


def upgrade() -> None:
    op.execute(TRIGGER_FUNCTION)
    for table in _TABLES:
        op.execute(
            f"""
            CREATE TRIGGER {table}_no_update
                BEFORE UPDATE ON {table}
                FOR EACH ROW
                EXECUTE FUNCTION prevent_ledger_mutation();
            """
        )
        op.execute(
            f"""
            CREATE TRIGGER {table}_no_delete
                BEFORE DELETE ON {table}
                FOR EACH ROW
                EXECUTE FUNCTION prevent_ledger_mutation();
            """
        )


def downgrade() -> None:
    for table in _TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS {table}_no_delete ON {table}")
        op.execute(f"DROP TRIGGER IF EXISTS {table}_no_update ON {table}")
    op.execute("DROP FUNCTION IF EXISTS prevent_ledger_mutation()")
