"""Bios table

Revision ID: 001
Revises: None
Create Date: 2025-03-01

Creates the proposal_generator schema and the bios table read by
GET /api/bios and the proposal team section.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = "proposal_generator"


def upgrade() -> None:
    """Create the bios table."""

    op.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}")

    op.create_table(
        "bios",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("industry_experience", sa.Text(), nullable=False, server_default=""),
        sa.Column("accreditations", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        schema=SCHEMA,
    )
    op.create_index("idx_bios_name", "bios", ["name"], schema=SCHEMA)

    # Automatic updated_at trigger
    op.execute(f"""
        CREATE OR REPLACE FUNCTION {SCHEMA}.update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ language 'plpgsql';
    """)
    op.execute(f"""
        CREATE TRIGGER update_bios_updated_at
            BEFORE UPDATE ON {SCHEMA}.bios
            FOR EACH ROW
            EXECUTE FUNCTION {SCHEMA}.update_updated_at_column();
    """)


def downgrade() -> None:
    """Drop the bios table."""
    op.execute(f"DROP TRIGGER IF EXISTS update_bios_updated_at ON {SCHEMA}.bios")
    op.execute(f"DROP FUNCTION IF EXISTS {SCHEMA}.update_updated_at_column()")
    op.drop_index("idx_bios_name", table_name="bios", schema=SCHEMA)
    op.drop_table("bios", schema=SCHEMA)
