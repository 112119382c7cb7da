"""Create effects table.

Revision ID: 001_create_effects
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_create_effects"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "effects",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.String(200), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("image", sa.String(500), nullable=False, server_default=""),
        sa.Column("seller", sa.Uuid, nullable=True),
        sa.Column("minimum_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="InStock"),
        sa.Column("appraisal_id", sa.Uuid, nullable=True),
        sa.Column("buyer", sa.Uuid, nullable=True),
        sa.Column("sold_for", sa.Numeric(12, 2), nullable=True),
        sa.CheckConstraint(
            "status IN ('InStock', 'OnAuction', 'Sold')",
            name="ck_effects_status",
        ),
    )
    op.create_index("ix_effects_status", "effects", ["status"])
    op.create_index("ix_effects_seller", "effects", ["seller"])


def downgrade() -> None:
    op.drop_index("ix_effects_seller", table_name="effects")
    op.drop_index("ix_effects_status", table_name="effects")
    op.drop_table("effects")
