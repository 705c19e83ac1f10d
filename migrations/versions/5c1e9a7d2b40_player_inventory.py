"""player inventory

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-18 10:40:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e9a7d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the fishing inventory tables."""
    op.create_table(
        "player_inventory",
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("bait", sa.Integer(), nullable=False),
        sa.Column("fishing_rods", sa.Integer(), nullable=False),
        sa.Column("money", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("address"),
    )
    op.create_table(
        "inventory_item",
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("item_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("item_type", sa.String(length=32), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["address"], ["player_inventory.address"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("address", "item_id"),
    )


def downgrade() -> None:
    """Drop the fishing inventory tables."""
    op.drop_table("inventory_item")
    op.drop_table("player_inventory")
