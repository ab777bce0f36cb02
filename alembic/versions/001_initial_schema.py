"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Warpplates table
    op.create_table(
        "Warpplates",
        sa.Column("WorldId", sa.Integer, primary_key=True),
        sa.Column("Name", sa.String(255), primary_key=True),
        sa.Column("X", sa.Integer, nullable=False),
        sa.Column("Y", sa.Integer, nullable=False),
        sa.Column("Width", sa.Integer, nullable=False),
        sa.Column("Height", sa.Integer, nullable=False),
        sa.Column("Tag", sa.String(255), nullable=False),
        sa.Column("Delay", sa.Integer, nullable=False, server_default="0"),
        sa.Column("Destination", sa.String(255), nullable=True),
        sa.Column("IsPublic", sa.Boolean, nullable=False, server_default=sa.true()),
    )

    # Allow-lists of non-public warpplates
    op.create_table(
        "WarpplateIsAllowed",
        sa.Column("WorldId", sa.Integer, primary_key=True),
        sa.Column("Warpplate", sa.String(255), primary_key=True),
        sa.Column("UserId", sa.Integer, primary_key=True),
    )


def downgrade() -> None:
    op.drop_table("WarpplateIsAllowed")
    op.drop_table("Warpplates")
