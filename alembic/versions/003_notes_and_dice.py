"""campaign notes and dice roll history

Revision ID: 003
Revises: 002
Create Date: 2025-04-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "campaign_notes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "campaign_id",
            sa.String(36),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_campaign_notes_campaign_id", "campaign_notes", ["campaign_id"])

    op.create_table(
        "dice_rolls",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "campaign_id",
            sa.String(36),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("notation", sa.String(100), nullable=False),
        sa.Column("dice_data", sa.JSON(), nullable=True),
        sa.Column("modifier", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("is_crit", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_fumble", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("shared_with_players", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rolled_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_dice_rolls_campaign_id", "dice_rolls", ["campaign_id"])
    op.create_index("ix_dice_rolls_rolled_at", "dice_rolls", ["rolled_at"])


def downgrade() -> None:
    op.drop_index("ix_dice_rolls_rolled_at", table_name="dice_rolls")
    op.drop_index("ix_dice_rolls_campaign_id", table_name="dice_rolls")
    op.drop_table("dice_rolls")
    op.drop_index("ix_campaign_notes_campaign_id", table_name="campaign_notes")
    op.drop_table("campaign_notes")
