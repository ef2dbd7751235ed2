"""player characters, entity stress and type, tracker name hiding, campaign settings

Revision ID: 004
Revises: 003
Create Date: 2025-06-07
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "player_characters",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "campaign_id",
            sa.String(36),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=False,
        ),
        # Identity
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("ancestry", sa.String(100), nullable=True),
        sa.Column("community", sa.String(100), nullable=True),
        sa.Column("class", sa.String(100), nullable=True),
        sa.Column("subclass", sa.String(100), nullable=True),
        sa.Column("domain", sa.String(100), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        # Attributes
        sa.Column("attr_agility", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attr_strength", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attr_finesse", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attr_instinct", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attr_presence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attr_knowledge", sa.Integer(), nullable=False, server_default="0"),
        # Health and defense
        sa.Column("hp_current", sa.Integer(), nullable=False, server_default="6"),
        sa.Column("hp_max", sa.Integer(), nullable=False, server_default="6"),
        sa.Column("threshold_minor", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("threshold_major", sa.Integer(), nullable=False, server_default="6"),
        sa.Column("threshold_severe", sa.Integer(), nullable=False, server_default="11"),
        sa.Column("armor_current", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("armor_max", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("evasion", sa.Integer(), nullable=False, server_default="0"),
        # Resources
        sa.Column("hope", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("stress_current", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("stress_max", sa.Integer(), nullable=False, server_default="6"),
        # Narrative
        sa.Column("experiences", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("background", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_player_characters_campaign_id", "player_characters", ["campaign_id"])

    # Stress; existing entities fall back to the default cap (stress_max 0)
    op.add_column("entities", sa.Column("stress_current", sa.Integer(), nullable=False, server_default="0"))
    op.add_column("entities", sa.Column("stress_max", sa.Integer(), nullable=False, server_default="0"))
    op.add_column(
        "entities",
        sa.Column("entity_type", sa.String(20), nullable=False, server_default="adversary"),
    )

    op.add_column(
        "countdown_trackers",
        sa.Column("hide_name_from_players", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.add_column(
        "campaigns",
        sa.Column("allow_massive_damage", sa.Boolean(), nullable=False, server_default=sa.false()),
    )


def downgrade() -> None:
    with op.batch_alter_table("campaigns") as batch_op:
        batch_op.drop_column("allow_massive_damage")
    with op.batch_alter_table("countdown_trackers") as batch_op:
        batch_op.drop_column("hide_name_from_players")
    with op.batch_alter_table("entities") as batch_op:
        batch_op.drop_column("entity_type")
        batch_op.drop_column("stress_max")
        batch_op.drop_column("stress_current")
    op.drop_index("ix_player_characters_campaign_id", table_name="player_characters")
    op.drop_table("player_characters")
