"""global scope: entities, countdown trackers, tick labels, app state

Revision ID: 001
Revises:
Create Date: 2025-01-12
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "entities",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("hp_current", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hp_max", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("threshold_minor", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("threshold_major", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("threshold_severe", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("visible_to_players", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "countdown_trackers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("current", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("visible_to_players", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("tracker_type", sa.String(20), nullable=False, server_default="simple"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "tick_labels",
        sa.Column(
            "tracker_id",
            sa.String(36),
            sa.ForeignKey("countdown_trackers.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("tick", sa.Integer(), primary_key=True),
        sa.Column("label", sa.Text(), nullable=False),
    )

    # Global key/value state (fear level lived here before campaigns existed)
    op.create_table(
        "app_state",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("app_state")
    op.drop_table("tick_labels")
    op.drop_table("countdown_trackers")
    op.drop_table("entities")
