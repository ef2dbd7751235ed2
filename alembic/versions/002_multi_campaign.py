"""multi-campaign scope

Adds the campaigns table and scopes entities and trackers to a campaign.
Rows from a single-scope install are adopted by a new "My Campaign",
which also takes over the global fear level and becomes current.

Revision ID: 002
Revises: 001
Create Date: 2025-03-02
"""
import uuid
from datetime import datetime, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_CAMPAIGN_NAME = "My Campaign"

campaigns = sa.table(
    "campaigns",
    sa.column("id", sa.String),
    sa.column("name", sa.String),
    sa.column("fear_level", sa.Integer),
    sa.column("created_at", sa.DateTime),
)

new_app_state = sa.table(
    "app_state",
    sa.column("key", sa.String),
    sa.column("campaign_id", sa.String),
    sa.column("value", sa.Text),
)


def _scope_table(table: str, default_campaign_id: str | None) -> None:
    with op.batch_alter_table(table) as batch_op:
        batch_op.add_column(sa.Column("campaign_id", sa.String(36), nullable=True))

    if default_campaign_id is not None:
        op.get_bind().execute(
            sa.text(f"UPDATE {table} SET campaign_id = :cid"),
            {"cid": default_campaign_id},
        )

    with op.batch_alter_table(table) as batch_op:
        batch_op.alter_column("campaign_id", existing_type=sa.String(36), nullable=False)
        batch_op.create_foreign_key(
            f"fk_{table}_campaign_id", "campaigns", ["campaign_id"], ["id"], ondelete="CASCADE"
        )
        batch_op.create_index(f"ix_{table}_campaign_id", ["campaign_id"])


def upgrade() -> None:
    bind = op.get_bind()

    op.create_table(
        "campaigns",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("fear_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
    )

    # ─── Adopt pre-campaign data ─────────────────────────────────────
    legacy_state = dict(bind.execute(sa.text("SELECT key, value FROM app_state")).fetchall())
    row_count = (
        bind.execute(sa.text("SELECT COUNT(*) FROM entities")).scalar()
        + bind.execute(sa.text("SELECT COUNT(*) FROM countdown_trackers")).scalar()
    )

    default_campaign_id = None
    if row_count or "fear_level" in legacy_state:
        try:
            fear_level = max(0, int(legacy_state.get("fear_level") or 0))
        except ValueError:
            fear_level = 0
        default_campaign_id = str(uuid.uuid4())
        op.bulk_insert(campaigns, [{
            "id": default_campaign_id,
            "name": DEFAULT_CAMPAIGN_NAME,
            "fear_level": fear_level,
            "created_at": datetime.now(timezone.utc).replace(tzinfo=None),
        }])

    _scope_table("entities", default_campaign_id)
    _scope_table("countdown_trackers", default_campaign_id)

    # ─── app_state: add campaign scope ───────────────────────────────
    op.rename_table("app_state", "app_state_legacy")
    op.create_table(
        "app_state",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column(
            "campaign_id",
            sa.String(36),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("value", sa.Text(), nullable=True),
        sa.UniqueConstraint("key", "campaign_id", name="uq_app_state_key_campaign"),
    )

    rows = [
        {"key": key, "campaign_id": None, "value": value}
        for key, value in legacy_state.items()
        if key != "fear_level"
    ]
    if default_campaign_id is not None:
        rows.append({"key": "current_campaign", "campaign_id": None, "value": default_campaign_id})
    if rows:
        op.bulk_insert(new_app_state, rows)

    op.drop_table("app_state_legacy")


def downgrade() -> None:
    bind = op.get_bind()
    current = bind.execute(sa.text(
        "SELECT value FROM app_state WHERE key = 'current_campaign' AND campaign_id IS NULL"
    )).scalar()
    fear_level = 0
    if current:
        fear_level = bind.execute(
            sa.text("SELECT fear_level FROM campaigns WHERE id = :cid"), {"cid": current}
        ).scalar() or 0
        # Only the current campaign survives a return to global scope
        bind.execute(sa.text("DELETE FROM tick_labels WHERE tracker_id IN "
                             "(SELECT id FROM countdown_trackers WHERE campaign_id != :cid)"), {"cid": current})
        bind.execute(sa.text("DELETE FROM entities WHERE campaign_id != :cid"), {"cid": current})
        bind.execute(sa.text("DELETE FROM countdown_trackers WHERE campaign_id != :cid"), {"cid": current})

    globals_ = bind.execute(sa.text(
        "SELECT key, value FROM app_state WHERE campaign_id IS NULL AND key != 'current_campaign'"
    )).fetchall()
    op.drop_table("app_state")
    op.create_table(
        "app_state",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text(), nullable=True),
    )
    legacy = sa.table("app_state", sa.column("key", sa.String), sa.column("value", sa.Text))
    op.bulk_insert(
        legacy,
        [{"key": key, "value": value} for key, value in globals_]
        + [{"key": "fear_level", "value": str(fear_level)}],
    )

    for table in ("countdown_trackers", "entities"):
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_index(f"ix_{table}_campaign_id")
            batch_op.drop_constraint(f"fk_{table}_campaign_id", type_="foreignkey")
            batch_op.drop_column("campaign_id")

    op.drop_table("campaigns")
