"""Read helpers shared by the mixins and the broadcaster.

All functions take an open session (normally the one yielded by
StoreGuard.locked()) and return pydantic records, never ORM rows.
"""

from sqlalchemy.orm import Session as SQLAlchemySession
from sqlalchemy.orm import selectinload

from .. import schemas
from ..enums import AppStateKey
from .models import (
    AppState,
    Campaign,
    CampaignNote,
    CountdownTracker,
    DiceRoll,
    Entity,
    PlayerCharacter,
)


def current_campaign_id(db: SQLAlchemySession) -> str | None:
    row = (
        db.query(AppState)
        .filter(AppState.key == AppStateKey.CURRENT_CAMPAIGN, AppState.campaign_id.is_(None))
        .first()
    )
    return row.value if row and row.value else None


def list_campaigns(db: SQLAlchemySession) -> list[schemas.Campaign]:
    rows = db.query(Campaign).order_by(Campaign.created_at.desc(), Campaign.id).all()
    return [schemas.Campaign.model_validate(row) for row in rows]


def list_entities(
    db: SQLAlchemySession, campaign_id: str, visible_only: bool = False
) -> list[schemas.Entity]:
    query = db.query(Entity).filter(Entity.campaign_id == campaign_id)
    if visible_only:
        query = query.filter(Entity.visible_to_players.is_(True))
    rows = query.order_by(Entity.created_at, Entity.id).all()
    return [schemas.Entity.from_row(row) for row in rows]


def list_trackers(
    db: SQLAlchemySession, campaign_id: str, visible_only: bool = False
) -> list[schemas.CountdownTracker]:
    query = (
        db.query(CountdownTracker)
        .options(selectinload(CountdownTracker.tick_labels))
        .filter(CountdownTracker.campaign_id == campaign_id)
    )
    if visible_only:
        query = query.filter(CountdownTracker.visible_to_players.is_(True))
    rows = query.order_by(CountdownTracker.created_at, CountdownTracker.id).all()
    return [schemas.CountdownTracker.from_row(row) for row in rows]


def list_notes(db: SQLAlchemySession, campaign_id: str) -> list[schemas.CampaignNote]:
    rows = (
        db.query(CampaignNote)
        .filter(CampaignNote.campaign_id == campaign_id)
        .order_by(CampaignNote.updated_at.desc(), CampaignNote.id)
        .all()
    )
    return [schemas.CampaignNote.model_validate(row) for row in rows]


def list_dice_rolls(db: SQLAlchemySession, campaign_id: str, limit: int) -> list[schemas.DiceRoll]:
    rows = (
        db.query(DiceRoll)
        .filter(DiceRoll.campaign_id == campaign_id)
        .order_by(DiceRoll.rolled_at.desc(), DiceRoll.id)
        .limit(limit)
        .all()
    )
    return [schemas.DiceRoll.model_validate(row) for row in rows]


def list_player_characters(db: SQLAlchemySession, campaign_id: str) -> list[schemas.PlayerCharacter]:
    rows = (
        db.query(PlayerCharacter)
        .filter(PlayerCharacter.campaign_id == campaign_id)
        .order_by(PlayerCharacter.name, PlayerCharacter.id)
        .all()
    )
    return [schemas.PlayerCharacter.model_validate(row) for row in rows]
