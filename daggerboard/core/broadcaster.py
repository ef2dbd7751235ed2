"""Change broadcaster: republish refreshed state after each mutation.

Called from inside the mutating command's guarded block. Each method
flushes the session, re-reads the affected collection in full and queues
the event to be emitted once the block commits, while the guard is still
held. Observers therefore see events in commit order, and every window
converges on the same state without diffing. A delivery failure raises
EmitError; the mutation stays committed.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session as SQLAlchemySession

from .. import schemas
from ..db import queries
from ..db.guard import after_commit
from ..enums import EventType
from .events import EventBus

logger = logging.getLogger(__name__)

DEFAULT_DICE_LIMIT = 100


class Broadcaster:
    def __init__(self, bus: EventBus, dice_limit: int = DEFAULT_DICE_LIMIT):
        self._bus = bus
        self._dice_limit = dice_limit

    @property
    def bus(self) -> EventBus:
        return self._bus

    def _queue(self, db: SQLAlchemySession, event_type: EventType, **payload: Any) -> None:
        def emit():
            logger.debug(f"Broadcasting {event_type.value}")
            self._bus.emit(event_type, **payload)

        after_commit(db, emit)

    # ── Campaigns ─────────────────────────────────────────────────────

    def campaigns_updated(self, db: SQLAlchemySession) -> None:
        db.flush()
        campaigns = queries.list_campaigns(db)
        self._queue(db, EventType.CAMPAIGNS_UPDATED, campaigns=[schemas.dump(c) for c in campaigns])

    def current_campaign_changed(self, db: SQLAlchemySession, campaign: schemas.Campaign) -> None:
        self._queue(db, EventType.CURRENT_CAMPAIGN_CHANGED, campaign=schemas.dump(campaign))

    def campaign_switched(self, db: SQLAlchemySession, campaign_id: str) -> None:
        self._queue(db, EventType.CAMPAIGN_SWITCHED, campaign_id=campaign_id)

    def campaign_settings_updated(
        self, db: SQLAlchemySession, campaign_id: str, settings: schemas.CampaignSettings
    ) -> None:
        self._queue(
            db,
            EventType.CAMPAIGN_SETTINGS_UPDATED,
            campaign_id=campaign_id,
            settings=schemas.dump(settings),
        )

    # ── Notes ─────────────────────────────────────────────────────────

    def note_created(self, db: SQLAlchemySession, note: schemas.CampaignNote) -> None:
        self._queue(db, EventType.NOTE_CREATED, note=schemas.dump(note))

    def note_updated(self, db: SQLAlchemySession, note: schemas.CampaignNote) -> None:
        self._queue(db, EventType.NOTE_UPDATED, note=schemas.dump(note))

    def note_deleted(self, db: SQLAlchemySession, note_id: str, campaign_id: str) -> None:
        self._queue(db, EventType.NOTE_DELETED, note_id=note_id, campaign_id=campaign_id)

    def notes_updated(self, db: SQLAlchemySession, campaign_id: str) -> None:
        db.flush()
        notes = queries.list_notes(db, campaign_id)
        self._queue(
            db,
            EventType.NOTES_LIST_UPDATED,
            campaign_id=campaign_id,
            notes=[schemas.dump(n) for n in notes],
        )

    # ── Fear / trackers / entities ────────────────────────────────────

    def fear_level_updated(self, db: SQLAlchemySession, level: int, campaign_id: str) -> None:
        self._queue(db, EventType.FEAR_LEVEL_UPDATED, level=level, campaign_id=campaign_id)

    def trackers_updated(self, db: SQLAlchemySession, campaign_id: str) -> None:
        db.flush()
        trackers = queries.list_trackers(db, campaign_id)
        self._queue(
            db,
            EventType.TRACKERS_UPDATED,
            trackers=[schemas.dump(t) for t in trackers],
            campaign_id=campaign_id,
        )

    def entities_updated(self, db: SQLAlchemySession, campaign_id: str) -> None:
        db.flush()
        entities = queries.list_entities(db, campaign_id)
        self._queue(
            db,
            EventType.ENTITIES_UPDATED,
            entities=[schemas.dump(e) for e in entities],
            campaign_id=campaign_id,
        )

    # ── Dice ──────────────────────────────────────────────────────────

    def dice_roll_saved(self, db: SQLAlchemySession, roll: schemas.DiceRoll) -> None:
        self._queue(db, EventType.DICE_ROLL_SAVED, roll=schemas.dump(roll))

    def dice_rolls_updated(self, db: SQLAlchemySession, campaign_id: str) -> None:
        db.flush()
        rolls = queries.list_dice_rolls(db, campaign_id, self._dice_limit)
        self._queue(
            db,
            EventType.DICE_ROLLS_UPDATED,
            campaign_id=campaign_id,
            rolls=[schemas.dump(r) for r in rolls],
        )

    # ── Player characters ─────────────────────────────────────────────

    def player_characters_updated(self, db: SQLAlchemySession, campaign_id: str) -> None:
        db.flush()
        characters = queries.list_player_characters(db, campaign_id)
        self._queue(
            db,
            EventType.PLAYER_CHARACTERS_UPDATED,
            campaign_id=campaign_id,
            characters=[schemas.dump(c) for c in characters],
        )

    def player_character_updated(self, db: SQLAlchemySession, character: schemas.PlayerCharacter) -> None:
        self._queue(db, EventType.PLAYER_CHARACTER_UPDATED, character=schemas.dump(character))
