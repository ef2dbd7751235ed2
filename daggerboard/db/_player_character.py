"""Player character mixin: character sheets and their resource adjusters.

Split from state_manager.py for maintainability.
"""

import logging

from sqlalchemy.orm import Session as SQLAlchemySession

from .. import schemas
from ..core import rules
from ..errors import EntityNotFound
from . import queries
from .models import PlayerCharacter, new_id, utcnow

logger = logging.getLogger(__name__)

# Columns that may not be cleared by an update
_REQUIRED_FIELDS = frozenset(
    column.key for column in PlayerCharacter.__table__.columns if not column.nullable
)


class PlayerCharacterMixin:
    """Player character CRUD and clamped adjusters."""

    @staticmethod
    def _get_character_row(db: SQLAlchemySession, character_id: str) -> PlayerCharacter:
        character = db.get(PlayerCharacter, character_id)
        if character is None:
            raise EntityNotFound(f"Player character {character_id}")
        return character

    def _mutate_character(self, character_id: str, mutate) -> schemas.PlayerCharacter:
        with self._guard.locked() as db:
            row = self._get_character_row(db, character_id)
            mutate(row)
            row.updated_at = utcnow()
            character = schemas.PlayerCharacter.model_validate(row)
            self._broadcaster.player_characters_updated(db, character.campaign_id)
            self._broadcaster.player_character_updated(db, character)

        return character

    # ── CRUD ──────────────────────────────────────────────────────────

    def create_player_character(
        self, data: schemas.CreatePlayerCharacter, campaign_id: str | None = None
    ) -> schemas.PlayerCharacter:
        """Create a character at full HP with no stress or marked armor."""
        with self._guard.locked() as db:
            campaign_id = self._resolve_campaign_id(db, campaign_id)
            now = utcnow()
            row = PlayerCharacter(
                id=new_id(),
                campaign_id=campaign_id,
                hp_current=data.hp_max,
                armor_current=0,
                stress_current=0,
                created_at=now,
                updated_at=now,
                **data.model_dump(),
            )
            db.add(row)
            db.flush()
            character = schemas.PlayerCharacter.model_validate(row)
            self._broadcaster.player_characters_updated(db, campaign_id)
            self._broadcaster.player_character_updated(db, character)

        logger.info(f"Created player character '{character.name}' ({character.id})")
        return character

    def get_player_characters(self, campaign_id: str | None = None) -> list[schemas.PlayerCharacter]:
        """Characters of a campaign, ordered by name."""
        with self._guard.locked() as db:
            campaign_id = self._resolve_campaign_id(db, campaign_id)
            return queries.list_player_characters(db, campaign_id)

    def get_player_character(self, character_id: str) -> schemas.PlayerCharacter:
        with self._guard.locked() as db:
            return schemas.PlayerCharacter.model_validate(self._get_character_row(db, character_id))

    def update_player_character(
        self, character_id: str, data: schemas.UpdatePlayerCharacter
    ) -> schemas.PlayerCharacter:
        """Apply only the fields present in data; everything else is left alone."""
        changes = data.changes()

        def mutate(row):
            for field_name, value in changes.items():
                if value is None and field_name in _REQUIRED_FIELDS:
                    continue
                setattr(row, field_name, value)

        return self._mutate_character(character_id, mutate)

    def delete_player_character(self, character_id: str) -> None:
        with self._guard.locked() as db:
            row = self._get_character_row(db, character_id)
            campaign_id = row.campaign_id
            db.delete(row)
            self._broadcaster.player_characters_updated(db, campaign_id)

    # ── Adjusters ─────────────────────────────────────────────────────

    def adjust_player_hp(self, character_id: str, amount: int) -> schemas.PlayerCharacter:
        def mutate(row):
            row.hp_current = max(0, row.hp_current + amount)

        return self._mutate_character(character_id, mutate)

    def adjust_player_hope(self, character_id: str, amount: int) -> schemas.PlayerCharacter:
        def mutate(row):
            row.hope = max(0, row.hope + amount)

        return self._mutate_character(character_id, mutate)

    def adjust_player_stress(self, character_id: str, amount: int) -> schemas.PlayerCharacter:
        def mutate(row):
            row.stress_current = rules.clamp(row.stress_current + amount, 0, row.stress_max)

        return self._mutate_character(character_id, mutate)

    def adjust_player_armor(self, character_id: str, amount: int) -> schemas.PlayerCharacter:
        def mutate(row):
            row.armor_current = rules.clamp(row.armor_current + amount, 0, row.armor_max)

        return self._mutate_character(character_id, mutate)
