"""Entity mixin: NPCs and adversaries with HP, stress and damage thresholds.

Split from state_manager.py for maintainability.
"""

import logging

from sqlalchemy.orm import Session as SQLAlchemySession

from .. import schemas
from ..core import rules
from ..enums import EntityType
from ..errors import EntityNotFound, ValidationFailed
from . import queries
from .models import Entity, new_id

logger = logging.getLogger(__name__)


class EntityMixin:
    """Entity creation and mutation. Every mutation rebroadcasts the entity list."""

    @staticmethod
    def _get_entity_row(db: SQLAlchemySession, entity_id: str) -> Entity:
        entity = db.get(Entity, entity_id)
        if entity is None:
            raise EntityNotFound(entity_id)
        return entity

    def _mutate_entity(self, entity_id: str, mutate) -> schemas.Entity:
        """Apply mutate(row) under the guard, then broadcast the entity list."""
        with self._guard.locked() as db:
            self._require_campaign_id(db)
            row = self._get_entity_row(db, entity_id)
            mutate(row)
            entity = schemas.Entity.from_row(row)
            self._broadcaster.entities_updated(db, entity.campaign_id)

        return entity

    @staticmethod
    def _warn_unordered(name: str, thresholds: schemas.DamageThresholds) -> None:
        if not rules.thresholds_ordered(thresholds.minor, thresholds.major, thresholds.severe):
            logger.warning(
                f"Thresholds for '{name}' are not ascending: "
                f"{thresholds.minor}/{thresholds.major}/{thresholds.severe}"
            )

    # ── Create / read / delete ────────────────────────────────────────

    def create_entity(
        self,
        name: str,
        hp_max: int,
        thresholds: schemas.DamageThresholds,
        entity_type: EntityType = EntityType.ADVERSARY,
        stress_max: int | None = None,
    ) -> schemas.Entity:
        """Create an entity at full HP with no stress, hidden from players."""
        if hp_max < 0:
            raise ValidationFailed(f"hp_max must be non-negative (got {hp_max})")
        stress_cap = rules.clamp(stress_max or 0, 0, rules.DEFAULT_STRESS_CAP)
        self._warn_unordered(name, thresholds)

        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            row = Entity(
                id=new_id(),
                campaign_id=campaign_id,
                name=name,
                hp_current=hp_max,
                hp_max=hp_max,
                stress_current=0,
                stress_max=stress_cap,
                threshold_minor=thresholds.minor,
                threshold_major=thresholds.major,
                threshold_severe=thresholds.severe,
                visible_to_players=False,
                entity_type=EntityType(entity_type).value,
            )
            db.add(row)
            db.flush()
            entity = schemas.Entity.from_row(row)
            self._broadcaster.entities_updated(db, campaign_id)

        logger.debug(f"Created entity '{name}' ({entity.id})")
        return entity

    def get_entities(self, visible_only: bool = False) -> list[schemas.Entity]:
        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            return queries.list_entities(db, campaign_id, visible_only)

    def get_entity(self, entity_id: str) -> schemas.Entity:
        with self._guard.locked() as db:
            return schemas.Entity.from_row(self._get_entity_row(db, entity_id))

    def delete_entity(self, entity_id: str) -> None:
        with self._guard.locked() as db:
            self._require_campaign_id(db)
            row = self._get_entity_row(db, entity_id)
            campaign_id = row.campaign_id
            db.delete(row)
            self._broadcaster.entities_updated(db, campaign_id)

    # ── HP / damage / stress ──────────────────────────────────────────

    def update_entity_hp(self, entity_id: str, amount: int) -> schemas.Entity:
        """Add amount (may be negative) to HP, clamped to [0, hp_max]."""
        def mutate(row):
            row.hp_current = rules.clamp(row.hp_current + amount, 0, row.hp_max)

        return self._mutate_entity(entity_id, mutate)

    def set_entity_hp(self, entity_id: str, value: int) -> schemas.Entity:
        def mutate(row):
            row.hp_current = rules.clamp(value, 0, row.hp_max)

        return self._mutate_entity(entity_id, mutate)

    def apply_damage(self, entity_id: str, damage: int) -> schemas.DamageResult:
        """Resolve a hit against the entity's thresholds.

        Massive (>= 2x severe) costs 4 HP, severe 3, major 2, minor 1,
        anything below minor nothing. Loss never exceeds remaining HP.
        """
        outcome = {}

        def mutate(row):
            hit = rules.classify_damage(
                damage, row.threshold_minor, row.threshold_major, row.threshold_severe
            )
            loss = rules.damage_hp_loss(hit, row.hp_current)
            row.hp_current = rules.clamp(row.hp_current - loss, 0, row.hp_max)
            outcome.update(hit=hit, loss=loss)

        entity = self._mutate_entity(entity_id, mutate)
        logger.debug(f"{entity.name} took {damage} damage: {outcome['hit']} (-{outcome['loss']} HP)")
        return schemas.DamageResult(
            entity=entity,
            damage_dealt=outcome["loss"],
            threshold_hit=outcome["hit"],
        )

    def adjust_entity_stress(self, entity_id: str, amount: int) -> schemas.StressResult:
        """Mark or clear stress; stress past the cap overflows into HP loss."""
        outcome = {}

        def mutate(row):
            result = rules.apply_stress(row.stress_current, row.stress_max, row.hp_current, amount)
            row.stress_current = result.stress_current
            row.hp_current = result.hp_current
            outcome["result"] = result

        entity = self._mutate_entity(entity_id, mutate)
        result = outcome["result"]
        return schemas.StressResult(
            entity=entity,
            stress_applied=result.stress_applied,
            hp_overflow_damage=result.hp_overflow_damage,
        )

    # ── Field replacement ─────────────────────────────────────────────

    def update_entity_thresholds(
        self, entity_id: str, thresholds: schemas.DamageThresholds
    ) -> schemas.Entity:
        def mutate(row):
            self._warn_unordered(row.name, thresholds)
            row.threshold_minor = thresholds.minor
            row.threshold_major = thresholds.major
            row.threshold_severe = thresholds.severe

        return self._mutate_entity(entity_id, mutate)

    def update_entity_name(self, entity_id: str, name: str) -> schemas.Entity:
        def mutate(row):
            row.name = name

        return self._mutate_entity(entity_id, mutate)

    def toggle_entity_visibility(self, entity_id: str, visible: bool) -> schemas.Entity:
        def mutate(row):
            row.visible_to_players = visible

        return self._mutate_entity(entity_id, mutate)

    def set_all_entities_visibility(self, visible: bool) -> list[schemas.Entity]:
        """Show or hide every entity in the current campaign."""
        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            rows = db.query(Entity).filter(Entity.campaign_id == campaign_id).all()
            for row in rows:
                row.visible_to_players = visible
            db.flush()
            entities = queries.list_entities(db, campaign_id)
            self._broadcaster.entities_updated(db, campaign_id)

        return entities
