"""Pydantic models for records returned by state operations and broadcasts.

ORM rows never leave a guarded block; they are converted to these
models first, which are also the HTTP response bodies.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from .enums import EntityType, ThresholdHit, TrackerType


class Campaign(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    fear_level: int = 0
    allow_massive_damage: bool = False
    created_at: datetime


class CampaignSettings(BaseModel):
    """Per-campaign table rules."""
    model_config = ConfigDict(from_attributes=True)

    allow_massive_damage: bool = False


class CampaignNote(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    title: str | None = None
    content: str = ""
    created_at: datetime
    updated_at: datetime


# ── Entities ───────────────────────────────────────────────────────────

class DamageThresholds(BaseModel):
    minor: int
    major: int
    severe: int


class Entity(BaseModel):
    id: str
    campaign_id: str
    name: str
    hp_current: int
    hp_max: int
    stress_current: int = 0
    stress_max: int = 0
    thresholds: DamageThresholds
    visible_to_players: bool = False
    entity_type: EntityType = EntityType.ADVERSARY

    @classmethod
    def from_row(cls, row) -> "Entity":
        return cls(
            id=row.id,
            campaign_id=row.campaign_id,
            name=row.name,
            hp_current=row.hp_current,
            hp_max=row.hp_max,
            stress_current=row.stress_current,
            stress_max=row.stress_max,
            thresholds=DamageThresholds(
                minor=row.threshold_minor,
                major=row.threshold_major,
                severe=row.threshold_severe,
            ),
            visible_to_players=row.visible_to_players,
            entity_type=EntityType(row.entity_type),
        )


class DamageResult(BaseModel):
    """Outcome of apply_damage."""
    entity: Entity
    damage_dealt: int
    threshold_hit: ThresholdHit | None = None


class StressResult(BaseModel):
    """Outcome of adjust_stress: net stress change and HP lost to overflow."""
    entity: Entity
    stress_applied: int
    hp_overflow_damage: int


# ── Countdown Trackers ─────────────────────────────────────────────────

class CountdownTracker(BaseModel):
    id: str
    campaign_id: str
    name: str
    current: int
    max: int
    visible_to_players: bool = False
    hide_name_from_players: bool = False
    tracker_type: TrackerType = TrackerType.SIMPLE
    tick_labels: dict[int, str] | None = None

    @model_serializer(mode="wrap")
    def _omit_missing_tick_labels(self, handler):
        # Simple trackers carry no tick_labels key at all
        data = handler(self)
        if self.tick_labels is None:
            data.pop("tick_labels", None)
        return data

    @classmethod
    def from_row(cls, row) -> "CountdownTracker":
        labels = None
        if row.tracker_type == TrackerType.COMPLEX:
            labels = {label.tick: label.label for label in row.tick_labels}
        return cls(
            id=row.id,
            campaign_id=row.campaign_id,
            name=row.name,
            current=row.current,
            max=row.max,
            visible_to_players=row.visible_to_players,
            hide_name_from_players=row.hide_name_from_players,
            tracker_type=TrackerType(row.tracker_type),
            tick_labels=labels,
        )


# ── Dice ───────────────────────────────────────────────────────────────

class DiceRoll(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    notation: str
    dice_data: Any = None
    modifier: int = 0
    total: int
    is_crit: bool = False
    is_fumble: bool = False
    shared_with_players: bool = False
    rolled_at: datetime


class DiceRollsByDate(BaseModel):
    """Rolls from one calendar day (YYYY-MM-DD), newest first."""
    date: str
    rolls: list[DiceRoll]


# ── Player Characters ──────────────────────────────────────────────────

class PlayerCharacter(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    campaign_id: str
    name: str
    ancestry: str | None = None
    community: str | None = None
    class_: str | None = Field(default=None, alias="class")
    subclass: str | None = None
    domain: str | None = None
    level: int = 1
    attr_agility: int = 0
    attr_strength: int = 0
    attr_finesse: int = 0
    attr_instinct: int = 0
    attr_presence: int = 0
    attr_knowledge: int = 0
    hp_current: int
    hp_max: int
    threshold_minor: int
    threshold_major: int
    threshold_severe: int
    armor_current: int = 0
    armor_max: int = 0
    evasion: int = 0
    hope: int = 0
    stress_current: int = 0
    stress_max: int
    experiences: list[Any] = Field(default_factory=list)
    background: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class CreatePlayerCharacter(BaseModel):
    """Fields accepted when creating a character; everything but name has a default."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    ancestry: str | None = None
    community: str | None = None
    class_: str | None = Field(default=None, alias="class")
    subclass: str | None = None
    domain: str | None = None
    level: int = 1
    attr_agility: int = 0
    attr_strength: int = 0
    attr_finesse: int = 0
    attr_instinct: int = 0
    attr_presence: int = 0
    attr_knowledge: int = 0
    hp_max: int = Field(default=6, ge=0)
    threshold_minor: int = 1
    threshold_major: int = 6
    threshold_severe: int = 11
    armor_max: int = Field(default=0, ge=0)
    evasion: int = 0
    hope: int = Field(default=2, ge=0)
    stress_max: int = Field(default=6, ge=0)
    experiences: list[Any] = Field(default_factory=list)
    background: str | None = None
    notes: str | None = None


class UpdatePlayerCharacter(BaseModel):
    """Partial update: only fields explicitly present are applied."""
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    ancestry: str | None = None
    community: str | None = None
    class_: str | None = Field(default=None, alias="class")
    subclass: str | None = None
    domain: str | None = None
    level: int | None = None
    attr_agility: int | None = None
    attr_strength: int | None = None
    attr_finesse: int | None = None
    attr_instinct: int | None = None
    attr_presence: int | None = None
    attr_knowledge: int | None = None
    hp_current: int | None = None
    hp_max: int | None = None
    threshold_minor: int | None = None
    threshold_major: int | None = None
    threshold_severe: int | None = None
    armor_current: int | None = None
    armor_max: int | None = None
    evasion: int | None = None
    hope: int | None = None
    stress_current: int | None = None
    stress_max: int | None = None
    experiences: list[Any] | None = None
    background: str | None = None
    notes: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the caller supplied, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


def dump(model: BaseModel) -> dict[str, Any]:
    """JSON-compatible dict used as a broadcast payload."""
    return model.model_dump(mode="json", by_alias=True)
