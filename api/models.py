"""Request bodies for the API routes."""

from typing import Any

from pydantic import BaseModel, Field

from daggerboard.enums import EntityType, TrackerType
from daggerboard.schemas import DamageThresholds


class NameRequest(BaseModel):
    name: str = Field(min_length=1)


class SwitchCampaignRequest(BaseModel):
    campaign_id: str


class AmountRequest(BaseModel):
    """Signed delta."""
    amount: int


class ValueRequest(BaseModel):
    """Absolute value."""
    value: int


class VisibilityRequest(BaseModel):
    visible: bool


class NameVisibilityRequest(BaseModel):
    hide_name: bool


class FearLevelResponse(BaseModel):
    level: int


class CreateNoteRequest(BaseModel):
    title: str | None = None


class UpdateNoteRequest(BaseModel):
    title: str | None = None
    content: str = ""


class CreateTrackerRequest(BaseModel):
    name: str = Field(min_length=1)
    max: int = Field(ge=0)
    tracker_type: TrackerType = TrackerType.SIMPLE
    visible_to_players: bool = False
    hide_name_from_players: bool = False


class TickLabelRequest(BaseModel):
    label: str


class CreateEntityRequest(BaseModel):
    name: str = Field(min_length=1)
    hp_max: int = Field(ge=0)
    thresholds: DamageThresholds
    entity_type: EntityType = EntityType.ADVERSARY
    stress_max: int | None = None


class DamageRequest(BaseModel):
    damage: int = Field(ge=0)


class SaveDiceRollRequest(BaseModel):
    notation: str
    total: int
    dice_data: Any = None
    modifier: int = 0
    is_crit: bool = False
    is_fumble: bool = False
    shared_with_players: bool = False
    campaign_id: str | None = None


class ClearDiceResponse(BaseModel):
    removed: int
