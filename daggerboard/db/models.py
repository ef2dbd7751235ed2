"""SQLAlchemy database models for Daggerboard."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

from ..enums import EntityType, TrackerType

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite stores datetimes without zone)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Campaign(Base):
    """Top-level scope: every tracked record belongs to exactly one campaign."""

    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    fear_level = Column(Integer, nullable=False, default=0)
    allow_massive_damage = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    entities = relationship("Entity", back_populates="campaign", cascade="all, delete-orphan")
    trackers = relationship("CountdownTracker", back_populates="campaign", cascade="all, delete-orphan")
    notes = relationship("CampaignNote", back_populates="campaign", cascade="all, delete-orphan")
    dice_rolls = relationship("DiceRoll", back_populates="campaign", cascade="all, delete-orphan")
    player_characters = relationship("PlayerCharacter", back_populates="campaign", cascade="all, delete-orphan")
    state = relationship("AppState", back_populates="campaign", cascade="all, delete-orphan")


class AppState(Base):
    """Application key/value rows.

    Global keys (current campaign selector, migration marker) have a NULL
    campaign_id. SQLite treats NULLs as distinct in unique constraints, so
    global keys are written delete-then-insert.
    """

    __tablename__ = "app_state"
    __table_args__ = (UniqueConstraint("key", "campaign_id", name="uq_app_state_key_campaign"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), nullable=False)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=True)
    value = Column(Text, nullable=True)

    campaign = relationship("Campaign", back_populates="state")


class Entity(Base):
    """An NPC or adversary with HP, stress and damage thresholds."""

    __tablename__ = "entities"

    id = Column(String(36), primary_key=True, default=new_id)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    hp_current = Column(Integer, nullable=False, default=0)
    hp_max = Column(Integer, nullable=False, default=0)
    stress_current = Column(Integer, nullable=False, default=0)
    stress_max = Column(Integer, nullable=False, default=0)  # 0 = default cap
    threshold_minor = Column(Integer, nullable=False, default=0)
    threshold_major = Column(Integer, nullable=False, default=0)
    threshold_severe = Column(Integer, nullable=False, default=0)
    visible_to_players = Column(Boolean, nullable=False, default=False)
    entity_type = Column(String(20), nullable=False, default=EntityType.ADVERSARY.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    campaign = relationship("Campaign", back_populates="entities")


class CountdownTracker(Base):
    """A countdown clock that ticks between 0 and max."""

    __tablename__ = "countdown_trackers"

    id = Column(String(36), primary_key=True, default=new_id)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    current = Column(Integer, nullable=False, default=0)
    max = Column(Integer, nullable=False, default=0)
    visible_to_players = Column(Boolean, nullable=False, default=False)
    hide_name_from_players = Column(Boolean, nullable=False, default=False)
    tracker_type = Column(String(20), nullable=False, default=TrackerType.SIMPLE.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    campaign = relationship("Campaign", back_populates="trackers")
    tick_labels = relationship(
        "TickLabel",
        back_populates="tracker",
        cascade="all, delete-orphan",
        order_by="TickLabel.tick",
    )


class TickLabel(Base):
    """Annotation attached to one tick of a complex tracker."""

    __tablename__ = "tick_labels"

    tracker_id = Column(
        String(36),
        ForeignKey("countdown_trackers.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tick = Column(Integer, primary_key=True)
    label = Column(Text, nullable=False)

    tracker = relationship("CountdownTracker", back_populates="tick_labels")


class CampaignNote(Base):
    """Free-form GM note."""

    __tablename__ = "campaign_notes"

    id = Column(String(36), primary_key=True, default=new_id)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    campaign = relationship("Campaign", back_populates="notes")


class DiceRoll(Base):
    """One entry of the append-only dice log."""

    __tablename__ = "dice_rolls"

    id = Column(String(36), primary_key=True, default=new_id)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    notation = Column(String(100), nullable=False)
    dice_data = Column(JSON, nullable=True)  # Per-die results, stored as given
    modifier = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False)
    is_crit = Column(Boolean, nullable=False, default=False)
    is_fumble = Column(Boolean, nullable=False, default=False)
    shared_with_players = Column(Boolean, nullable=False, default=False)
    rolled_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    campaign = relationship("Campaign", back_populates="dice_rolls")


class PlayerCharacter(Base):
    """A player's character sheet."""

    __tablename__ = "player_characters"

    id = Column(String(36), primary_key=True, default=new_id)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)

    # Identity
    name = Column(String(255), nullable=False)
    ancestry = Column(String(100), nullable=True)
    community = Column(String(100), nullable=True)
    class_ = Column("class", String(100), nullable=True)
    subclass = Column(String(100), nullable=True)
    domain = Column(String(100), nullable=True)
    level = Column(Integer, nullable=False, default=1)

    # Attributes
    attr_agility = Column(Integer, nullable=False, default=0)
    attr_strength = Column(Integer, nullable=False, default=0)
    attr_finesse = Column(Integer, nullable=False, default=0)
    attr_instinct = Column(Integer, nullable=False, default=0)
    attr_presence = Column(Integer, nullable=False, default=0)
    attr_knowledge = Column(Integer, nullable=False, default=0)

    # Health and defense
    hp_current = Column(Integer, nullable=False, default=6)
    hp_max = Column(Integer, nullable=False, default=6)
    threshold_minor = Column(Integer, nullable=False, default=1)
    threshold_major = Column(Integer, nullable=False, default=6)
    threshold_severe = Column(Integer, nullable=False, default=11)
    armor_current = Column(Integer, nullable=False, default=0)
    armor_max = Column(Integer, nullable=False, default=0)
    evasion = Column(Integer, nullable=False, default=0)

    # Resources
    hope = Column(Integer, nullable=False, default=2)
    stress_current = Column(Integer, nullable=False, default=0)
    stress_max = Column(Integer, nullable=False, default=6)

    # Narrative
    experiences = Column(JSON, nullable=False, default=list)
    background = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    campaign = relationship("Campaign", back_populates="player_characters")
