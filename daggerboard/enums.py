"""
Canonical string enumerations for Daggerboard.

StrEnum values serialize as plain strings, so they go straight into
database columns and JSON payloads without conversion.
"""

from enum import StrEnum


# ── Entities ───────────────────────────────────────────────────────────

class EntityType(StrEnum):
    """Kind of tracked creature."""
    NPC = "npc"
    ADVERSARY = "adversary"


class ThresholdHit(StrEnum):
    """Damage severity tier crossed by an incoming hit."""
    MINOR = "minor"
    MAJOR = "major"
    SEVERE = "severe"
    MASSIVE = "massive"


# ── Countdown Trackers ─────────────────────────────────────────────────

class TrackerType(StrEnum):
    """Simple counters have no per-tick annotations; complex ones do."""
    SIMPLE = "simple"
    COMPLEX = "complex"


# ── App State Keys ─────────────────────────────────────────────────────

class AppStateKey(StrEnum):
    """Keys of rows in the app_state table."""
    CURRENT_CAMPAIGN = "current_campaign"
    MIGRATION_COMPLETED = "migration_completed"


# ── Broadcast Events ───────────────────────────────────────────────────

class EventType(StrEnum):
    """Names of change notifications delivered to observing windows."""
    CAMPAIGNS_UPDATED = "campaigns-updated"
    CURRENT_CAMPAIGN_CHANGED = "current-campaign-changed"
    CAMPAIGN_SWITCHED = "campaign-switched"
    CAMPAIGN_SETTINGS_UPDATED = "campaign-settings-updated"

    NOTE_CREATED = "campaign-note-created"
    NOTE_UPDATED = "campaign-note-updated"
    NOTE_DELETED = "campaign-note-deleted"
    NOTES_LIST_UPDATED = "campaign-notes-list-updated"

    FEAR_LEVEL_UPDATED = "fear-level-updated"
    TRACKERS_UPDATED = "trackers-updated"
    ENTITIES_UPDATED = "entities-updated"

    DICE_ROLL_SAVED = "dice-roll-saved"
    DICE_ROLLS_UPDATED = "dice-rolls-updated"

    PLAYER_CHARACTERS_UPDATED = "player-characters-updated"
    PLAYER_CHARACTER_UPDATED = "player-character-updated"
