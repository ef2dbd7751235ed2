"""State manager for campaign-scoped game state.

Composed from domain mixins (one per file). Each public method is one
command: it takes the store guard, resolves the campaign scope, applies
its rule, commits, and then asks the broadcaster to republish whatever
changed.
"""

import logging
from pathlib import Path

from ..config import Config
from ..core.broadcaster import Broadcaster
from ..core.events import EventBus, get_event_bus
from ._campaign import CampaignMixin
from ._countdown import CountdownMixin
from ._dice import DiceMixin
from ._entity import EntityMixin
from ._fear import FearMixin
from ._notes import NotesMixin
from ._player_character import PlayerCharacterMixin
from .guard import StoreGuard
from .legacy_import import LegacyImportReport, import_legacy_store
from .session import get_session_factory, init_db

logger = logging.getLogger(__name__)


class StateManager(
    CampaignMixin,
    NotesMixin,
    FearMixin,
    EntityMixin,
    CountdownMixin,
    DiceMixin,
    PlayerCharacterMixin,
):
    """Single entry point for every state command.

    Usage:
        manager = StateManager()
        manager.startup()
        manager.apply_damage(entity_id, 7)
    """

    def __init__(
        self,
        guard: StoreGuard | None = None,
        bus: EventBus | None = None,
        dice_limit: int | None = None,
    ):
        self._guard = guard or StoreGuard(get_session_factory(), timeout=Config.LOCK_TIMEOUT)
        self._bus = bus or get_event_bus()
        self._dice_limit = dice_limit or Config.DICE_HISTORY_LIMIT
        self._broadcaster = Broadcaster(self._bus, self._dice_limit)

    @property
    def guard(self) -> StoreGuard:
        return self._guard

    @property
    def bus(self) -> EventBus:
        return self._bus

    def import_legacy_store(self, path: str | Path | None = None) -> LegacyImportReport:
        return import_legacy_store(self._guard, path or Config.LEGACY_STORE_PATH)

    def startup(self, legacy_store_path: str | Path | None = None) -> str:
        """Bring the store up to date and guarantee a valid current campaign.

        Runs migrations, selects or creates a campaign, then imports any
        legacy store. Returns the current campaign id.
        """
        init_db()
        campaign_id = self.ensure_campaign_exists()
        report = self.import_legacy_store(legacy_store_path)
        if not report.skipped and (report.entities or report.trackers):
            with self._guard.locked() as db:
                self._broadcaster.entities_updated(db, campaign_id)
                self._broadcaster.trackers_updated(db, campaign_id)
        logger.info(f"State ready, current campaign {campaign_id}")
        return campaign_id
