"""Countdown mixin: countdown trackers and their tick labels.

Split from state_manager.py for maintainability.
"""

import logging

from sqlalchemy.orm import Session as SQLAlchemySession

from .. import schemas
from ..core import rules
from ..enums import TrackerType
from ..errors import InvalidOperation, OutOfRange, TrackerNotFound, ValidationFailed
from . import queries
from .models import CountdownTracker, TickLabel, new_id

logger = logging.getLogger(__name__)


class CountdownMixin:
    """Tracker creation and mutation. Every mutation rebroadcasts the tracker list."""

    @staticmethod
    def _get_tracker_row(db: SQLAlchemySession, tracker_id: str) -> CountdownTracker:
        tracker = db.get(CountdownTracker, tracker_id)
        if tracker is None:
            raise TrackerNotFound(tracker_id)
        return tracker

    def _mutate_tracker(self, tracker_id: str, mutate) -> schemas.CountdownTracker:
        with self._guard.locked() as db:
            self._require_campaign_id(db)
            row = self._get_tracker_row(db, tracker_id)
            mutate(db, row)
            db.flush()
            db.refresh(row, attribute_names=["tick_labels"])
            tracker = schemas.CountdownTracker.from_row(row)
            self._broadcaster.trackers_updated(db, tracker.campaign_id)

        return tracker

    # ── Create / read / delete ────────────────────────────────────────

    def create_tracker(
        self,
        name: str,
        max_value: int,
        tracker_type: TrackerType = TrackerType.SIMPLE,
        visible_to_players: bool = False,
        hide_name_from_players: bool = False,
    ) -> schemas.CountdownTracker:
        """Create a tracker starting full (current == max)."""
        if max_value < 0:
            raise ValidationFailed(f"max must be non-negative (got {max_value})")

        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            row = CountdownTracker(
                id=new_id(),
                campaign_id=campaign_id,
                name=name,
                current=max_value,
                max=max_value,
                visible_to_players=visible_to_players,
                hide_name_from_players=hide_name_from_players,
                tracker_type=TrackerType(tracker_type).value,
            )
            db.add(row)
            db.flush()
            tracker = schemas.CountdownTracker.from_row(row)
            self._broadcaster.trackers_updated(db, campaign_id)

        logger.debug(f"Created {tracker.tracker_type} tracker '{name}' ({tracker.id})")
        return tracker

    def get_trackers(self, visible_only: bool = False) -> list[schemas.CountdownTracker]:
        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            return queries.list_trackers(db, campaign_id, visible_only)

    def get_tracker(self, tracker_id: str) -> schemas.CountdownTracker:
        with self._guard.locked() as db:
            return schemas.CountdownTracker.from_row(self._get_tracker_row(db, tracker_id))

    def delete_tracker(self, tracker_id: str) -> None:
        """Delete a tracker together with its tick labels."""
        with self._guard.locked() as db:
            self._require_campaign_id(db)
            row = self._get_tracker_row(db, tracker_id)
            campaign_id = row.campaign_id
            db.delete(row)
            self._broadcaster.trackers_updated(db, campaign_id)

    # ── Value ─────────────────────────────────────────────────────────

    def update_tracker_value(self, tracker_id: str, amount: int) -> schemas.CountdownTracker:
        """Add amount (may be negative), clamped to [0, max]."""
        def mutate(db, row):
            row.current = rules.clamp(row.current + amount, 0, row.max)

        return self._mutate_tracker(tracker_id, mutate)

    def set_tracker_value(self, tracker_id: str, value: int) -> schemas.CountdownTracker:
        def mutate(db, row):
            row.current = rules.clamp(value, 0, row.max)

        return self._mutate_tracker(tracker_id, mutate)

    # ── Visibility ────────────────────────────────────────────────────

    def toggle_tracker_visibility(self, tracker_id: str, visible: bool) -> schemas.CountdownTracker:
        def mutate(db, row):
            row.visible_to_players = visible

        return self._mutate_tracker(tracker_id, mutate)

    def toggle_tracker_name_visibility(self, tracker_id: str, hide_name: bool) -> schemas.CountdownTracker:
        def mutate(db, row):
            row.hide_name_from_players = hide_name

        return self._mutate_tracker(tracker_id, mutate)

    def set_all_trackers_visibility(self, visible: bool) -> list[schemas.CountdownTracker]:
        """Show or hide every tracker in the current campaign."""
        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            rows = db.query(CountdownTracker).filter(CountdownTracker.campaign_id == campaign_id).all()
            for row in rows:
                row.visible_to_players = visible
            db.flush()
            trackers = queries.list_trackers(db, campaign_id)
            self._broadcaster.trackers_updated(db, campaign_id)

        return trackers

    # ── Tick labels ───────────────────────────────────────────────────

    def set_tick_label(self, tracker_id: str, tick: int, label: str) -> schemas.CountdownTracker:
        """Attach (or replace) the label at a tick of a complex tracker."""
        def mutate(db, row):
            if row.tracker_type != TrackerType.COMPLEX:
                raise InvalidOperation("Cannot add tick labels to simple tracker")
            if tick < 0 or tick > row.max:
                raise OutOfRange(f"Tick {tick} out of range (0-{row.max})")
            existing = db.get(TickLabel, (row.id, tick))
            if existing is not None:
                existing.label = label
            else:
                db.add(TickLabel(tracker_id=row.id, tick=tick, label=label))

        return self._mutate_tracker(tracker_id, mutate)

    def remove_tick_label(self, tracker_id: str, tick: int) -> schemas.CountdownTracker:
        """Remove the label at a tick; nothing happens if there is none."""
        def mutate(db, row):
            existing = db.get(TickLabel, (row.id, tick))
            if existing is not None:
                db.delete(existing)

        return self._mutate_tracker(tracker_id, mutate)
