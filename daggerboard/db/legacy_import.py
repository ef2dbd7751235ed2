"""One-time import of the pre-database JSON key/value store.

Older releases kept everything in a single ``store.json`` with the keys
``entities``, ``countdownTrackers`` and ``fearLevel``. On first start the
contents are copied into the current campaign, a ``migration_completed``
marker is recorded in app_state and the file is renamed to
``store.json.migrated``. Later starts see the marker and do nothing.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session as SQLAlchemySession

from ..enums import AppStateKey, EntityType, TrackerType
from ..errors import InvalidOperation, PersistenceError
from . import queries
from .guard import StoreGuard
from .models import AppState, Campaign, CountdownTracker, Entity, TickLabel, new_id

logger = logging.getLogger(__name__)


@dataclass
class LegacyImportReport:
    """What a legacy import did."""
    skipped: bool = False
    entities: int = 0
    trackers: int = 0
    fear_level: int | None = None


def _pick(record: dict[str, Any], *names: str, default: Any = None) -> Any:
    """First present key among snake_case / camelCase spellings."""
    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    return default


def _marker_present(db: SQLAlchemySession) -> bool:
    return (
        db.query(AppState)
        .filter(AppState.key == AppStateKey.MIGRATION_COMPLETED, AppState.campaign_id.is_(None))
        .first()
        is not None
    )


def _fresh_id(db: SQLAlchemySession, model, candidate: Any) -> str:
    if isinstance(candidate, str) and candidate and db.get(model, candidate) is None:
        return candidate
    return new_id()


def _import_entity(db: SQLAlchemySession, campaign_id: str, record: dict[str, Any]) -> None:
    thresholds = _pick(record, "thresholds", default={}) or {}
    hp_max = int(_pick(record, "hp_max", "hpMax", default=0))
    hp_current = int(_pick(record, "hp_current", "hpCurrent", default=hp_max))
    db.add(Entity(
        id=_fresh_id(db, Entity, record.get("id")),
        campaign_id=campaign_id,
        name=str(_pick(record, "name", default="Unnamed")),
        hp_max=hp_max,
        hp_current=max(0, min(hp_current, hp_max)),
        stress_current=0,
        stress_max=0,
        threshold_minor=int(thresholds.get("minor", 0)),
        threshold_major=int(thresholds.get("major", 0)),
        threshold_severe=int(thresholds.get("severe", 0)),
        visible_to_players=bool(_pick(record, "visible_to_players", "visibleToPlayers", default=False)),
        entity_type=EntityType.ADVERSARY.value,
    ))


def _import_tracker(db: SQLAlchemySession, campaign_id: str, record: dict[str, Any]) -> None:
    max_value = max(0, int(_pick(record, "max", default=0)))
    current = int(_pick(record, "current", default=max_value))
    tracker_type = str(_pick(record, "tracker_type", "trackerType", "type", default=TrackerType.SIMPLE))
    if tracker_type not in (TrackerType.SIMPLE, TrackerType.COMPLEX):
        tracker_type = TrackerType.SIMPLE.value

    tracker_id = _fresh_id(db, CountdownTracker, record.get("id"))
    db.add(CountdownTracker(
        id=tracker_id,
        campaign_id=campaign_id,
        name=str(_pick(record, "name", default="Countdown")),
        current=max(0, min(current, max_value)),
        max=max_value,
        visible_to_players=bool(_pick(record, "visible_to_players", "visibleToPlayers", default=False)),
        hide_name_from_players=bool(
            _pick(record, "hide_name_from_players", "hideNameFromPlayers", default=False)
        ),
        tracker_type=tracker_type,
    ))

    if tracker_type == TrackerType.COMPLEX:
        labels = _pick(record, "tick_labels", "tickLabels", default={}) or {}
        for tick, label in labels.items():
            tick = int(tick)
            if 0 <= tick <= max_value:
                db.add(TickLabel(tracker_id=tracker_id, tick=tick, label=str(label)))


def import_legacy_store(guard: StoreGuard, path: str | Path) -> LegacyImportReport:
    """Copy a legacy store.json into the current campaign, once.

    Requires a current campaign (run after ensure_campaign_exists()).
    A missing file still records the marker so the check is not repeated.
    """
    path = Path(path)
    report = LegacyImportReport()

    with guard.locked() as db:
        if _marker_present(db):
            report.skipped = True
            return report

        if path.exists():
            try:
                store = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                raise PersistenceError(f"Could not read legacy store {path}: {e}") from e
            if not isinstance(store, dict):
                raise PersistenceError(f"Legacy store {path} is not a JSON object")

            campaign_id = queries.current_campaign_id(db)
            if campaign_id is None:
                raise InvalidOperation("No campaign selected")

            logger.info(f"Migrating data from {path} into campaign {campaign_id}")
            for record in store.get("entities") or []:
                _import_entity(db, campaign_id, record)
                db.flush()
                report.entities += 1
            for record in store.get("countdownTrackers") or []:
                _import_tracker(db, campaign_id, record)
                db.flush()
                report.trackers += 1

            fear = store.get("fearLevel")
            if isinstance(fear, int) and not isinstance(fear, bool):
                campaign = db.get(Campaign, campaign_id)
                campaign.fear_level = max(0, fear)
                report.fear_level = campaign.fear_level

            logger.info(
                f"Migrated {report.entities} entities, {report.trackers} trackers, "
                f"fear level {report.fear_level}"
            )

        db.add(AppState(key=AppStateKey.MIGRATION_COMPLETED.value, campaign_id=None, value="true"))

    if path.exists():
        backup = path.with_name(path.name + ".migrated")
        if backup.exists():
            logger.warning(f"{backup} already exists, leaving {path} in place")
        else:
            try:
                path.rename(backup)
            except OSError as e:
                logger.warning(f"Could not rename old store file: {e}")

    return report
