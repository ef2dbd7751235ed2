"""Dice mixin: append-only roll history per campaign."""

import logging
from itertools import groupby
from typing import Any

from .. import schemas
from ..errors import OutOfRange
from . import queries
from .models import DiceRoll, new_id, utcnow

logger = logging.getLogger(__name__)


class DiceMixin:
    """Roll log. Rolls are immutable once saved; they can only be deleted."""

    def _history_limit(self, limit: int | None) -> int:
        if limit is None:
            return self._dice_limit
        if limit < 1:
            raise OutOfRange(f"limit must be at least 1 (got {limit})")
        return limit

    def save_dice_roll(
        self,
        notation: str,
        total: int,
        dice_data: Any = None,
        modifier: int = 0,
        is_crit: bool = False,
        is_fumble: bool = False,
        shared_with_players: bool = False,
        campaign_id: str | None = None,
    ) -> schemas.DiceRoll:
        """Record a roll; rolled_at is assigned here, not by the caller."""
        with self._guard.locked() as db:
            campaign_id = self._resolve_campaign_id(db, campaign_id)
            row = DiceRoll(
                id=new_id(),
                campaign_id=campaign_id,
                notation=notation,
                dice_data=dice_data,
                modifier=modifier,
                total=total,
                is_crit=is_crit,
                is_fumble=is_fumble,
                shared_with_players=shared_with_players,
                rolled_at=utcnow(),
            )
            db.add(row)
            db.flush()
            roll = schemas.DiceRoll.model_validate(row)
            self._broadcaster.dice_roll_saved(db, roll)

        logger.debug(f"Saved roll {notation} = {total}")
        return roll

    def get_dice_rolls(self, campaign_id: str | None = None, limit: int | None = None) -> list[schemas.DiceRoll]:
        """Most recent rolls first."""
        limit = self._history_limit(limit)
        with self._guard.locked() as db:
            campaign_id = self._resolve_campaign_id(db, campaign_id)
            return queries.list_dice_rolls(db, campaign_id, limit)

    def get_dice_rolls_by_date(
        self, campaign_id: str | None = None, limit: int | None = None
    ) -> list[schemas.DiceRollsByDate]:
        """Recent rolls bucketed by calendar day, newest day first."""
        rolls = self.get_dice_rolls(campaign_id, limit)
        ordered = sorted(rolls, key=lambda r: r.rolled_at, reverse=True)
        return [
            schemas.DiceRollsByDate(date=day, rolls=list(day_rolls))
            for day, day_rolls in groupby(ordered, key=lambda r: r.rolled_at.date().isoformat())
        ]

    def delete_dice_roll(self, roll_id: str) -> bool:
        """Delete one roll. Returns False (and changes nothing) if it does not exist."""
        with self._guard.locked() as db:
            row = db.get(DiceRoll, roll_id)
            if row is None:
                return False
            campaign_id = row.campaign_id
            db.delete(row)
            self._broadcaster.dice_rolls_updated(db, campaign_id)

        return True

    def clear_dice_history(self, campaign_id: str | None = None) -> int:
        """Delete every roll of a campaign; returns how many were removed."""
        with self._guard.locked() as db:
            campaign_id = self._resolve_campaign_id(db, campaign_id)
            removed = (
                db.query(DiceRoll)
                .filter(DiceRoll.campaign_id == campaign_id)
                .delete(synchronize_session=False)
            )
            self._broadcaster.dice_rolls_updated(db, campaign_id)

        logger.info(f"Cleared {removed} dice roll(s) from {campaign_id}")
        return removed
