"""Fear mixin: the GM's fear meter for the current campaign."""

import logging

from ..errors import InvalidOperation
from .models import Campaign

logger = logging.getLogger(__name__)


class FearMixin:
    """Fear level: one non-negative integer per campaign, no ceiling."""

    def _change_fear(self, compute) -> int:
        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            campaign = db.get(Campaign, campaign_id)
            if campaign is None:
                raise InvalidOperation(f"Current campaign {campaign_id} does not exist")
            campaign.fear_level = max(0, compute(campaign.fear_level))
            level = campaign.fear_level
            self._broadcaster.fear_level_updated(db, level, campaign_id)

        logger.debug(f"Fear level now {level} in {campaign_id}")
        return level

    def get_fear_level(self) -> int:
        with self._guard.locked() as db:
            campaign_id = self._require_campaign_id(db)
            campaign = db.get(Campaign, campaign_id)
            return campaign.fear_level if campaign else 0

    def adjust_fear_level(self, amount: int) -> int:
        return self._change_fear(lambda current: current + amount)

    def set_fear_level(self, value: int) -> int:
        return self._change_fear(lambda current: value)

    def reset_fear_level(self) -> int:
        return self.set_fear_level(0)
