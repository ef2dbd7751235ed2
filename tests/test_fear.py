"""Fear level tests."""

import pytest

from daggerboard.enums import EventType
from daggerboard.errors import InvalidOperation


class TestFearLevel:
    def test_starts_at_zero(self, sm):
        assert sm.get_fear_level() == 0

    def test_adjust(self, sm):
        assert sm.adjust_fear_level(3) == 3
        assert sm.adjust_fear_level(2) == 5
        assert sm.get_fear_level() == 5

    def test_adjust_floors_at_zero(self, sm):
        sm.set_fear_level(2)
        assert sm.adjust_fear_level(-10) == 0

    def test_set_has_no_ceiling(self, sm):
        assert sm.set_fear_level(250) == 250

    def test_set_negative_is_zero(self, sm):
        assert sm.set_fear_level(-4) == 0

    def test_reset(self, sm):
        sm.set_fear_level(7)
        assert sm.reset_fear_level() == 0

    def test_broadcast(self, sm, recorder):
        sm.adjust_fear_level(4)
        payload = recorder.last(EventType.FEAR_LEVEL_UPDATED).payload
        assert payload == {"level": 4, "campaign_id": sm.get_current_campaign_id()}

    def test_scoped_per_campaign(self, sm):
        first = sm.get_current_campaign_id()
        sm.set_fear_level(6)
        other = sm.create_campaign("Second")
        sm.set_current_campaign(other.id)
        assert sm.get_fear_level() == 0
        sm.set_current_campaign(first)
        assert sm.get_fear_level() == 6

    def test_requires_campaign(self, bare_sm):
        with pytest.raises(InvalidOperation, match="No campaign selected"):
            bare_sm.adjust_fear_level(1)
