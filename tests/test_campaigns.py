"""Campaign lifecycle and scope resolution tests."""

import pytest

from daggerboard.db.models import AppState, Campaign, CountdownTracker, Entity
from daggerboard.db.session import get_session
from daggerboard.enums import AppStateKey, EventType
from daggerboard.errors import EntityNotFound, InvalidOperation, ValidationFailed
from daggerboard.schemas import CampaignSettings


class TestEnsureCampaignExists:
    def test_creates_default_when_empty(self, bare_sm):
        assert bare_sm.get_current_campaign_id() is None
        campaign_id = bare_sm.ensure_campaign_exists()
        campaigns = bare_sm.get_campaigns()
        assert [c.name for c in campaigns] == ["My Campaign"]
        assert campaigns[0].id == campaign_id
        assert bare_sm.get_current_campaign_id() == campaign_id

    def test_idempotent(self, sm, recorder):
        first = sm.get_current_campaign_id()
        assert sm.ensure_campaign_exists() == first
        assert sm.ensure_campaign_exists() == first
        assert len(sm.get_campaigns()) == 1
        assert recorder.events == []

    def test_selects_existing_campaign(self, bare_sm):
        created = bare_sm.create_campaign("Existing")
        assert bare_sm.ensure_campaign_exists() == created.id
        assert len(bare_sm.get_campaigns()) == 1

    def test_repairs_stale_selector(self, sm):
        with get_session() as db:
            db.query(AppState).filter(AppState.key == AppStateKey.CURRENT_CAMPAIGN).update(
                {AppState.value: "gone"}, synchronize_session=False
            )
        assert sm.get_current_campaign_id() == "gone"
        repaired = sm.ensure_campaign_exists()
        assert repaired != "gone"
        assert sm.get_current_campaign().id == repaired


class TestCurrentCampaign:
    def test_require_without_selection(self, bare_sm):
        with pytest.raises(InvalidOperation, match="No campaign selected"):
            bare_sm.require_current_campaign_id()
        assert bare_sm.get_current_campaign() is None

    def test_switch(self, sm, recorder):
        other = sm.create_campaign("Second")
        switched = sm.set_current_campaign(other.id)
        assert switched.id == other.id
        assert sm.get_current_campaign_id() == other.id
        assert recorder.last(EventType.CURRENT_CAMPAIGN_CHANGED).payload["campaign"]["id"] == other.id
        assert recorder.last(EventType.CAMPAIGN_SWITCHED).payload == {"campaign_id": other.id}

    def test_switch_keeps_single_selector_row(self, sm):
        other = sm.create_campaign("Second")
        first = sm.get_current_campaign_id()
        for target in (other.id, first, other.id):
            sm.set_current_campaign(target)
        with get_session() as db:
            rows = db.query(AppState).filter(AppState.key == AppStateKey.CURRENT_CAMPAIGN).all()
            assert [r.value for r in rows] == [other.id]

    def test_switch_to_unknown(self, sm):
        before = sm.get_current_campaign_id()
        with pytest.raises(EntityNotFound):
            sm.set_current_campaign("missing")
        assert sm.get_current_campaign_id() == before


class TestCampaignCrud:
    def test_create_and_list_newest_first(self, sm, recorder):
        second = sm.create_campaign("Second")
        names = [c.name for c in sm.get_campaigns()]
        assert names[0] == "Second"
        assert second.fear_level == 0
        payload = recorder.last(EventType.CAMPAIGNS_UPDATED).payload
        assert len(payload["campaigns"]) == 2

    def test_rename_current_rebroadcasts_current(self, sm, recorder):
        current = sm.get_current_campaign_id()
        renamed = sm.rename_campaign(current, "Renamed")
        assert renamed.name == "Renamed"
        assert recorder.last(EventType.CURRENT_CAMPAIGN_CHANGED).payload["campaign"]["name"] == "Renamed"

    def test_rename_other_does_not_touch_current(self, sm, recorder):
        other = sm.create_campaign("Other")
        recorder.clear()
        sm.rename_campaign(other.id, "Elsewhere")
        assert EventType.CURRENT_CAMPAIGN_CHANGED not in recorder.names
        assert EventType.CAMPAIGNS_UPDATED in recorder.names

    def test_rename_unknown(self, sm):
        with pytest.raises(EntityNotFound):
            sm.rename_campaign("missing", "x")


class TestDeleteCampaign:
    def test_cannot_delete_only_campaign(self, sm):
        with pytest.raises(ValidationFailed):
            sm.delete_campaign(sm.get_current_campaign_id())

    def test_cannot_delete_last_campaign(self, sm):
        # Current pointer elsewhere, so the count rule is what refuses
        current = sm.get_current_campaign_id()
        with get_session() as db:
            db.query(AppState).filter(AppState.key == AppStateKey.CURRENT_CAMPAIGN).delete()
        with pytest.raises(ValidationFailed, match="last campaign"):
            sm.delete_campaign(current)

    def test_cannot_delete_active_campaign(self, sm):
        sm.create_campaign("Spare")
        with pytest.raises(ValidationFailed, match="active campaign"):
            sm.delete_campaign(sm.get_current_campaign_id())

    def test_delete_unknown(self, sm):
        sm.create_campaign("Spare")
        with pytest.raises(EntityNotFound):
            sm.delete_campaign("missing")

    def test_delete_cascades(self, sm, thresholds):
        keep = sm.get_current_campaign_id()
        doomed = sm.create_campaign("Doomed")
        sm.set_current_campaign(doomed.id)
        sm.create_entity("Victim", 5, thresholds)
        sm.create_tracker("Clock", 4)
        sm.create_note(doomed.id, "Lore")
        sm.save_dice_roll("1d20", 12)
        from daggerboard.schemas import CreatePlayerCharacter
        sm.create_player_character(CreatePlayerCharacter(name="Hero"))

        sm.set_current_campaign(keep)
        sm.delete_campaign(doomed.id)

        assert [c.id for c in sm.get_campaigns()] == [keep]
        with get_session() as db:
            assert db.query(Entity).count() == 0
            assert db.query(CountdownTracker).count() == 0
            assert db.get(Campaign, doomed.id) is None

    def test_delete_leaves_other_campaigns_alone(self, sm, thresholds):
        kept_entity = sm.create_entity("Survivor", 5, thresholds)
        doomed = sm.create_campaign("Doomed")
        sm.delete_campaign(doomed.id)
        assert [e.id for e in sm.get_entities()] == [kept_entity.id]


class TestCampaignSettings:
    def test_defaults(self, sm):
        settings = sm.get_campaign_settings(sm.get_current_campaign_id())
        assert settings.allow_massive_damage is False

    def test_update(self, sm, recorder):
        campaign_id = sm.get_current_campaign_id()
        updated = sm.update_campaign_settings(campaign_id, CampaignSettings(allow_massive_damage=True))
        assert updated.allow_massive_damage is True
        assert sm.get_campaign(campaign_id).allow_massive_damage is True
        payload = recorder.last(EventType.CAMPAIGN_SETTINGS_UPDATED).payload
        assert payload == {"campaign_id": campaign_id, "settings": {"allow_massive_damage": True}}

    def test_unknown_campaign(self, sm):
        with pytest.raises(EntityNotFound):
            sm.get_campaign_settings("missing")
