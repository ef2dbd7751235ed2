"""Entity mutator tests: creation, HP, damage, stress and visibility."""

import pytest

from daggerboard.enums import EntityType, EventType, ThresholdHit
from daggerboard.errors import EntityNotFound, InvalidOperation, ValidationFailed
from daggerboard.schemas import DamageThresholds


@pytest.fixture
def goblin(sm, thresholds, recorder):
    entity = sm.create_entity("Goblin", hp_max=10, thresholds=thresholds)
    recorder.clear()
    return entity


class TestCreateEntity:
    def test_round_trip(self, sm, thresholds):
        created = sm.create_entity(
            "Ogre", hp_max=12, thresholds=thresholds, entity_type=EntityType.NPC, stress_max=4
        )
        assert created.hp_current == 12
        assert created.stress_current == 0
        assert created.visible_to_players is False
        assert created.entity_type == EntityType.NPC
        assert created.campaign_id == sm.get_current_campaign_id()
        assert sm.get_entity(created.id) == created

    def test_defaults_to_adversary(self, sm, thresholds):
        assert sm.create_entity("Bandit", 5, thresholds).entity_type == EntityType.ADVERSARY

    def test_stress_max_capped_at_twelve(self, sm, thresholds):
        assert sm.create_entity("Dragon", 30, thresholds, stress_max=40).stress_max == 12
        assert sm.create_entity("Rat", 1, thresholds).stress_max == 0

    def test_ids_are_unique(self, sm, thresholds):
        ids = {sm.create_entity(f"E{i}", 5, thresholds).id for i in range(5)}
        assert len(ids) == 5

    def test_negative_hp_rejected(self, sm, thresholds):
        with pytest.raises(ValidationFailed):
            sm.create_entity("Broken", -1, thresholds)

    def test_requires_campaign(self, bare_sm, thresholds):
        with pytest.raises(InvalidOperation, match="No campaign selected"):
            bare_sm.create_entity("Orphan", 5, thresholds)

    def test_broadcasts_full_list(self, sm, thresholds, recorder):
        sm.create_entity("A", 5, thresholds)
        sm.create_entity("B", 5, thresholds)
        event = recorder.last(EventType.ENTITIES_UPDATED)
        assert [e["name"] for e in event.payload["entities"]] == ["A", "B"]
        assert event.payload["campaign_id"] == sm.get_current_campaign_id()

    def test_unordered_thresholds_are_accepted(self, sm):
        entity = sm.create_entity("Odd", 5, DamageThresholds(minor=8, major=4, severe=2))
        assert entity.thresholds.minor == 8


class TestHitPoints:
    def test_update_clamps_to_max(self, sm, goblin):
        assert sm.update_entity_hp(goblin.id, 50).hp_current == 10

    def test_update_clamps_to_zero(self, sm, goblin):
        assert sm.update_entity_hp(goblin.id, -50).hp_current == 0

    def test_update_relative(self, sm, goblin):
        assert sm.update_entity_hp(goblin.id, -3).hp_current == 7
        assert sm.update_entity_hp(goblin.id, 1).hp_current == 8

    @pytest.mark.parametrize("value,expected", [(-4, 0), (4, 4), (99, 10)])
    def test_set(self, sm, goblin, value, expected):
        assert sm.set_entity_hp(goblin.id, value).hp_current == expected

    def test_unknown_entity(self, sm):
        with pytest.raises(EntityNotFound):
            sm.update_entity_hp("missing", 1)

    def test_mutation_broadcasts(self, sm, goblin, recorder):
        sm.update_entity_hp(goblin.id, -2)
        event = recorder.last(EventType.ENTITIES_UPDATED)
        assert event.payload["entities"][0]["hp_current"] == 8


class TestApplyDamage:
    def test_massive(self, sm, goblin):
        result = sm.apply_damage(goblin.id, 20)
        assert result.threshold_hit == ThresholdHit.MASSIVE
        assert result.damage_dealt == 4
        assert result.entity.hp_current == 6

    @pytest.mark.parametrize("damage,hit,hp_after", [
        (10, ThresholdHit.SEVERE, 7),
        (6, ThresholdHit.MAJOR, 8),
        (3, ThresholdHit.MINOR, 9),
        (2, None, 10),
    ])
    def test_tiers(self, sm, goblin, damage, hit, hp_after):
        result = sm.apply_damage(goblin.id, damage)
        assert result.threshold_hit == hit
        assert result.entity.hp_current == hp_after
        assert result.damage_dealt == 10 - hp_after

    def test_never_below_zero(self, sm, goblin):
        sm.set_entity_hp(goblin.id, 2)
        result = sm.apply_damage(goblin.id, 50)
        assert result.damage_dealt == 2
        assert result.entity.hp_current == 0

    def test_persisted(self, sm, goblin):
        sm.apply_damage(goblin.id, 6)
        assert sm.get_entity(goblin.id).hp_current == 8


class TestStress:
    def test_overflow(self, sm, thresholds):
        entity = sm.create_entity("Brute", 10, thresholds, stress_max=3)
        sm.adjust_entity_stress(entity.id, 2)
        result = sm.adjust_entity_stress(entity.id, 3)
        assert result.stress_applied == 1
        assert result.hp_overflow_damage == 2
        assert result.entity.stress_current == 3
        assert result.entity.hp_current == 8

    def test_clearing(self, sm, thresholds):
        entity = sm.create_entity("Brute", 10, thresholds, stress_max=6)
        sm.adjust_entity_stress(entity.id, 4)
        result = sm.adjust_entity_stress(entity.id, -10)
        assert result.stress_applied == -4
        assert result.entity.stress_current == 0

    def test_default_cap(self, sm, goblin):
        result = sm.adjust_entity_stress(goblin.id, 12)
        assert result.entity.stress_current == 12
        assert result.hp_overflow_damage == 0


class TestFieldUpdates:
    def test_thresholds(self, sm, goblin):
        updated = sm.update_entity_thresholds(goblin.id, DamageThresholds(minor=1, major=2, severe=3))
        assert updated.thresholds == DamageThresholds(minor=1, major=2, severe=3)
        assert sm.apply_damage(goblin.id, 6).threshold_hit == ThresholdHit.MASSIVE

    def test_name(self, sm, goblin):
        assert sm.update_entity_name(goblin.id, "Hobgoblin").name == "Hobgoblin"

    def test_visibility_and_filter(self, sm, goblin, thresholds):
        other = sm.create_entity("Hidden", 5, thresholds)
        sm.toggle_entity_visibility(goblin.id, True)
        visible = sm.get_entities(visible_only=True)
        assert [e.id for e in visible] == [goblin.id]
        assert {e.id for e in sm.get_entities()} == {goblin.id, other.id}

    def test_bulk_visibility(self, sm, goblin, thresholds, recorder):
        sm.create_entity("Second", 5, thresholds)
        entities = sm.set_all_entities_visibility(True)
        assert all(e.visible_to_players for e in entities)
        payload = recorder.last(EventType.ENTITIES_UPDATED).payload
        assert all(e["visible_to_players"] for e in payload["entities"])

    def test_delete(self, sm, goblin):
        sm.delete_entity(goblin.id)
        assert sm.get_entities() == []
        with pytest.raises(EntityNotFound):
            sm.delete_entity(goblin.id)

    def test_entities_scoped_to_current_campaign(self, sm, goblin):
        other = sm.create_campaign("Other")
        sm.set_current_campaign(other.id)
        assert sm.get_entities() == []

    def test_delete_broadcasts_owning_campaign(self, sm, thresholds, recorder):
        home = sm.get_current_campaign_id()
        away = sm.create_campaign("Away")
        sm.set_current_campaign(away.id)
        raider = sm.create_entity("Raider", 5, thresholds)
        sm.set_current_campaign(home)
        recorder.clear()

        sm.delete_entity(raider.id)
        event = recorder.last(EventType.ENTITIES_UPDATED)
        assert event.payload["campaign_id"] == away.id
        assert event.payload["entities"] == []

    def test_huge_stress_does_not_hold_the_lock(self, sm, goblin):
        result = sm.adjust_entity_stress(goblin.id, 10**12)
        assert result.entity.stress_current == 12
        assert result.entity.hp_current == 0
        assert result.hp_overflow_damage == 10**12 - 12
        assert sm.get_fear_level() == 0
