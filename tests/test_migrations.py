"""Schema migration tests: fresh installs and upgrades of single-scope databases."""

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker

from daggerboard.db.guard import StoreGuard
from daggerboard.db.session import get_engine, upgrade_schema
from daggerboard.db.state_manager import StateManager


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'old.db'}", connect_args={"check_same_thread": False}
    )
    yield engine
    engine.dispose()


def _seed_single_scope(engine):
    with engine.begin() as conn:
        conn.execute(text(
            "INSERT INTO entities (id, name, hp_current, hp_max, threshold_minor, "
            "threshold_major, threshold_severe, visible_to_players) "
            "VALUES ('e1', 'Old Goblin', 4, 8, 2, 5, 9, 1)"
        ))
        conn.execute(text(
            "INSERT INTO countdown_trackers (id, name, current, max, visible_to_players, tracker_type) "
            "VALUES ('t1', 'Ritual', 2, 5, 0, 'complex')"
        ))
        conn.execute(text("INSERT INTO tick_labels (tracker_id, tick, label) VALUES ('t1', 3, 'Portal opens')"))
        conn.execute(text("INSERT INTO app_state (key, value) VALUES ('fear_level', '4')"))


class TestFreshDatabase:
    def test_head_revision(self):
        with get_engine().connect() as conn:
            assert conn.execute(text("SELECT version_num FROM alembic_version")).scalar() == "004"

    def test_all_tables_present(self):
        tables = set(inspect(get_engine()).get_table_names())
        assert {
            "campaigns", "app_state", "entities", "countdown_trackers", "tick_labels",
            "campaign_notes", "dice_rolls", "player_characters",
        } <= tables

    def test_no_campaign_created_for_empty_install(self, file_engine):
        upgrade_schema(file_engine)
        with file_engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM campaigns")).scalar() == 0
            assert conn.execute(text("SELECT COUNT(*) FROM app_state")).scalar() == 0

    def test_upgrade_is_idempotent(self, file_engine):
        upgrade_schema(file_engine)
        upgrade_schema(file_engine)
        with file_engine.connect() as conn:
            assert conn.execute(text("SELECT version_num FROM alembic_version")).scalar() == "004"


class TestSingleScopeUpgrade:
    @pytest.fixture
    def upgraded(self, file_engine):
        upgrade_schema(file_engine, "001")
        _seed_single_scope(file_engine)
        upgrade_schema(file_engine)
        return file_engine

    def test_rows_adopted_by_default_campaign(self, upgraded):
        with upgraded.connect() as conn:
            campaigns = conn.execute(text("SELECT id, name, fear_level FROM campaigns")).fetchall()
            assert len(campaigns) == 1
            campaign_id, name, fear = campaigns[0]
            assert name == "My Campaign"
            assert fear == 4
            assert conn.execute(text("SELECT campaign_id FROM entities WHERE id = 'e1'")).scalar() == campaign_id
            assert conn.execute(
                text("SELECT campaign_id FROM countdown_trackers WHERE id = 't1'")
            ).scalar() == campaign_id

    def test_global_fear_key_removed_and_selector_set(self, upgraded):
        with upgraded.connect() as conn:
            keys = dict(conn.execute(text("SELECT key, value FROM app_state WHERE campaign_id IS NULL")).fetchall())
            campaign_id = conn.execute(text("SELECT id FROM campaigns")).scalar()
        assert "fear_level" not in keys
        assert keys["current_campaign"] == campaign_id

    def test_new_columns_have_defaults(self, upgraded):
        with upgraded.connect() as conn:
            row = conn.execute(text(
                "SELECT stress_current, stress_max, entity_type FROM entities WHERE id = 'e1'"
            )).one()
            hidden = conn.execute(
                text("SELECT hide_name_from_players FROM countdown_trackers WHERE id = 't1'")
            ).scalar()
        assert tuple(row) == (0, 0, "adversary")
        assert not hidden

    def test_state_manager_reads_upgraded_data(self, upgraded, bus):
        manager = StateManager(guard=StoreGuard(sessionmaker(bind=upgraded, autoflush=False)), bus=bus)
        assert manager.ensure_campaign_exists() == manager.get_current_campaign_id()
        assert manager.get_fear_level() == 4

        [entity] = manager.get_entities()
        assert entity.name == "Old Goblin"
        assert entity.hp_current == 4
        assert entity.visible_to_players is True

        [tracker] = manager.get_trackers()
        assert tracker.tick_labels == {3: "Portal opens"}
