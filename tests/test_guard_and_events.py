"""Concurrency guard and broadcast failure tests."""

import threading
import time

import pytest

from daggerboard.core.events import EventBus, get_event_bus, reset_event_bus
from daggerboard.db.guard import StoreGuard, after_commit
from daggerboard.db.models import Campaign, Entity
from daggerboard.db.session import get_session_factory
from daggerboard.enums import EventType
from daggerboard.errors import EmitError, LockError, PersistenceError


class TestStoreGuard:
    def test_commits_on_success(self):
        guard = StoreGuard(get_session_factory(), timeout=1.0)
        with guard.locked() as db:
            db.add(Campaign(name="Guarded"))
        with guard.locked() as db:
            assert db.query(Campaign).filter(Campaign.name == "Guarded").count() == 1
        assert not guard.is_held()

    def test_lock_timeout_raises_lock_error(self):
        guard = StoreGuard(get_session_factory(), timeout=0.05)
        with guard.locked():
            with pytest.raises(LockError):
                with guard.locked():
                    pass
        assert not guard.is_held()

    def test_lock_error_from_other_thread(self):
        guard = StoreGuard(get_session_factory(), timeout=0.05)
        holding = threading.Event()
        release = threading.Event()

        def hold():
            with guard.locked():
                holding.set()
                release.wait(5)

        worker = threading.Thread(target=hold)
        worker.start()
        try:
            assert holding.wait(5)
            with pytest.raises(LockError):
                with guard.locked():
                    pass
        finally:
            release.set()
            worker.join(5)

    def test_database_failure_rolls_back(self):
        guard = StoreGuard(get_session_factory(), timeout=1.0)
        with pytest.raises(PersistenceError):
            with guard.locked() as db:
                db.add(Campaign(name="Half written"))
                db.flush()
                db.add(Entity(campaign_id="nowhere", name=None, hp_max=1, hp_current=1))
        assert not guard.is_held()
        with guard.locked() as db:
            assert db.query(Campaign).filter(Campaign.name == "Half written").count() == 0

    def test_released_after_domain_error(self):
        guard = StoreGuard(get_session_factory(), timeout=1.0)
        with pytest.raises(ValueError):
            with guard.locked():
                raise ValueError("boom")
        assert not guard.is_held()

    def test_concurrent_mutations_serialize(self, sm, thresholds):
        entity = sm.create_entity("Target", 100, thresholds)

        def hammer():
            for _ in range(5):
                sm.update_entity_hp(entity.id, -1)

        threads = [threading.Thread(target=hammer) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(10)
        assert sm.get_entity(entity.id).hp_current == 60


    def test_after_commit_runs_with_lock_held(self):
        guard = StoreGuard(get_session_factory(), timeout=1.0)
        seen = []
        with guard.locked() as db:
            db.add(Campaign(name="Hooked"))
            after_commit(db, lambda: seen.append(guard.is_held()))
            assert seen == []
        assert seen == [True]
        assert not guard.is_held()

    def test_after_commit_dropped_on_rollback(self):
        guard = StoreGuard(get_session_factory(), timeout=1.0)
        seen = []
        with pytest.raises(ValueError):
            with guard.locked() as db:
                after_commit(db, lambda: seen.append("ran"))
                raise ValueError("abort")
        assert seen == []


class TestEventBus:
    def test_typed_and_wildcard_handlers(self):
        bus = EventBus()
        typed, everything = [], []
        bus.on(EventType.FEAR_LEVEL_UPDATED, typed.append)
        bus.on_any(everything.append)
        bus.emit(EventType.FEAR_LEVEL_UPDATED, level=1, campaign_id="c")
        bus.emit(EventType.TRACKERS_UPDATED, trackers=[], campaign_id="c")
        assert [e.type for e in typed] == [EventType.FEAR_LEVEL_UPDATED]
        assert len(everything) == 2
        assert bus.listener_count(EventType.FEAR_LEVEL_UPDATED) == 2

    def test_off(self):
        bus = EventBus()
        seen = []
        bus.on(EventType.CAMPAIGN_SWITCHED, seen.append)
        bus.off(EventType.CAMPAIGN_SWITCHED, seen.append)
        bus.emit(EventType.CAMPAIGN_SWITCHED, campaign_id="x")
        assert seen == []

    def test_failing_handler_does_not_stop_others(self):
        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("window closed")

        bus.on(EventType.CAMPAIGN_SWITCHED, broken)
        bus.on(EventType.CAMPAIGN_SWITCHED, seen.append)
        with pytest.raises(EmitError, match="campaign-switched"):
            bus.emit(EventType.CAMPAIGN_SWITCHED, campaign_id="x")
        assert len(seen) == 1

    def test_history_is_bounded(self):
        bus = EventBus(history_limit=3)
        for level in range(5):
            bus.emit(EventType.FEAR_LEVEL_UPDATED, level=level, campaign_id="c")
        assert [e.payload["level"] for e in bus.get_history()] == [2, 3, 4]

    def test_singleton_reset(self):
        first = get_event_bus()
        assert get_event_bus() is first
        reset_event_bus()
        assert get_event_bus() is not first


class TestBroadcastFailure:
    def test_emit_error_keeps_committed_mutation(self, sm, bus, thresholds):
        def broken(event):
            raise RuntimeError("observer crashed")

        bus.on(EventType.ENTITIES_UPDATED, broken)
        with pytest.raises(EmitError):
            sm.create_entity("Persisted anyway", 5, thresholds)
        bus.off(EventType.ENTITIES_UPDATED, broken)

        assert [e.name for e in sm.get_entities()] == ["Persisted anyway"]
        assert not sm.guard.is_held()


class TestBroadcastOrdering:
    def test_slow_delivery_cannot_reorder_concurrent_commands(self, sm, bus, thresholds):
        entity = sm.create_entity("Target", 10, thresholds)
        delivered = []
        first_publishing = threading.Event()

        def slow_window(event):
            hp = event.payload["entities"][0]["hp_current"]
            delivered.append(hp)
            if hp == 9:
                first_publishing.set()
                time.sleep(0.3)

        bus.on(EventType.ENTITIES_UPDATED, slow_window)
        first = threading.Thread(target=sm.set_entity_hp, args=(entity.id, 9))
        first.start()
        assert first_publishing.wait(5)
        second = threading.Thread(target=sm.set_entity_hp, args=(entity.id, 8))
        second.start()
        first.join(5)
        second.join(5)

        assert delivered == [9, 8]
        assert sm.get_entity(entity.id).hp_current == delivered[-1]

    def test_payload_reflects_the_mutation_that_queued_it(self, sm, recorder, thresholds):
        entity = sm.create_entity("Target", 10, thresholds)
        for hp in (7, 3, 5):
            sm.set_entity_hp(entity.id, hp)
        payloads = [e.payload["entities"][0]["hp_current"] for e in recorder.of(EventType.ENTITIES_UPDATED)]
        assert payloads == [10, 7, 3, 5]
