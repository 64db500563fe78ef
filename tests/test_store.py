"""Tests for WaterStore."""

import logging
from datetime import timedelta

import pytest

from waterlog.adapters.memory_settings import MemorySettingsStore
from waterlog.core.logs import LogEntry, deserialize_logs, serialize_logs
from waterlog.store import GOAL_KEY, LOGS_KEY, StoreNotInitializedError, WaterStore

from conftest import TZ, FakeClock


class FailingSettingsStore(MemorySettingsStore):
    """Loads fine, refuses every write."""

    def save(self, key: str, data: bytes) -> None:
        raise OSError("disk full")


class TestInitialize:
    def test_empty_settings(self, store):
        assert store.is_ready
        assert store.daily_logs == []
        assert store.target_goal == 2000
        assert store.total_today() == 0
        assert store.progress() == 0.0

    def test_custom_default_goal(self, settings, clock):
        store = WaterStore(settings, tz=TZ, clock=clock, default_goal=2500)
        store.initialize()
        assert store.target_goal == 2500

    def test_use_before_initialize_raises(self, settings, clock):
        store = WaterStore(settings, tz=TZ, clock=clock)
        assert not store.is_ready
        with pytest.raises(StoreNotInitializedError):
            store.add_log(200)
        with pytest.raises(StoreNotInitializedError):
            store.total_today()

    def test_loads_saved_logs_and_goal(self, settings, clock, now):
        saved = [
            LogEntry(timestamp=now - timedelta(minutes=5), amount=300, id="b"),
            LogEntry(timestamp=now - timedelta(hours=1), amount=200, id="a"),
        ]
        settings.save(LOGS_KEY, serialize_logs(saved))
        settings.save(GOAL_KEY, b"1500")

        store = WaterStore(settings, tz=TZ, clock=clock)
        store.initialize()

        assert store.daily_logs == saved
        assert store.target_goal == 1500
        assert store.total_today() == 500

    @pytest.mark.parametrize(
        "data",
        [
            b"{broken",
            b'[{"id": "a", "timestamp": "0001-01-01T00:00:00+01:00", "amount": 1}]',
            b'[{"id": "a", "timestamp": "9999-12-31T23:00:00-05:00", "amount": 1}]',
            b"[" * 100000,
        ],
    )
    def test_corrupt_logs_become_empty(self, settings, clock, caplog, data):
        settings.save(LOGS_KEY, data)
        store = WaterStore(settings, tz=TZ, clock=clock)

        with caplog.at_level(logging.WARNING, logger="waterlog.store"):
            store.initialize()

        assert store.daily_logs == []
        assert "unreadable saved logs" in caplog.text

    def test_corrupt_goal_falls_back_to_default(self, settings, clock):
        settings.save(GOAL_KEY, b"two litres")
        store = WaterStore(settings, tz=TZ, clock=clock)
        store.initialize()
        assert store.target_goal == 2000

    def test_reinitialize_reloads(self, store, settings, now):
        settings.save(LOGS_KEY, serialize_logs([LogEntry(timestamp=now, amount=123)]))
        store.initialize()
        assert store.total_today() == 123


class TestAddLog:
    def test_example_scenario(self, store):
        store.add_log(200)
        store.add_log(500)

        assert [e.amount for e in store.daily_logs] == [500, 200]
        assert store.total_today() == 700
        assert store.progress() == pytest.approx(0.35)

    def test_total_is_sum_of_amounts(self, store, clock):
        amounts = [250, 100, 330, 500, 75]
        for amount in amounts:
            store.add_log(amount)
            clock.advance(minutes=10)
        assert store.total_today() == sum(amounts)
        assert len(store.daily_logs) == len(amounts)

    def test_newest_first(self, store, clock):
        first = store.add_log(100)
        clock.advance(minutes=1)
        second = store.add_log(200)
        clock.advance(minutes=1)
        third = store.add_log(300)
        assert [e.id for e in store.daily_logs] == [third.id, second.id, first.id]

    def test_entry_gets_current_time(self, store, now):
        entry = store.add_log(200)
        assert entry.timestamp == now

    def test_persists_full_sequence(self, store, settings):
        store.add_log(200)
        store.add_log(500)
        assert deserialize_logs(settings.load(LOGS_KEY)) == store.daily_logs

    def test_survives_reload(self, store, settings, clock):
        store.add_log(200)
        store.add_log(500)

        reloaded = WaterStore(settings, tz=TZ, clock=clock)
        reloaded.initialize()
        assert reloaded.daily_logs == store.daily_logs

    def test_accepts_zero_and_negative(self, store):
        store.add_log(0)
        store.add_log(-150)
        store.add_log(400)
        assert store.total_today() == 250
        assert len(store.daily_logs) == 3

    def test_daily_logs_is_a_copy(self, store):
        store.add_log(200)
        logs = store.daily_logs
        logs.clear()
        assert len(store.daily_logs) == 1


class TestProgress:
    def test_zero_goal(self, store):
        store.set_target_goal(0)
        store.add_log(100)
        assert store.progress() == 0.0

    def test_goal_reached(self, store):
        store.set_target_goal(500)
        store.add_log(500)
        assert store.progress() == 1.0

    def test_goal_exceeded_is_capped(self, store):
        store.set_target_goal(500)
        store.add_log(800)
        assert store.progress() == 1.0

    def test_negative_total_is_floored(self, store):
        store.add_log(-300)
        assert store.progress() == 0.0

    def test_recomputed_after_goal_change(self, store):
        store.add_log(1000)
        assert store.progress() == pytest.approx(0.5)
        store.set_target_goal(4000)
        assert store.progress() == pytest.approx(0.25)


class TestDayReset:
    def test_initialize_clears_previous_day(self, settings, clock, now):
        yesterday = [LogEntry(timestamp=now - timedelta(days=1), amount=800)]
        settings.save(LOGS_KEY, serialize_logs(yesterday))

        store = WaterStore(settings, tz=TZ, clock=clock)
        store.initialize()

        assert store.daily_logs == []
        assert store.total_today() == 0
        assert settings.load(LOGS_KEY) == b"[]"

    def test_initialize_keeps_today(self, settings, clock, now):
        today = [LogEntry(timestamp=now - timedelta(hours=3), amount=800)]
        settings.save(LOGS_KEY, serialize_logs(today))

        store = WaterStore(settings, tz=TZ, clock=clock)
        store.initialize()

        assert store.daily_logs == today

    def test_reset_keeps_goal(self, settings, clock, now):
        settings.save(LOGS_KEY, serialize_logs([LogEntry(timestamp=now - timedelta(days=2), amount=1)]))
        settings.save(GOAL_KEY, b"3000")

        store = WaterStore(settings, tz=TZ, clock=clock)
        store.initialize()

        assert store.target_goal == 3000

    def test_check_on_empty_is_noop(self, store, settings):
        assert store.check_and_reset_logs() is False
        assert settings.load(LOGS_KEY) is None

    def test_check_same_day(self, store, clock):
        store.add_log(200)
        clock.advance(hours=5)
        assert store.check_and_reset_logs() is False
        assert store.total_today() == 200

    def test_check_after_midnight(self, store, clock, settings):
        store.add_log(200)
        clock.advance(days=1)
        assert store.check_and_reset_logs() is True
        assert store.daily_logs == []
        assert settings.load(LOGS_KEY) == b"[]"

    def test_add_log_after_midnight_starts_fresh_day(self, store, clock):
        """A session left open over midnight does not add to yesterday's total."""
        store.set_target_goal(1000)
        store.add_log(900)
        clock.advance(hours=15)  # 01:00 the next day
        entry = store.add_log(100)

        assert store.daily_logs == [entry]
        assert store.total_today() == 100
        assert store.progress() == pytest.approx(0.1)

    def test_late_evening_entry_not_reset_before_local_midnight(self, settings, now):
        clock = FakeClock(now.replace(hour=23, minute=30))
        store = WaterStore(settings, tz=TZ, clock=clock)
        store.initialize()
        store.add_log(200)

        clock.advance(minutes=20)
        assert store.check_and_reset_logs() is False

        clock.advance(minutes=20)
        assert store.check_and_reset_logs() is True


class TestClearAll:
    def test_clears_everything(self, store, settings):
        store.add_log(200)
        store.add_log(500)
        store.clear_all()

        assert store.daily_logs == []
        assert store.total_today() == 0
        assert settings.load(LOGS_KEY) == b"[]"

    def test_on_empty_store(self, store):
        store.clear_all()
        assert store.daily_logs == []

    def test_keeps_goal(self, store):
        store.set_target_goal(2500)
        store.clear_all()
        assert store.target_goal == 2500


class TestSetTargetGoal:
    def test_persists_independently(self, store, settings):
        store.add_log(200)
        logs_before = settings.load(LOGS_KEY)

        store.set_target_goal(1800)

        assert settings.load(GOAL_KEY) == b"1800"
        assert settings.load(LOGS_KEY) == logs_before

    def test_survives_reload(self, store, settings, clock):
        store.set_target_goal(3200)
        reloaded = WaterStore(settings, tz=TZ, clock=clock)
        reloaded.initialize()
        assert reloaded.target_goal == 3200

    def test_accepts_zero_and_negative(self, store):
        store.set_target_goal(0)
        assert store.target_goal == 0
        store.set_target_goal(-1)
        assert store.target_goal == -1


class TestWriteFailures:
    def test_failures_are_logged_not_raised(self, clock, caplog):
        store = WaterStore(FailingSettingsStore(), tz=TZ, clock=clock)
        store.initialize()

        with caplog.at_level(logging.ERROR, logger="waterlog.store"):
            store.add_log(200)
            store.set_target_goal(1000)

        assert store.total_today() == 200
        assert store.target_goal == 1000
        assert "Failed to save daily_logs" in caplog.text
        assert "Failed to save target_goal" in caplog.text


class TestSubscribe:
    def test_notified_after_each_mutation(self, store):
        seen = []
        store.subscribe(lambda s: seen.append(s.total_today()))

        store.add_log(200)
        store.add_log(300)
        store.set_target_goal(1000)
        store.clear_all()

        assert seen == [200, 500, 500, 0]

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(lambda s: seen.append(s))
        store.add_log(200)
        unsubscribe()
        store.add_log(200)
        assert len(seen) == 1

    def test_notified_on_day_reset(self, store, clock):
        store.add_log(200)
        seen = []
        store.subscribe(lambda s: seen.append(len(s.daily_logs)))
        clock.advance(days=1)
        store.check_and_reset_logs()
        assert seen == [0]
