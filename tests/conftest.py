"""Shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from waterlog.adapters.memory_settings import MemorySettingsStore
from waterlog.store import WaterStore

TZ = timezone(timedelta(hours=-5))


class FakeClock:
    """Settable clock for the store."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 10, 0, tzinfo=TZ)


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def settings():
    return MemorySettingsStore()


@pytest.fixture
def store(settings, clock):
    s = WaterStore(settings, tz=TZ, clock=clock)
    s.initialize()
    return s
