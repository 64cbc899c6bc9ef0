"""Shared fixtures: manual scheduler/clock, in-memory sqlite slot, timer wiring."""

import sqlite3
from typing import Callable, Dict, List, Optional

import pytest

from core.timer_engine import TimerEngine
from domain.models import RenderFrame
from services.duration_source import DurationSource, MemoryInput
from storage.db import Database
from storage.repos import AppStateRepo
from storage.snapshot_store import SnapshotStore

T0_MS = 1_700_000_000_000.0


class FakeScheduler:
    """Collects tick requests; tests fire them by hand."""

    def __init__(self):
        self._next = 0
        self.pending: Dict[int, Callable[[float], None]] = {}
        self.cancelled: List[int] = []

    def request_tick(self, callback):
        self._next += 1
        self.pending[self._next] = callback
        return self._next

    def cancel_tick(self, handle):
        self.cancelled.append(handle)
        self.pending.pop(handle, None)

    def fire(self, now: float) -> bool:
        if not self.pending:
            return False
        handle = min(self.pending)
        callback = self.pending.pop(handle)
        callback(now)
        return True


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class WallClock:
    def __init__(self, now_ms: float = T0_MS):
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms


class FailingRepo:
    """AppStateRepo stand-in whose slot operations raise sqlite errors."""

    def __init__(self, fail_probe=True, fail_set=True, fail_get=False, fail_delete=False):
        self.fail_probe = fail_probe
        self.fail_set = fail_set
        self.fail_get = fail_get
        self.fail_delete = fail_delete
        self.values: Dict[str, str] = {}
        self.set_calls = 0

    def probe(self, key: str = "__storage_test__") -> None:
        if self.fail_probe:
            raise sqlite3.OperationalError("attempt to write a readonly database")

    def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise sqlite3.OperationalError("disk I/O error")
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.set_calls += 1
        if self.fail_set:
            raise sqlite3.OperationalError("database or disk is full")
        self.values[key] = value

    def delete(self, key: str) -> None:
        if self.fail_delete:
            raise sqlite3.OperationalError("attempt to write a readonly database")
        self.values.pop(key, None)


@pytest.fixture
def db():
    d = Database(db_path=":memory:")
    d.init_schema()
    yield d
    d.close()


@pytest.fixture
def repo(db) -> AppStateRepo:
    return AppStateRepo(db)


@pytest.fixture
def store(repo) -> SnapshotStore:
    return SnapshotStore(repo)


@pytest.fixture
def inputs() -> List[MemoryInput]:
    return [MemoryInput("5"), MemoryInput("30"), MemoryInput("5")]


@pytest.fixture
def durations(inputs) -> DurationSource:
    return DurationSource(inputs)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def wall() -> WallClock:
    return WallClock()


@pytest.fixture
def frames() -> List[RenderFrame]:
    return []


@pytest.fixture
def engine(durations, store, scheduler, clock, wall, frames) -> TimerEngine:
    e = TimerEngine(
        durations,
        store,
        scheduler,
        on_render=frames.append,
        clock=clock,
        wall_clock_ms=wall,
    )
    e.set_phase(0)
    return e
