"""Shared fixtures: a hand-driven clock and a temp-file event store."""

import sqlite3
from collections.abc import AsyncIterator, Iterator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from carelog.services.aggregator import Aggregator
from carelog.services.event_store import SQLiteEventStore


class FakeClock:
    """Local wall clock that only moves when a test moves it."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 14, 9, 30, 0))


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "babyRecords.db"


@pytest.fixture
async def store(db_path: Path, clock: FakeClock) -> AsyncIterator[SQLiteEventStore]:
    event_store = SQLiteEventStore(db_path, clock=clock)
    await event_store.initialize()
    yield event_store
    await event_store.close()


@pytest.fixture
def aggregator(store: SQLiteEventStore, clock: FakeClock) -> Aggregator:
    return Aggregator(store, clock=clock)


@pytest.fixture
def raw_db(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Second connection to the same file, for arranging or inspecting rows directly."""
    conn = sqlite3.connect(db_path)
    conn.isolation_level = None
    yield conn
    conn.close()
