"""
Service facade wiring configuration, the event store and the aggregator.

This is the contract a presentation layer talks to: async inserts and
deletes on submitted forms, async reads on load and refresh.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from carelog.config import AppConfig, get_config
from carelog.domain.models import (
    DiaperEvent,
    DiaperType,
    FeedingEvent,
    FeedingType,
    HistoryRecord,
    LastFeedingInfo,
    RecordKind,
    TodayStats,
)
from carelog.domain.timestamps import Clock, local_now
from carelog.services.aggregator import Aggregator
from carelog.services.event_store import SQLiteEventStore
from carelog.services.recency import FeedingAlert, classify_recency
from carelog.services.observability import logger


@dataclass(frozen=True)
class HomeScreen:
    """Everything the home screen shows, read in one pass."""

    stats: TodayStats
    last_feeding: LastFeedingInfo
    alert: FeedingAlert


class CareLogService:
    """Single entry point over one care log database."""

    def __init__(
        self,
        store: SQLiteEventStore,
        aggregator: Aggregator,
        config: AppConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.store = store
        self.aggregator = aggregator
        self.logger = logger.bind(component="care_log")

    @classmethod
    def from_config(
        cls, config: AppConfig | None = None, clock: Clock = local_now
    ) -> "CareLogService":
        config = config or get_config()
        store = SQLiteEventStore(config.storage.db_path, clock=clock)
        aggregator = Aggregator(store, clock=clock, recent_limit=config.aggregation.recent_limit)
        return cls(store, aggregator, config)

    @asynccontextmanager
    async def session(self) -> AsyncIterator["CareLogService"]:
        async with self.store.session():
            self.logger.info("care_log_session_started", environment=self.config.environment)
            try:
                yield self
            finally:
                self.logger.info("care_log_session_ended")

    async def initialize(self) -> None:
        await self.store.initialize()

    async def close(self) -> None:
        await self.store.close()

    # Writes

    async def add_feeding(
        self, amount: int, milk_type: FeedingType | str, notes: str | None = None
    ) -> int:
        return await self.store.insert_feeding(amount, milk_type, notes)

    async def add_diaper(self, diaper_type: DiaperType | str, notes: str | None = None) -> int:
        return await self.store.insert_diaper(diaper_type, notes)

    async def delete_record(self, kind: RecordKind | str, record_id: int) -> bool:
        return await self.store.delete_by_id(kind, record_id)

    async def clear_all(self) -> None:
        await self.store.clear_all()

    # Reads

    async def recent_feedings(self, limit: int | None = None) -> list[FeedingEvent]:
        if limit is None:
            limit = self.config.aggregation.recent_limit
        return await self.store.get_recent_feedings(limit)

    async def recent_diapers(self, limit: int | None = None) -> list[DiaperEvent]:
        if limit is None:
            limit = self.config.aggregation.recent_limit
        return await self.store.get_recent_diapers(limit)

    async def today_stats(self) -> TodayStats:
        return await self.aggregator.get_today_stats()

    async def history(self, limit: int | None = None) -> list[HistoryRecord]:
        if limit is None:
            limit = self.config.aggregation.history_limit
        return await self.aggregator.get_all_history(limit)

    async def last_feeding_info(self) -> LastFeedingInfo:
        return await self.aggregator.get_last_feeding_info()

    async def home_screen(self) -> HomeScreen:
        """Today's stats, last-feeding recency and the alert level it implies."""
        stats = await self.aggregator.get_today_stats()
        last_feeding = await self.aggregator.get_last_feeding_info()
        alert = classify_recency(last_feeding, self.config.recency)

        self.logger.debug(
            "home_screen_loaded",
            feedings=stats.today.feedings,
            total_milk=stats.today.total_milk,
            alert=alert.value,
        )
        return HomeScreen(stats=stats, last_feeding=last_feeding, alert=alert)
