"""
Read-only derived views over the event logs.

Every view comes in two shapes. ``try_*`` returns a Result so callers
and tests can tell an empty log from a failed query. The plain method
is the presentation boundary: it logs the failure and falls back to a
zeroed value, so a transient read error never reaches the screen.
"""

import heapq
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from carelog.domain.models import HistoryRecord, LastFeedingInfo, TodayStats, TodayTotals
from carelog.domain.timestamps import Clock, local_now
from carelog.errors import StorageError
from carelog.services.event_store import EventLog
from carelog.services.observability import logger
from carelog.services.result import Result

T = TypeVar("T")

DEFAULT_RECENT_LIMIT = 5
DEFAULT_HISTORY_LIMIT = 100


class Aggregator:
    """Computes today's totals, merged history and last-feeding recency."""

    def __init__(
        self,
        events: EventLog,
        clock: Clock = local_now,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ) -> None:
        self.events = events
        self.recent_limit = recent_limit
        self._clock = clock
        self.logger = logger.bind(component="aggregator")

    def _now(self) -> datetime:
        return self._clock()

    async def _attempt(self, query: Callable[[], Awaitable[T]]) -> Result[T, StorageError]:
        try:
            return Result.ok(await query())
        except StorageError as e:
            return Result.err(e)

    # Today

    async def _today_stats(self) -> TodayStats:
        today = self._now().date()
        feedings = await self.events.get_feedings_on(today)
        diapers = await self.events.get_diapers_on(today)

        totals = TodayTotals(
            feedings=len(feedings),
            total_milk=sum(event.amount for event in feedings),
            urine=sum(1 for event in diapers if event.has_urine),
            stool=sum(1 for event in diapers if event.has_stool),
        )
        return TodayStats(
            today=totals,
            recent_feedings=await self.events.get_recent_feedings(self.recent_limit),
            recent_diapers=await self.events.get_recent_diapers(self.recent_limit),
        )

    async def try_get_today_stats(self) -> Result[TodayStats, StorageError]:
        return await self._attempt(self._today_stats)

    async def get_today_stats(self) -> TodayStats:
        """Today's counters and the newest events of each log; zeroed on failure."""
        result = await self.try_get_today_stats()
        if result.is_err():
            self.logger.error("today_stats_failed", error=str(result.unwrap_err()))
        return result.unwrap_or(TodayStats.empty())

    # History

    async def _history(self, limit: int) -> list[HistoryRecord]:
        feedings = await self.events.get_recent_feedings(limit)
        diapers = await self.events.get_recent_diapers(limit)

        merged = heapq.merge(
            (HistoryRecord.from_feeding(event) for event in feedings),
            (HistoryRecord.from_diaper(event) for event in diapers),
            key=lambda record: record.timestamp,
            reverse=True,
        )
        return list(merged)[:limit]

    async def try_get_all_history(
        self, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> Result[list[HistoryRecord], StorageError]:
        return await self._attempt(lambda: self._history(limit))

    async def get_all_history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[HistoryRecord]:
        """Both logs merged newest first, at most ``limit`` records; empty on failure."""
        result = await self.try_get_all_history(limit)
        if result.is_err():
            self.logger.error("history_failed", error=str(result.unwrap_err()), limit=limit)
        return result.unwrap_or([])

    # Recency

    async def _last_feeding_info(self) -> LastFeedingInfo:
        last = await self.events.get_last_feeding()
        if last is None:
            return LastFeedingInfo.missing()
        return LastFeedingInfo.since(last, self._now())

    async def try_get_last_feeding_info(self) -> Result[LastFeedingInfo, StorageError]:
        return await self._attempt(self._last_feeding_info)

    async def get_last_feeding_info(self) -> LastFeedingInfo:
        """Most recent feeding and the time since it, snapshotted now."""
        result = await self.try_get_last_feeding_info()
        if result.is_err():
            self.logger.error("last_feeding_info_failed", error=str(result.unwrap_err()))
        return result.unwrap_or(LastFeedingInfo.missing())
