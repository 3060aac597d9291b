"""
Tests for the service facade and the terminal dashboard.

These run against a real temp-file database, the way a presentation
layer would use the package.
"""

from pathlib import Path

import pytest
from rich.console import Console

from carelog.config import AggregationConfig, AppConfig, StorageConfig
from carelog.dashboard import render_history, render_home
from carelog.domain.models import DiaperType, FeedingType, RecordKind
from carelog.errors import ValidationError
from carelog.services import CareLogService, FeedingAlert


@pytest.fixture
def config(db_path: Path) -> AppConfig:
    return AppConfig(
        storage=StorageConfig(db_path=db_path),
        aggregation=AggregationConfig(recent_limit=3, history_limit=4),
    )


@pytest.fixture
def service(config: AppConfig, clock) -> CareLogService:
    return CareLogService.from_config(config, clock=clock)


def _render(renderable: object) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


async def test_session_round_trip(service: CareLogService, db_path: Path, clock) -> None:
    async with service.session():
        await service.add_feeding(120, FeedingType.FORMULA)
        clock.advance(minutes=30)
        await service.add_diaper(DiaperType.BOTH, notes="after nap")

    assert db_path.exists()
    assert service.store._conn is None


async def test_home_screen_combines_stats_recency_and_alert(
    service: CareLogService, clock
) -> None:
    async with service.session():
        await service.add_feeding(120, FeedingType.FORMULA)
        await service.add_diaper(DiaperType.BOTH)
        clock.advance(hours=3, minutes=25)

        screen = await service.home_screen()

    assert screen.stats.today.feedings == 1
    assert screen.stats.today.urine == 1
    assert screen.stats.today.stool == 1
    assert (screen.last_feeding.hours, screen.last_feeding.minutes) == (3, 25)
    assert screen.alert is FeedingAlert.APPROACHING


async def test_recent_limit_comes_from_config(service: CareLogService, clock) -> None:
    async with service.session():
        for amount in (60, 70, 80, 90):
            await service.add_feeding(amount, FeedingType.BREAST_MILK)
            clock.advance(minutes=45)

        stats = await service.today_stats()
        recent = await service.recent_feedings()

    assert [event.amount for event in stats.recent_feedings] == [90, 80, 70]
    assert [event.amount for event in recent] == [90, 80, 70]


async def test_history_limit_comes_from_config(service: CareLogService, clock) -> None:
    async with service.session():
        for _ in range(3):
            await service.add_feeding(100, FeedingType.FORMULA)
            await service.add_diaper(DiaperType.URINE)
            clock.advance(minutes=10)

        assert len(await service.history()) == 4
        assert len(await service.history(limit=6)) == 6


async def test_delete_and_clear(service: CareLogService) -> None:
    async with service.session():
        feeding_id = await service.add_feeding(100, FeedingType.FORMULA)
        await service.add_diaper(DiaperType.STOOL)

        assert await service.delete_record(RecordKind.FEEDING, feeding_id) is True
        assert await service.delete_record(RecordKind.FEEDING, feeding_id) is False

        await service.clear_all()
        info = await service.last_feeding_info()
        history = await service.history()

    assert info.exists is False
    assert history == []


async def test_validation_errors_reach_the_caller(service: CareLogService) -> None:
    async with service.session():
        with pytest.raises(ValidationError):
            await service.add_feeding(-10, FeedingType.FORMULA)


async def test_dashboard_shows_totals_and_feed_now(service: CareLogService, clock) -> None:
    async with service.session():
        await service.add_feeding(120, FeedingType.FORMULA)
        clock.advance(minutes=20)
        await service.add_feeding(90, FeedingType.BREAST_MILK, notes="sleepy")
        await service.add_diaper(DiaperType.URINE)
        clock.advance(hours=4, minutes=5)

        screen = await service.home_screen()
        history = await service.history()

    assert screen.alert is FeedingAlert.FEED_NOW

    home_text = _render(render_home(screen))
    assert "210 ml" in home_text
    assert "4 h 5 min ago" in home_text
    assert "Time to feed" in home_text
    assert "sleepy" in home_text

    history_text = _render(render_history(history))
    assert "2024-05-14 09:50:00" in history_text
    assert "90 ml breast-milk" in history_text
    assert "urine" in history_text


async def test_dashboard_on_empty_log(service: CareLogService) -> None:
    async with service.session():
        screen = await service.home_screen()

    text = _render(render_home(screen))

    assert screen.alert is FeedingAlert.NONE
    assert "no feedings yet" in text
    assert "0 ml" in text
