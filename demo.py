"""
Seed a throwaway care log and print the home screen and history.

Run with: python demo.py
"""

import asyncio
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from carelog.config import AppConfig, StorageConfig, get_config
from carelog.dashboard import render_history, render_home
from carelog.domain.models import DiaperType, FeedingType
from carelog.services import CareLogService, configure_logging

console = Console()


class ScriptedClock:
    """Clock that can be moved by hand so the demo spans several hours."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


async def main() -> None:
    base = get_config()
    configure_logging(base.logging)

    with tempfile.TemporaryDirectory() as tmpdir:
        config = AppConfig(
            environment=base.environment,
            debug=base.debug,
            storage=StorageConfig(db_path=Path(tmpdir) / "demo.db"),
            aggregation=base.aggregation,
            recency=base.recency,
            logging=base.logging,
        )
        clock = ScriptedClock(datetime.now().replace(hour=6, minute=0, second=0, microsecond=0))
        service = CareLogService.from_config(config, clock=clock)

        async with service.session():
            console.print(Panel("Recording a morning", style="blue"))
            await service.add_feeding(120, FeedingType.FORMULA)
            clock.advance(minutes=40)
            await service.add_diaper(DiaperType.URINE)
            clock.advance(hours=2, minutes=30)
            await service.add_feeding(90, FeedingType.BREAST_MILK, notes="fell asleep halfway")
            last_feeding_at = clock()
            clock.advance(minutes=15)
            await service.add_diaper(DiaperType.BOTH)

            for hours_since in (1, 3, 4):
                clock.now = last_feeding_at + timedelta(hours=hours_since, minutes=5)
                console.print(render_home(await service.home_screen()))

            console.print(render_history(await service.history()))


if __name__ == "__main__":
    asyncio.run(main())
