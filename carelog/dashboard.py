"""
Terminal rendering of the home screen and the history list with rich.

Pure functions from models to renderables; nothing here touches the
database.
"""

from datetime import datetime

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from carelog.domain.models import HistoryRecord, RecordKind
from carelog.domain.timestamps import format_timestamp
from carelog.services.care_log import HomeScreen
from carelog.services.recency import FeedingAlert, describe_recency

ALERT_STYLES = {
    FeedingAlert.NONE: "green",
    FeedingAlert.APPROACHING: "dark_orange",
    FeedingAlert.FEED_NOW: "red",
}

ALERT_LABELS = {
    FeedingAlert.NONE: "",
    FeedingAlert.APPROACHING: "Feeding time is approaching",
    FeedingAlert.FEED_NOW: "Time to feed",
}


def _clock_time(record_time: datetime | None) -> str:
    return record_time.strftime("%H:%M") if record_time is not None else "--:--"


def render_totals(screen: HomeScreen) -> Table:
    today = screen.stats.today
    table = Table(title="Today", show_header=True)
    table.add_column("Feedings", style="cyan", justify="right")
    table.add_column("Total milk", style="cyan", justify="right")
    table.add_column("Urine", style="yellow", justify="right")
    table.add_column("Stool", style="magenta", justify="right")
    table.add_row(str(today.feedings), f"{today.total_milk} ml", str(today.urine), str(today.stool))
    return table


def render_last_feeding(screen: HomeScreen) -> Text:
    info = screen.last_feeding
    style = ALERT_STYLES[screen.alert]

    text = Text()
    text.append("Last feeding: ", style="bold")
    text.append(describe_recency(info), style=style)
    if info.exists:
        text.append(f"  (at {_clock_time(info.timestamp)}, {info.amount} ml {info.type.value})")
    label = ALERT_LABELS[screen.alert]
    if label:
        text.append(f"\n{label}", style=f"bold {style}")
    return text


def render_recent(screen: HomeScreen) -> Table:
    table = Table(title="Recent records")
    table.add_column("Time", style="cyan")
    table.add_column("Record", style="white")
    table.add_column("Notes", style="dim")

    for feeding in screen.stats.recent_feedings:
        table.add_row(
            _clock_time(feeding.timestamp),
            f"{feeding.amount} ml {feeding.type.value}",
            feeding.notes or "",
        )
    for diaper in screen.stats.recent_diapers:
        table.add_row(
            _clock_time(diaper.timestamp), f"diaper: {diaper.type.value}", diaper.notes or ""
        )
    return table


def render_home(screen: HomeScreen) -> Panel:
    """Home screen: today's totals, recency line with alert, recent records."""
    body = Group(render_totals(screen), render_last_feeding(screen), render_recent(screen))
    return Panel(body, title="Baby care log", border_style=ALERT_STYLES[screen.alert])


def render_history(records: list[HistoryRecord]) -> Table:
    """Merged history, newest first, one row per record."""
    table = Table(title="History")
    table.add_column("When", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Detail", style="white")
    table.add_column("Notes", style="dim")

    for record in records:
        if record.kind is RecordKind.FEEDING:
            detail = f"{record.amount} ml {record.type.value}"
        else:
            detail = record.type.value
        table.add_row(
            format_timestamp(record.timestamp), record.kind.value, detail, record.notes or ""
        )
    return table
