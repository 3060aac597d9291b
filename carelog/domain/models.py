"""
Domain models for the infant-care log.

Events are immutable once written: the store assigns the id and the
timestamp, and nothing updates a record in place. Models are pydantic
and frozen; timestamps dump back to the on-disk text format.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from carelog.domain.timestamps import format_timestamp, parse_timestamp

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 60 * MS_PER_MINUTE


class FeedingType(str, Enum):
    """Kind of milk given at a feeding."""

    BREAST_MILK = "breast-milk"
    FORMULA = "formula"

    @classmethod
    def _missing_(cls, value: object) -> "FeedingType | None":
        return _LEGACY_FEEDING_LABELS.get(value) if isinstance(value, str) else None


class DiaperType(str, Enum):
    """What a diaper change contained."""

    URINE = "urine"
    STOOL = "stool"
    BOTH = "both"

    @classmethod
    def _missing_(cls, value: object) -> "DiaperType | None":
        return _LEGACY_DIAPER_LABELS.get(value) if isinstance(value, str) else None


class RecordKind(str, Enum):
    """Which log a record belongs to."""

    FEEDING = "feeding"
    DIAPER = "diaper"


# Labels written by the original mobile app
_LEGACY_FEEDING_LABELS = {
    "母乳": FeedingType.BREAST_MILK,
    "配方奶": FeedingType.FORMULA,
}
_LEGACY_DIAPER_LABELS = {
    "小便": DiaperType.URINE,
    "大便": DiaperType.STOOL,
    "两者都有": DiaperType.BOTH,
}


def _coerce_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        return parse_timestamp(value)
    return value


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: datetime
    notes: str | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        return _coerce_timestamp(value)

    @field_serializer("timestamp")
    def _dump_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)


class FeedingEvent(_Event):
    """A logged feeding: volume in milliliters and milk type."""

    amount: int = Field(gt=0, description="Volume in milliliters")
    type: FeedingType


class DiaperEvent(_Event):
    """A logged diaper change."""

    type: DiaperType

    @property
    def has_urine(self) -> bool:
        return self.type in (DiaperType.URINE, DiaperType.BOTH)

    @property
    def has_stool(self) -> bool:
        return self.type in (DiaperType.STOOL, DiaperType.BOTH)


class HistoryRecord(_Event):
    """One entry of the merged history, tagged with the log it came from."""

    kind: RecordKind
    amount: int | None = None
    type: FeedingType | DiaperType

    @classmethod
    def from_feeding(cls, event: FeedingEvent) -> "HistoryRecord":
        return cls(
            kind=RecordKind.FEEDING,
            id=event.id,
            timestamp=event.timestamp,
            amount=event.amount,
            type=event.type,
            notes=event.notes,
        )

    @classmethod
    def from_diaper(cls, event: DiaperEvent) -> "HistoryRecord":
        return cls(
            kind=RecordKind.DIAPER,
            id=event.id,
            timestamp=event.timestamp,
            amount=None,
            type=event.type,
            notes=event.notes,
        )


class TodayTotals(BaseModel):
    """Counters for the current calendar day."""

    model_config = ConfigDict(frozen=True)

    feedings: int = Field(default=0, ge=0)
    total_milk: int = Field(default=0, ge=0, description="Milliliters fed today")
    urine: int = Field(default=0, ge=0, description="Diapers with urine, 'both' included")
    stool: int = Field(default=0, ge=0, description="Diapers with stool, 'both' included")


class TodayStats(BaseModel):
    """Home-screen summary: today's totals plus the newest events of each log."""

    model_config = ConfigDict(frozen=True)

    today: TodayTotals = Field(default_factory=TodayTotals)
    recent_feedings: list[FeedingEvent] = Field(default_factory=list)
    recent_diapers: list[DiaperEvent] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "TodayStats":
        return cls()


class LastFeedingInfo(BaseModel):
    """
    Snapshot of the most recent feeding and the time elapsed since it.

    The elapsed fields are computed once, at query time. Callers that
    display a running clock must query again to refresh them.
    """

    model_config = ConfigDict(frozen=True)

    exists: bool
    timestamp: datetime | None = None
    amount: int | None = None
    type: FeedingType | None = None
    elapsed_ms: int = Field(default=0, ge=0)
    hours: int = Field(default=0, ge=0)
    minutes: int = Field(default=0, ge=0, lt=60)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        return _coerce_timestamp(value)

    @field_serializer("timestamp")
    def _dump_timestamp(self, value: datetime | None) -> str | None:
        return format_timestamp(value) if value is not None else None

    @property
    def elapsed(self) -> timedelta:
        return timedelta(milliseconds=self.elapsed_ms)

    @classmethod
    def missing(cls) -> "LastFeedingInfo":
        return cls(exists=False)

    @classmethod
    def since(cls, event: FeedingEvent, now: datetime) -> "LastFeedingInfo":
        """Decompose ``now - event.timestamp`` into whole hours and minutes."""
        elapsed_ms = max(0, (now - event.timestamp) // timedelta(milliseconds=1))
        return cls(
            exists=True,
            timestamp=event.timestamp,
            amount=event.amount,
            type=event.type,
            elapsed_ms=elapsed_ms,
            hours=elapsed_ms // MS_PER_HOUR,
            minutes=(elapsed_ms % MS_PER_HOUR) // MS_PER_MINUTE,
        )
