"""
Feeding-due policy applied on top of the raw recency snapshot.

The aggregator only reports elapsed time. Whether that time means
"approaching" or "feed now" is decided here, from configurable hour
thresholds, so display code and tests share one definition.
"""

from datetime import timedelta
from enum import Enum

from carelog.config import RecencyConfig
from carelog.domain.models import LastFeedingInfo


class FeedingAlert(str, Enum):
    """How urgently the next feeding is due."""

    NONE = "none"
    APPROACHING = "approaching"
    FEED_NOW = "feed_now"


def classify_elapsed(elapsed: timedelta, config: RecencyConfig | None = None) -> FeedingAlert:
    config = config or RecencyConfig()
    if elapsed >= timedelta(hours=config.feed_now_hours):
        return FeedingAlert.FEED_NOW
    if elapsed >= timedelta(hours=config.approaching_hours):
        return FeedingAlert.APPROACHING
    return FeedingAlert.NONE


def classify_recency(info: LastFeedingInfo, config: RecencyConfig | None = None) -> FeedingAlert:
    """Alert level for a recency snapshot; no feeding on record means no alert."""
    if not info.exists:
        return FeedingAlert.NONE
    return classify_elapsed(info.elapsed, config)


def describe_recency(info: LastFeedingInfo) -> str:
    """Short human phrase such as ``"3 h 25 min ago"``.

    The phrase carries no colour of its own. Highlighting comes only from
    ``classify_recency``; there is no separate highlight for feedings
    45 minutes old or more.
    """
    if not info.exists:
        return "no feedings yet"
    if info.hours == 0 and info.minutes == 0:
        return "just fed"
    if info.hours == 0:
        return f"{info.minutes} min ago"
    return f"{info.hours} h {info.minutes} min ago"
