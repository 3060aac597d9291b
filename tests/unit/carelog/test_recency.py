"""Tests for the feeding-due thresholds and recency wording."""

from datetime import datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from carelog.config import RecencyConfig
from carelog.domain.models import FeedingEvent, FeedingType, LastFeedingInfo
from carelog.services.recency import (
    FeedingAlert,
    classify_elapsed,
    classify_recency,
    describe_recency,
)

FED_AT = datetime(2024, 5, 14, 6, 0, 0)


def _info_after(elapsed: timedelta) -> LastFeedingInfo:
    feeding = FeedingEvent(id=1, timestamp=FED_AT, amount=100, type=FeedingType.BREAST_MILK)
    return LastFeedingInfo.since(feeding, FED_AT + elapsed)


@pytest.mark.parametrize(
    ("elapsed", "expected"),
    [
        (timedelta(0), FeedingAlert.NONE),
        (timedelta(hours=2, minutes=59, seconds=59), FeedingAlert.NONE),
        (timedelta(hours=3), FeedingAlert.APPROACHING),
        (timedelta(hours=3, minutes=59), FeedingAlert.APPROACHING),
        (timedelta(hours=4), FeedingAlert.FEED_NOW),
        (timedelta(hours=9, minutes=30), FeedingAlert.FEED_NOW),
    ],
)
def test_default_thresholds(elapsed: timedelta, expected: FeedingAlert) -> None:
    assert classify_elapsed(elapsed) is expected
    assert classify_recency(_info_after(elapsed)) is expected


@given(seconds=st.integers(min_value=0, max_value=3 * 3600 - 1))
def test_under_three_hours_never_alerts(seconds: int) -> None:
    assert classify_elapsed(timedelta(seconds=seconds)) is FeedingAlert.NONE


def test_custom_thresholds() -> None:
    config = RecencyConfig(approaching_hours=2.5, feed_now_hours=3)

    assert classify_elapsed(timedelta(hours=2, minutes=29), config) is FeedingAlert.NONE
    assert classify_elapsed(timedelta(hours=2, minutes=30), config) is FeedingAlert.APPROACHING
    assert classify_elapsed(timedelta(hours=3), config) is FeedingAlert.FEED_NOW


def test_no_feeding_means_no_alert() -> None:
    assert classify_recency(LastFeedingInfo.missing()) is FeedingAlert.NONE


def test_thresholds_must_be_ordered() -> None:
    with pytest.raises(ValueError, match="lower than feed_now_hours"):
        RecencyConfig(approaching_hours=4, feed_now_hours=4)


@pytest.mark.parametrize(
    ("elapsed", "text"),
    [
        (timedelta(seconds=30), "just fed"),
        (timedelta(minutes=45), "45 min ago"),
        (timedelta(hours=3, minutes=25), "3 h 25 min ago"),
        (timedelta(hours=4), "4 h 0 min ago"),
    ],
)
def test_describe_recency(elapsed: timedelta, text: str) -> None:
    assert describe_recency(_info_after(elapsed)) == text


def test_describe_without_feedings() -> None:
    assert describe_recency(LastFeedingInfo.missing()) == "no feedings yet"


def test_three_quarters_of_an_hour_is_not_highlighted() -> None:
    info = _info_after(timedelta(minutes=45))

    assert classify_recency(info) is FeedingAlert.NONE
    assert describe_recency(info) == "45 min ago"
