"""
Core services for the care log.

This package contains the event store, the aggregation layer, the
feeding-due policy and the facade that wires them together.
"""

from .aggregator import Aggregator
from .care_log import CareLogService, HomeScreen
from .event_store import EventLog, SQLiteEventStore
from .recency import FeedingAlert, classify_elapsed, classify_recency, describe_recency
from .observability import configure_logging
from .result import Result

__all__ = [
    "Aggregator",
    "CareLogService",
    "EventLog",
    "FeedingAlert",
    "HomeScreen",
    "Result",
    "SQLiteEventStore",
    "classify_elapsed",
    "classify_recency",
    "configure_logging",
    "describe_recency",
]
