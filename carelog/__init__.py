"""Infant-care logging core.

This package holds the domain models, the SQLite event store and the
aggregation layer that derives today's totals, merged history and the
time since the last feeding. Presentation code consumes it through
plain async calls.
"""
