"""
Daily case-report aggregation pipeline.

Normalizes per-day case-count reports into a single record shape,
accumulates per-(country, region, day) counters and derives
day-over-day deltas and days-since-threshold metrics.
"""

__version__ = "0.1.0"
