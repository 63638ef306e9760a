"""Utility constants for timekeep.

Time unit constants represent durations in seconds, matching the
multipliers used by the arithmetic helpers.
"""

# Time unit constants (all values in seconds)
MILLISECOND = 0.001
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400

# Default sampling period for timers, in seconds
POLL_INTERVAL = 100 * MILLISECOND
