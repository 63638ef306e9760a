"""Absolute date arithmetic.

Each helper shifts an instant by elapsed time and composes the next finer
unit, so ``add_days(d, 1) == add_hours(d, 24) == add_seconds(d, 86400)``.
Instants are shifted on the UTC timeline and converted back: aware values to
their own zone, naive values to the process-local zone they are taken to be
in. The shift stays exact across DST transitions and never lands on a local
time that does not exist.
"""

from datetime import datetime, timedelta, timezone

from dateutil.tz import tzlocal

from timekeep.util import DAY, HOUR, MINUTE


def add_seconds(instant: datetime, delta: float) -> datetime:
    """Return ``instant`` moved by ``delta`` seconds (negative moves back)."""
    offset = timedelta(seconds=delta)
    if not offset:
        return instant
    shifted = instant.astimezone(timezone.utc) + offset
    if instant.tzinfo is None:
        return shifted.astimezone(tzlocal()).replace(tzinfo=None)
    return shifted.astimezone(instant.tzinfo)


def add_minutes(instant: datetime, delta: float) -> datetime:
    return add_seconds(instant, MINUTE * delta)


def add_hours(instant: datetime, delta: float) -> datetime:
    return add_minutes(instant, HOUR // MINUTE * delta)


def add_days(instant: datetime, delta: float) -> datetime:
    return add_hours(instant, DAY // HOUR * delta)
