"""Local-time rendering and timezone lookup.

Both helpers read the process-local zone by default; pass ``tz`` (or
``environ``/``localtime`` for :func:`localtz`) to pin the result.
"""

import os
from collections.abc import Mapping
from datetime import datetime, tzinfo
from pathlib import Path

from dateutil.tz import gettz, tzlocal

_LOCALTIME = Path("/etc/localtime")

# Subdirectories of a zoneinfo tree that prefix the real zone name
_ZONEINFO_VARIANTS = {"posix", "right"}


def datetime_format(instant: datetime, tz: tzinfo | None = None) -> str:
    """
    Render an instant as ``YYYY-MM-DDTHH:mm`` in local time.

    Args:
        instant: Aware or naive datetime. Naive values are taken to be
            local time already.
        tz: Zone to render in. Defaults to the process-local zone.

    Returns:
        Fixed-width string without seconds or offset, e.g.
        ``"2024-03-05T09:07"``.

    Example:
        >>> datetime_format(datetime(2024, 3, 5, 9, 7))
        '2024-03-05T09:07'
    """
    if tz is not None:
        instant = instant.astimezone(tz)
    elif instant.tzinfo is not None:
        instant = instant.astimezone(tzlocal())
    return (
        f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d}"
        f"T{instant.hour:02d}:{instant.minute:02d}"
    )


def localtz(
    environ: Mapping[str, str] | None = None,
    localtime: Path | None = None,
) -> str:
    """
    Return the identifier of the local timezone (e.g. ``"Europe/Paris"``).

    Resolution order: the ``TZ`` variable (a zone name or a zoneinfo file
    path, which wins even when it cannot be named), the ``/etc/localtime`` link,
    the sibling ``timezone`` file, then the local zone's abbreviation.

    Args:
        environ: Environment to read ``TZ`` from (default ``os.environ``).
        localtime: Path of the localtime link (default ``/etc/localtime``).
    """
    environ = os.environ if environ is None else environ
    localtime = _LOCALTIME if localtime is None else localtime

    name = environ.get("TZ", "").lstrip(":")
    if name.startswith("/"):
        return _zone_from_path(Path(name)) or _abbreviation(gettz(name))
    if name and gettz(name) is not None:
        return name

    if localtime.is_symlink():
        zone = _zone_from_path(localtime)
        if zone:
            return zone

    timezone_file = localtime.parent / "timezone"
    if timezone_file.is_file():
        zone = timezone_file.read_text(encoding="utf-8").strip()
        if zone:
            return zone

    return _abbreviation(tzlocal())


def _abbreviation(zone: tzinfo | None) -> str:
    """Current abbreviation of ``zone`` (process-local zone when unloadable)."""
    return datetime.now(zone if zone is not None else tzlocal()).tzname() or "UTC"


def _zone_from_path(path: Path) -> str | None:
    """Extract ``Area/City`` from a path inside a zoneinfo tree."""
    parts = Path(os.path.realpath(path)).parts
    if "zoneinfo" not in parts:
        return None
    # Last occurrence, so nested trees resolve to the innermost zone name
    index = len(parts) - 1 - parts[::-1].index("zoneinfo")
    tail = list(parts[index + 1 :])
    if tail and tail[0] in _ZONEINFO_VARIANTS:
        tail = tail[1:]
    return "/".join(tail) or None
