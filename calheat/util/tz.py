# calheat/util/tz.py
from __future__ import annotations

import re
from typing import Optional, Union

import pendulum
from pendulum.tz.timezone import FixedTimezone, Timezone

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")

TzInfo = Union[Timezone, FixedTimezone]

_LOCAL_ALIASES = frozenset({"", "local", "system", "native"})
_UTC_ALIASES = frozenset({"utc", "z", "gmt", "utc0", "utc+0", "+00:00", "+0000", "-00:00"})


def normalize_tz_name(name: Optional[str]) -> str:
    """Canonical zone name stored in CalendarConfig.tz.

    Empty and machine aliases map to "local", zero-offset aliases to "UTC";
    IANA names and "+HH:MM" offsets pass through stripped.
    """
    s = "" if name is None else str(name).strip()
    key = s.lower()
    if key in _LOCAL_ALIASES:
        return "local"
    if key in _UTC_ALIASES:
        return "UTC"
    return s


def resolve_tz(name: Optional[str]) -> TzInfo:
    """Resolve a timezone name into a pendulum timezone.

    For "local", resolves to the system local timezone.
    For "UTC", resolves to pendulum.UTC.
    For IANA zone names, resolves through pendulum's zoneinfo database.
    For fixed offsets, resolves to a FixedTimezone.

    Raises ValueError for invalid timezone identifiers.
    """
    tz_name = normalize_tz_name(name)

    if tz_name == "UTC":
        return pendulum.UTC

    if tz_name == "local":
        return pendulum.local_timezone()

    # Fixed offsets: +HH:MM, +HHMM, -HH:MM, -HHMM
    m = _OFFSET_RE.match(tz_name)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh = int(hh_s)
        mm = int(mm_s)
        if hh > 23 or mm > 59:
            raise ValueError(f"Invalid timezone offset: {tz_name!r}")
        sign = 1 if sign_s == "+" else -1
        return FixedTimezone(sign * (hh * 3600 + mm * 60))

    try:
        return pendulum.timezone(tz_name)
    except Exception as ex:
        raise ValueError(f"Invalid timezone identifier: {tz_name!r}") from ex
