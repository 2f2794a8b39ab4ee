# calheat/util/dates.py
from __future__ import annotations

import calendar as _calendar
import datetime as dt
from typing import Any, Callable, Union

import pendulum

from .tz import normalize_tz_name, resolve_tz

MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS

UNITS = ("minute", "hour", "day", "week", "month", "year")

# isoweekday() of the first day of the week
WEEK_STARTS = {"monday": 1, "sunday": 7}

DateLike = Union[int, float, str, dt.date, dt.datetime]
Formatter = Union[str, Callable[..., str]]


class DateHelper:
    """Timezone and locale aware date arithmetic over epoch milliseconds.

    All bucket math of the calendar goes through this object: flooring a
    timestamp to the start of its unit, stepping by whole units, counting
    units between two timestamps and formatting labels.

    Minute and hour steps are absolute (fixed length). Day and coarser steps
    follow the wall clock, so a day bucket on a DST transition is 23 or 25
    hours long.
    """

    def __init__(self, tz: str | None = "local", locale: str = "en", week_start: str = "monday") -> None:
        if week_start not in WEEK_STARTS:
            raise ValueError(f"Invalid week start: {week_start!r} (expected monday|sunday)")
        self.tz_name = normalize_tz_name(tz)
        self.tz = resolve_tz(self.tz_name)
        self.locale = locale
        self.week_start = week_start
        self._week_start_iso = WEEK_STARTS[week_start]

    def __repr__(self) -> str:
        return f"DateHelper(tz={self.tz_name!r}, locale={self.locale!r}, week_start={self.week_start!r})"

    # --- conversions ----------------------------------------------------------

    def date(self, value: DateLike | None = None) -> pendulum.DateTime:
        """Return `value` as a pendulum DateTime in the configured timezone.

        Accepts epoch milliseconds, `date`, `datetime` (naive values are read
        as wall-clock time in the configured timezone) and ISO-8601 strings.
        None means now.
        """
        if value is None:
            return pendulum.now(self.tz)
        if isinstance(value, bool):
            raise TypeError("bool is not a valid date value")
        if isinstance(value, (int, float)):
            return pendulum.from_timestamp(value / 1000.0, tz=self.tz)
        if isinstance(value, dt.datetime):
            if value.tzinfo is not None:
                return pendulum.from_timestamp(value.timestamp(), tz=self.tz)
            return pendulum.datetime(
                value.year, value.month, value.day,
                value.hour, value.minute, value.second, value.microsecond,
                tz=self.tz,
            )
        if isinstance(value, dt.date):
            return pendulum.datetime(value.year, value.month, value.day, tz=self.tz)
        if isinstance(value, str):
            parsed = pendulum.parse(value.strip(), tz=self.tz)
            if isinstance(parsed, pendulum.DateTime):
                return parsed.in_timezone(self.tz)
            if isinstance(parsed, pendulum.Date):
                return pendulum.datetime(parsed.year, parsed.month, parsed.day, tz=self.tz)
            raise ValueError(f"Not a date or datetime: {value!r}")
        raise TypeError(f"Unsupported date value: {type(value).__name__}")

    def to_ms(self, value: DateLike | None = None) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return _ms(self.date(value))

    # --- unit arithmetic ------------------------------------------------------

    def floor(self, unit: str, ts: int) -> int:
        """Start of the `unit` bucket containing `ts`."""
        d = self.date(ts)
        if unit == "week":
            day = d.start_of("day")
            return _ms(day.subtract(days=self._week_offset(day)).start_of("day"))
        if unit in ("minute", "hour", "day", "month", "year"):
            return _ms(d.start_of(unit))
        raise ValueError(f"Unknown date unit: {unit!r}")

    def add(self, unit: str, ts: int, n: int) -> int:
        """Step `n` whole units from `ts` (n may be negative)."""
        if unit == "minute":
            return ts + n * MINUTE_MS
        if unit == "hour":
            return ts + n * HOUR_MS
        d = self.date(ts)
        if unit == "day":
            return _ms(d.add(days=n))
        if unit == "week":
            return _ms(d.add(weeks=n))
        if unit == "month":
            return _ms(d.add(months=n))
        if unit == "year":
            return _ms(d.add(years=n))
        raise ValueError(f"Unknown date unit: {unit!r}")

    def diff(self, unit: str, a: int, b: int) -> int:
        """Number of `unit` boundaries crossed going from bucket(a) to bucket(b).

        Both timestamps are floored first; the result is negative when `b`
        lies before `a`.
        """
        fa = self.floor(unit, a)
        fb = self.floor(unit, b)
        if unit == "minute":
            return (fb - fa) // MINUTE_MS
        if unit == "hour":
            return (fb - fa) // HOUR_MS
        da = self.date(fa)
        db = self.date(fb)
        if unit == "day":
            return (db.date() - da.date()).days
        if unit == "week":
            return (db.date() - da.date()).days // 7
        if unit == "month":
            return (db.year - da.year) * 12 + (db.month - da.month)
        if unit == "year":
            return db.year - da.year
        raise ValueError(f"Unknown date unit: {unit!r}")

    def same_interval(self, unit: str, a: int, b: int) -> bool:
        return self.floor(unit, a) == self.floor(unit, b)

    def before_interval(self, unit: str, a: int, b: int) -> bool:
        """True when `a` belongs to a `unit` bucket strictly before the bucket of `b`."""
        return self.floor(unit, a) < self.floor(unit, b)

    # --- calendar fields ------------------------------------------------------

    def _week_offset(self, d: dt.datetime) -> int:
        return (d.isoweekday() - self._week_start_iso) % 7

    def week_day(self, ts: int) -> int:
        """Day index within the week, 0 being the configured first day."""
        return self._week_offset(self.date(ts))

    def days_in_month(self, ts: int) -> int:
        d = self.date(ts)
        return _calendar.monthrange(d.year, d.month)[1]

    # --- formatting -----------------------------------------------------------

    def format(self, ts: int, formatter: Formatter | None, *args: Any) -> str | None:
        """Format `ts` with a pendulum token string or a callable.

        A callable receives the timestamp, the localized DateTime and any extra
        arguments. An empty/None formatter yields None.
        """
        if callable(formatter):
            return formatter(ts, self.date(ts), *args)
        if formatter:
            return self.date(ts).format(formatter, locale=self.locale)
        return None


def _ms(d: dt.datetime) -> int:
    return int(round(d.timestamp() * 1000))
