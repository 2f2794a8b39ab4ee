# calheat/templates/builtin.py
"""Built-in granularity templates.

Each subdomain has a native layout inside one native period (minutes in an
hour, hours in a day, days in a week). When nested in a larger domain the
native blocks are stacked along the columns, one block per native period
the domain spans:

    col = native_col + k * native_columns

with `k` the number of native periods between the domain start and the
subunit. Columns therefore wrap at the subdomain's own boundary (a new day
for hours, a new week for days) rather than at a fixed width.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

from ..granularity import ORIENTATION_PREFIX
from ..interval import interval_end
from ..model import Position
from ..util.dates import DateHelper
from .base import Layout, TemplateDefinition


def _domain_span(dates: DateHelper, parent_unit: str, ts: int) -> Tuple[int, int]:
    """(first ms, last ms) of the domain bucket containing ts."""
    start = dates.floor(parent_unit, ts)
    return start, interval_end(dates, parent_unit, start) - 1


def _stacked(
    dates: DateHelper,
    parent_unit: Optional[str],
    period: str,
    rows: int,
    cols: int,
    native: Callable[[int], Position],
) -> Layout:
    def periods(ts: int) -> int:
        if parent_unit is None:
            return 1
        start, last = _domain_span(dates, parent_unit, ts)
        return dates.diff(period, start, last) + 1

    def position(ts: int) -> Position:
        p = native(ts)
        if parent_unit is None:
            return p
        k = dates.diff(period, dates.floor(parent_unit, ts), ts)
        return Position(row=p.row, col=p.col + k * cols)

    return Layout(
        rows_count=lambda ts: rows,
        columns_count=lambda ts: cols * periods(ts),
        position=position,
    )


def _minute(dates: DateHelper, parent_unit: Optional[str]) -> Layout:
    def native(ts: int) -> Position:
        m = dates.date(ts).minute
        return Position(row=m % 10, col=m // 10)

    return _stacked(dates, parent_unit, "hour", 10, 6, native)


def _hour(dates: DateHelper, parent_unit: Optional[str]) -> Layout:
    """Hours of a day in 6 rows x 4 columns, keyed by wall-clock hour.

    On a DST fall-back day the repeated wall-clock hour yields two cells at
    the same position; the later one is drawn over the earlier. A spring
    forward day leaves the skipped hour's slot empty.
    """
    def native(ts: int) -> Position:
        h = dates.date(ts).hour
        return Position(row=h % 6, col=h // 6)

    return _stacked(dates, parent_unit, "day", 6, 4, native)


def _day(dates: DateHelper, parent_unit: Optional[str]) -> Layout:
    def native(ts: int) -> Position:
        return Position(row=dates.week_day(ts), col=0)

    return _stacked(dates, parent_unit, "week", 7, 1, native)


def _week(dates: DateHelper, parent_unit: Optional[str]) -> Layout:
    # A week belongs to the domain its first day falls in, so the column is
    # counted from the first week starting inside the domain.
    def first_week(ts: int) -> int:
        start = dates.floor(parent_unit, ts)
        week = dates.floor("week", start)
        return week if week == start else dates.add("week", week, 1)

    def position(ts: int) -> Position:
        if parent_unit is None:
            return Position(row=0, col=0)
        return Position(row=0, col=dates.diff("week", first_week(ts), ts))

    def columns_count(ts: int) -> int:
        if parent_unit is None:
            return 1
        _start, last = _domain_span(dates, parent_unit, ts)
        return dates.diff("week", first_week(ts), last) + 1

    return Layout(rows_count=lambda ts: 1, columns_count=columns_count, position=position)


def _month(dates: DateHelper, parent_unit: Optional[str]) -> Layout:
    return _stacked(dates, parent_unit, "month", 1, 1, lambda ts: Position(row=0, col=0))


def _year(dates: DateHelper, parent_unit: Optional[str]) -> Layout:
    return Layout(rows_count=lambda ts: 1, columns_count=lambda ts: 1, position=lambda ts: Position(row=0, col=0))


MINUTE = TemplateDefinition(name="minute", unit="minute", build=_minute, allowed_domains=("hour", "day"))
HOUR = TemplateDefinition(name="hour", unit="hour", build=_hour, allowed_domains=("day", "week", "month"))
DAY = TemplateDefinition(name="day", unit="day", build=_day, allowed_domains=("week", "month", "year"))
WEEK = TemplateDefinition(name="week", unit="week", build=_week, allowed_domains=("month", "year"))
MONTH = TemplateDefinition(name="month", unit="month", build=_month, allowed_domains=("year",))
YEAR = TemplateDefinition(name="year", unit="year", build=_year)

BUILTIN_TEMPLATES: Tuple[TemplateDefinition, ...] = (
    MINUTE,
    MINUTE.transposed(ORIENTATION_PREFIX + "minute"),
    HOUR,
    HOUR.transposed(ORIENTATION_PREFIX + "hour"),
    DAY,
    DAY.transposed(ORIENTATION_PREFIX + "day"),
    WEEK,
    MONTH,
    MONTH.transposed(ORIENTATION_PREFIX + "month"),
    YEAR,
)
