# calheat/interval.py
from __future__ import annotations

from typing import List, Optional, Union

from .util.dates import DateHelper, DateLike

Range = Union[int, DateLike]


def generate_intervals(dates: DateHelper, unit: str, anchor: DateLike, range_: Range) -> List[int]:
    """Return the bucket starts (epoch ms) of `unit` around `anchor`.

    `range_` semantics:
      - positive int n: n buckets, the first one containing `anchor`
      - negative int -n: n buckets, the last one containing `anchor`
      - 0 or 1: the single bucket containing `anchor`
      - a stop date (str, date, datetime): see intervals_between()

    Ints are always counts. To stop at an epoch-ms timestamp use
    intervals_between() directly.
    """
    if not (isinstance(range_, int) and not isinstance(range_, bool)):
        return intervals_between(dates, unit, anchor, range_)

    count = max(1, abs(range_))
    first = dates.floor(unit, dates.to_ms(anchor))
    if range_ < 0:
        first = dates.floor(unit, dates.add(unit, first, -(count - 1)))
    return _walk(dates, unit, first, count=count)


def intervals_between(dates: DateHelper, unit: str, a: DateLike, b: DateLike) -> List[int]:
    """Every bucket start from the bucket of the earlier date to the bucket of the later one.

    Both ends are inclusive and argument order does not matter.
    """
    lo, hi = sorted((dates.to_ms(a), dates.to_ms(b)))
    return _walk(dates, unit, dates.floor(unit, lo), last=dates.floor(unit, hi))


def interval_end(dates: DateHelper, unit: str, ts: int) -> int:
    """Start of the bucket following the one containing `ts`."""
    return generate_intervals(dates, unit, ts, 2)[-1]


def _walk(
    dates: DateHelper,
    unit: str,
    first: int,
    *,
    count: Optional[int] = None,
    last: Optional[int] = None,
) -> List[int]:
    out: List[int] = []
    step = 0
    while True:
        ts = dates.floor(unit, dates.add(unit, first, step))
        step += 1
        if last is not None and ts > last:
            break
        if out and ts <= out[-1]:
            # DST fold: the step landed in a bucket already emitted
            continue
        out.append(ts)
        if count is not None and len(out) >= count:
            break
    return out
