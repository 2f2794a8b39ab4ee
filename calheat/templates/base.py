# calheat/templates/base.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, List, NamedTuple, Optional, Tuple

from ..interval import intervals_between
from ..model import Position, SubDomain
from ..util.dates import DateHelper


class Layout(NamedTuple):
    """Row/column functions of a template, all keyed by timestamp."""

    rows_count: Callable[[int], int]
    columns_count: Callable[[int], int]
    position: Callable[[int], Position]


# (date helper, parent unit or None) -> Layout
LayoutBuilder = Callable[[DateHelper, Optional[str]], Layout]


@dataclass(frozen=True)
class TemplateDefinition:
    """Registration record of a granularity.

    `build` receives the calendar's DateHelper and the unit of the owning
    domain (None when the template is used on its own) and returns the pure
    layout functions for that nesting.
    """

    name: str
    unit: str
    build: LayoutBuilder = field(repr=False)
    allowed_domains: Tuple[str, ...] = ()

    def transposed(self, name: str) -> "TemplateDefinition":
        """Same granularity with rows and columns swapped."""
        inner = self.build

        def build(dates: DateHelper, parent_unit: Optional[str]) -> Layout:
            lay = inner(dates, parent_unit)

            def position(ts: int) -> Position:
                p = lay.position(ts)
                return Position(row=p.col, col=p.row)

            return Layout(rows_count=lay.columns_count, columns_count=lay.rows_count, position=position)

        return replace(self, name=name, build=build)


@dataclass(frozen=True)
class Template:
    """A granularity bound to a DateHelper and, optionally, to its domain.

    Instances are immutable; every function is a pure function of the
    timestamp, so positions stay stable across repaints of a bucket.
    """

    name: str
    unit: str
    dates: DateHelper = field(repr=False, compare=False)
    layout: Layout = field(repr=False, compare=False)
    parent: Optional[str] = None
    allowed_domains: Tuple[str, ...] = ()

    @classmethod
    def bind(
        cls,
        definition: TemplateDefinition,
        dates: DateHelper,
        parent: Optional[str] = None,
        parent_unit: Optional[str] = None,
    ) -> "Template":
        return cls(
            name=definition.name,
            unit=definition.unit,
            dates=dates,
            layout=definition.build(dates, parent_unit),
            parent=parent,
            allowed_domains=definition.allowed_domains,
        )

    def rows_count(self, ts: int) -> int:
        return self.layout.rows_count(ts)

    def columns_count(self, ts: int) -> int:
        return self.layout.columns_count(ts)

    def position(self, ts: int) -> Position:
        return self.layout.position(ts)

    def extract_unit(self, ts: int) -> int:
        """Comparison key of `ts`: the start of its bucket."""
        return self.dates.floor(self.unit, ts)

    def mapping(self, start_ms: int, end_ms: int) -> List[SubDomain]:
        """Subdomain records from the bucket of `start_ms` to the bucket of `end_ms`.

        When nested under a domain, buckets starting before `start_ms` belong
        to the previous domain and are left out (weeks straddling a month or
        year boundary).
        """
        out: List[SubDomain] = []
        for ts in intervals_between(self.dates, self.unit, start_ms, end_ms):
            if self.parent is not None and ts < start_ms:
                continue
            row, col = self.position(ts)
            out.append(SubDomain(timestamp=ts, row=row, col=col))
        return out
