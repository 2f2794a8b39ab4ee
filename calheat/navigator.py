# calheat/navigator.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from . import events as ev
from .config import CalendarConfig
from .domain import DomainCollection
from .events import EventEmitter
from .interval import interval_end
from .model import ScrollDirection, SubDomain
from .templates import TemplateRegistry
from .util.dates import DateHelper, DateLike

logger = logging.getLogger(__name__)

LoadResult = Union[ScrollDirection, bool]


class Navigator:
    """Moves the visible window of a DomainCollection.

    State besides the collection is two flags telling whether the configured
    min/max dates are on screen. Reaching a bound is not an error: the load
    returns False and subscribers get min/max_date_(not_)reached events, once
    per flip.
    """

    def __init__(
        self,
        cfg: CalendarConfig,
        templates: TemplateRegistry,
        domains: DomainCollection,
        emitter: EventEmitter,
    ) -> None:
        self.cfg = cfg
        self.templates = templates
        self.domains = domains
        self.emitter = emitter
        self.min_domain_reached = False
        self.max_domain_reached = False

    @property
    def dates(self) -> DateHelper:
        return self.templates.dates

    def bounds(self) -> Tuple[Optional[int], Optional[int]]:
        """Configured min/max dates as domain keys (None when unbounded)."""
        tpl = self.templates.at(self.cfg.domain)
        min_key = tpl.extract_unit(self.cfg.min_date) if self.cfg.min_date is not None else None
        max_key = tpl.extract_unit(self.cfg.max_date) if self.cfg.max_date is not None else None
        return min_key, max_key

    def window(self, anchor: DateLike, range_: int) -> DomainCollection:
        unit = self.templates.at(self.cfg.domain).unit
        return DomainCollection.from_interval(self.dates, unit, anchor, range_)

    def window_between(self, a: DateLike, b: DateLike) -> DomainCollection:
        unit = self.templates.at(self.cfg.domain).unit
        return DomainCollection.between(self.dates, unit, a, b)

    def is_boundary_reached(
        self,
        window: DomainCollection,
        min_key: Optional[int],
        max_key: Optional[int],
        direction: ScrollDirection,
    ) -> bool:
        if (
            direction is ScrollDirection.FORWARD
            and max_key is not None
            and self.max_domain_reached
            and window.max is not None
            and window.max >= max_key
        ):
            return True
        if (
            direction is ScrollDirection.BACKWARD
            and min_key is not None
            and self.min_domain_reached
            and window.min is not None
            and window.min <= min_key
        ):
            return True
        return False

    def _subdomains(self, key: int, _index: int) -> List[SubDomain]:
        domain = self.templates.at(self.cfg.domain)
        sub = self.templates.at(self.cfg.subdomain, parent=self.cfg.domain)
        return sub.mapping(key, interval_end(self.dates, domain.unit, key) - 1)

    def load_new_domains(
        self,
        window: DomainCollection,
        direction: ScrollDirection = ScrollDirection.FORWARD,
    ) -> LoadResult:
        """Merge `window` into the live collection.

        Returns `direction` on success, False when the bound on that side is
        already reached or nothing is left of the window after clamping.
        """
        min_key, max_key = self.bounds()

        if self.is_boundary_reached(window, min_key, max_key, direction):
            logger.debug("load %s skipped: boundary already reached", direction.name)
            return False

        window.clamp(min_key, max_key).slice(self.cfg.range, direction is ScrollDirection.FORWARD)
        if not len(window):
            logger.debug("load %s skipped: window empty after clamping", direction.name)
            return False

        self.domains.merge(window, self.cfg.range, self._subdomains)
        flips = self._update_boundaries(min_key, max_key)
        logger.debug(
            "loaded %s: %d domain(s) [%s .. %s], yanked %d",
            direction.name, len(self.domains), self.domains.min, self.domains.max, len(self.domains.yanked),
        )

        for name in flips:
            self.emitter.emit(name)
        if direction is ScrollDirection.BACKWARD:
            self.emitter.emit(ev.DOMAINS_LOADED, self.domains.min)
        elif direction is ScrollDirection.FORWARD:
            self.emitter.emit(ev.DOMAINS_LOADED, self.domains.max)
        return direction

    def _update_boundaries(self, min_key: Optional[int], max_key: Optional[int]) -> List[str]:
        """Recompute both flags; return the event names of the flags that flipped."""
        flips: List[str] = []
        lo, hi = self.domains.min, self.domains.max
        if lo is None or hi is None:
            return flips

        if min_key is not None:
            reached = lo <= min_key
            if reached != self.min_domain_reached:
                flips.append(ev.MIN_DATE_REACHED if reached else ev.MIN_DATE_NOT_REACHED)
            self.min_domain_reached = reached
        if max_key is not None:
            reached = hi >= max_key
            if reached != self.max_domain_reached:
                flips.append(ev.MAX_DATE_REACHED if reached else ev.MAX_DATE_NOT_REACHED)
            self.max_domain_reached = reached

        if flips:
            logger.info("navigation boundary change: %s", ", ".join(flips))
        return flips

    def jump_to(self, date: DateLike, reset: bool = False) -> LoadResult:
        """Bring the domain of `date` on screen.

        Before the window: load backward down to it. With `reset`: reload a
        full window starting at it. After the window: load forward up to it.
        Already visible without `reset`: no-op, returns False.
        """
        ts = self.dates.to_ms(date)
        key = self.templates.at(self.cfg.domain).extract_unit(ts)
        lo, hi = self.domains.min, self.domains.max

        if lo is None or hi is None:
            return self.load_new_domains(self.window(ts, self.cfg.range), ScrollDirection.FORWARD)
        if key < lo:
            return self.load_new_domains(self.window_between(ts, lo), ScrollDirection.BACKWARD)
        if reset:
            direction = ScrollDirection.FORWARD if lo < ts else ScrollDirection.BACKWARD
            return self.load_new_domains(self.window(ts, self.cfg.range), direction)
        if key > hi:
            return self.load_new_domains(self.window_between(hi, ts), ScrollDirection.FORWARD)
        return False
