# calheat/calendar.py
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from .config import CalendarConfig, build_config
from .data import Records, apply_records
from .domain import DomainCollection
from .events import EventEmitter, Listener
from .model import ScrollDirection, SubDomain
from .navigator import LoadResult, Navigator
from .templates import BUILTIN_TEMPLATES, Template, TemplateDefinition, TemplateRegistry
from .util.dates import DateLike

logger = logging.getLogger(__name__)


class CalHeatmap:
    """Calendar heat map model: the visible domains, their cells and navigation.

    Construction validates the configuration (ConfigurationError on failure)
    and, unless `load=False`, loads the first window. Pass `load=False` to
    subscribe to events before the first load, then call `load()`.
    """

    def __init__(
        self,
        config: Optional[CalendarConfig] = None,
        templates: Iterable[TemplateDefinition] = (),
        *,
        load: bool = True,
        **options: Any,
    ) -> None:
        if config is None:
            config = build_config(**options)
        elif options:
            raise TypeError("pass either a CalendarConfig or option keywords, not both")
        self.config = config
        self.dates = config.date_helper()
        self.templates = TemplateRegistry(self.dates, BUILTIN_TEMPLATES)
        self.templates.register(*templates)
        self.domain_template, self.subdomain_template = self.templates.validate_pair(
            config.domain, config.subdomain
        )
        self.events = EventEmitter()
        self.domains = DomainCollection()
        self.navigator = Navigator(config, self.templates, self.domains, self.events)
        logger.debug(
            "calendar %s/%s range=%d tz=%s week_start=%s",
            config.domain, config.subdomain, config.range, self.dates.tz_name, config.week_start,
        )
        if load:
            self.load()

    def add_templates(self, *definitions: TemplateDefinition) -> None:
        """Register extra templates; the configured pair is validated again."""
        self.templates.register(*definitions)
        self.domain_template, self.subdomain_template = self.templates.validate_pair(
            self.config.domain, self.config.subdomain
        )

    def load(self) -> LoadResult:
        """Load the first window around config.start (no-op once loaded)."""
        if len(self.domains):
            return False
        cfg = self.config
        if cfg.window_anchor == "end":
            window = self.navigator.window(cfg.start, -cfg.range)
            return self.navigator.load_new_domains(window, ScrollDirection.BACKWARD)
        window = self.navigator.window(cfg.start, cfg.range)
        return self.navigator.load_new_domains(window, ScrollDirection.FORWARD)

    def next(self, n: int = 1) -> LoadResult:
        """Scroll forward by `n` domains."""
        if self.domains.max is None:
            return self.load()
        window = self.navigator.window(self.domains.max, n + 1).slice(n, from_end=True)
        return self.navigator.load_new_domains(window, ScrollDirection.FORWARD)

    def previous(self, n: int = 1) -> LoadResult:
        """Scroll backward by `n` domains."""
        if self.domains.min is None:
            return self.load()
        window = self.navigator.window(self.domains.min, -(n + 1)).slice(n, from_end=False)
        return self.navigator.load_new_domains(window, ScrollDirection.BACKWARD)

    def jump_to(self, date: DateLike, reset: bool = False) -> LoadResult:
        return self.navigator.jump_to(date, reset)

    def fill(self, records: Records, aggregate: Optional[str] = None) -> int:
        """Apply (timestamp, value) records to the visible cells; returns the number of cells set."""
        return apply_records(
            records,
            self.dates,
            self.domain_template,
            self.subdomain_template,
            self.domains,
            how=aggregate or self.config.aggregate,
        )

    def on(self, name: str, fn: Listener) -> Callable[[], None]:
        return self.events.on(name, fn)

    def subdomains(self, domain_key: int) -> List[SubDomain]:
        return self.domains.subdomains(domain_key)

    def template(self, name: str) -> Template:
        return self.templates.at(name)

    @property
    def min_date_reached(self) -> bool:
        return self.navigator.min_domain_reached

    @property
    def max_date_reached(self) -> bool:
        return self.navigator.max_domain_reached

    def destroy(self) -> None:
        self.domains.clear()
        self.events.clear()
