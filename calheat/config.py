# calheat/config.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import orjson
from pendulum.locales.locale import Locale

from .errors import ConfigurationError
from .util.dates import WEEK_STARTS, DateHelper
from .util.tz import normalize_tz_name

logger = logging.getLogger(__name__)

AGGREGATES = ("sum", "count", "min", "max", "average")
WINDOW_ANCHORS = ("start", "end")


@dataclass(frozen=True)
class CalendarConfig:
    """Read-only option snapshot shared by every calendar component.

    Dates are epoch milliseconds. `start` is the date the first window is
    built around: with window_anchor="start" its bucket is the first domain,
    with "end" the last one.
    """

    domain: str = "hour"
    subdomain: str = "minute"
    range: int = 12
    start: int = 0
    week_start: str = "monday"
    tz: str = "local"
    locale: str = "en"
    min_date: Optional[int] = None
    max_date: Optional[int] = None
    window_anchor: str = "start"
    domain_label: Optional[str] = None
    aggregate: str = "sum"

    def date_helper(self) -> DateHelper:
        return DateHelper(self.tz, locale=self.locale, week_start=self.week_start)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_FIELDS = {f.name for f in fields(CalendarConfig)}


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigurationError(msg)


def _coerce_date(dates: DateHelper, key: str, value: Any) -> int:
    try:
        return dates.to_ms(value)
    except (TypeError, ValueError) as ex:
        raise ConfigurationError(f"{key}: invalid date {value!r} ({ex})") from ex


def build_config(**values: Any) -> CalendarConfig:
    """Validate option values and return a CalendarConfig.

    Dates may be epoch ms, `date`/`datetime`, or ISO-8601 strings
    (`YYYY-MM-DD`, `YYYY-MM-DDTHH:MM[:SS]`); naive values are read in `tz`.
    A missing `start` means now. None values fall back to the defaults.

    Raises ConfigurationError on the first invalid value.
    """
    unknown = sorted(set(values) - _FIELDS)
    _require(not unknown, f"Unknown option(s): {', '.join(unknown)}")
    v = {k: x for k, x in values.items() if x is not None}
    defaults = CalendarConfig()

    domain = v.get("domain", defaults.domain)
    subdomain = v.get("subdomain", defaults.subdomain)
    _require(isinstance(domain, str) and bool(domain), "domain must be a non-empty string")
    _require(isinstance(subdomain, str) and bool(subdomain), "subdomain must be a non-empty string")

    range_ = v.get("range", defaults.range)
    _require(
        isinstance(range_, int) and not isinstance(range_, bool) and range_ >= 1,
        f"range must be an integer >= 1, got {range_!r}",
    )

    week_start = str(v.get("week_start", defaults.week_start)).strip().lower()
    _require(week_start in WEEK_STARTS, f"week_start must be one of {', '.join(WEEK_STARTS)}, got {week_start!r}")

    tz = normalize_tz_name(v.get("tz", defaults.tz))
    locale = str(v.get("locale", defaults.locale)).strip()
    try:
        Locale.load(locale)
    except ValueError as ex:
        raise ConfigurationError(f"Invalid locale: {locale!r}") from ex
    try:
        dates = DateHelper(tz, locale=locale, week_start=week_start)
    except ValueError as ex:
        raise ConfigurationError(str(ex)) from ex

    window_anchor = v.get("window_anchor", defaults.window_anchor)
    _require(window_anchor in WINDOW_ANCHORS, f"window_anchor must be one of {', '.join(WINDOW_ANCHORS)}")

    aggregate = v.get("aggregate", defaults.aggregate)
    _require(aggregate in AGGREGATES, f"aggregate must be one of {', '.join(AGGREGATES)}")

    domain_label = v.get("domain_label")
    _require(domain_label is None or isinstance(domain_label, str), "domain_label must be a string")

    start = _coerce_date(dates, "start", v["start"]) if "start" in v else dates.to_ms(None)
    min_date = _coerce_date(dates, "min_date", v["min_date"]) if "min_date" in v else None
    max_date = _coerce_date(dates, "max_date", v["max_date"]) if "max_date" in v else None
    if min_date is not None and max_date is not None:
        _require(min_date <= max_date, "min_date must not be after max_date")

    return CalendarConfig(
        domain=domain,
        subdomain=subdomain,
        range=range_,
        start=start,
        week_start=week_start,
        tz=tz,
        locale=locale,
        min_date=min_date,
        max_date=max_date,
        window_anchor=window_anchor,
        domain_label=domain_label,
        aggregate=aggregate,
    )


def load_config_file(path: Union[str, Path], **overrides: Any) -> CalendarConfig:
    """Build a CalendarConfig from a JSON object file; non-None overrides win."""
    p = Path(path)
    try:
        raw = orjson.loads(p.read_bytes())
    except OSError as ex:
        raise ConfigurationError(f"Cannot read config file {p}: {ex}") from ex
    except orjson.JSONDecodeError as ex:
        raise ConfigurationError(f"Invalid JSON in config file {p}: {ex}") from ex
    _require(isinstance(raw, dict), f"Config file {p} must contain a JSON object")
    logger.debug("loaded config file %s (%d keys)", p, len(raw))
    merged = dict(raw)
    merged.update({k: x for k, x in overrides.items() if x is not None})
    return build_config(**merged)
