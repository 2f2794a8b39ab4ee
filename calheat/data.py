# calheat/data.py
"""Apply raw (timestamp, value) records to the visible subdomain cells.

Fetching and parsing remote sources is left to the caller; this module only
groups already-decoded records by domain bucket and subdomain unit and writes
the aggregated value into the matching SubDomain records.
"""
from __future__ import annotations

import datetime as dt
from collections import defaultdict
from typing import Any, DefaultDict, Dict, Iterable, List, Mapping, Tuple, Union

from .config import AGGREGATES
from .domain import DomainCollection
from .templates import Template
from .util.dates import DateHelper

Records = Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]]]

# Below this magnitude a numeric timestamp is read as epoch seconds.
_SECONDS_CUTOFF = 100_000_000_000


def record_timestamp(raw: Any, dates: DateHelper) -> int:
    """Epoch ms of a record key: epoch seconds, epoch ms, or an ISO date string."""
    if isinstance(raw, bool):
        raise TypeError("bool is not a valid record timestamp")
    if isinstance(raw, str):
        s = raw.strip()
        if s.lstrip("-").isdigit():
            raw = int(s)
        else:
            return dates.to_ms(s)
    if isinstance(raw, (int, float)):
        if abs(raw) < _SECONDS_CUTOFF:
            return int(round(raw * 1000))
        return int(raw)
    if isinstance(raw, (dt.date, dt.datetime)):
        return dates.to_ms(raw)
    raise TypeError(f"Unsupported record timestamp: {type(raw).__name__}")


def _pairs(records: Records) -> Iterable[Tuple[Any, Any]]:
    if isinstance(records, Mapping):
        return records.items()
    return records


def group_records(
    records: Records,
    dates: DateHelper,
    domain: Template,
    subdomain: Template,
    domains: DomainCollection,
) -> Dict[int, Dict[int, List[Any]]]:
    """domain key -> subdomain key -> raw values, for visible domains only."""
    grouped: DefaultDict[int, DefaultDict[int, List[Any]]] = defaultdict(lambda: defaultdict(list))
    for raw_ts, value in _pairs(records):
        ts = record_timestamp(raw_ts, dates)
        domain_key = domain.extract_unit(ts)
        if domain_key not in domains:
            continue
        grouped[domain_key][subdomain.extract_unit(ts)].append(value)
    return {k: dict(v) for k, v in grouped.items()}


def aggregate(values: List[Any], how: str = "sum") -> Any:
    if how not in AGGREGATES:
        raise ValueError(f"Unknown aggregate: {how!r}")
    if how == "count":
        return len(values)
    nums = [x for x in values if isinstance(x, (int, float)) and not isinstance(x, bool)]
    if not nums:
        return None
    if how == "sum":
        return sum(nums)
    if how == "min":
        return min(nums)
    if how == "max":
        return max(nums)
    return sum(nums) / len(nums)


def apply_records(
    records: Records,
    dates: DateHelper,
    domain: Template,
    subdomain: Template,
    domains: DomainCollection,
    how: str = "sum",
) -> int:
    """Write aggregated values into the visible cells; returns how many cells were set.

    Records outside the visible domains are ignored; cells without records
    keep their current value.
    """
    grouped = group_records(records, dates, domain, subdomain, domains)
    updated = 0
    for domain_key, by_cell in grouped.items():
        for cell in domains.subdomains(domain_key):
            values = by_cell.get(cell.timestamp)
            if values is None:
                continue
            cell.value = aggregate(values, how)
            updated += 1
    return updated


def expand_source_uri(template: str, start_ms: int, end_ms: int) -> str:
    """Fill the {{t:start}}, {{t:end}} (epoch seconds) and {{d:start}}, {{d:end}} (ISO-8601 UTC) placeholders."""
    def iso(ms: int) -> str:
        d = dt.datetime.fromtimestamp(ms / 1000.0, tz=dt.timezone.utc)
        return d.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    out = template
    out = out.replace("{{t:start}}", str(start_ms // 1000))
    out = out.replace("{{t:end}}", str(end_ms // 1000))
    out = out.replace("{{d:start}}", iso(start_ms))
    out = out.replace("{{d:end}}", iso(end_ms))
    return out
