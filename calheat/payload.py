# calheat/payload.py
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from .calendar import CalHeatmap

SCHEMA_NAME = "calheat.payload"
SCHEMA_VERSION = 1

# Default domain label format per unit (pendulum tokens).
DOMAIN_FORMAT: Dict[str, str] = {
    "year": "YYYY",
    "month": "MMMM",
    "week": "Do MMM",
    "day": "Do MMM",
    "hour": "HH:00",
    "minute": "HH:mm",
}

# Default cell title format per unit.
SUBDOMAIN_FORMAT: Dict[str, str] = {
    "year": "YYYY",
    "month": "MMMM YYYY",
    "week": "[Week of] Do MMMM YYYY",
    "day": "dddd Do MMMM YYYY",
    "hour": "dddd Do MMMM YYYY, HH:00",
    "minute": "dddd Do MMMM YYYY, HH:mm",
}


def domain_label(cal: CalHeatmap, key: int) -> Optional[str]:
    fmt = cal.config.domain_label or DOMAIN_FORMAT.get(cal.domain_template.unit)
    return cal.dates.format(key, fmt)


def subdomain_title(cal: CalHeatmap, ts: int) -> Optional[str]:
    return cal.dates.format(ts, SUBDOMAIN_FORMAT.get(cal.subdomain_template.unit))


def build_payload(cal: CalHeatmap, *, titles: bool = False) -> Dict[str, Any]:
    """JSON-ready snapshot of the visible calendar.

    Domains are listed in ascending order with their grid size and cells
    (`t` timestamp, `x` column, `y` row, `v` value). `titles=True` adds a
    formatted `title` to each cell.
    """
    sub = cal.subdomain_template
    domains: List[Dict[str, Any]] = []
    for key, cells in cal.domains.items():
        rows = []
        for cell in cells:
            item = cell.to_dict()
            if titles:
                item["title"] = subdomain_title(cal, cell.timestamp)
            rows.append(item)
        domains.append(
            {
                "t": key,
                "label": domain_label(cal, key),
                "rows": sub.rows_count(key),
                "columns": sub.columns_count(key),
                "subdomains": rows,
            }
        )

    return {
        "schema_version": SCHEMA_VERSION,
        "meta": {
            "schema": {"name": SCHEMA_NAME, "version": SCHEMA_VERSION},
            "generated_at": dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds"),
        },
        "cfg": cal.config.to_dict(),
        "navigation": {
            "min_date_reached": cal.min_date_reached,
            "max_date_reached": cal.max_date_reached,
        },
        "domains": domains,
        "yanked": list(cal.domains.yanked),
    }
