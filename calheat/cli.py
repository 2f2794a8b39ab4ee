from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

from .calendar import CalHeatmap
from .config import AGGREGATES, WINDOW_ANCHORS, CalendarConfig, build_config, load_config_file
from .errors import ConfigurationError
from .payload import build_payload
from .util.dates import WEEK_STARTS

logger = logging.getLogger(__name__)


def _options(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "domain": args.domain,
        "subdomain": args.subdomain,
        "start": args.start,
        "range": args.range,
        "week_start": args.week_start,
        "tz": args.tz,
        "locale": args.locale,
        "min_date": args.min_date,
        "max_date": args.max_date,
        "window_anchor": args.window_anchor,
        "domain_label": args.domain_label,
        "aggregate": args.aggregate,
    }


def _load_records(path: str) -> Any:
    try:
        raw = orjson.loads(Path(path).read_bytes())
    except OSError as e:
        raise SystemExit(f"Cannot read data file {path}: {e}")
    except orjson.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON in data file {path}: {e}")
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, list):
        # [[timestamp, value], ...] or [{"t": ..., "v": ...}, ...]
        pairs = []
        for item in raw:
            if isinstance(item, dict):
                pairs.append((item.get("t"), item.get("v")))
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                pairs.append((item[0], item[1]))
            else:
                raise SystemExit(f"Invalid record in data file {path}: {item!r}")
        return pairs
    raise SystemExit(f"Data file {path} must contain a JSON object or array")


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(
        description="Compute a calendar heat map (domains, cell positions, values) and print it as JSON."
    )
    ap.add_argument("--domain", default=None, help="Domain granularity (default: hour)")
    ap.add_argument("--subdomain", default=None, help="Subdomain granularity (default: minute)")
    ap.add_argument("--start", default=None, help="Start date YYYY-MM-DD or ISO datetime (default: now in --tz)")
    ap.add_argument("--range", type=int, default=None, help="Number of domains shown at once (default: 12)")
    ap.add_argument(
        "--week-start",
        default=os.getenv("CALHEAT_WEEK_START"),
        choices=sorted(WEEK_STARTS),
        help="First day of the week (default: env CALHEAT_WEEK_START or 'monday')",
    )
    ap.add_argument(
        "--tz",
        default=os.getenv("CALHEAT_TZ"),
        help="Bucketing timezone (default: env CALHEAT_TZ or 'local')",
    )
    ap.add_argument(
        "--locale",
        default=os.getenv("CALHEAT_LOCALE"),
        help="Label locale (default: env CALHEAT_LOCALE or 'en')",
    )
    ap.add_argument("--min-date", default=None, help="Earliest date navigation may reach")
    ap.add_argument("--max-date", default=None, help="Latest date navigation may reach")
    ap.add_argument(
        "--window-anchor",
        default=None,
        choices=WINDOW_ANCHORS,
        help="Whether --start is the first ('start') or last ('end') domain (default: start)",
    )
    ap.add_argument("--domain-label", default=None, help="Domain label format (pendulum tokens)")
    ap.add_argument("--aggregate", default=None, choices=AGGREGATES, help="How values of one cell are combined (default: sum)")
    ap.add_argument("--config", default=None, help="JSON config file; flags override its keys")

    ap.add_argument("--next", type=int, default=0, help="Scroll forward N domains after loading")
    ap.add_argument("--previous", type=int, default=0, help="Scroll backward N domains after loading")
    ap.add_argument("--jump", default=None, help="Jump to the domain of this date after loading")
    ap.add_argument("--reset", action="store_true", help="With --jump, reload a full window starting at the date")

    ap.add_argument("--data", default=None, help="JSON records file: {timestamp: value} or [[timestamp, value], ...]")
    ap.add_argument("--titles", action="store_true", help="Include formatted cell titles in the output")
    ap.add_argument("--out", default=None, help="Write JSON to this path instead of stdout")
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")

    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    if args.next < 0 or args.previous < 0:
        raise SystemExit("--next and --previous must be >= 0")
    if args.reset and not args.jump:
        raise SystemExit("--reset requires --jump")

    try:
        cfg: CalendarConfig
        if args.config:
            cfg = load_config_file(args.config, **_options(args))
        else:
            cfg = build_config(**_options(args))
        cal = CalHeatmap(cfg)
    except ConfigurationError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    if args.previous:
        cal.previous(args.previous)
    if args.next:
        cal.next(args.next)
    if args.jump:
        try:
            cal.jump_to(args.jump, reset=args.reset)
        except (TypeError, ValueError) as e:
            raise SystemExit(f"Invalid --jump value: {e}")

    if args.data:
        try:
            n = cal.fill(_load_records(args.data))
        except (TypeError, ValueError) as e:
            raise SystemExit(f"Invalid data file {args.data}: {e}")
        logger.info("applied data to %d cell(s)", n)

    out = orjson.dumps(build_payload(cal, titles=args.titles), option=orjson.OPT_INDENT_2)

    out_path: Optional[Path] = Path(args.out) if args.out else None
    if out_path is None:
        sys.stdout.write(out.decode("utf-8") + "\n")
        return
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(out)
    except OSError as e:
        raise SystemExit(f"Cannot write {out_path}: {e}")
    print(str(out_path))


if __name__ == "__main__":
    main()
