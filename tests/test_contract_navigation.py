from __future__ import annotations

import unittest

from calheat import events as ev
from calheat.calendar import CalHeatmap
from calheat.model import ScrollDirection
from calheat.util.dates import DateHelper

D = DateHelper("UTC")


def months(*isos: str) -> list:
    return [D.to_ms(s) for s in isos]


def monthly(**options):  # type: ignore[no-untyped-def]
    base = {"domain": "month", "subdomain": "day", "range": 3, "tz": "UTC"}
    base.update(options)
    return CalHeatmap(**base)


class TestInitialWindowContract(unittest.TestCase):
    def test_window_anchored_at_end(self) -> None:
        cal = monthly(start="2024-03-15", window_anchor="end")
        self.assertEqual(cal.domains.keys, months("2024-01-01", "2024-02-01", "2024-03-01"))

    def test_window_anchored_at_start(self) -> None:
        cal = monthly(start="2024-03-15")
        self.assertEqual(cal.domains.keys, months("2024-03-01", "2024-04-01", "2024-05-01"))

    def test_subdomains_materialized_per_domain(self) -> None:
        cal = monthly(start="2024-01-01")
        self.assertEqual(len(cal.subdomains(D.to_ms("2024-02-01"))), 29)
        self.assertEqual(len(cal.subdomains(D.to_ms("2024-03-01"))), 31)

    def test_load_is_a_noop_once_loaded(self) -> None:
        cal = monthly(start="2024-01-01")
        self.assertFalse(cal.load())

    def test_domains_loaded_event_carries_window_edge(self) -> None:
        cal = monthly(start="2024-01-01", load=False)
        seen = []
        cal.on(ev.DOMAINS_LOADED, seen.append)
        self.assertIs(cal.load(), ScrollDirection.FORWARD)
        self.assertEqual(seen, months("2024-03-01"))
        cal.previous()
        self.assertEqual(seen[-1], D.to_ms("2023-12-01"))


class TestScrollContract(unittest.TestCase):
    def test_next_and_previous_shift_by_one(self) -> None:
        cal = monthly(start="2024-01-01")
        self.assertIs(cal.next(), ScrollDirection.FORWARD)
        self.assertEqual(cal.domains.keys, months("2024-02-01", "2024-03-01", "2024-04-01"))
        self.assertEqual(cal.domains.yanked, months("2024-01-01"))

        self.assertIs(cal.previous(2), ScrollDirection.BACKWARD)
        self.assertEqual(cal.domains.keys, months("2023-12-01", "2024-01-01", "2024-02-01"))
        self.assertEqual(cal.domains.yanked, months("2024-03-01", "2024-04-01"))

    def test_collection_never_exceeds_range(self) -> None:
        cal = monthly(start="2024-01-01")
        cal.next(7)
        self.assertEqual(len(cal.domains), 3)
        self.assertEqual(cal.domains.keys, months("2024-08-01", "2024-09-01", "2024-10-01"))


class TestBoundaryContract(unittest.TestCase):
    def test_max_bound_stops_forward_loads(self) -> None:
        cal = monthly(start="2024-01-01", max_date="2024-04-15", load=False)
        fired = []
        for name in (ev.MAX_DATE_REACHED, ev.MAX_DATE_NOT_REACHED):
            cal.on(name, lambda name=name: fired.append(name))
        cal.load()
        self.assertFalse(cal.max_date_reached)

        self.assertIs(cal.next(), ScrollDirection.FORWARD)
        self.assertTrue(cal.max_date_reached)
        self.assertFalse(cal.next())
        self.assertFalse(cal.next())
        self.assertEqual(cal.domains.keys, months("2024-02-01", "2024-03-01", "2024-04-01"))
        self.assertEqual(fired, [ev.MAX_DATE_REACHED])

        self.assertIs(cal.previous(), ScrollDirection.BACKWARD)
        self.assertFalse(cal.max_date_reached)
        self.assertEqual(fired, [ev.MAX_DATE_REACHED, ev.MAX_DATE_NOT_REACHED])

    def test_min_bound_reached_on_first_load(self) -> None:
        cal = monthly(start="2024-01-01", min_date="2024-01-10", load=False)
        fired = []
        cal.on(ev.MIN_DATE_REACHED, lambda: fired.append(ev.MIN_DATE_REACHED))
        cal.load()
        self.assertTrue(cal.min_date_reached)
        self.assertEqual(fired, [ev.MIN_DATE_REACHED])
        self.assertFalse(cal.previous())
        self.assertEqual(cal.domains.min, D.to_ms("2024-01-01"))

    def test_window_clamped_to_bounds(self) -> None:
        cal = monthly(start="2024-01-01", max_date="2024-02-10")
        self.assertEqual(cal.domains.keys, months("2024-01-01", "2024-02-01"))
        self.assertTrue(cal.max_date_reached)


class TestJumpContract(unittest.TestCase):
    def setUp(self) -> None:
        self.cal = monthly(start="2024-01-01")

    def test_jump_one_domain_before_acts_like_previous(self) -> None:
        self.assertIs(self.cal.jump_to("2023-12-10"), ScrollDirection.BACKWARD)
        self.assertEqual(self.cal.domains.keys, months("2023-12-01", "2024-01-01", "2024-02-01"))
        self.assertEqual(self.cal.domains.yanked, months("2024-03-01"))

    def test_jump_forward_past_window(self) -> None:
        self.assertIs(self.cal.jump_to("2024-06-10"), ScrollDirection.FORWARD)
        self.assertEqual(self.cal.domains.keys, months("2024-04-01", "2024-05-01", "2024-06-01"))

    def test_jump_inside_window_is_a_noop(self) -> None:
        self.assertFalse(self.cal.jump_to("2024-02-10"))
        self.assertEqual(self.cal.domains.keys, months("2024-01-01", "2024-02-01", "2024-03-01"))

    def test_jump_with_reset_reloads_from_date(self) -> None:
        self.assertIs(self.cal.jump_to("2024-02-10", reset=True), ScrollDirection.FORWARD)
        self.assertEqual(self.cal.domains.keys, months("2024-02-01", "2024-03-01", "2024-04-01"))

    def test_reset_direction_compares_date_with_window_minimum(self) -> None:
        loaded = []
        self.cal.on(ev.DOMAINS_LOADED, loaded.append)
        self.assertIs(self.cal.jump_to("2024-01-20", reset=True), ScrollDirection.FORWARD)
        self.assertEqual(loaded, months("2024-03-01"))
        self.assertEqual(self.cal.domains.keys, months("2024-01-01", "2024-02-01", "2024-03-01"))

        self.assertIs(self.cal.jump_to("2024-01-01", reset=True), ScrollDirection.BACKWARD)
        self.assertEqual(loaded[-1], D.to_ms("2024-01-01"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
