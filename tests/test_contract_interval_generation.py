from __future__ import annotations

import unittest

from calheat.interval import generate_intervals, interval_end, intervals_between
from calheat.util.dates import HOUR_MS, DateHelper


class TestIntervalGenerationContract(unittest.TestCase):
    def setUp(self) -> None:
        self.d = DateHelper("UTC")

    def days(self, *isos: str) -> list:
        return [self.d.to_ms(s) for s in isos]

    def test_positive_count_starts_at_anchor_bucket(self) -> None:
        got = generate_intervals(self.d, "day", "2024-01-10T17:45", 3)
        self.assertEqual(got, self.days("2024-01-10", "2024-01-11", "2024-01-12"))

    def test_negative_count_ends_at_anchor_bucket(self) -> None:
        got = generate_intervals(self.d, "day", "2024-01-10T17:45", -3)
        self.assertEqual(got, self.days("2024-01-08", "2024-01-09", "2024-01-10"))

    def test_zero_and_one_give_single_bucket(self) -> None:
        expected = self.days("2024-01-10")
        self.assertEqual(generate_intervals(self.d, "day", "2024-01-10T08:00", 0), expected)
        self.assertEqual(generate_intervals(self.d, "day", "2024-01-10T08:00", 1), expected)

    def test_week_bucket_of_a_sunday_is_the_previous_monday(self) -> None:
        got = generate_intervals(self.d, "week", "2024-01-07", 1)
        self.assertEqual(got, self.days("2024-01-01"))

    def test_stop_date_is_inclusive_in_either_order(self) -> None:
        expected = self.days("2024-01-01", "2024-02-01", "2024-03-01")
        self.assertEqual(generate_intervals(self.d, "month", "2024-01-15", "2024-03-02"), expected)
        self.assertEqual(intervals_between(self.d, "month", "2024-03-02", "2024-01-15"), expected)
        self.assertEqual(
            intervals_between(self.d, "month", self.d.to_ms("2024-01-15"), self.d.to_ms("2024-03-02")),
            expected,
        )

    def test_output_is_strictly_increasing_bucket_starts(self) -> None:
        got = generate_intervals(self.d, "hour", "2024-01-10T10:59", 48)
        self.assertEqual(len(got), 48)
        self.assertEqual(got, sorted(set(got)))
        for ts in got:
            self.assertEqual(self.d.floor("hour", ts), ts)

    def test_interval_end_is_next_bucket_start(self) -> None:
        self.assertEqual(interval_end(self.d, "month", self.d.to_ms("2024-02-10")), self.d.to_ms("2024-03-01"))

    def test_hours_across_spring_forward_skip_missing_hour(self) -> None:
        paris = DateHelper("Europe/Paris")
        got = generate_intervals(paris, "hour", "2024-03-31T00:00", 4)
        self.assertEqual([paris.date(t).hour for t in got], [0, 1, 3, 4])
        self.assertEqual([b - a for a, b in zip(got, got[1:])], [HOUR_MS] * 3)

    def test_days_across_spring_forward_are_wall_clock_midnights(self) -> None:
        paris = DateHelper("Europe/Paris")
        got = generate_intervals(paris, "day", "2024-03-30T12:00", 3)
        self.assertEqual([paris.date(t).format("YYYY-MM-DD HH:mm") for t in got],
                         ["2024-03-30 00:00", "2024-03-31 00:00", "2024-04-01 00:00"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
