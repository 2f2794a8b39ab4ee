from __future__ import annotations

import unittest

from calheat.calendar import CalHeatmap
from calheat.data import aggregate, expand_source_uri, record_timestamp
from calheat.util.dates import DateHelper

D = DateHelper("UTC")
JAN_5 = 1704412800000  # 2024-01-05T00:00:00Z


class TestRecordTimestampContract(unittest.TestCase):
    def test_seconds_milliseconds_and_strings(self) -> None:
        self.assertEqual(record_timestamp(1704067200, D), 1704067200000)
        self.assertEqual(record_timestamp(1704067200000, D), 1704067200000)
        self.assertEqual(record_timestamp("1704067200", D), 1704067200000)
        self.assertEqual(record_timestamp("2024-01-01", D), 1704067200000)
        with self.assertRaises(TypeError):
            record_timestamp(None, D)


class TestAggregateContract(unittest.TestCase):
    def test_aggregates(self) -> None:
        self.assertEqual(aggregate([1, 2, 3]), 6)
        self.assertEqual(aggregate([1, 2, 3], "average"), 2)
        self.assertEqual(aggregate([4, 2], "min"), 2)
        self.assertEqual(aggregate([4, 2], "max"), 4)
        self.assertEqual(aggregate(["a", None], "count"), 2)
        self.assertIsNone(aggregate([None], "sum"))
        with self.assertRaises(ValueError):
            aggregate([1], "median")


class TestFillContract(unittest.TestCase):
    def setUp(self) -> None:
        self.cal = CalHeatmap(domain="month", subdomain="day", range=3, start="2024-01-01", tz="UTC")

    def cell(self, ts: int):  # type: ignore[no-untyped-def]
        key = D.floor("month", ts)
        return next(c for c in self.cal.subdomains(key) if c.timestamp == ts)

    def test_values_summed_per_cell(self) -> None:
        n = self.cal.fill({"2024-01-05": 3, 1704456000: 2, "2023-06-01": 9})
        self.assertEqual(n, 1)
        self.assertEqual(self.cal_value(JAN_5), 5)

    def cal_value(self, ts: int):  # type: ignore[no-untyped-def]
        return self.cell(ts).value

    def test_aggregate_override_and_pairs(self) -> None:
        self.cal.fill([(JAN_5, 2), (JAN_5 + 3_600_000, 4)], aggregate="average")
        self.assertEqual(self.cal_value(JAN_5), 3)

    def test_untouched_cells_stay_empty(self) -> None:
        self.cal.fill({JAN_5: 1})
        self.assertIsNone(self.cal_value(JAN_5 + 86_400_000))


class TestSourceUriContract(unittest.TestCase):
    def test_placeholders_are_expanded(self) -> None:
        uri = expand_source_uri(
            "https://example.org/data?start={{t:start}}&end={{t:end}}&from={{d:start}}&to={{d:end}}",
            1704067200000,
            1704153600000,
        )
        self.assertEqual(
            uri,
            "https://example.org/data?start=1704067200&end=1704153600"
            "&from=2024-01-01T00:00:00.000Z&to=2024-01-02T00:00:00.000Z",
        )


if __name__ == "__main__":
    unittest.main(verbosity=2)
