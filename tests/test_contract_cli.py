from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import orjson

from calheat import cli

BASE = ["--domain", "month", "--subdomain", "day", "--range", "3", "--tz", "UTC", "--start", "2024-03-15"]


class TestCliContract(unittest.TestCase):
    def test_writes_payload_to_out(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "build" / "cal.json"
            with redirect_stdout(io.StringIO()):
                cli.main(BASE + ["--window-anchor", "end", "--out", str(out)])
            data = orjson.loads(out.read_bytes())
        self.assertEqual([d["label"] for d in data["domains"]], ["January", "February", "March"])

    def test_prints_payload_and_applies_navigation_and_data(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            records = Path(td) / "data.json"
            records.write_bytes(orjson.dumps({"2024-04-02": 7}))
            buf = io.StringIO()
            with redirect_stdout(buf):
                cli.main(BASE + ["--next", "1", "--data", str(records)])
        data = orjson.loads(buf.getvalue())
        self.assertEqual([d["label"] for d in data["domains"]], ["April", "May", "June"])
        self.assertEqual(data["yanked"], [1709251200000])
        values = [c["v"] for c in data["domains"][0]["subdomains"] if c["v"] is not None]
        self.assertEqual(values, [7])

    def test_invalid_tz_reports_user_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--tz", "No/Such_Zone"])
        self.assertIn("Invalid configuration", str(ctx.exception))

    def test_reset_requires_jump(self) -> None:
        with self.assertRaises(SystemExit):
            cli.main(BASE + ["--reset"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
