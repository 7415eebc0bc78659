"""Local write/read smoke test for influxdb-linekit against a running server.

Usage:
    py scripts/smoke_write_read.py
    py scripts/smoke_write_read.py --url http://localhost:8086 --database smoke_test
    py scripts/smoke_write_read.py --keep
"""

from __future__ import annotations

import argparse
import sys
import time

from influxdb_linekit import Database, Measurement, config_from_env


SMOKE_MEASUREMENT = "cpu"


def _sample_measurements() -> list[Measurement]:
    # both points share one series and need distinct times to be kept apart
    now = time.time_ns()
    return [
        Measurement(SMOKE_MEASUREMENT, fields={"temperature": 42}, tags={"tag1": "foo"}, timestamp=now),
        Measurement(SMOKE_MEASUREMENT, fields={"temperature": 68}, tags={"tag1": "foo"}, timestamp=now + 1),
    ]


def _resolve_target(url: str | None, database: str | None) -> tuple[str, str]:
    cfg = config_from_env()
    resolved_db = database or cfg.database
    if not resolved_db:
        raise ValueError("--database (or INFLUXDB_DB) is required for the smoke test")
    return (url or cfg.url).rstrip("/"), resolved_db


def run(url: str, database: str, keep: bool = False) -> int:
    db = Database(url, database)
    try:
        written = db.insert(_sample_measurements())
        print(f"url={url} database={database} written={written}")

        response = db.query(f"SELECT * FROM {SMOKE_MEASUREMENT}")
        rows = [row for series in response.iter_series() for row in series.rows]
        print(f"rows read back: {len(rows)}")
        for row in rows[:3]:
            print(f"  {row.time().isoformat()} {row.as_dict()}")

        hot = db.query(f"SELECT * FROM {SMOKE_MEASUREMENT} WHERE temperature > 50")
        hot_rows = sum(len(s) for s in hot.iter_series())
        print(f"rows with temperature > 50: {hot_rows}")
        if len(rows) != written or hot_rows != 1:
            print("Unexpected row counts.", file=sys.stderr)
            return 1
    finally:
        if not keep:
            db.drop()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Run write/read smoke checks for influxdb-linekit")
    parser.add_argument("--url", type=str, help="InfluxDB base URL (default: INFLUXDB_URL)")
    parser.add_argument("--database", type=str, help="Scratch database name (default: INFLUXDB_DB)")
    parser.add_argument("--keep", action="store_true", help="Do not drop the database afterwards")
    args = parser.parse_args()
    try:
        url, database = _resolve_target(args.url, args.database)
        return run(url, database, keep=args.keep)
    except Exception as exc:
        print(f"Smoke test failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
