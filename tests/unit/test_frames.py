from __future__ import annotations

from datetime import UTC, datetime

import numpy as np
import pandas as pd
import pytest

from influxdb_linekit.frames import measurements_from_dataframe
from influxdb_linekit.protocol import to_line
from influxdb_linekit.response import parse_response


def _response(series: list[dict]) -> dict:
    return {"results": [{"statement_id": 0, "series": series}]}


def test_measurements_from_dataframe() -> None:
    df = pd.DataFrame(
        {
            "time": [datetime(2015, 6, 11, 20, 46, 2, tzinfo=UTC), datetime(2015, 6, 11, 20, 46, 3, tzinfo=UTC)],
            "value": [1.5, 2.0],
            "count": [3, 4],
            "sensor": ["a", "b"],
        }
    )
    measurements = measurements_from_dataframe(df, "temperature", tag_columns=["sensor"])

    assert [to_line(m) for m in measurements] == [
        "temperature,sensor=a value=1.5,count=3i 1434055562000000000",
        "temperature,sensor=b value=2,count=4i 1434055563000000000",
    ]


def test_measurements_from_dataframe_skips_null_fields() -> None:
    df = pd.DataFrame({"time": [1, 2, 3], "a": [1.0, np.nan, np.nan], "b": ["x", "y", None]})
    lines = [to_line(m) for m in measurements_from_dataframe(df, "m", field_columns=["a"])]
    assert lines == ["m a=1 1"]

    lines = [to_line(m) for m in measurements_from_dataframe(df, "m")]
    assert lines == ['m a=1,b="x" 1', 'm b="y" 2']


def test_measurements_from_dataframe_without_time() -> None:
    df = pd.DataFrame({"v": [True]})
    measurements = measurements_from_dataframe(df, "m", time_column=None)
    assert [to_line(m) for m in measurements] == ["m v=true"]


def test_measurements_from_dataframe_requires_time_column() -> None:
    with pytest.raises(ValueError, match="time_column must exist"):
        measurements_from_dataframe(pd.DataFrame({"v": [1]}), "m")


def test_series_to_dataframe_parses_time_and_adds_tags() -> None:
    response = parse_response(
        _response(
            [
                {
                    "name": "m",
                    "tags": {"sensor": "s1"},
                    "columns": ["value", "time"],
                    "values": [[1.0, "2026-02-01T00:00:00Z"], [2.0, "2026-02-01T00:00:01.123456789012Z"]],
                }
            ]
        )
    )
    out = response.results[0].series[0].to_dataframe()

    assert list(out.columns) == ["time", "value", "sensor"]
    assert list(out["sensor"]) == ["s1", "s1"]
    assert out["time"].iloc[0] == pd.Timestamp("2026-02-01T00:00:00Z")
    assert out["time"].iloc[1] == pd.Timestamp("2026-02-01T00:00:01.123456789Z")
    assert out["time"].iloc[0].tzinfo is not None


def test_series_to_dataframe_converts_timezone() -> None:
    response = parse_response(
        _response([{"name": "m", "columns": ["time", "v"], "values": [["2026-02-01T00:00:00Z", 1]]}])
    )
    out = response.to_dataframe(timezone="Europe/Zurich")
    assert out["time"].iloc[0] == pd.Timestamp("2026-02-01T01:00:00")
    assert out["time"].iloc[0].tzinfo is None


def test_response_to_dataframe_stacks_series() -> None:
    response = parse_response(
        _response(
            [
                {"name": "m", "tags": {"host": "a"}, "columns": ["time", "v"], "values": [[1, 1]]},
                {"name": "m", "tags": {"host": "b"}, "columns": ["time", "v"], "values": [[2, 2]]},
            ]
        )
    )
    out = response.to_dataframe()
    assert list(out.columns) == ["time", "v", "host"]
    assert list(out["host"]) == ["a", "b"]
    assert list(out["v"]) == [1, 2]


def test_empty_response_to_dataframe() -> None:
    assert parse_response(b'{"results":[{"statement_id":0}]}').to_dataframe().empty


def test_measurements_from_dataframe_skips_null_tags() -> None:
    df = pd.DataFrame(
        {
            "time": [1, 2],
            "host": ["a", None],
            "region": [np.nan, "eu"],
            "v": [1.0, 2.0],
        }
    )
    lines = [to_line(m) for m in measurements_from_dataframe(df, "m", tag_columns=["host", "region"])]
    assert lines == ["m,host=a v=1 1", "m,region=eu v=2 2"]
