"""pandas bridges for measurements and query results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

import pandas as pd
from pandas.api.types import is_integer

from .protocol import Measurement
from .response import TIME_COLUMN, cell_to_nanoseconds
from .values import Value

if TYPE_CHECKING:
    from .response import Response, Series


def measurements_from_dataframe(
    df: pd.DataFrame,
    measurement: str,
    tag_columns: Optional[List[str]] = None,
    field_columns: Optional[List[str]] = None,
    time_column: Optional[str] = "time",
) -> List[Measurement]:
    """One measurement per dataframe row.

    Cells are typed from their dtype, strings are never guessed. Null field
    and tag cells are skipped; rows without any field are dropped.
    """
    if time_column is not None and time_column not in df.columns:
        raise ValueError("time_column must exist in dataframe")
    excluded = [time_column] + (tag_columns or [])
    fields = field_columns or [c for c in df.columns if c not in excluded]
    measurements = []
    for row in df.to_dict("records"):
        values = {k: Value.of(row[k]) for k in fields if not _is_null(row[k])}
        if not values:
            continue
        measurements.append(
            Measurement(
                name=measurement,
                fields=values,
                tags={k: row[k] for k in (tag_columns or []) if not _is_null(row[k])},
                timestamp=None if time_column is None else _row_time(row[time_column]),
            )
        )
    return measurements


def series_to_dataframe(series: "Series", timezone: str = "UTC") -> pd.DataFrame:
    """Rows of a series as a dataframe; series tags become constant columns."""
    records = []
    for row in series.rows:
        record = row.as_dict()
        record.update(series.tags)
        records.append(record)
    df = pd.DataFrame(records, columns=_frame_columns(series))
    return _normalize_time(df, series.column(TIME_COLUMN) if TIME_COLUMN in series.columns else None, timezone)


def response_to_dataframe(response: "Response", timezone: str = "UTC") -> pd.DataFrame:
    """All series of all results stacked into one dataframe."""
    frames = [series_to_dataframe(s, timezone) for s in response.iter_series()]
    frames = [f for f in frames if not f.empty]
    if not frames:
        return pd.DataFrame()
    if len(frames) == 1:
        return frames[0]
    return _move_time_first(pd.concat(frames, ignore_index=True))


def _frame_columns(series: "Series") -> List[str]:
    cols = list(series.columns)
    cols.extend(k for k in series.tags if k not in cols)
    return cols


def _normalize_time(df: pd.DataFrame, time_cells: Optional[list], timezone: str) -> pd.DataFrame:
    if df.empty or time_cells is None:
        return df
    nanos = [cell_to_nanoseconds(cell) for cell in time_cells]
    df["time"] = pd.to_datetime(nanos, unit="ns", utc=True)
    if timezone and timezone.upper() != "UTC":
        df["time"] = df["time"].dt.tz_convert(timezone)
        df["time"] = df["time"].dt.tz_localize(None)
    return _move_time_first(df)


def _move_time_first(df: pd.DataFrame) -> pd.DataFrame:
    cols = list(df.columns)
    if cols and cols[0] != "time" and "time" in cols:
        cols = ["time"] + [c for c in cols if c != "time"]
        return df.reindex(columns=cols)
    return df


def _row_time(value: Any) -> Optional[Any]:
    if _is_null(value):
        return None
    if isinstance(value, (pd.Timestamp, str)) or is_integer(value):
        return value
    return pd.Timestamp(value)


def _is_null(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
