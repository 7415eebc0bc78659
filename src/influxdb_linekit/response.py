"""Decoding of InfluxDB ``/query`` JSON responses.

The response is decoded once into an immutable tree::

    Response -> Result[] -> Series[] -> rows

Cells are typed per value from their JSON shape, never per column.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union
import json
import logging

import pandas as pd

from .exceptions import (
    MalformedResponseError,
    ResponseParseError,
    TimestampParseError,
    UnknownColumnError,
)
from .timestamps import parse_time, to_timestamp
from .values import Value, ValueType

logger = logging.getLogger(__name__)

TIME_COLUMN = "time"

Cell = Optional[Value]

_MISSING = object()


class Row:
    """View over one row of a :class:`Series`."""

    __slots__ = ("_columns", "_index", "_values")

    def __init__(
        self,
        columns: Tuple[str, ...],
        index: Mapping[str, int],
        values: Tuple[Cell, ...],
    ) -> None:
        self._columns = columns
        self._index = index
        self._values = values

    @property
    def columns(self) -> Tuple[str, ...]:
        return self._columns

    @property
    def values(self) -> Tuple[Cell, ...]:
        return self._values

    def get(self, column: str, default: Any = _MISSING) -> Any:
        position = self._index.get(column)
        if position is None:
            if default is _MISSING:
                raise UnknownColumnError(f"Unknown column '{column}'. Available: {', '.join(self._columns)}")
            return default
        return self._values[position]

    def __getitem__(self, column: str) -> Cell:
        return self.get(column)

    def __contains__(self, column: object) -> bool:
        return column in self._index

    def __len__(self) -> int:
        return len(self._values)

    def time(self) -> pd.Timestamp:
        """Timestamp of the row, parsed from the ``time`` column."""
        return to_timestamp(self.time_ns())

    def time_ns(self) -> int:
        cell = self.get(TIME_COLUMN)
        return cell_to_nanoseconds(cell)

    def as_dict(self) -> Dict[str, Any]:
        """Column name to python value (``None`` for null cells)."""
        return {
            col: (cell.value if cell is not None else None)
            for col, cell in zip(self._columns, self._values)
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._columns == other._columns and self._values == other._values

    def __repr__(self) -> str:
        return f"Row({self.as_dict()!r})"


@dataclass(frozen=True)
class Series:
    """A named columnar result set."""

    name: str
    columns: Tuple[str, ...]
    values: Tuple[Tuple[Cell, ...], ...] = ()
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "values", tuple(tuple(r) for r in self.values))
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        for number, row in enumerate(self.values):
            if len(row) != len(self.columns):
                raise MalformedResponseError(
                    f"Series '{self.name}' row {number} has {len(row)} values "
                    f"for {len(self.columns)} columns"
                )
        index = {col: i for i, col in enumerate(self.columns)}
        object.__setattr__(self, "_index", MappingProxyType(index))

    @property
    def rows(self) -> List[Row]:
        return [Row(self.columns, self._index, values) for values in self.values]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.values)

    def column(self, name: str) -> List[Cell]:
        """All values of one column, in row order."""
        position = self._index.get(name)
        if position is None:
            raise UnknownColumnError(f"Unknown column '{name}'. Available: {', '.join(self.columns)}")
        return [row[position] for row in self.values]

    def to_dataframe(self, timezone: str = "UTC") -> pd.DataFrame:
        from .frames import series_to_dataframe

        return series_to_dataframe(self, timezone=timezone)


@dataclass(frozen=True)
class Result:
    """The outcome of one statement of a (possibly multi-statement) query."""

    statement_id: int = 0
    series: Tuple[Series, ...] = ()
    error: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "series", tuple(self.series))


@dataclass(frozen=True)
class Response:
    results: Tuple[Result, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", tuple(self.results))

    @property
    def errors(self) -> List[str]:
        return [r.error for r in self.results if r.error]

    def iter_series(self) -> Iterator[Series]:
        for result in self.results:
            yield from result.series

    def to_dataframe(self, timezone: str = "UTC") -> pd.DataFrame:
        from .frames import response_to_dataframe

        return response_to_dataframe(self, timezone=timezone)


# -------------------- Decoding --------------------

def decode_cell(cell: Any) -> Cell:
    """Type one JSON scalar by its own shape."""
    if cell is None:
        return None
    if isinstance(cell, bool):
        return Value.boolean(cell)
    if isinstance(cell, int):
        return Value(type=ValueType.INT, native=cell)
    if isinstance(cell, float):
        return Value.float64(cell)
    if isinstance(cell, str):
        return Value.string(cell)
    raise ResponseParseError(f"Unexpected value in series row: {cell!r}")


def cell_to_nanoseconds(cell: Cell) -> int:
    if cell is None:
        raise TimestampParseError("time value is null")
    if cell.type is ValueType.INT:
        return int(cell.value)
    if cell.type is ValueType.STRING:
        return parse_time(str(cell.value))
    raise TimestampParseError(f"Cannot read a time from {cell.type.value} value {cell.value!r}")


def _expect(obj: Any, kind: type, what: str) -> Any:
    if not isinstance(obj, kind):
        raise ResponseParseError(f"Expected {what} to be a JSON {kind.__name__}, got {type(obj).__name__}")
    return obj


def _decode_series(obj: Any) -> Series:
    _expect(obj, dict, "series")
    columns = _expect(obj.get("columns", []), list, "series columns")
    rows = _expect(obj.get("values", []), list, "series values")
    tags = _expect(obj.get("tags") or {}, dict, "series tags")
    values = [
        tuple(decode_cell(c) for c in _expect(row, list, "series row"))
        for row in rows
    ]
    return Series(
        name=str(obj.get("name", "")),
        columns=tuple(str(c) for c in columns),
        values=tuple(values),
        tags={str(k): str(v) for k, v in tags.items()},
    )


def _decode_result(obj: Any) -> Result:
    _expect(obj, dict, "result")
    statement_id = obj.get("statement_id", 0)
    if isinstance(statement_id, bool) or not isinstance(statement_id, int):
        raise ResponseParseError(f"statement_id must be an integer, got {statement_id!r}")
    series = _expect(obj.get("series", []), list, "result series")
    return Result(
        statement_id=statement_id,
        series=tuple(_decode_series(s) for s in series),
        error=obj.get("error"),
    )


def parse_response(document: Union[bytes, str, Mapping[str, Any]]) -> Response:
    """Decode a ``/query`` response body into a :class:`Response`."""
    if isinstance(document, (bytes, bytearray, str)):
        try:
            document = json.loads(document)
        except ValueError as exc:
            raise ResponseParseError(f"Invalid JSON response: {exc}") from exc
    _expect(document, dict, "response")
    results = _expect(document.get("results") or [], list, "results")
    response = Response(results=tuple(_decode_result(r) for r in results))
    logger.debug(
        "Decoded response with %d result(s), %d series",
        len(response.results),
        sum(len(r.series) for r in response.results),
    )
    return response

