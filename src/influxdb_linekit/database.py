"""Database facade binding a URL and database name to manage/query/write."""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Union
import logging

import pandas as pd

from . import transport
from .config import DatabaseConfig, resolve_config
from .exceptions import InfluxDBConfigError, InfluxDBQueryError
from .frames import measurements_from_dataframe
from .protocol import Measurement, to_lines
from .response import Response, parse_response

logger = logging.getLogger(__name__)

ManageFunc = Callable[[str, str], Any]
QueryFunc = Callable[[str, str, str], Union[bytes, str, Mapping[str, Any]]]
WriteFunc = Callable[[str, str, str], Any]


class Database:
    """One InfluxDB database reached through three I/O callables.

    ``manage(url, command)``, ``query(url, db, text) -> body`` and
    ``write(url, db, lines)`` default to :mod:`influxdb_linekit.transport`.
    Creating the object issues ``CREATE DATABASE``.
    """

    def __init__(
        self,
        url: str,
        db: str,
        manage: Optional[ManageFunc] = None,
        query: Optional[QueryFunc] = None,
        write: Optional[WriteFunc] = None,
    ) -> None:
        if not db:
            raise InfluxDBConfigError("database name is required")
        self._url = url
        self._db = db
        self._manage = manage or transport.manage
        self._query = query or transport.query
        self._write = write or transport.write
        self.manage(f"CREATE DATABASE {db}")

    @classmethod
    def from_config(
        cls, config: DatabaseConfig | Mapping[str, Any], **io: Any
    ) -> "Database":
        cfg = resolve_config(config)
        return cls(cfg.url, cfg.database, **io)

    @property
    def url(self) -> str:
        return self._url

    @property
    def db(self) -> str:
        return self._db

    def manage(self, command: str) -> None:
        logger.debug("Command on %s: %s", self._url, command)
        self._manage(self._url, command)

    def query(self, query: str) -> Response:
        logger.debug("Query on %s/%s: %s", self._url, self._db, query)
        response = parse_response(self._query(self._url, self._db, query))
        if response.errors:
            raise InfluxDBQueryError("; ".join(response.errors))
        return response

    def query_dataframe(self, query: str, timezone: str = "UTC") -> pd.DataFrame:
        return self.query(query).to_dataframe(timezone=timezone)

    def insert(self, measurements: Union[Measurement, Iterable[Measurement]]) -> int:
        """Write measurements as one line-protocol body; returns the line count."""
        if isinstance(measurements, Measurement):
            measurements = [measurements]
        batch: List[Measurement] = list(measurements)
        if not batch:
            return 0
        self._write(self._url, self._db, to_lines(batch))
        return len(batch)

    def insert_dataframe(
        self,
        df: pd.DataFrame,
        measurement: str,
        tag_columns: Optional[List[str]] = None,
        field_columns: Optional[List[str]] = None,
        time_column: Optional[str] = "time",
    ) -> int:
        return self.insert(
            measurements_from_dataframe(
                df,
                measurement,
                tag_columns=tag_columns,
                field_columns=field_columns,
                time_column=time_column,
            )
        )

    def drop(self) -> None:
        self.manage(f"DROP DATABASE {self._db}")

    def __repr__(self) -> str:
        return f"Database({self._url!r}, {self._db!r})"
