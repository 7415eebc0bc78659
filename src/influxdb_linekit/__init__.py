"""influxdb_linekit package."""

from .config import DatabaseConfig, config_from_env, load_env, resolve_config
from .database import Database
from .exceptions import (
    InfluxDBConfigError,
    InfluxDBError,
    InfluxDBQueryError,
    InfluxDBTransportError,
    InvalidMeasurementError,
    MalformedResponseError,
    ResponseParseError,
    TimestampParseError,
    UnknownColumnError,
)
from .protocol import Measurement, escape_key, escape_measurement, to_line, to_lines
from .response import Response, Result, Row, Series, parse_response
from .timestamps import parse_time, to_nanoseconds
from .values import Value, ValueType, guess_type

__all__ = [
    "Database",
    "DatabaseConfig",
    "config_from_env",
    "load_env",
    "resolve_config",
    "InfluxDBConfigError",
    "InfluxDBError",
    "InfluxDBQueryError",
    "InfluxDBTransportError",
    "InvalidMeasurementError",
    "MalformedResponseError",
    "ResponseParseError",
    "TimestampParseError",
    "UnknownColumnError",
    "Measurement",
    "escape_key",
    "escape_measurement",
    "to_line",
    "to_lines",
    "Response",
    "Result",
    "Row",
    "Series",
    "parse_response",
    "parse_time",
    "to_nanoseconds",
    "Value",
    "ValueType",
    "guess_type",
]
