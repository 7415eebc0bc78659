"""Exceptions for influxdb_linekit."""

class InfluxDBError(Exception):
    """Base exception for influxdb_linekit."""


class InfluxDBTransportError(InfluxDBError):
    """An HTTP round-trip to InfluxDB failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InfluxDBQueryError(InfluxDBError):
    """The server reported an error for a query statement."""


class ResponseParseError(InfluxDBError):
    """The query response is not valid JSON or not shaped like one."""


class MalformedResponseError(InfluxDBError):
    """The query response is valid JSON but breaks the columnar layout."""


class UnknownColumnError(InfluxDBError, KeyError):
    """A row was accessed by a column name the series does not have."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message instead
        return str(self.args[0]) if self.args else ""


class TimestampParseError(InfluxDBError, ValueError):
    """A time value could not be parsed, even after truncation."""


class InvalidMeasurementError(InfluxDBError, ValueError):
    """A measurement or field value cannot be written as line protocol."""


class InfluxDBConfigError(InfluxDBError, ValueError):
    """Connection settings are missing or invalid."""
