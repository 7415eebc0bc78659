"""Line protocol encoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional
import logging

from .exceptions import InvalidMeasurementError
from .timestamps import TimeLike, to_nanoseconds
from .values import Value

logger = logging.getLogger(__name__)

_NAME_ESCAPES = str.maketrans({"\\": "\\\\", ",": "\\,", " ": "\\ "})
_KEY_ESCAPES = str.maketrans({"\\": "\\\\", ",": "\\,", "=": "\\=", " ": "\\ "})


def escape_measurement(name: str) -> str:
    return name.translate(_NAME_ESCAPES)


def escape_key(text: str) -> str:
    """Escape a tag key, tag value or field key."""
    return text.translate(_KEY_ESCAPES)


def _to_field_value(value: Any) -> Value:
    # plain strings keep the guessing behaviour of the untyped API
    if isinstance(value, str):
        return Value.from_text(value)
    return Value.of(value)


@dataclass(frozen=True)
class Measurement:
    """A single point: measurement name, tags, fields and optional time.

    ``timestamp`` is nanoseconds since the epoch; ``None`` or ``0`` lets the
    server assign the time.
    """

    name: str
    fields: Mapping[str, Value] = field(default_factory=dict)
    tags: Mapping[str, str] = field(default_factory=dict)
    timestamp: Optional[int] = None

    def __init__(
        self,
        name: str,
        fields: Optional[Mapping[str, Any]] = None,
        tags: Optional[Mapping[str, Any]] = None,
        timestamp: Optional[TimeLike] = None,
    ) -> None:
        if not name:
            raise InvalidMeasurementError("measurement name must not be empty")
        converted_fields = {str(k): _to_field_value(v) for k, v in (fields or {}).items()}
        # the protocol has no empty tag values, such tags are left out
        converted_tags = {
            str(k): str(v) for k, v in (tags or {}).items() if v is not None and str(v) != ""
        }
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "fields", MappingProxyType(converted_fields))
        object.__setattr__(self, "tags", MappingProxyType(converted_tags))
        object.__setattr__(
            self, "timestamp", None if timestamp is None else to_nanoseconds(timestamp)
        )

    @classmethod
    def from_point(cls, point: Mapping[str, Any], measurement: Optional[str] = None) -> "Measurement":
        """Build from a ``{"measurement", "tags", "fields", "time"}`` point dict."""
        name = point.get("measurement") or measurement
        if not name:
            raise InvalidMeasurementError("measurement is required in each point")
        return cls(
            name=str(name),
            fields=point.get("fields"),
            tags=point.get("tags"),
            timestamp=point.get("time"),
        )

    def to_line(self) -> str:
        return to_line(self)

    def __str__(self) -> str:
        return to_line(self)


def to_line(measurement: Measurement) -> str:
    """Encode one measurement as a line-protocol line."""
    head = escape_measurement(measurement.name)
    if measurement.tags:
        head += "," + ",".join(
            f"{escape_key(k)}={escape_key(v)}" for k, v in measurement.tags.items()
        )
    fields = ",".join(
        f"{escape_key(k)}={v.to_line_protocol()}" for k, v in measurement.fields.items()
    )
    parts = [head, fields]
    if measurement.timestamp:
        parts.append(str(measurement.timestamp))
    return " ".join(parts)


def to_lines(measurements: Iterable[Measurement]) -> str:
    """Encode measurements as newline separated lines."""
    lines = [to_line(m) for m in measurements]
    logger.debug("Encoded %d line(s)", len(lines))
    return "\n".join(lines)
