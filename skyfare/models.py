"""Data records for airports, routes and flights, with JSON mapping."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string")
    return value


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time: {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "")[:6].ljust(6, "0"))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])) * sign
        tz = timezone.utc if not offset else timezone(offset)
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tz
    )


def _utc_offset(moment: datetime) -> timedelta:
    offset = moment.utcoffset()
    return offset if offset is not None else timedelta(0)


def _fraction(moment: datetime) -> str:
    if not moment.microsecond:
        return ""
    return "." + f"{moment.microsecond:06d}".rstrip("0")


def _format_rfc3339(moment: datetime) -> str:
    base = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    offset = _utc_offset(moment)
    if not offset:
        zone = "Z"
    else:
        total = int(offset.total_seconds())
        sign = "-" if total < 0 else "+"
        hours, minutes = divmod(abs(total) // 60, 60)
        zone = f"{sign}{hours:02d}:{minutes:02d}"
    return base + _fraction(moment) + zone


@dataclass
class Coordinates:
    """Latitude and longitude, kept as the text the source supplied."""

    lat: str = ""
    lng: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"latitude": self.lat, "longitude": self.lng}

    @classmethod
    def from_dict(cls, data: Any) -> Coordinates:
        data = _require_mapping(data)
        return cls(lat=_string(data, "latitude"), lng=_string(data, "longitude"))


@dataclass
class Airport:
    """An airport served by an airline."""

    code: str = ""
    name: str = ""
    country: str = ""
    coordinates: Coordinates = field(default_factory=Coordinates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "country": self.country,
            "coordinates": self.coordinates.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Airport:
        data = _require_mapping(data)
        return cls(
            code=_string(data, "code"),
            name=_string(data, "name"),
            country=_string(data, "country"),
            coordinates=Coordinates.from_dict(data.get("coordinates")),
        )


@dataclass
class Route:
    """A destination reachable from some origin airport."""

    code: str = ""
    connection: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "connection": self.connection}

    @classmethod
    def from_dict(cls, data: Any) -> Route:
        data = _require_mapping(data)
        return cls(code=_string(data, "code"), connection=_string(data, "connection"))


@dataclass
class Flight:
    """The fare offered on one departure date."""

    date: datetime = _ZERO_TIME
    price: float = 0.0
    promotion: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"date": _format_rfc3339(self.date)}
        if self.price:
            result["price"] = self.price
        result["promotion"] = self.promotion
        return result

    @classmethod
    def from_dict(cls, data: Any) -> Flight:
        data = _require_mapping(data)

        raw_date = data.get("date")
        if raw_date is None:
            date = _ZERO_TIME
        elif isinstance(raw_date, str):
            date = _parse_rfc3339(raw_date)
        else:
            raise TypeError("field 'date' must be a string")

        raw_price = data.get("price")
        if raw_price is None:
            price = 0.0
        elif isinstance(raw_price, bool) or not isinstance(raw_price, (int, float)):
            raise TypeError("field 'price' must be a number")
        else:
            price = float(raw_price)

        raw_promotion = data.get("promotion")
        if raw_promotion is None:
            promotion = False
        elif isinstance(raw_promotion, bool):
            promotion = raw_promotion
        else:
            raise TypeError("field 'promotion' must be a boolean")

        return cls(date=date, price=price, promotion=promotion)


class _Serialisable(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


def to_json(items: Iterable[_Serialisable]) -> str:
    """Render records as an indented JSON array."""
    return json.dumps([item.to_dict() for item in items], indent=2, ensure_ascii=False)