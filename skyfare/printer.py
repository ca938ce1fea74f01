"""Human-readable listings of scraped airports, routes and flights."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from . import logs
from .models import Airport, Flight, Route

T = TypeVar("T")


def _load(json_text: str | bytes, kind: str, factory: Callable[[Any], T]) -> list[T]:
    try:
        data = json.loads(json_text)
        if data is None:
            return []
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        return [factory(item) for item in data]
    except (ValueError, TypeError) as err:
        logs.fatal(f"failed to unmarshal {kind} JSON for printing: {err}")


def _display_time(moment: datetime) -> str:
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    total = int(offset.total_seconds()) if offset is not None else 0
    sign = "-" if total < 0 else "+"
    hours, minutes = divmod(abs(total) // 60, 60)
    numeric = f"{sign}{hours:02d}{minutes:02d}"
    name = "UTC" if total == 0 else numeric
    return f"{text} {numeric} {name}"


def print_airports(json_text: str | bytes) -> None:
    """Log one line per airport in a JSON array."""
    airports = _load(json_text, "airport", Airport.from_dict)
    logs.log("Available airports:")
    for airport in airports:
        logs.log(
            f" - {airport.name} ({airport.code}), Country: {airport.country}, "
            f"Coordinates: {airport.coordinates.lat}, {airport.coordinates.lng}"
        )


def print_routes(json_text: str | bytes) -> None:
    """Log one line per route in a JSON array."""
    routes = _load(json_text, "route", Route.from_dict)
    logs.log("Available routes:")
    for route in routes:
        logs.log(f" - To: {route.code} (Connection: {route.connection})")


def print_flights(json_text: str | bytes) -> None:
    """Log one line per flight in a JSON array, marking promotions."""
    flights = _load(json_text, "flight", Flight.from_dict)
    logs.log("Available flights:")
    for flight in flights:
        promo = " (PROMO)" if flight.promotion else ""
        logs.log(
            f" - Date: {_display_time(flight.date)} | Price: {flight.price:.2f}{promo}"
        )