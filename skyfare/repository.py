"""Storage of scraped airports and flights in the cache database."""

from __future__ import annotations

import sqlite3
from datetime import datetime

from .models import Airport, Flight


def _sql_timestamp(moment: datetime) -> str:
    """Render a time the way the cache stores departure dates."""
    base = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        base += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    total = int(offset.total_seconds()) if offset is not None else 0
    sign = "-" if total < 0 else "+"
    hours, minutes = divmod(abs(total) // 60, 60)
    return f"{base}{sign}{hours:02d}:{minutes:02d}"


class AirportRepository:
    """Writes airports, leaving already known codes untouched."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self._db = db

    def insert_airport(self, airport: Airport) -> None:
        with self._db:
            self._db.execute(
                """
                INSERT OR IGNORE INTO airports (code, name, country, lat, lng)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    airport.code,
                    airport.name,
                    airport.country,
                    airport.coordinates.lat,
                    airport.coordinates.lng,
                ),
            )


class FlightsRepository:
    """Writes flights, updating the fare when the departure is already stored."""

    def __init__(self, db: sqlite3.Connection) -> None:
        self._db = db

    def insert_flight(self, origin: str, destination: str, flight: Flight) -> None:
        with self._db:
            self._db.execute(
                """
                INSERT INTO flights (
                    origin, destination, departure_date, price, promotion
                ) VALUES (
                    (SELECT id FROM airports WHERE code = ?),
                    (SELECT id FROM airports WHERE code = ?),
                    ?, ?, ?)
                ON CONFLICT(origin, destination, departure_date) DO UPDATE SET
                    price = excluded.price,
                    departure_date = excluded.departure_date,
                    promotion = excluded.promotion,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    origin,
                    destination,
                    _sql_timestamp(flight.date),
                    flight.price,
                    flight.promotion,
                ),
            )