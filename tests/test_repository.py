import sqlite3
from datetime import datetime, timezone

import pytest

from skyfare import logs
from skyfare.migrator import DatabaseMigrator, connect
from skyfare.models import Airport, Coordinates, Flight
from skyfare.repository import AirportRepository, FlightsRepository


@pytest.fixture
def db(tmp_path):
    logs.set_quiet(True)
    path = tmp_path / "cache.db"
    with DatabaseMigrator(path) as migrator:
        migrator.migrate()
    logs.set_quiet(False)
    conn = connect(path)
    yield conn
    conn.close()


def _airport(code="BCN", name="Barcelona"):
    return Airport(
        code=code,
        name=name,
        country="ES",
        coordinates=Coordinates(lat="41.29", lng="2.07"),
    )


def _flight(price=19.99, day=1):
    return Flight(
        date=datetime(2024, 5, day, 10, 0, tzinfo=timezone.utc),
        price=price,
        promotion=True,
    )


@pytest.fixture
def airports(db):
    repo = AirportRepository(db)
    repo.insert_airport(_airport("BCN", "Barcelona"))
    repo.insert_airport(_airport("MAD", "Madrid"))
    return db


def test_insert_airport_stores_row(db):
    AirportRepository(db).insert_airport(_airport())
    row = db.execute("SELECT code, name, country, lat, lng FROM airports").fetchone()
    assert row == ("BCN", "Barcelona", "ES", 41.29, 2.07)


def test_insert_airport_ignores_duplicate_code(db):
    repo = AirportRepository(db)
    repo.insert_airport(_airport(name="Barcelona"))
    repo.insert_airport(_airport(name="Other"))
    rows = db.execute("SELECT name FROM airports").fetchall()
    assert rows == [("Barcelona",)]


def test_insert_flight_references_airport_ids(airports):
    FlightsRepository(airports).insert_flight("BCN", "MAD", _flight())
    bcn_id = airports.execute("SELECT id FROM airports WHERE code='BCN'").fetchone()[0]
    mad_id = airports.execute("SELECT id FROM airports WHERE code='MAD'").fetchone()[0]
    row = airports.execute(
        "SELECT origin, destination, departure_date, price, promotion FROM flights"
    ).fetchone()
    assert row == (bcn_id, mad_id, "2024-05-01 10:00:00+00:00", 19.99, 1)


def test_insert_flight_upserts_same_departure(airports):
    repo = FlightsRepository(airports)
    repo.insert_flight("BCN", "MAD", _flight(price=19.99))
    repo.insert_flight("BCN", "MAD", _flight(price=25.0))
    rows = airports.execute("SELECT price FROM flights").fetchall()
    assert rows == [(25.0,)]


def test_insert_flight_distinct_dates_are_separate(airports):
    repo = FlightsRepository(airports)
    repo.insert_flight("BCN", "MAD", _flight(day=1))
    repo.insert_flight("BCN", "MAD", _flight(day=2))
    assert airports.execute("SELECT COUNT(*) FROM flights").fetchone() == (2,)


def test_insert_flight_unknown_airport_fails(airports):
    with pytest.raises(sqlite3.IntegrityError):
        FlightsRepository(airports).insert_flight("BCN", "XXX", _flight())