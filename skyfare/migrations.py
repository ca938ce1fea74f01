"""The ordered list of schema migrations for the fare cache."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Migration:
    """A named block of SQL that brings the schema one step forward."""

    name: str
    sql: str

    def statements(self) -> list[str]:
        """Split the SQL into complete statements, keeping trigger bodies whole."""
        pieces = self.sql.split(";")
        result: list[str] = []
        buffer = ""
        for piece in pieces[:-1]:
            buffer += piece + ";"
            if sqlite3.complete_statement(buffer):
                statement = buffer.strip()
                if statement.rstrip(";").strip():
                    result.append(statement)
                buffer = ""
        tail = (buffer + pieces[-1]).strip()
        if tail:
            result.append(tail)
        return result


_RANDOM_ID = "id TEXT PRIMARY KEY DEFAULT (lower(hex(randomblob(16))))"


def _create_table(name: str, columns: Iterable[str], *, if_not_exists: bool = False) -> str:
    guard = "IF NOT EXISTS " if if_not_exists else ""
    body = ",\n  ".join(columns)
    return f"CREATE TABLE {guard}{name} (\n  {body}\n);\n"


def _touch_trigger(table: str, column: str) -> str:
    return (
        f"CREATE TRIGGER IF NOT EXISTS update_{table}_{column}\n"
        f"AFTER UPDATE ON {table} FOR EACH ROW\n"
        f"BEGIN UPDATE {table} SET {column} = CURRENT_TIMESTAMP WHERE id = OLD.id; END;\n"
    )


_AIRPORTS_SQL = _create_table(
    "airports",
    [
        _RANDOM_ID,
        "code TEXT UNIQUE NOT NULL",
        "name TEXT",
        "country TEXT",
        "lat REAL",
        "lng REAL",
    ],
)

_FLIGHTS_SQL = _create_table(
    "flights",
    [
        _RANDOM_ID,
        "origin TEXT NOT NULL",
        "destination TEXT NOT NULL",
        "departure_date DATETIME NOT NULL",
        "price REAL NOT NULL",
        "promotion BOOLEAN NOT NULL",
        "created_at DATETIME DEFAULT CURRENT_TIMESTAMP",
        "updated_at DATETIME DEFAULT CURRENT_TIMESTAMP",
        "FOREIGN KEY (origin) REFERENCES airports(code)",
        "FOREIGN KEY (destination) REFERENCES airports(code)",
        "UNIQUE(origin, destination, departure_date)",
    ],
    if_not_exists=True,
) + _touch_trigger("flights", "updated_at")

MIGRATIONS: tuple[Migration, ...] = (
    Migration("001_create_airports", _AIRPORTS_SQL),
    Migration("002_create_flights", _FLIGHTS_SQL),
)