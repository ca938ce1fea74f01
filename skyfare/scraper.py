"""The common interface of airline scrapers and the choice between them."""

from __future__ import annotations

import sqlite3
from typing import Protocol, runtime_checkable

from .models import Airport, Flight, Route
from .vueling import VuelingScraper


@runtime_checkable
class Scraper(Protocol):
    """What every airline scraper offers."""

    def get_airports(self) -> list[Airport]:
        """Return every airport the airline serves."""

    def get_airport_routes(self, origin_code: str) -> list[Route]:
        """Return the destinations reachable from ``origin_code``."""

    def get_route(
        self, origin_code: str, dest_code: str, month: int, year: int, currency: str
    ) -> list[Flight]:
        """Return the fares between two airports from the given month on."""


def get_scraper(company: str, db: sqlite3.Connection) -> Scraper:
    """Build the scraper for ``company`` (case-insensitive)."""
    company = company.lower()
    if company == "vueling":
        return VuelingScraper(db)
    raise ValueError(f"no scraper available for company '{company}'")