"""Fare scraper for Vueling's public booking services."""

from __future__ import annotations

import re
import sqlite3
from datetime import datetime, timezone
from typing import Any

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter

from .models import Airport, Coordinates, Flight, Route
from .repository import AirportRepository, FlightsRepository

TICKETS_BASE_URL = "https://tickets.vueling.com"
AMS_BASE_URL = "https://ams.vueling.com"

TICKETS_SERVICE_BOOKING_URL = TICKETS_BASE_URL + "/booking"
TICKETS_SERVICE_BOOKING_FLIGHT_SEARCH_URL = TICKETS_SERVICE_BOOKING_URL + "/flightSearch"
TICKETS_SERVICE_ASSETS_URL = TICKETS_BASE_URL + "/assets"
TICKETS_SERVICE_ASSETS_STATIONS_FILE = "es-ES.json"
TICKETS_SERVICE_ASSETS_STATIONS_URL = (
    TICKETS_SERVICE_ASSETS_URL + "/stations/" + TICKETS_SERVICE_ASSETS_STATIONS_FILE
)

AMS_SERVICE_VERSION = "v1"
AMS_SERVICE_ASM_BASE_URL = AMS_BASE_URL + "/asm/" + AMS_SERVICE_VERSION
AMS_SERVICE_ASM_AUTH_URL = AMS_SERVICE_ASM_BASE_URL + "/Auth"

AMS_SERVICE_RES_BASE_URL = AMS_BASE_URL + "/res/" + AMS_SERVICE_VERSION
AMS_SERVICE_RES_MARKETS_URL = AMS_SERVICE_RES_BASE_URL + "/Markets"
AMS_SERVICE_RES_MARKETS_BYORIGIN_URL = AMS_SERVICE_RES_MARKETS_URL + "/ByOrigin"

AMS_SERVICE_AVY_VERSION = "v2"
AMS_SERVICE_AVY_BASE_URL = AMS_BASE_URL + "/avy/" + AMS_SERVICE_AVY_VERSION
AMS_SERVICE_AVY_AVAILABILITY_URL = AMS_SERVICE_AVY_BASE_URL + "/AvailabilityServices"
AMS_SERVICE_AVY_AVAILABILITY_FLIGHTS_URL = AMS_SERVICE_AVY_AVAILABILITY_URL + "/flightsSummary"

HEADERS: dict[str, str] = {
    "accept": "application/json, text/plain, */*",
    "accept-language": "es-ES,es;q=0.7",
    "content-type": "application/json",
    "origin": TICKETS_BASE_URL,
    "referer": TICKETS_BASE_URL,
    "user-agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "sec-ch-ua": '"Chromium";v="124", "Brave";v="124", "Not-A.Brand";v="99"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Linux"',
    "sec-fetch-dest": "empty",
    "sec-fetch-mode": "cors",
    "sec-fetch-site": "same-site",
    "sec-gpc": "1",
    "priority": "u=1, i",
}

_TIMEOUT = 15
_RETRIES = 3
_MONTHS_RANGE = 9
_DATE_LAYOUT = "%Y-%m-%dT%H:%M:%S"

_CHUNK_FILE = re.compile(r"chunk-[A-Z0-9]+\.js")
_PROFILE_ID = re.compile(r'profileId:"([a-f0-9-]{36})"')


class ScraperError(Exception):
    """The airline's services answered with something unusable."""


def is_json_response(response: requests.Response) -> bool:
    """Whether the response declares a JSON body."""
    return "application/json" in response.headers.get("Content-Type", "")


def _text(record: Any, *path: str) -> str:
    value = record
    for key in path:
        if value is None:
            return ""
        if not isinstance(value, dict):
            raise ScraperError(f"expected an object at {key!r}")
        value = value.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ScraperError(f"field {'.'.join(path)!r} must be a string")
    return value


def _records(response: requests.Response) -> list[dict[str, Any]]:
    if not is_json_response(response):
        raise ScraperError("invalid content type")
    data = response.json()
    if data is None:
        return []
    if not isinstance(data, list):
        raise ScraperError("expected a JSON array")
    for item in data:
        if item is not None and not isinstance(item, dict):
            raise ScraperError("expected an array of objects")
    return [item or {} for item in data]


class VuelingScraper:
    """Reads airports, routes and fares from Vueling and caches them."""

    def __init__(
        self, db: sqlite3.Connection, session: requests.Session | None = None
    ) -> None:
        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(max_retries=_RETRIES)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        session.headers.update(HEADERS)
        self._session = session
        self._airports = AirportRepository(db)
        self._flights = FlightsRepository(db)
        fetched_id = ""
        bearer = ""
        try:
            fetched_id = self._fetch_profile_id()
            bearer = self._fetch_access_token(fetched_id)
        except (requests.RequestException, ScraperError, ValueError) as err:
            print(f"Failed to initialize Vueling scraper: {err}")
        self.profile_id = fetched_id
        self.access_token = bearer

    def _authorization(self) -> dict[str, str]:
        return {"Authorization": "Bearer " + self.access_token}

    def get_airports(self) -> list[Airport]:
        """Fetch every station, storing each one in the cache."""
        response = self._session.get(TICKETS_SERVICE_ASSETS_STATIONS_URL, timeout=_TIMEOUT)
        airports = []
        for item in _records(response):
            airport = Airport(
                code=_text(item, "stationCode"),
                name=_text(item, "fullName"),
                country=_text(item, "locationDetails", "countryCode"),
                coordinates=Coordinates(
                    lat=_text(item, "locationDetails", "coordinates", "latitude"),
                    lng=_text(item, "locationDetails", "coordinates", "longitude"),
                ),
            )
            airports.append(airport)
            try:
                self._airports.insert_airport(airport)
            except sqlite3.Error as err:
                print(f"Failed to insert airport {airport.code}: {err}")
        return airports

    def get_airport_routes(self, code: str) -> list[Route]:
        """Fetch the destinations served from the airport ``code``."""
        response = self._session.get(
            f"{AMS_SERVICE_RES_MARKETS_BYORIGIN_URL}/{code}",
            headers=self._authorization(),
            timeout=_TIMEOUT,
        )
        return [
            Route(code=_text(item, "toCode"), connection=_text(item, "connection"))
            for item in _records(response)
        ]

    def get_route(
        self, code_from: str, code_to: str, month: int, year: int, currency: str
    ) -> list[Flight]:
        """Fetch the daily fares between two airports, storing each one."""
        body = {
            "originCode": code_from,
            "destinationCode": code_to,
            "year": year,
            "month": month,
            "currencyCode": currency,
            "monthsRange": _MONTHS_RANGE,
        }
        response = self._session.post(
            AMS_SERVICE_AVY_AVAILABILITY_FLIGHTS_URL,
            json=body,
            headers={**self._authorization(), "Content-Type": "application/json"},
            timeout=_TIMEOUT,
        )
        flights = []
        for item in _records(response):
            raw_price = item.get("price")
            if raw_price is None:
                price = 0.0
            elif isinstance(raw_price, bool) or not isinstance(raw_price, (int, float)):
                raise ScraperError("field 'price' must be a number")
            else:
                price = float(raw_price)

            raw_promotion = item.get("promotion")
            if raw_promotion is not None and not isinstance(raw_promotion, bool):
                raise ScraperError("field 'promotion' must be a boolean")

            try:
                date = datetime.strptime(_text(item, "departureDate"), _DATE_LAYOUT)
            except ValueError as err:
                raise ScraperError(f"invalid date format: {err}") from err

            flight = Flight(
                date=date.replace(tzinfo=timezone.utc),
                price=price,
                promotion=bool(raw_promotion),
            )
            try:
                self._flights.insert_flight(code_from, code_to, flight)
            except sqlite3.Error as err:
                print(f"failed to insert flight: {err}")
            flights.append(flight)
        return flights

    def _fetch_profile_id(self) -> str:
        response = self._session.get(TICKETS_SERVICE_BOOKING_URL, timeout=_TIMEOUT)
        soup = BeautifulSoup(response.text, "html.parser")
        chunk_href = next(
            (
                link["href"]
                for link in soup.select("link[href]")
                if _CHUNK_FILE.search(link["href"])
            ),
            "",
        )
        if not chunk_href:
            raise ScraperError("chunk file not found")

        chunk = self._session.get(f"{TICKETS_BASE_URL}/{chunk_href}", timeout=_TIMEOUT)
        match = _PROFILE_ID.search(chunk.text)
        if match is None:
            raise ScraperError("profile ID not found")
        return match.group(1)

    def _fetch_access_token(self, profile_id: str) -> str:
        response = self._session.post(
            AMS_SERVICE_ASM_AUTH_URL,
            json={"profileId": profile_id},
            headers={"Content-Type": "application/json"},
            timeout=_TIMEOUT,
        )
        result = response.json()
        if result is None:
            result = {}
        if not isinstance(result, dict):
            raise ScraperError("unexpected authentication response")
        bearer = _text(result, "accessToken")
        if not bearer:
            raise ScraperError("access token missing in response")
        return bearer