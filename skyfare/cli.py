"""Command line entry point: scrape an airline and list what it offers."""

from __future__ import annotations

import argparse
import sqlite3
from collections.abc import Callable
from datetime import date
from os import PathLike
from typing import Any, TypeVar

import requests

from . import logs, printer
from .migrator import DatabaseMigrator, MigrationError, connect
from .models import to_json
from .scraper import get_scraper
from .vueling import ScraperError

DB_PATH = "cache.db"

_FETCH_ERRORS = (requests.RequestException, ScraperError, ValueError)

T = TypeVar("T")


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the ``skyfare`` command."""
    parser = argparse.ArgumentParser(prog="skyfare")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress all output")
    commands = parser.add_subparsers(dest="subcommand")

    scrape = commands.add_parser("scrape", help="Run the scraper")
    scrape.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Suppress all output",
    )
    today = date.today()
    scrape.add_argument("--company", required=True, help="Flight company name (required)")
    scrape.add_argument(
        "--command", required=True, help="Command to execute (airports, routes, flights)"
    )
    scrape.add_argument("--origin", default="", help="Origin airport code")
    scrape.add_argument("--destination", default="", help="Destination airport code")
    scrape.add_argument("--month", type=int, default=today.month, help="Month")
    scrape.add_argument("--year", type=int, default=today.year, help="Year")
    scrape.add_argument("--currency", default="EUR", help="Currency code")
    return parser


def run_migrations(db_path: str | PathLike[str]) -> None:
    """Bring the cache database's schema up to date, exiting on failure."""
    try:
        migrator = DatabaseMigrator(db_path)
    except sqlite3.Error as err:
        logs.fatal(f"Failed to open database: {err}")
    with migrator:
        try:
            migrator.migrate()
        except (MigrationError, sqlite3.Error) as err:
            logs.fatal(f"Migration failed: {err}")
    logs.log("Database migrations applied successfully.")


def _fetch(what: str, call: Callable[..., T], *args: Any) -> T:
    try:
        return call(*args)
    except _FETCH_ERRORS as err:
        logs.fatal(f"Error fetching {what}: {err}")


def _scrape(args: argparse.Namespace) -> None:
    if not args.company or not args.command:
        logs.fatal("All parameters are required: --company, --command")

    try:
        db = connect(DB_PATH)
    except sqlite3.Error as err:
        logs.fatal(f"Error opening database: {err}")

    try:
        try:
            scraper = get_scraper(args.company, db)
        except ValueError as err:
            logs.fatal(f"Error initializing scraper: {err}")

        if args.command == "airports":
            airports = _fetch("airports", scraper.get_airports)
            printer.print_airports(to_json(airports))
        elif args.command == "routes":
            if not args.origin:
                logs.fatal("--origin is required for routes command")
            routes = _fetch("routes", scraper.get_airport_routes, args.origin)
            printer.print_routes(to_json(routes))
        elif args.command == "flights":
            if not args.origin:
                logs.fatal("--origin is required for route command")
            if not args.destination:
                logs.fatal("--destination is required for route command")
            flights = _fetch(
                "flights",
                scraper.get_route,
                args.origin,
                args.destination,
                args.month,
                args.year,
                args.currency,
            )
            printer.print_flights(to_json(flights))
        else:
            logs.fatal(f"Unknown command: {args.command}")
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    """Run the command line; returns the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.subcommand is None:
        parser.print_help()
        return 0
    logs.set_quiet(args.quiet)
    run_migrations(DB_PATH)
    _scrape(args)
    return 0