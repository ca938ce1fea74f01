"""Scrape Vueling airports, routes and fares, caching them in SQLite."""

__version__ = "0.1.0"