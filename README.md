# skyfare

A small command-line tool that scrapes airline data: airports, the routes
served from an airport, and the daily fares for a route. Results are
listed on the console, and airports and fares are also stored in a local
SQLite database, `cache.db`, in the current directory.

Only Vueling is supported.

## Installation

```
pip install .
```

## Usage

Each run first brings the `cache.db` schema up to date (creating the
`airports` and `flights` tables and recording applied migrations in a
`migrations` table), then runs the requested scrape.

List every airport (each one is stored in `cache.db`):

```
skyfare scrape --company vueling --command airports
```

List the destinations reachable from an airport:

```
skyfare scrape --company vueling --command routes --origin BCN
```

List daily fares between two airports, for nine months starting at the
given month (each fare is stored in `cache.db`, updating any fare already
stored for the same departure):

```
skyfare scrape --company vueling --command flights --origin BCN --destination MAD --month 7 --year 2025 --currency EUR
```

`--month` and `--year` default to the current month and year and
`--currency` to `EUR`. The company name is matched without regard to case.

Listings and progress messages are written to standard error, each line
prefixed with a date and time. Fares are shown with two decimals, and
promotional fares are marked `(PROMO)`.

Running `skyfare` with no subcommand prints the help text.

### Options

| Option | Meaning |
| --- | --- |
| `-q`, `--quiet` | Suppress log output (before or after `scrape`) |
| `--company` | Airline name (required) |
| `--command` | `airports`, `routes` or `flights` (required) |
| `--origin` | Origin airport code (routes, flights) |
| `--destination` | Destination airport code (flights) |
| `--month`, `--year` | First month to look up (flights) |
| `--currency` | Currency code for prices (flights) |

Missing or malformed options end the program with exit status 2. Any
other error (an unknown company or command, a missing `--origin` or
`--destination`, a failed request or migration) ends it with exit
status 1.

If the airline's sign-in step fails, a message is printed to standard
output and the scrape is still attempted without a token. Failures to
store an airport or fare are likewise printed to standard output and do
not stop the run; `--quiet` does not silence these messages.

## Using it from Python

```python
from skyfare.cli import run_migrations
from skyfare.migrator import connect
from skyfare.scraper import get_scraper

run_migrations("cache.db")
db = connect("cache.db")
scraper = get_scraper("vueling", db)
for route in scraper.get_airport_routes("BCN"):
    print(route.code, route.connection)
```

`get_scraper` raises `ValueError` for an airline it does not know.
`skyfare.models` holds the `Airport`, `Coordinates`, `Route` and `Flight`
records, each with `to_dict` and `from_dict`, and `to_json` renders a list
of them as an indented JSON array.

## What it does not do

`cache.db` is only written to: there is no command or function to query
the stored airports and fares, and routes are not stored at all. No
airline other than Vueling can be scraped.

## Running the tests

```
pip install ".[test]"
pytest
```