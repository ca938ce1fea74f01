import sqlite3
from datetime import date

import pytest
import responses

from skyfare import logs, vueling
from skyfare.cli import build_parser, main, run_migrations

PROFILE_ID = "0123abcd-0000-4000-8000-00000000abcd"


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    logs.set_quiet(False)


def _mock_setup(rsps):
    rsps.add(
        responses.GET,
        vueling.TICKETS_SERVICE_BOOKING_URL,
        body='<html><link href="chunk-Q1.js"></html>',
        content_type="text/html",
    )
    rsps.add(
        responses.GET,
        f"{vueling.TICKETS_BASE_URL}/chunk-Q1.js",
        body=f'profileId:"{PROFILE_ID}"',
    )
    rsps.add(responses.POST, vueling.AMS_SERVICE_ASM_AUTH_URL, json={"accessToken": "token"})


def test_parser_defaults():
    args = build_parser().parse_args(["scrape", "--company", "vueling", "--command", "airports"])
    today = date.today()
    assert (args.month, args.year) == (today.month, today.year)
    assert args.currency == "EUR"
    assert args.quiet is False


def test_parser_quiet_after_subcommand():
    args = build_parser().parse_args(["scrape", "-q", "--company", "x", "--command", "y"])
    assert args.quiet is True


def test_parser_requires_company():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["scrape", "--command", "airports"])


def test_run_migrations_creates_schema(workdir, capsys):
    path = workdir / "fares.db"
    run_migrations(path)
    with sqlite3.connect(path) as connection:
        names = {row[0] for row in connection.execute("SELECT name FROM sqlite_master")}
    assert {"airports", "flights", "migrations"} <= names
    assert "Database migrations applied successfully." in capsys.readouterr().err


def test_main_without_subcommand_prints_help(capsys):
    assert main([]) == 0
    assert "scrape" in capsys.readouterr().out


def test_main_unknown_company(capsys):
    with pytest.raises(SystemExit) as info:
        main(["scrape", "--company", "iberia", "--command", "airports"])
    assert info.value.code == 1
    assert "Error initializing scraper" in capsys.readouterr().err


def test_main_unknown_command(capsys):
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        _mock_setup(rsps)
        with pytest.raises(SystemExit) as info:
            main(["scrape", "--company", "vueling", "--command", "bogus"])
    assert info.value.code == 1
    assert "Unknown command: bogus" in capsys.readouterr().err


def test_main_flights_requires_destination(capsys):
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        _mock_setup(rsps)
        with pytest.raises(SystemExit) as info:
            main(["scrape", "--company", "vueling", "--command", "flights", "--origin", "BCN"])
    assert info.value.code == 1
    assert "--destination is required for route command" in capsys.readouterr().err


def test_main_airports_lists_and_caches(workdir, capsys):
    with responses.RequestsMock() as rsps:
        _mock_setup(rsps)
        rsps.add(
            responses.GET,
            vueling.TICKETS_SERVICE_ASSETS_STATIONS_URL,
            json=[
                {
                    "stationCode": "BCN",
                    "fullName": "Barcelona",
                    "locationDetails": {
                        "countryCode": "ES",
                        "coordinates": {"latitude": "41.29", "longitude": "2.07"},
                    },
                }
            ],
        )
        status = main(["scrape", "--company", "vueling", "--command", "airports"])
    err = capsys.readouterr().err
    assert status == 0
    assert "Available airports:" in err
    assert " - Barcelona (BCN), Country: ES, Coordinates: 41.29, 2.07" in err
    with sqlite3.connect(workdir / "cache.db") as connection:
        assert connection.execute("SELECT code FROM airports").fetchall() == [("BCN",)]


def test_main_quiet_suppresses_output(capsys):
    with pytest.raises(SystemExit) as info:
        main(["-q", "scrape", "--company", "iberia", "--command", "airports"])
    assert info.value.code == 1
    assert capsys.readouterr().err == ""