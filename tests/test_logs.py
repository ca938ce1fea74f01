import re
from datetime import datetime, timedelta

import pytest

from skyfare import logs


@pytest.fixture(autouse=True)
def _reset_quiet():
    logs.set_quiet(False)
    yield
    logs.set_quiet(False)


def test_log_writes_message_to_stderr(capsys):
    logs.log("hello")
    captured = capsys.readouterr()
    assert captured.err.endswith(" hello\n")
    assert captured.out == ""


def test_log_prefixes_current_timestamp(capsys):
    before = datetime.now().replace(microsecond=0)
    logs.log("hello")
    err = capsys.readouterr().err
    match = re.fullmatch(r"(\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}) hello\n", err)
    assert match, err
    stamp = datetime.strptime(match.group(1), "%Y/%m/%d %H:%M:%S")
    assert before - timedelta(seconds=1) <= stamp <= datetime.now() + timedelta(seconds=1)


def test_log_does_not_double_trailing_newline(capsys):
    logs.log("hello\n")
    err = capsys.readouterr().err
    assert err.endswith(" hello\n")
    assert err.count("\n") == 1


def test_quiet_suppresses_output(capsys):
    logs.set_quiet(True)
    logs.log("hello")
    assert capsys.readouterr().err == ""


def test_is_quiet_follows_set_quiet():
    logs.set_quiet(True)
    assert logs.is_quiet() is True
    logs.set_quiet(False)
    assert logs.is_quiet() is False


def test_fatal_logs_and_exits(capsys):
    with pytest.raises(SystemExit) as info:
        logs.fatal("boom")
    assert info.value.code == 1
    assert capsys.readouterr().err.endswith(" boom\n")


def test_fatal_when_quiet_exits_silently(capsys):
    logs.set_quiet(True)
    with pytest.raises(SystemExit) as info:
        logs.fatal("boom")
    assert info.value.code == 1
    assert capsys.readouterr().err == ""