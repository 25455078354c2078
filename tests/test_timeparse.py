from datetime import datetime, timedelta, timezone

import pytest

from gator.timeparse import format_duration, parse_duration, parse_time


def test_rfc1123z():
    t = parse_time("Mon, 02 Jan 2006 15:04:05 -0700")
    assert t == datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone(timedelta(hours=-7)))


def test_rfc1123_abbreviation():
    t = parse_time("Mon, 02 Jan 2006 15:04:05 MST")
    assert (t.year, t.month, t.day, t.hour) == (2006, 1, 2, 15)


def test_rfc3339_and_nano_agree():
    a = parse_time("2006-01-02T15:04:05Z")
    b = parse_time("2006-01-02T15:04:05.999999999Z")
    assert b - a < timedelta(seconds=1)
    assert a.tzinfo is not None and a.utcoffset() == timedelta(0)


def test_date_only():
    assert parse_time("2006-01-02") == datetime(2006, 1, 2, tzinfo=timezone.utc)


def test_unparseable():
    with pytest.raises(ValueError):
        parse_time("not a date")


@pytest.mark.parametrize("text", ["1m", "60s", "1m0s", "0.5m30s"])
def test_parse_duration_minute(text):
    assert parse_duration(text) == 60


def test_parse_duration_errors():
    for bad in ["", "5", "abc", "1x"]:
        with pytest.raises(ValueError):
            parse_duration(bad)


def test_format_duration_round_trip():
    for text in ["1m0s", "1h0m0s", "1.5s", "500ms", "0s"]:
        assert format_duration(parse_duration(text)) == text