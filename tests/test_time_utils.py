from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from luminance_connector.mapping.time_utils import (
    epoch_ms_to_dt,
    format_iso,
    parse_datetime,
    to_iso_timestamp,
    utc_now_iso,
)


def test_epoch_seconds_and_milliseconds():
    assert epoch_ms_to_dt(1_700_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert epoch_ms_to_dt(1_700_000_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2024-01-15", "2024-01-15T00:00:00.000Z"),
        ("2024-01-15T10:30:00", "2024-01-15T10:30:00.000Z"),
        ("2024-01-15T10:30:00Z", "2024-01-15T10:30:00.000Z"),
        ("2024-01-15T12:30:00+02:00", "2024-01-15T10:30:00.000Z"),
        ("2024-01-15T10:30:00.123456Z", "2024-01-15T10:30:00.123Z"),
        ("01/15/2024", "2024-01-15T00:00:00.000Z"),
        ("Jan 15, 2024", "2024-01-15T00:00:00.000Z"),
        ("Mon, 15 Jan 2024 10:30:00 GMT", "2024-01-15T10:30:00.000Z"),
        ("1700000000000", "2023-11-14T22:13:20.000Z"),
        (1700000000, "2023-11-14T22:13:20.000Z"),
    ],
)
def test_to_iso_timestamp_formats(raw, expected):
    assert to_iso_timestamp(raw) == expected


def test_naive_datetime_treated_as_utc():
    naive = datetime(2024, 1, 15, 10, 30)  # allow-naive-datetime
    assert format_iso(naive) == "2024-01-15T10:30:00.000Z"


def test_aware_datetime_converted_to_utc():
    aware = datetime(2024, 1, 15, 5, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert parse_datetime(aware) == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", [None, "", "   ", True, "tomorrow-ish"])
def test_parse_datetime_unparsable(value):
    assert parse_datetime(value) is None


def test_invalid_value_falls_back_to_now_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="luminance_connector.mapping.time_utils"):
        out = to_iso_timestamp("garbage")
    parsed = datetime.fromisoformat(out.replace("Z", "+00:00"))
    assert abs((datetime.now(timezone.utc) - parsed).total_seconds()) < 120
    assert any("Unparsable date" in r.getMessage() for r in caplog.records)


def test_empty_value_falls_back_to_now_silently(caplog):
    with caplog.at_level(logging.WARNING, logger="luminance_connector.mapping.time_utils"):
        to_iso_timestamp(None)
        to_iso_timestamp("")
    assert not caplog.records


def test_utc_now_iso_shape():
    now = utc_now_iso()
    assert now.endswith("Z")
    assert now[10] == "T" and now[19] == "."


@pytest.mark.parametrize("value", [0, 0.0, False])
def test_zero_is_treated_as_missing(value, caplog):
    with caplog.at_level(logging.WARNING, logger="luminance_connector.mapping.time_utils"):
        out = to_iso_timestamp(value)
    assert not out.startswith("1970-")
    parsed = datetime.fromisoformat(out.replace("Z", "+00:00"))
    assert abs((datetime.now(timezone.utc) - parsed).total_seconds()) < 120
    assert not caplog.records
