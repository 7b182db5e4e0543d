"""Tests for timestamp parsing and formatting."""

from datetime import datetime

import pytest

from mediastamp.timestamps import TimestampParser


def test_parse_metadata_primary_format(parser: TimestampParser) -> None:
    assert parser.parse_metadata("2023:06:15 14:30:00") == datetime(2023, 6, 15, 14, 30, 0)


def test_parse_metadata_drops_zone_and_keeps_wall_time(parser: TimestampParser) -> None:
    parsed = parser.parse_metadata("2023:06:15 14:30:00+02:00")

    assert parsed == datetime(2023, 6, 15, 14, 30, 0)
    assert parsed.tzinfo is None


def test_parse_metadata_dash_fallback(parser: TimestampParser) -> None:
    assert parser.parse_metadata("2023-06-15 14:30:00") == datetime(2023, 6, 15, 14, 30, 0)


@pytest.mark.parametrize(
    "raw",
    [
        "1970:01:01 00:00:00",
        "1970:01:01 12:34:56",
        "1970-01-01 23:59:59",
        "1970:01:01 08:00:00+01:00",
    ],
)
def test_epoch_sentinel_is_never_a_timestamp(parser: TimestampParser, raw: str) -> None:
    assert parser.parse_metadata(raw) is None


@pytest.mark.parametrize("raw", ["0000:00:00 00:00:00", "", "   ", None, "not a date"])
def test_unparseable_values_return_none(parser: TimestampParser, raw) -> None:
    assert parser.parse_metadata(raw) is None


def test_filename_format_rejects_short_fields(parser: TimestampParser) -> None:
    assert parser.parse_filename("2023615_1430") is None
    assert parser.parse_filename("20230615_143000") == datetime(2023, 6, 15, 14, 30, 0)


def test_filename_round_trip(parser: TimestampParser) -> None:
    for value in (datetime(2001, 1, 2, 3, 4, 5), datetime(2024, 2, 29, 23, 59, 59)):
        assert parser.parse_filename(parser.format_filename(value)) == value


def test_output_formats(parser: TimestampParser) -> None:
    value = datetime(2023, 6, 15, 14, 30, 0)

    assert parser.format_filename(value) == "20230615_143000"
    assert parser.format_metadata(value) == "2023:06:15 14:30:00"
    assert parser.format_attribute(value) == "06/15/2023 14:30:00"


def test_first_matching_format_wins(parser: TimestampParser) -> None:
    formats = ("%d.%m.%Y", "%m.%d.%Y")

    assert parser.parse("03.04.2020", formats) == datetime(2020, 4, 3)
