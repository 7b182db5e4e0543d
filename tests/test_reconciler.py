"""Tests for timestamp reconciliation across metadata and file names."""

from datetime import datetime
from pathlib import Path

import pytest

from mediastamp.errors import NoTimestampFoundError
from mediastamp.timestamps import MetadataReading, TimestampOrigin

from tests.doubles import ScriptedPrompt

PHOTO = Path("/media/photo.jpg")


def _readings(reconciler, **tags: str) -> list[MetadataReading]:
    return reconciler.readings(tags)


def test_principal_context_takes_earliest(make_reconciler) -> None:
    reconciler = make_reconciler()
    readings = _readings(
        reconciler,
        DateTimeOriginal="2023:06:15 14:30:00",
        CreateDate="2023:06:15 09:00:00",
        FileModifyDate="2020:01:01 00:00:00",
    )
    principal, secondary = reconciler.split(readings)

    result = reconciler.from_principal(PHOTO, principal)

    assert [reading.tag for reading in secondary] == ["FileModifyDate"]
    assert result.timestamp == datetime(2023, 6, 15, 9, 0, 0)
    assert result.origin is TimestampOrigin.PRINCIPAL_METADATA


def test_principal_context_ignores_sentinel(make_reconciler) -> None:
    reconciler = make_reconciler()
    principal, _ = reconciler.split(
        _readings(
            reconciler,
            DateTimeOriginal="1970:01:01 00:00:00",
            CreateDate="2023:06:15 14:30:00",
        )
    )

    result = reconciler.from_principal(PHOTO, principal)

    assert result.timestamp == datetime(2023, 6, 15, 14, 30, 0)


def test_principal_context_without_values_raises(make_reconciler) -> None:
    reconciler = make_reconciler()
    principal, _ = reconciler.split(_readings(reconciler, DateTimeOriginal="0000:00:00 00:00:00"))

    with pytest.raises(NoTimestampFoundError):
        reconciler.from_principal(PHOTO, principal)


def test_secondary_context_lists_sorted_unique_values(make_reconciler) -> None:
    prompt = ScriptedPrompt("1")
    reconciler = make_reconciler(prompt)
    readings = _readings(
        reconciler,
        FileModifyDate="2022:05:01 10:00:00",
        FileAccessDate="2021:01:01 08:00:00",
        ModifyDate="2022:05:01 10:00:00",
    )

    result = reconciler.from_secondary(PHOTO, readings)

    message, options = prompt.asked[0]
    assert message.startswith("photo.jpg")
    assert "0: 2021-01-01 08:00:00" in message
    assert "1: 2022-05-01 10:00:00" in message
    assert "None of those: -" in message
    assert options == ("-", "0", "1")
    assert result.timestamp == datetime(2022, 5, 1, 10, 0, 0)
    assert result.origin is TimestampOrigin.SECONDARY_METADATA_INTERACTIVE


def test_secondary_context_none_key_omits(make_reconciler) -> None:
    reconciler = make_reconciler(ScriptedPrompt("-"))
    readings = _readings(reconciler, FileModifyDate="2022:05:01 10:00:00")

    with pytest.raises(NoTimestampFoundError):
        reconciler.from_secondary(PHOTO, readings)


def test_secondary_context_without_candidates_never_prompts(make_reconciler) -> None:
    prompt = ScriptedPrompt()
    reconciler = make_reconciler(prompt)

    with pytest.raises(NoTimestampFoundError):
        reconciler.from_secondary(PHOTO, _readings(reconciler, FileModifyDate="garbage"))
    assert prompt.asked == []


def test_filename_exact(make_reconciler) -> None:
    reconciler = make_reconciler()

    def _never() -> list[MetadataReading]:
        raise AssertionError("metadata must not be read for exact candidates")

    result = reconciler.from_filename(PHOTO, "20230615_143000", _never)

    assert result.timestamp == datetime(2023, 6, 15, 14, 30, 0)
    assert result.origin is TimestampOrigin.FILENAME_EXACT


def test_date_only_candidate_uses_matching_metadata(make_reconciler) -> None:
    reconciler = make_reconciler()
    readings = _readings(
        reconciler,
        DateTimeOriginal="2023:06:15 10:00:00",
        FileModifyDate="2023:06:16 08:00:00",
    )

    result = reconciler.from_filename(PHOTO, "20230615", lambda: readings)

    assert result.timestamp == datetime(2023, 6, 15, 10, 0, 0)
    assert result.origin is TimestampOrigin.FILENAME_PARTIAL_METADATA_MATCH


def test_date_only_candidate_falls_back_to_default_time(make_reconciler) -> None:
    reconciler = make_reconciler()

    result = reconciler.from_filename(PHOTO, "20230615", lambda: [])

    assert result.timestamp == datetime(2023, 6, 15, 0, 1, 0)
    assert result.origin is TimestampOrigin.FILENAME_PARTIAL_DEFAULT_FILL


def test_year_month_confirmed_fills_day_and_time(make_reconciler) -> None:
    prompt = ScriptedPrompt("y")
    reconciler = make_reconciler(prompt)

    result = reconciler.from_filename(PHOTO, "202306", lambda: [])

    assert "Is 202306 a valid partial date?" in prompt.asked[0][0]
    assert prompt.asked[0][1] == ("y", "n")
    assert result.timestamp == datetime(2023, 6, 1, 0, 1, 0)


def test_year_month_declined_omits(make_reconciler) -> None:
    reconciler = make_reconciler(ScriptedPrompt("n"))

    with pytest.raises(NoTimestampFoundError):
        reconciler.from_filename(PHOTO, "202306", lambda: [])


def test_year_month_without_prompt_omits(make_reconciler) -> None:
    reconciler = make_reconciler(None)

    with pytest.raises(NoTimestampFoundError):
        reconciler.from_filename(PHOTO, "202306", lambda: [])


def test_invalid_filename_candidate_omits(make_reconciler) -> None:
    reconciler = make_reconciler()

    with pytest.raises(NoTimestampFoundError):
        reconciler.from_filename(PHOTO, "20231315", lambda: [])
