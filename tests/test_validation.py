"""Tests for the validation engine."""

from datetime import datetime
from pathlib import Path

import pytest

from mediastamp.config.models import FolderSettings
from mediastamp.timestamps import QuarantineReason
from mediastamp.validation import ValidationEngine
from tests.doubles import FakeGateway

STAMP = datetime(2024, 1, 2, 3, 4, 5)
NAME = "20230615_143000__photo.jpg"


@pytest.fixture
def make_engine(settings, parser):
    def factory(gateway: FakeGateway) -> ValidationEngine:
        return ValidationEngine(
            settings, FolderSettings(), gateway, parser, max_workers=2, clock=lambda: STAMP
        )

    return factory


def test_matching_tags_pass(make_engine) -> None:
    gateway = FakeGateway(
        {NAME: {"DateTimeOriginal": "2023:06:15 14:30:00", "CreateDate": "2023:06:15 14:30:00"}}
    )

    assert make_engine(gateway).decide(Path(NAME)) is None


def test_one_mismatching_tag_quarantines(make_engine) -> None:
    gateway = FakeGateway(
        {NAME: {"DateTimeOriginal": "2023:06:15 14:30:00", "CreateDate": "2023:06:15 14:30:01"}}
    )

    decision = make_engine(gateway).decide(Path(NAME))

    assert decision is not None
    assert decision.reason is QuarantineReason.MISMATCH
    assert decision.stamped_at == STAMP
    assert "CreateDate=2023-06-15 14:30:01" in decision.detail


def test_unparseable_tags_are_skipped(make_engine) -> None:
    gateway = FakeGateway(
        {NAME: {"DateTimeOriginal": "2023:06:15 14:30:00", "CreateDate": "1970:01:01 00:00:00"}}
    )

    assert make_engine(gateway).decide(Path(NAME)) is None


def test_no_comparable_metadata(make_engine) -> None:
    gateway = FakeGateway({NAME: {"FileModifyDate": "2023:06:15 14:30:00"}})

    decision = make_engine(gateway).decide(Path(NAME))

    assert decision.reason is QuarantineReason.NO_COMPARABLE_METADATA


def test_unreadable_file_counts_as_no_metadata(make_engine) -> None:
    gateway = FakeGateway()
    gateway.unreadable.add(NAME)

    decision = make_engine(gateway).decide(Path(NAME))

    assert decision.reason is QuarantineReason.NO_COMPARABLE_METADATA


@pytest.mark.parametrize("name", ["photo.jpg", "2023-06-15__photo.jpg", "20231315_143000.jpg"])
def test_names_without_canonical_prefix(make_engine, name: str) -> None:
    decision = make_engine(FakeGateway()).decide(Path(name))

    assert decision.reason is QuarantineReason.NO_FILENAME_TIMESTAMP


def test_whole_stem_is_used_without_partition(make_engine) -> None:
    gateway = FakeGateway({"20230615_143000.jpg": {"DateTimeOriginal": "2023:06:15 14:30:00"}})

    assert make_engine(gateway).decide(Path("20230615_143000.jpg")) is None


def test_tool_artifacts_are_quarantined(make_engine) -> None:
    decision = make_engine(FakeGateway()).decide(Path(f"{NAME}_exiftool_tmp"))

    assert decision.reason is QuarantineReason.TOOL_ARTIFACT


def test_run_keeps_input_order(make_engine) -> None:
    good = "20230615_143000__a.jpg"
    gateway = FakeGateway({good: {"DateTimeOriginal": "2023:06:15 14:30:00"}})
    paths = [Path("z.jpg"), Path(good), Path("b.jpg")]

    decisions = make_engine(gateway).run(paths)

    assert [decision.path for decision in decisions] == [Path("z.jpg"), Path("b.jpg")]
