"""Tests for directory scanning."""

from pathlib import Path

import pytest

from mediastamp.config.models import FolderSettings
from mediastamp.errors import InvalidDirectoryError
from mediastamp.ingestion import DirectoryScanner
from tests.doubles import make_file


def test_scan_lists_top_level_media_only(tmp_path: Path) -> None:
    make_file(tmp_path, "b.jpg")
    make_file(tmp_path, "a.mov")
    make_file(tmp_path, "notes.TXT")
    make_file(tmp_path, ".DS_Store")
    (tmp_path / "_unsuccessful").mkdir()
    make_file(tmp_path / "_unsuccessful", "c.jpg")

    names = [path.name for path in DirectoryScanner(FolderSettings()).scan(tmp_path)]

    assert names == ["a.mov", "b.jpg"]


def test_zero_byte_files(tmp_path: Path) -> None:
    make_file(tmp_path, "full.jpg")
    empty = make_file(tmp_path, "empty.jpg", b"")

    assert DirectoryScanner(FolderSettings()).zero_byte(tmp_path) == [empty.resolve()]


def test_missing_directory_raises(tmp_path: Path) -> None:
    scanner = DirectoryScanner(FolderSettings())

    with pytest.raises(InvalidDirectoryError):
        scanner.scan(tmp_path / "missing")
    with pytest.raises(InvalidDirectoryError):
        scanner.require_directory(make_file(tmp_path, "file.jpg"))
