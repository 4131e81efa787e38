"""Tests for on-disk screenshot storage."""

from pathlib import Path

import pytest

from study_tracker.adapters.local_image_storage import (
    LocalImageStorage,
    safe_path_component,
)
from study_tracker.domain.sessions import ContextNames
from study_tracker.errors import StorageError


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Limits", "Limits"),
        ("Computer Science", "Computer_Science"),
        ("../etc/passwd", "etc_passwd"),
        ("  ", "untitled"),
        ("???", "untitled"),
    ],
)
def test_safe_path_component(name: str, expected: str) -> None:
    assert safe_path_component(name) == expected


def test_save_image_writes_under_hierarchy(tmp_path: Path) -> None:
    storage = LocalImageStorage(tmp_path / "screenshots")
    names = ContextNames("Computer Science", "Algorithms", "DP / Knapsack")

    relative = storage.save_image(names, "problem-20261019-090000", b"png-bytes")

    assert relative == (
        "Computer_Science/Algorithms/DP_Knapsack/problem-20261019-090000.png"
    )
    assert (tmp_path / "screenshots" / relative).read_bytes() == b"png-bytes"


def test_save_image_reports_write_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "screenshots"
    blocker.write_text("not a directory", encoding="utf-8")
    storage = LocalImageStorage(blocker)

    with pytest.raises(StorageError):
        storage.save_image(ContextNames("a", "b", "c"), "q", b"data")
