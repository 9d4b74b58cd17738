"""Unit tests for the removal-only edit buffer."""

import pytest

from tree_shaker.core.edits import EditBuffer

SOURCE = "0123456789"


def test_no_removals_returns_original() -> None:
    buffer = EditBuffer(SOURCE)
    assert str(buffer) == SOURCE
    assert buffer.has_changed() is False


def test_removals_are_tracked_against_original_offsets() -> None:
    buffer = EditBuffer(SOURCE)
    buffer.remove(2, 4).remove(6, 8)
    assert str(buffer) == "014589"


def test_removal_order_does_not_matter() -> None:
    forward = EditBuffer(SOURCE).remove(1, 3).remove(5, 7).remove(8, 10)
    backward = EditBuffer(SOURCE).remove(8, 10).remove(5, 7).remove(1, 3)
    assert str(forward) == str(backward) == "0478"


def test_overlapping_and_adjacent_removals_are_merged() -> None:
    buffer = EditBuffer(SOURCE).remove(2, 5).remove(4, 7).remove(7, 8)
    assert buffer.removed_ranges() == [(2, 8)]
    assert str(buffer) == "0189"


def test_empty_range_is_ignored() -> None:
    buffer = EditBuffer(SOURCE).remove(3, 3)
    assert buffer.has_changed() is False
    assert str(buffer) == SOURCE


@pytest.mark.parametrize(("start", "end"), [(-1, 2), (5, 4), (0, 11)], ids=["negative", "reversed", "past-end"])
def test_out_of_range_removal_raises(start: int, end: int) -> None:
    with pytest.raises(ValueError, match="outside of source"):
        EditBuffer(SOURCE).remove(start, end)


def test_offsets_are_bytes_for_multibyte_text() -> None:
    buffer = EditBuffer("é=1;x")
    # "é" takes two bytes in UTF-8.
    buffer.remove(0, 5)
    assert buffer.original == "é=1;x".encode()
    assert str(buffer) == "x"
