"""Unit tests for /lobbychess/chess/square.py"""

from string import ascii_lowercase

import pytest

from lobbychess.chess.square import (
    NUM_SQUARES,
    file_of,
    is_light_square,
    is_within_bounds,
    row_of,
    square_at,
    to_index,
    to_notation,
)
from lobbychess.core.exceptions import InvalidNotationError


@pytest.mark.parametrize(
    "notation, index",
    [("a8", 0), ("h8", 7), ("a1", 56), ("h1", 63), ("e4", 36), ("e2", 52), ("d5", 27)],
)
def test_to_index(notation: str, index: int) -> None:
    """a8 is the top-left square (index 0), counting left-to-right then top-to-bottom"""
    assert to_index(notation) == index


@pytest.mark.parametrize(
    "notation, index",
    [("a8", 0), ("h8", 7), ("a1", 56), ("h1", 63), ("e4", 36)],
)
def test_to_notation(notation: str, index: int) -> None:
    assert to_notation(index) == notation


def test_round_trip_every_square() -> None:
    """Going to notation and back lands on the same index for every square on the board"""
    for square in range(NUM_SQUARES):
        assert to_index(to_notation(square)) == square


@pytest.mark.parametrize(
    "file, rank",
    [(file, rank) for file in range(8) for rank in range(1, 9)],
)
def test_file_and_row(file: int, rank: int) -> None:
    """Rows are counted from the top, so the 8th rank is row 0"""
    square = to_index(f"{ascii_lowercase[file]}{rank}")
    assert file_of(square) == file
    assert row_of(square) == 8 - rank
    assert square_at(file, 8 - rank) == square


@pytest.mark.parametrize(
    "invalid", ["", "e", "e44", "i4", "e9", "e0", "E4", "4e", "ee", " e4", None, "e²"]
)
def test_invalid_notation(invalid: str) -> None:
    with pytest.raises(InvalidNotationError):
        to_index(invalid)


@pytest.mark.parametrize("index", [-1, 64, 100])
def test_index_out_of_range(index: int) -> None:
    with pytest.raises(InvalidNotationError):
        to_notation(index)


def test_square_within_bounds() -> None:
    assert all(is_within_bounds(file, row) for file in range(8) for row in range(8))
    assert not is_within_bounds(8, 0)
    assert not is_within_bounds(0, -1)


def test_square_colors() -> None:
    """a1 and h8 are dark, a8 and h1 are light"""
    assert not is_light_square(to_index("a1"))
    assert not is_light_square(to_index("h8"))
    assert is_light_square(to_index("a8"))
    assert is_light_square(to_index("h1"))
