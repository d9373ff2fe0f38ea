"""Unit tests for /src/chess/square.py"""

import pytest

from src.chess.square import BOARD_DIMENSIONS, FILE_NAMES, Square, all_squares


@pytest.mark.parametrize(
    "col, rank, notation",
    [
        (col, rank, f"{FILE_NAMES[col]}{rank}")
        for col in range(8)
        for rank in range(1, 9)
    ],
)
def test_creating_from_algebraic(col: int, rank: int, notation: str) -> None:
    """'a8' is the top left corner (0, 0), 'h1' the bottom right (7, 7)"""
    square = Square.from_algebraic(notation)
    assert square.col == col
    assert square.rank == rank
    assert square.row == 8 - rank
    assert square.to_algebraic() == notation


def test_corners() -> None:
    assert Square.from_algebraic("a8") == Square(0, 0)
    assert Square.from_algebraic("h8") == Square(0, 7)
    assert Square.from_algebraic("a1") == Square(7, 0)
    assert Square.from_algebraic("h1") == Square(7, 7)


@pytest.mark.parametrize("notation", ["", "a", "i1", "a0", "a9", "e22", "11", "E4"])
def test_invalid_square_names(notation: str) -> None:
    with pytest.raises(ValueError):
        Square.from_algebraic(notation)


@pytest.mark.parametrize("row, col", [(-1, 0), (0, -1), (8, 0), (0, 8), (8, 8)])
def test_square_out_of_bounds(row: int, col: int) -> None:
    """A square can never be created outside of the board"""
    with pytest.raises(ValueError):
        Square(row, col)


def test_offset_within_board() -> None:
    e4 = Square.from_algebraic("e4")
    assert e4.offset(-1, 0) == Square.from_algebraic("e5")
    assert e4.offset(1, 1) == Square.from_algebraic("f3")


def test_offset_leaving_board() -> None:
    assert Square.from_algebraic("a1").offset(0, -1) is None
    assert Square.from_algebraic("h8").offset(-1, 0) is None


def test_all_squares() -> None:
    squares = all_squares()
    assert len(squares) == BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
    assert len(set(squares)) == len(squares)
    assert squares[0] == Square.from_algebraic("a8")
    assert squares[-1] == Square.from_algebraic("h1")
