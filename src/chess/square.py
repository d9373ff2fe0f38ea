"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILE_NAMES = "abcdefgh"


@dataclass(frozen=True, order=True)
class Square:
    """
    (row, col) coordinates
    ---

    Row 0 is the 8th rank (black's back rank), row 7 the 1st rank.
    Col 0 is the a-file, col 7 the h-file.
    A Square can never lie outside of the board: stepping off the board is expressed by `offset()` returning None.
    """

    row: int
    col: int

    def __post_init__(self) -> None:
        if not is_within_bounds(self.row, self.col):
            raise ValueError(f"Square ({self.row}, {self.col}) lies outside the board")

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0] not in FILE_NAMES or not sq[1].isdigit():
            raise ValueError(f"Cannot interpret {sq!r} as a square name")
        col = FILE_NAMES.index(sq[0])
        row = BOARD_DIMENSIONS[1] - int(sq[1])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{self.file_name}{self.rank}"

    @property
    def file_name(self) -> str:
        return FILE_NAMES[self.col]

    @property
    def rank(self) -> int:
        """Rank as printed on the board (1-8)"""
        return BOARD_DIMENSIONS[1] - self.row

    def offset(self, d_row: int, d_col: int) -> Optional[Square]:
        """The square reached by a step of (d_row, d_col), or None if that step leaves the board."""
        row = self.row + d_row
        col = self.col + d_col
        if not is_within_bounds(row, col):
            return None
        return Square(row, col)

    def __str__(self) -> str:
        return self.to_algebraic()


def is_within_bounds(row: int, col: int) -> bool:
    return (0 <= row < BOARD_DIMENSIONS[1]) and (0 <= col < BOARD_DIMENSIONS[0])


def all_squares() -> list[Square]:
    """Row by row, starting from a8"""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[1])
        for col in range(BOARD_DIMENSIONS[0])
    ]
