"""The Game board: pure placement data (which piece stands where). Rules live in moves.py / generator.py"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import InvalidBoardError
from src.core.shared_types import Color, PieceType

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@dataclass
class Board:
    position: dict[Square, Optional[Piece]]

    @classmethod
    def empty(cls) -> Self:
        return cls({square: None for square in all_squares()})

    @classmethod
    def starting_position(cls) -> Self:
        """
        Standard setup: black on rows 0-1 (ranks 8-7), white on rows 6-7 (ranks 2-1).
        """
        board = cls.empty()
        for col, piece_type in enumerate(BACK_RANK):
            board.set(Square(0, col), Piece(piece_type, Color.BLACK))
            board.set(Square(1, col), Piece(PieceType.PAWN, Color.BLACK))
            board.set(Square(6, col), Piece(PieceType.PAWN, Color.WHITE))
            board.set(Square(7, col), Piece(piece_type, Color.WHITE))
        return board

    @classmethod
    def from_pieces(cls, pieces: Mapping[str, str]) -> Self:
        """
        Convenience constructor: {"e1": "K", "e8": "k"} places a white and a black king.
        (Upper case: white pieces, lower case: black pieces)
        """
        board = cls.empty()
        for square_name, character in pieces.items():
            board.set(Square.from_algebraic(square_name), Piece.from_fen(character))
        return board

    def get(self, square: Square) -> Optional[Piece]:
        return self.position[square]

    def set(self, square: Square, piece: Optional[Piece]) -> None:
        self.position[square] = piece

    def is_empty(self, square: Square) -> bool:
        return self.position[square] is None

    def find_king(self, color: Color) -> Optional[Square]:
        """Scan all squares; the first king of the requested color found is returned."""
        king = Piece(PieceType.KING, color)
        return next(
            (square for square, piece in self.position.items() if piece == king), None
        )

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece is not None and piece.color == color
        ]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        target = Piece(piece_type, color)
        return [square for square, piece in self.position.items() if piece == target]

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """Update the position on the board. Returns whatever stood on the target square."""
        captured = self.position[to_square]
        self.position[to_square] = self.position[from_square]
        self.position[from_square] = None
        return captured

    @contextmanager
    def probe(self, changes: Mapping[Square, Optional[Piece]]) -> Iterator[Self]:
        """
        Scoped mutation of a handful of squares.
        ---

        Applies `changes`, yields the (mutated) board and puts back every touched square on exit,
        no matter how the block is left.
        """
        saved = {square: self.position[square] for square in changes}
        try:
            self.position.update(changes)
            yield self
        finally:
            self.position.update(saved)

    def validate_kings(self) -> None:
        """Exactly one king per color. Raised at construction time, never tolerated silently later on."""
        for color in Color:
            kings = self.locate_pieces(PieceType.KING, color)
            if len(kings) != 1:
                raise InvalidBoardError(
                    f"Board must hold exactly one {color} king, found {len(kings)}."
                )

    def to_fen(self) -> str:
        """Placement field of a FEN string. Ranks are separated by slashes, from the 8th rank down."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[1]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[0]):
            piece = self.get(Square(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)
