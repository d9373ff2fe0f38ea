"""Committed moves: what the history (and the redo stack) is made of."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from src.chess.castling import CastlingRights, CastlingSide, castling_side_of_king_move
from src.chess.pieces import PIECE_TO_FEN
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


class Annotation(StrEnum):
    """Move quality tag a player can attach to the last move. Values are the names written in the transcript."""

    BRILLIANT = "Brilliant"
    GREAT_FIND = "GreatFind"
    BEST_MOVE = "BestMove"
    EXCELLENT = "Excellent"
    GOOD = "Good"
    BOOK = "Book"
    INACCURACY = "Inaccuracy"
    INTERESTING = "Interesting"
    MISS = "Miss"
    MISTAKE = "Mistake"
    BLUNDER = "Blunder"

    @property
    def nag(self) -> str:
        """Numeric Annotation Glyph, empty if the tag has no PGN equivalent"""
        return NAG_CODES.get(self, "")

    @property
    def symbol(self) -> str:
        return ANNOTATION_SYMBOLS.get(self, "")


NAG_CODES: dict[Annotation, str] = {
    Annotation.BRILLIANT: "$3",
    Annotation.GREAT_FIND: "$1",
    Annotation.GOOD: "$1",
    Annotation.INACCURACY: "$6",
    Annotation.MISTAKE: "$2",
    Annotation.MISS: "$2",
    Annotation.BLUNDER: "$4",
}

ANNOTATION_SYMBOLS: dict[Annotation, str] = {
    Annotation.BRILLIANT: "!!",
    Annotation.GREAT_FIND: "!",
    Annotation.GOOD: "!",
    Annotation.INACCURACY: "?!",
    Annotation.MISTAKE: "?",
    Annotation.MISS: "?",
    Annotation.BLUNDER: "??",
}


@dataclass
class MoveRecord:
    """
    A committed move.
    ---

    Holds exactly enough of the state before the move to invert it:
    * the type of the moving piece (a promoted pawn goes back as a pawn)
    * the captured piece type (its color is always the opponent's)
    * castling rights and en passant target as they were before the move

    `notation` and `annotation` are the only fields that change after the record is created
    (check/mate suffix, user annotations).
    """

    player: Color
    piece: PieceType
    from_square: Square
    to_square: Square
    notation: str
    castling_before: CastlingRights
    en_passant_before: Optional[Square]
    captured: Optional[PieceType] = None
    is_en_passant: bool = False
    promotion: Optional[PieceType] = None
    annotation: Optional[Annotation] = None

    @property
    def nag(self) -> str:
        return self.annotation.nag if self.annotation else ""

    @property
    def is_castle(self) -> bool:
        return (
            self.piece == PieceType.KING
            and abs(self.to_square.col - self.from_square.col) == 2
        )

    @property
    def castling_side(self) -> Optional[CastlingSide]:
        if not self.is_castle:
            return None
        return castling_side_of_king_move(self.from_square, self.to_square)

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def display_text(self) -> str:
        """Notation followed by the annotation symbol (ex. 'Qh4#!!'), as shown in a move list"""
        symbol = self.annotation.symbol if self.annotation else ""
        return f"{self.notation}{symbol}"

    def to_uci(self) -> str:
        piece_char = PIECE_TO_FEN[self.promotion] if self.promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"
