"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Self

from src.chess.square import Square
from src.core.shared_types import Color


class CastlingSide(StrEnum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


@dataclass(frozen=True)
class SideRights:
    """Castling availability of a single player."""

    kingside: bool = True
    queenside: bool = True

    def has(self, side: CastlingSide) -> bool:
        return self.kingside if side == CastlingSide.KINGSIDE else self.queenside

    @property
    def any(self) -> bool:
        return self.kingside or self.queenside


@dataclass(frozen=True)
class CastlingRights:
    """
    Castling rights of both players.
    ---

    Immutable: revoking a right hands back a new value. That way a move record can hold on to the rights
    before the move without copying, and undo simply puts that value back.
    """

    white: SideRights = SideRights()
    black: SideRights = SideRights()

    @classmethod
    def none(cls) -> Self:
        revoked = SideRights(kingside=False, queenside=False)
        return cls(white=revoked, black=revoked)

    def for_color(self, color: Color) -> SideRights:
        return self.white if color == Color.WHITE else self.black

    def can_castle(self, color: Color, side: CastlingSide) -> bool:
        return self.for_color(color).has(side)

    def revoke(self, color: Color, side: CastlingSide) -> Self:
        rights = replace(self.for_color(color), **{side.value: False})
        return self._with(color, rights)

    def revoke_all(self, color: Color) -> Self:
        return self._with(color, SideRights(kingside=False, queenside=False))

    def _with(self, color: Color, rights: SideRights) -> Self:
        if color == Color.WHITE:
            return replace(self, white=rights)
        return replace(self, black=rights)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square
    must_be_empty: tuple[Square, ...]
    king_passes: tuple[Square, ...]

    @classmethod
    def from_algebraic(
        cls,
        k_from: str,
        k_to: str,
        r_from: str,
        r_to: str,
        empty: tuple[str, ...],
        passes: tuple[str, ...],
    ) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        return cls(
            king_from=Square.from_algebraic(k_from),
            king_to=Square.from_algebraic(k_to),
            rook_from=Square.from_algebraic(r_from),
            rook_to=Square.from_algebraic(r_to),
            must_be_empty=tuple(Square.from_algebraic(sq) for sq in empty),
            king_passes=tuple(Square.from_algebraic(sq) for sq in passes),
        )


# The moves (in classical chess) made when castling.
# NOTE: the square next to the queenside rook (b1/b8) must be empty, but the king never crosses it so it may be attacked.
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KINGSIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1", empty=("f1", "g1"), passes=("f1", "g1")
    ),
    (Color.WHITE, CastlingSide.QUEENSIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1", empty=("b1", "c1", "d1"), passes=("d1", "c1")
    ),
    (Color.BLACK, CastlingSide.KINGSIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8", empty=("f8", "g8"), passes=("f8", "g8")
    ),
    (Color.BLACK, CastlingSide.QUEENSIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8", empty=("b8", "c8", "d8"), passes=("d8", "c8")
    ),
}

# A move from or to one of these squares means the rook either left its corner or got captured there.
ROOK_HOME_SQUARES: dict[Square, tuple[Color, CastlingSide]] = {
    squares.rook_from: color_and_side for color_and_side, squares in CASTLING_RULES.items()
}


def castling_side_of_king_move(king_from: Square, king_to: Square) -> CastlingSide:
    """A king move of two files is a castling move. The direction tells the side."""
    return CastlingSide.KINGSIDE if king_to.col > king_from.col else CastlingSide.QUEENSIDE
