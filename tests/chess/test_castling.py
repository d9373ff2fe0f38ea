"""Unit tests for /src/chess/castling.py"""

import pytest

from src.chess.castling import (
    CASTLING_RULES,
    ROOK_HOME_SQUARES,
    CastlingRights,
    CastlingSide,
    SideRights,
    castling_side_of_king_move,
)
from src.chess.square import Square
from src.core.shared_types import Color


def test_all_rights_at_start() -> None:
    rights = CastlingRights()
    for color in Color:
        for side in CastlingSide:
            assert rights.can_castle(color, side)


def test_no_rights() -> None:
    rights = CastlingRights.none()
    assert not rights.white.any
    assert not rights.black.any


def test_revoking_a_side_returns_new_value() -> None:
    rights = CastlingRights()
    revoked = rights.revoke(Color.WHITE, CastlingSide.QUEENSIDE)

    assert rights.can_castle(Color.WHITE, CastlingSide.QUEENSIDE)
    assert not revoked.can_castle(Color.WHITE, CastlingSide.QUEENSIDE)
    assert revoked.can_castle(Color.WHITE, CastlingSide.KINGSIDE)
    assert revoked.black == SideRights()


def test_revoke_all_only_touches_one_color() -> None:
    revoked = CastlingRights().revoke_all(Color.BLACK)
    assert not revoked.black.any
    assert revoked.white == SideRights()


def test_rights_only_turn_off() -> None:
    """Revoking twice is the same as revoking once"""
    rights = CastlingRights().revoke(Color.BLACK, CastlingSide.KINGSIDE)
    assert rights.revoke(Color.BLACK, CastlingSide.KINGSIDE) == rights


@pytest.mark.parametrize(
    "color, side, king_to, rook_from, rook_to",
    [
        (Color.WHITE, CastlingSide.KINGSIDE, "g1", "h1", "f1"),
        (Color.WHITE, CastlingSide.QUEENSIDE, "c1", "a1", "d1"),
        (Color.BLACK, CastlingSide.KINGSIDE, "g8", "h8", "f8"),
        (Color.BLACK, CastlingSide.QUEENSIDE, "c8", "a8", "d8"),
    ],
)
def test_castling_squares(
    color: Color, side: CastlingSide, king_to: str, rook_from: str, rook_to: str
) -> None:
    rule = CASTLING_RULES[(color, side)]
    assert rule.king_to == Square.from_algebraic(king_to)
    assert rule.rook_from == Square.from_algebraic(rook_from)
    assert rule.rook_to == Square.from_algebraic(rook_to)


def test_queenside_b_file_must_be_empty_but_is_not_crossed() -> None:
    rule = CASTLING_RULES[(Color.WHITE, CastlingSide.QUEENSIDE)]
    b1 = Square.from_algebraic("b1")
    assert b1 in rule.must_be_empty
    assert b1 not in rule.king_passes


def test_rook_home_squares() -> None:
    assert ROOK_HOME_SQUARES[Square.from_algebraic("a1")] == (Color.WHITE, CastlingSide.QUEENSIDE)
    assert ROOK_HOME_SQUARES[Square.from_algebraic("h8")] == (Color.BLACK, CastlingSide.KINGSIDE)
    assert len(ROOK_HOME_SQUARES) == 4


def test_castling_side_of_king_move() -> None:
    e1 = Square.from_algebraic("e1")
    assert castling_side_of_king_move(e1, Square.from_algebraic("g1")) == CastlingSide.KINGSIDE
    assert castling_side_of_king_move(e1, Square.from_algebraic("c1")) == CastlingSide.QUEENSIDE
