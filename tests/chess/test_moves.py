"""Unit tests for /src/chess/moves.py"""

import pytest

from src.chess.board import Board
from src.chess.moves import (
    STRAIGHTS,
    Move,
    candidate_bishop_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    en_passant_moves,
    en_passant_square_behind,
    is_attacked,
    is_attacked_along_diagonals,
    is_attacked_along_straights,
    is_attacked_by_king,
    is_attacked_by_knight,
    is_attacked_by_pawn,
    raycasting_move,
)
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def destinations(moves: list[Move]) -> set[str]:
    return {move.to_square.to_algebraic() for move in moves}


# -- MOVE ENCODING ---
@pytest.mark.parametrize(
    "from_name, to_name, uci",
    [("e2", "e4", "e2e4"), ("a1", "a5", "a1a5"), ("g3", "a7", "g3a7")],
)
def test_converting_into_uci(from_name: str, to_name: str, uci: str) -> None:
    assert Move(sq(from_name), sq(to_name)).to_uci() == uci


def test_uci_incl_promotion() -> None:
    move = Move(sq("e7"), sq("e8"), is_promotion_pending=True)
    assert move.to_uci(PieceType.QUEEN) == "e7e8q"
    assert move.to_uci(PieceType.KNIGHT) == "e7e8n"


# -- MOVEMENT RULES ---
def test_rook_on_empty_board() -> None:
    board = Board.from_pieces({"d4": "R"})
    moves = candidate_rook_moves(sq("d4"), board)
    assert len(moves) == 14
    assert "d8" in destinations(moves) and "a4" in destinations(moves)


def test_raycasting_stops_at_pieces() -> None:
    """Own piece blocks the ray, an opponent piece is the last square of the ray (capture)"""
    board = Board.from_pieces({"d4": "R", "d6": "P", "f4": "p"})
    moves = raycasting_move(sq("d4"), board, STRAIGHTS)
    assert destinations(moves) == {"d5", "d3", "d2", "d1", "c4", "b4", "a4", "e4", "f4"}


def test_bishop_and_queen() -> None:
    board = Board.from_pieces({"a1": "B", "h8": "q"})
    assert destinations(candidate_bishop_moves(sq("a1"), board)) == {
        "b2", "c3", "d4", "e5", "f6", "g7", "h8"
    }
    assert len(candidate_queen_moves(sq("h8"), board)) == 7 + 7 + 7


def test_knight_in_the_corner() -> None:
    board = Board.from_pieces({"a1": "N", "c2": "P"})
    assert destinations(candidate_knight_moves(sq("a1"), board)) == {"b3"}


def test_king_single_steps() -> None:
    board = Board.from_pieces({"e1": "K"})
    assert destinations(candidate_king_moves(sq("e1"), board)) == {"d1", "d2", "e2", "f2", "f1"}


def test_pawn_first_move_one_or_two_steps() -> None:
    board = Board.from_pieces({"e2": "P", "d7": "p"})
    assert destinations(candidate_pawn_moves(sq("e2"), board)) == {"e3", "e4"}
    assert destinations(candidate_pawn_moves(sq("d7"), board)) == {"d6", "d5"}


def test_pawn_blocked() -> None:
    board = Board.from_pieces({"e2": "P", "e3": "n"})
    assert candidate_pawn_moves(sq("e2"), board) == []


def test_pawn_cannot_jump_over_piece() -> None:
    board = Board.from_pieces({"e2": "P", "e4": "n"})
    assert destinations(candidate_pawn_moves(sq("e2"), board)) == {"e3"}


def test_pawn_takes_diagonally_only_opponents() -> None:
    board = Board.from_pieces({"e4": "P", "d5": "p", "f5": "N"})
    assert destinations(candidate_pawn_moves(sq("e4"), board)) == {"e5", "d5"}


def test_pawn_reaching_last_rank_is_flagged_for_promotion() -> None:
    board = Board.from_pieces({"b7": "P", "a8": "r", "a2": "p"})
    moves = candidate_pawn_moves(sq("b7"), board)
    assert destinations(moves) == {"b8", "a8"}
    assert all(move.is_promotion_pending for move in moves)

    black_moves = candidate_pawn_moves(sq("a2"), board)
    assert all(move.is_promotion_pending for move in black_moves)


# -- EN PASSANT ---
def test_en_passant_square_behind() -> None:
    assert en_passant_square_behind(sq("e5"), sq("d6")) == sq("d5")
    assert en_passant_square_behind(sq("d4"), sq("e3")) == sq("e4")


def test_en_passant_move() -> None:
    board = Board.from_pieces({"e5": "P", "d5": "p"})
    moves = en_passant_moves(sq("e5"), board, sq("d6"))
    assert moves == [Move(sq("e5"), sq("d6"), is_en_passant=True)]


@pytest.mark.parametrize(
    "pieces, target",
    [
        ({"e5": "P", "d5": "p"}, None),
        ({"e5": "P", "d5": "p"}, "b6"),
        ({"e5": "P", "d5": "n"}, "d6"),
        ({"e4": "P", "d4": "p"}, "d3"),
    ],
)
def test_no_en_passant(pieces: dict[str, str], target: str | None) -> None:
    board = Board.from_pieces(pieces)
    start = next(name for name, char in pieces.items() if char == "P")
    assert en_passant_moves(sq(start), board, sq(target) if target else None) == []


# -- ATTACKS ---
def test_pawn_attacks_are_directional() -> None:
    board = Board.from_pieces({"e4": "P", "d6": "p"})
    assert is_attacked_by_pawn(sq("d5"), Color.WHITE, board)
    assert is_attacked_by_pawn(sq("f5"), Color.WHITE, board)
    assert not is_attacked_by_pawn(sq("d3"), Color.WHITE, board)
    assert not is_attacked_by_pawn(sq("e5"), Color.WHITE, board)

    assert is_attacked_by_pawn(sq("e5"), Color.BLACK, board)
    assert not is_attacked_by_pawn(sq("e7"), Color.BLACK, board)


def test_knight_attack() -> None:
    board = Board.from_pieces({"g1": "N"})
    assert is_attacked_by_knight(sq("f3"), Color.WHITE, board)
    assert not is_attacked_by_knight(sq("f3"), Color.BLACK, board)


def test_sliding_attacks_are_blocked() -> None:
    board = Board.from_pieces({"a1": "r", "a4": "P", "h8": "b"})
    assert is_attacked_along_straights(sq("a3"), Color.BLACK, board)
    assert not is_attacked_along_straights(sq("a5"), Color.BLACK, board)
    assert is_attacked_along_diagonals(sq("b2"), Color.BLACK, board)
    # no white slider anywhere
    assert not is_attacked_along_diagonals(sq("b2"), Color.WHITE, board)


def test_king_attack() -> None:
    board = Board.from_pieces({"e8": "k"})
    assert is_attacked_by_king(sq("d7"), Color.BLACK, board)
    assert not is_attacked_by_king(sq("d6"), Color.BLACK, board)


def test_is_attacked_combines_everything() -> None:
    board = Board.starting_position()
    assert is_attacked(sq("f3"), Color.WHITE, board)
    assert is_attacked(sq("f6"), Color.BLACK, board)
    assert not is_attacked(sq("e4"), Color.WHITE, board)
    assert not is_attacked(sq("e5"), Color.BLACK, board)
