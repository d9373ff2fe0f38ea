"""
Move generation
---

1. pseudo-legal moves: the basic movement rules of the piece (moves.py) + en passant + castling
2. legal moves: the pseudo-legal moves that do not leave your own king in check

Everything here is a function of the board + the bits of game state it needs (castling rights, en passant target).
None of it mutates the board permanently.
"""

import logging
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, CastlingRights, CastlingSide
from src.chess.moves import (
    MOVEMENT_RULES,
    Move,
    en_passant_moves,
    en_passant_square_behind,
    is_attacked,
)
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)


def pseudo_moves(
    square: Square,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> list[Move]:
    """Candidate moves of the piece on `square`, before checking if they leave the own king in check."""
    piece = board.get(square)
    if piece is None:
        return []

    moves = MOVEMENT_RULES[piece.type](square, board)

    if piece.type == PieceType.PAWN:
        moves.extend(en_passant_moves(square, board, en_passant_target))

    if piece.type == PieceType.KING:
        moves.extend(castling_moves(square, board, castling_rights))

    return moves


def legal_moves(
    square: Square,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> list[Move]:
    """keep those moves that do not put (or leave) you in check"""
    return [
        move
        for move in pseudo_moves(square, board, castling_rights, en_passant_target)
        if not would_leave_king_in_check(move, board)
    ]


def castling_moves(
    square: Square, board: Board, castling_rights: CastlingRights
) -> list[Move]:
    """
    Castling moves available to the king on `square`
    ---

    **you are allowed to castle if**

    * You are not currently in check (you cannot castle out of check).
    * Castling rights in that direction are not yet revoked (and the rook is still in its corner).
    * All squares in between king and rook are empty.
    * Neither the square the king crosses, nor the square it lands on, is under attack.
      (The rook's corner and the b-file square on the queenside may be attacked)
    """
    king = board.get(square)
    if king is None or king.type != PieceType.KING:
        return []

    color = king.color
    opponent = color.opponent
    if not castling_rights.for_color(color).any:
        return []

    # Cannot castle out of a check.
    if is_attacked(square, opponent, board):
        return []

    moves: list[Move] = []
    for side in CastlingSide:
        rule = CASTLING_RULES[(color, side)]
        if square != rule.king_from:
            continue

        if not castling_rights.can_castle(color, side):
            continue

        if board.get(rule.rook_from) != Piece(PieceType.ROOK, color):
            continue

        if any(not board.is_empty(sq) for sq in rule.must_be_empty):
            continue

        if any(is_attacked(sq, opponent, board) for sq in rule.king_passes):
            continue

        # survived the checks? add to legal castling directions.
        moves.append(
            Move(rule.king_from, rule.king_to, is_castle=True, castling_side=side)
        )
    return moves


def would_leave_king_in_check(move: Move, board: Board) -> bool:
    """
    Return True if, after making the move, the mover's king is attacked.

    plan:
    1. make the candidate move on the live board (scoped: `Board.probe` restores every touched square)
    2. locate the king (it may have been the piece that moved)
    3. ask if the opponent attacks that square
    """
    mover = board.get(move.from_square)
    if mover is None:
        return False

    changes: dict[Square, Optional[Piece]] = {
        move.from_square: None,
        move.to_square: mover,
    }
    if move.is_en_passant:
        changes[en_passant_square_behind(move.from_square, move.to_square)] = None

    with board.probe(changes) as probed:
        return is_in_check(mover.color, probed)


def is_in_check(color: Color, board: Board) -> bool:
    king_square = board.find_king(color)
    if king_square is None:
        logger.debug("No %s king on the board; cannot be in check", color)
        return False
    return is_attacked(king_square, color.opponent, board)


def has_any_legal_move(
    color: Color,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> bool:
    """Scans the pieces of `color` and stops at the first one that can move."""
    return any(
        legal_moves(square, board, castling_rights, en_passant_target)
        for square in board.locate_color(color)
    )
