"""Unit tests for /src/chess/pieces.py"""

import pytest

from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType


@pytest.mark.parametrize("char", [char.upper() for char in FEN_TO_PIECE.keys()])
def test_creating_white_piece_from_fen(char: str) -> None:
    """Capital letters are used for white pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.WHITE


@pytest.mark.parametrize("char", [char.lower() for char in FEN_TO_PIECE.keys()])
def test_creating_black_piece_from_fen(char: str) -> None:
    """Lower case letters are used for black pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.BLACK


@pytest.mark.parametrize("char", ["x", "1", "", "kk"])
def test_invalid_piece_character(char: str) -> None:
    with pytest.raises(ValueError):
        Piece.from_fen(char)


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_pieces_to_fen(piece_type: PieceType) -> None:
    assert Piece(piece_type, Color.WHITE).to_fen() == PIECE_TO_FEN[piece_type].upper()
    assert Piece(piece_type, Color.BLACK).to_fen() == PIECE_TO_FEN[piece_type].lower()


@pytest.mark.parametrize(
    "piece_type, letter",
    [
        (PieceType.PAWN, ""),
        (PieceType.KNIGHT, "N"),
        (PieceType.BISHOP, "B"),
        (PieceType.ROOK, "R"),
        (PieceType.QUEEN, "Q"),
        (PieceType.KING, "K"),
    ],
)
def test_san_letters(piece_type: PieceType, letter: str) -> None:
    """Same letter for both colors, pawns have none"""
    assert Piece(piece_type, Color.BLACK).san_letter == letter


@pytest.mark.parametrize("color", list(Color))
def test_promotion_to_queen(color: Color) -> None:
    """Pieces are values: promotion returns a new piece and does not by accident change the color"""
    pawn = Piece(PieceType.PAWN, color)
    queen = pawn.promoted_to(PieceType.QUEEN)
    assert queen == Piece(PieceType.QUEEN, color)
    assert pawn.type == PieceType.PAWN
