"""
Standard Algebraic Notation (SAN) per move, and the PGN transcript of a whole game.

SAN building blocks, in order:
<piece letter><disambiguation><x if capture><destination>[=<promotion piece>][+ or #]

* pawns have no letter, but a capturing pawn is prefixed by the file it left (exd5)
* castling is written as O-O (kingside) / O-O-O (queenside)
* the check (+) / mate (#) suffix is only known after the move is made, see `with_check_suffix()`
"""

import re
from collections.abc import Sequence
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingRights, CastlingSide
from src.chess.generator import legal_moves
from src.chess.history import MoveRecord
from src.chess.moves import Move
from src.chess.pieces import PIECE_TO_SAN
from src.chess.square import Square
from src.core.models import GameHeaders
from src.core.shared_types import PieceType

CASTLING_NOTATION: dict[CastlingSide, str] = {
    CastlingSide.KINGSIDE: "O-O",
    CastlingSide.QUEENSIDE: "O-O-O",
}

DEFAULT_FILENAME = "chess_game.pgn"
DEFAULT_PLAYER_NAMES = ("White", "Black")

# numbered pair of moves: (move number, white's move, black's reply if already played)
MovePair = tuple[int, MoveRecord, Optional[MoveRecord]]


# --- SAN ---
def ambiguous_origins(
    move: Move,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> list[Square]:
    """Other pieces of the same type and color that could legally go to the same destination."""
    mover = board.get(move.from_square)
    if mover is None:
        return []
    return [
        square
        for square in board.locate_pieces(mover.type, mover.color)
        if square != move.from_square
        and any(
            candidate.to_square == move.to_square
            for candidate in legal_moves(
                square, board, castling_rights, en_passant_target
            )
        )
    ]


def disambiguation(origin: Square, rivals: Sequence[Square]) -> str:
    """
    1. nobody else can reach the square: nothing to add
    2. the origin file is unique among the candidates: add the file (Nbd2)
    3. else, the origin rank is unique: add the rank (N1f3)
    4. else: add both (Qh4e1)
    """
    if not rivals:
        return ""
    if all(rival.col != origin.col for rival in rivals):
        return origin.file_name
    if all(rival.row != origin.row for rival in rivals):
        return str(origin.rank)
    return origin.to_algebraic()


def san(
    move: Move,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
    promotion: Optional[PieceType] = None,
) -> str:
    """
    Notation of `move`, WITHOUT check/mate suffix.

    NOTE: must be called on the board BEFORE the move is made (needs the origin square + captured piece).
    """
    if move.is_castle and move.castling_side is not None:
        return CASTLING_NOTATION[move.castling_side]

    mover = board.get(move.from_square)
    if mover is None:
        raise ValueError(f"No piece on {move.from_square} to write notation for")

    is_capture = move.is_en_passant or board.get(move.to_square) is not None

    notation = mover.san_letter
    if mover.type == PieceType.PAWN:
        if is_capture:
            notation += move.from_square.file_name
    elif mover.type != PieceType.KING:
        rivals = ambiguous_origins(move, board, castling_rights, en_passant_target)
        notation += disambiguation(move.from_square, rivals)

    if is_capture:
        notation += "x"
    notation += move.to_square.to_algebraic()

    if promotion is not None:
        notation += f"={PIECE_TO_SAN[promotion]}"
    return notation


def with_check_suffix(notation: str, is_check: bool, is_checkmate: bool) -> str:
    if is_checkmate:
        return f"{notation}#"
    if is_check:
        return f"{notation}+"
    return notation


# --- TRANSCRIPT ---
def move_text(record: MoveRecord) -> str:
    """A single move inside the transcript: notation, NAG and the annotation as a square-effect comment"""
    text = record.notation
    if record.nag:
        text += f" {record.nag}"
    if record.annotation is not None:
        destination = record.to_square.to_algebraic()
        text += (
            f" {{[%c_effect {destination};square;{destination};"
            f"type;{record.annotation.value};persistent;true]}}"
        )
    return text


def move_pairs(history: Sequence[MoveRecord]) -> list[MovePair]:
    """White always moves first: (1, e4, e5), (2, Nf3, None) ..."""
    return [
        (
            index // 2 + 1,
            history[index],
            history[index + 1] if index + 1 < len(history) else None,
        )
        for index in range(0, len(history), 2)
    ]


def build_transcript(
    headers: GameHeaders, history: Sequence[MoveRecord], result: str
) -> str:
    """
    PGN transcript
    ---

    [Event "OTB"]
    [Site "Chess.com"]
    ...
    <blank line>
    1. e4 e5 2. Nf3 Nc6 3. Bb5 *
    """
    header_block = "".join(
        f'[{tag} "{_escape_tag_value(value)}"]\n' for tag, value in headers.tag_pairs()
    )

    tokens: list[str] = []
    for number, white_move, black_move in move_pairs(history):
        token = f"{number}. {move_text(white_move)}"
        if black_move is not None:
            token += f" {move_text(black_move)}"
        tokens.append(token)
    tokens.append(result)

    return f"{header_block}\n{' '.join(tokens)}"


def transcript_filename(headers: GameHeaders) -> str:
    """
    <White>_vs_<Black>_<Date>.pgn
    ---

    Names lose everything but letters, digits and whitespace; whitespace becomes underscores.
    Falls back to 'chess_game.pgn' while the player names are unset (empty, or still the defaults).
    """
    white = _clean_name(headers.white)
    black = _clean_name(headers.black)
    if not white or not black or (white, black) == DEFAULT_PLAYER_NAMES:
        return DEFAULT_FILENAME

    date = re.sub(r"[^0-9.]", "_", headers.date) if headers.date else "unknown_date"
    return f"{white}_vs_{black}_{date}.pgn"


def _clean_name(name: str) -> str:
    without_symbols = re.sub(r"[^a-zA-Z0-9\s]", "", name).strip()
    return re.sub(r"\s+", "_", without_symbols)


def _escape_tag_value(value: str) -> str:
    """Backslashes and quotes inside a tag value are escaped by a backslash"""
    return value.replace("\\", "\\\\").replace('"', '\\"')
