"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define candidate move sets for each piece type.


Legality (not leaving your own king in check) and castling are handled later by the generator.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.castling import CastlingSide
from src.chess.pieces import PIECE_TO_FEN, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def get(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


# (d_row, d_col). NOTE: row 0 is the 8th rank, so white moves UP the board by DECREASING the row.
Vector = tuple[int, int]

STRAIGHTS: tuple[Vector, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONALS: tuple[Vector, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
KNIGHT_DELTAS: tuple[Vector, ...] = (
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
)
KING_DELTAS: tuple[Vector, ...] = STRAIGHTS + DIAGONALS

PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_ROWS: tuple[int, int] = (0, BOARD_DIMENSIONS[1] - 1)


def pawn_direction(color: Color) -> int:
    """White pawns walk towards row 0, black pawns towards row 7"""
    return -1 if color == Color.WHITE else 1


@dataclass(frozen=True)
class Move:
    """basic definition of a (candidate) move to be made"""

    from_square: Square
    to_square: Square
    is_castle: bool = False
    castling_side: Optional[CastlingSide] = None
    is_en_passant: bool = False
    is_promotion_pending: bool = False

    def to_uci(self, promote_to: Optional[PieceType] = None) -> str:
        """
        Universal Chess Interface notation: <from_square><to_square>[promotion piece]

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        piece_char = PIECE_TO_FEN[promote_to] if promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: tuple[Vector, ...]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    player_color = _color_on(square, board)

    moves: list[Move] = []
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square is not None:
            occupant = board.get(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != player_color:
                    moves.append(Move(square, target_square))
                break

            moves.append(Move(square, target_square))
            target_square = target_square.offset(d_row, d_col)
    return moves


def single_step_move(
    square: Square, board: Board, deltas: tuple[Vector, ...]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    player_color = _color_on(square, board)
    moves: list[Move] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if target_square is None:
            continue

        occupant = board.get(target_square)
        if occupant is None or occupant.color != player_color:
            moves.append(Move(square, target_square))

    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (only onto an empty square).
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally

    NOTE: En passant is not part of the basic movement, see `en_passant_moves()`
    """
    color = _color_on(square, board)
    forward = pawn_direction(color)

    moves: list[Move] = []
    one_step = square.offset(forward, 0)
    if one_step is not None and board.is_empty(one_step):
        moves.append(_pawn_move(square, one_step))

        two_steps = one_step.offset(forward, 0)
        if (
            square.row == PAWN_START_ROW[color]
            and two_steps is not None
            and board.is_empty(two_steps)
        ):
            moves.append(Move(square, two_steps))

    # pawns take diagonally:
    for d_col in (-1, 1):
        target_square = square.offset(forward, d_col)
        if target_square is None:
            continue
        occupant = board.get(target_square)
        if occupant is not None and occupant.color != color:
            moves.append(_pawn_move(square, target_square))
    return moves


def _pawn_move(from_square: Square, to_square: Square) -> Move:
    """Pawns never move backwards, so reaching the first or last row always means promotion."""
    return Move(
        from_square,
        to_square,
        is_promotion_pending=to_square.row in PROMOTION_ROWS,
    )


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always much such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# -- EN PASSANT MOVES ---
def en_passant_square_behind(move_from: Square, en_passant_target: Square) -> Square:
    """
    The pawn taken en passant does not stand on the target square, but right behind it:
    same file as the target square, same rank the capturing pawn started from.
    """
    return Square(move_from.row, en_passant_target.col)


def en_passant_moves(
    square: Square, board: Board, en_passant_target: Optional[Square]
) -> list[Move]:
    """The pawn on `square` may take en passant if the target square is diagonally in front of it."""
    if en_passant_target is None:
        return []

    pawn = board.get(square)
    if pawn is None or pawn.type != PieceType.PAWN:
        return []

    forward = pawn_direction(pawn.color)
    if en_passant_target not in (square.offset(forward, -1), square.offset(forward, 1)):
        return []

    # The pawn that skipped over the target square must be an opponent's pawn
    victim = board.get(en_passant_square_behind(square, en_passant_target))
    if victim != Piece(PieceType.PAWN, pawn.color.opponent):
        return []

    return [Move(square, en_passant_target, is_en_passant=True)]


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: frozenset[PieceType],
    board: Board,
    directions: tuple[Vector, ...],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    ---
    Similar to raycasting moves.
    However, where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_


    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_

    ---
    Returns TRUE if the first piece encountered along a ray is of `by_color` and one of `by_piece_types`.
    """
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square is not None:
            piece_found = board.get(target_square)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
            target_square = target_square.offset(d_row, d_col)
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: tuple[Vector, ...],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction.

    ---
    Returns TRUE if the piece encountered is an opponent's piece of the specified type.
    """
    attacker = Piece(by_piece_type, by_color)
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if target_square is not None and board.get(target_square) == attacker:
            return True
    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. To check IF a white pawn attacks your square -->
    Must look one rank DOWN the board (white pawns attack UP the board, towards row 0)

    Hence, vectors are exactly opposite to the ones used to check if you could move to a square by taking.
    """
    behind = -pawn_direction(by_color)
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, ((behind, -1), (behind, 1))
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_along_straights(square: Square, by_color: Color, board: Board) -> bool:
    """Rooks and Queens"""
    return raycasting_attack(
        square,
        by_color,
        frozenset({PieceType.ROOK, PieceType.QUEEN}),
        board,
        STRAIGHTS,
    )


def is_attacked_along_diagonals(square: Square, by_color: Color, board: Board) -> bool:
    """Bishops and Queens"""
    return raycasting_attack(
        square,
        by_color,
        frozenset({PieceType.BISHOP, PieceType.QUEEN}),
        board,
        DIAGONALS,
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES (checked in this order) ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
THREAT_CHECKS: tuple[IsAttackedFn, ...] = (
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_along_straights,
    is_attacked_along_diagonals,
    is_attacked_by_king,
)


def is_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """
    Does any piece of `by_color` attack `square`?

    Pure function of the board it is handed, so it works just as well on a hypothetical (probed) board.
    """
    return any(check(square, by_color, board) for check in THREAT_CHECKS)


def _color_on(square: Square, board: Board) -> Color:
    piece = board.get(square)
    if piece is None:
        raise ValueError(f"No piece on {square}")
    return piece.color
