"""
The Game class will be the entrypoint into the domain layer for the service layer (and any other host, ex. a UI).
It owns the authoritative state of a single game and is responsible for orchestrating everything that happens during a turn:

select a square -> legal moves -> commit one -> (resolve promotion) -> check / mate evaluation

Moves can be taken back (undo) and replayed (redo). Committing a new move after an undo discards the moves that were undone.
"""

import logging
from dataclasses import dataclass, field
from itertools import zip_longest
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, ROOK_HOME_SQUARES, CastlingRights
from src.chess.generator import has_any_legal_move, is_in_check, legal_moves
from src.chess.history import Annotation, MoveRecord
from src.chess.moves import Move, en_passant_square_behind
from src.chess.notation import build_transcript, san, transcript_filename, with_check_suffix
from src.chess.pieces import FEN_TO_PIECE, PROMOTION_OPTIONS, Piece
from src.chess.square import Square
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.models import GameHeaders, GameModel
from src.core.shared_types import Color, PieceType, Result, Status

logger = logging.getLogger(__name__)


# --- INPUT PHASES (state machine) ---
@dataclass(frozen=True)
class Idle:
    """Nothing selected, waiting for input."""


@dataclass(frozen=True)
class Selected:
    """A piece of the side to move is selected. Its legal moves are cached."""

    square: Square
    moves: tuple[Move, ...]


@dataclass(frozen=True)
class PendingPromotion:
    """A pawn move to the last rank has been accepted. Waiting for the piece type to promote into."""

    move: Move
    player: Color


Phase = Idle | Selected | PendingPromotion


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board = field(default_factory=Board.starting_position)
    side_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_target: Optional[Square] = None
    headers: GameHeaders = field(default_factory=GameHeaders)
    history: list[MoveRecord] = field(default_factory=list)
    redo_stack: list[MoveRecord] = field(default_factory=list)
    game_over: bool = False
    result: Result = Result.UNDECIDED
    status: Status = Status.IN_PROGRESS
    phase: Phase = field(default_factory=Idle)

    def __post_init__(self) -> None:
        # A game without exactly one king per side is never playable: refuse it up front.
        self.board.validate_kings()

    @classmethod
    def new_game(cls, headers: Optional[GameHeaders] = None) -> Self:
        """Standard starting position, white to move."""
        game = cls(headers=headers or GameHeaders())
        game.setup_game()
        return game

    def setup_game(self) -> None:
        """Full reset to the starting position. Headers are kept, apart from the outcome tags."""
        self.board = Board.starting_position()
        self.side_to_move = Color.WHITE
        self.castling_rights = CastlingRights()
        self.en_passant_target = None
        self.history = []
        self.redo_stack = []
        self.phase = Idle()
        self._reopen_game()
        logger.info("New game set up: %s vs %s", self.headers.white, self.headers.black)

    # --- QUERIES ---
    def get_legal_moves(self, square: Square) -> list[Move]:
        """
        Legal moves of the piece on `square`.
        ----

        Empty list (no error) if the square is empty, holds a piece of the side NOT to move,
        the game is over, or a promotion still awaits its piece.
        """
        if self.game_over or isinstance(self.phase, PendingPromotion):
            return []

        piece = self.board.get(square)
        if piece is None or piece.color != self.side_to_move:
            return []

        return legal_moves(square, self.board, self.castling_rights, self.en_passant_target)

    def is_in_check(self, color: Color) -> bool:
        return is_in_check(color, self.board)

    def is_game_over(self) -> bool:
        return self.game_over

    @property
    def latest_record(self) -> Optional[MoveRecord]:
        return self.history[-1] if self.history else None

    @property
    def pending_promotion(self) -> Optional[PendingPromotion]:
        return self.phase if isinstance(self.phase, PendingPromotion) else None

    # --- SELECTION ---
    def select(self, square: Square) -> list[Move]:
        """
        Idle/Selected -> Selected when the square holds a piece of the side to move, otherwise back to Idle.
        Ignored while a promotion is pending.
        """
        if isinstance(self.phase, PendingPromotion):
            return []

        piece = self.board.get(square)
        if self.game_over or piece is None or piece.color != self.side_to_move:
            self.phase = Idle()
            return []

        moves = self.get_legal_moves(square)
        self.phase = Selected(square, tuple(moves))
        return moves

    def clear_selection(self) -> None:
        if isinstance(self.phase, Selected):
            self.phase = Idle()

    # --- MUTATIONS ---
    def commit_move(
        self, from_square: Square, to_square: Square, move: Optional[Move] = None
    ) -> Optional[MoveRecord]:
        """
        Attempt to make a move
        -----

        1. validate: the move must be one of the legal moves of the piece on `from_square` (else IllegalMoveError, nothing changes)
        2. clear the redo stack (deviating from the undone line invalidates it)
        3. pawn to the last rank? --> suspend in PendingPromotion, `resolve_promotion()` finishes the move
        4. otherwise: update the board, record the move, update castling rights / en passant target, switch turns
        5. evaluate check / mate for the player now to move

        Returns the new history record, or None while a promotion is pending.
        """
        accepted = self._validate_move(from_square, to_square, move)
        self.redo_stack.clear()

        if accepted.is_promotion_pending:
            self.phase = PendingPromotion(accepted, self.side_to_move)
            logger.info(
                "%s pawn reaches %s, awaiting promotion piece",
                self.side_to_move,
                to_square,
            )
            return None

        record = self._record_and_play(accepted)
        self.phase = Idle()
        self._finalize(record)
        return record

    def resolve_promotion(self, piece_type: PieceType | str) -> Optional[MoveRecord]:
        """Finish the pending promotion. Without pending promotion this is a no-op."""
        pending = self.pending_promotion
        if pending is None:
            logger.debug("resolve_promotion(%s) ignored: no promotion pending", piece_type)
            return None

        promote_to = _promotion_piece(piece_type)
        record = self._record_and_play(pending.move, promotion=promote_to)
        self.phase = Idle()
        self._finalize(record)
        return record

    def undo(self) -> Optional[MoveRecord]:
        """Take back the last move. No-op if there is nothing to take back (or a promotion is pending)."""
        if isinstance(self.phase, PendingPromotion) or not self.history:
            logger.debug("undo ignored: nothing to take back")
            return None

        record = self.history.pop()
        self._play_backward(record)
        self.redo_stack.append(record)
        self.phase = Idle()
        self._reopen_game()
        logger.info("Undo %s (%s)", record.notation, record.player)
        return record

    def redo(self) -> Optional[MoveRecord]:
        """Replay the last move taken back. No-op if the redo stack is empty (or a promotion is pending)."""
        if isinstance(self.phase, PendingPromotion) or not self.redo_stack:
            logger.debug("redo ignored: nothing to replay")
            return None

        record = self.redo_stack.pop()
        self._play_forward(record)
        self.history.append(record)
        self.phase = Idle()
        self._evaluate_game_end()
        logger.info("Redo %s (%s)", record.notation, record.player)
        return record

    def annotate_last_move(self, annotation: Optional[Annotation]) -> Optional[MoveRecord]:
        """Tag the last move (ex. Blunder). None removes the tag. No-op without any move."""
        record = self.latest_record
        if record is None:
            return None
        record.annotation = annotation
        return record

    # --- SERIALIZATION ---
    def transcript(self) -> str:
        return build_transcript(self.headers, self.history, self.result)

    def transcript_filename(self) -> str:
        return transcript_filename(self.headers)

    def to_model(self) -> GameModel:
        """Encode into a format the Service layer uses"""
        return GameModel(
            headers=self.headers.model_dump(by_alias=True),
            moves_uci=[record.to_uci() for record in self.history],
            annotations=[
                record.annotation.value if record.annotation else None
                for record in self.history
            ],
            pgn=self.transcript(),
            status=self.status.value,
            result=self.result.value,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Rebuild a game by replaying its moves from the starting position.
        ---

        Every move goes through the same validation as a move made by a player, so a corrupted record
        raises instead of producing an impossible position.
        """
        game = cls.new_game(GameHeaders.model_validate(model.headers))
        for uci, annotation in zip_longest(model.moves_uci, model.annotations):
            if uci is None:
                raise GameStateError("More annotations than moves in the stored game.")
            from_square, to_square, promote_to = _parse_uci(uci)
            record = game.commit_move(from_square, to_square)
            if promote_to is not None:
                if record is not None:
                    raise GameStateError(f"Stored move {uci!r} is not a promotion.")
                game.resolve_promotion(promote_to)
            if game.pending_promotion is not None:
                raise GameStateError(f"Stored move {uci!r} lacks its promotion piece.")
            if annotation:
                game.annotate_last_move(Annotation(annotation))
        return game

    # -- PRIVATE HELPERS ---
    def _validate_move(
        self, from_square: Square, to_square: Square, move: Optional[Move]
    ) -> Move:
        legal = self.get_legal_moves(from_square)
        if move is not None:
            if move in legal and (move.from_square, move.to_square) == (from_square, to_square):
                return move
        else:
            matching = [candidate for candidate in legal if candidate.to_square == to_square]
            if matching:
                return matching[0]

        raise IllegalMoveError(
            f"Move not allowed: {from_square.to_algebraic()}{to_square.to_algebraic()}"
        )

    def _record_and_play(
        self, move: Move, promotion: Optional[PieceType] = None
    ) -> MoveRecord:
        """Snapshot of the state before the move, then the board update."""
        mover = self.board.get(move.from_square)
        assert mover is not None  # guaranteed by the legality check

        captured_square = (
            en_passant_square_behind(move.from_square, move.to_square)
            if move.is_en_passant
            else move.to_square
        )
        captured = self.board.get(captured_square)

        record = MoveRecord(
            player=mover.color,
            piece=mover.type,
            from_square=move.from_square,
            to_square=move.to_square,
            notation=san(
                move,
                self.board,
                self.castling_rights,
                self.en_passant_target,
                promotion,
            ),
            castling_before=self.castling_rights,
            en_passant_before=self.en_passant_target,
            captured=captured.type if captured else None,
            is_en_passant=move.is_en_passant,
            promotion=promotion,
        )
        self._play_forward(record)
        self.history.append(record)
        logger.info("%s plays %s", record.player, record.notation)
        return record

    def _play_forward(self, record: MoveRecord) -> None:
        """
        The forward transformation of a move (shared by commit and redo)
        ---

        1. lift the piece, remove a pawn taken en passant (it stands BEHIND the destination)
        2. place the piece (or the piece it promotes into) on the destination
        3. castling: the rook jumps over the king
        4. castling rights / en passant target / side to move
        """
        self.board.set(record.from_square, None)
        if record.is_en_passant:
            self.board.set(
                en_passant_square_behind(record.from_square, record.to_square), None
            )
        placed = Piece(record.piece, record.player)
        if record.promotion is not None:
            placed = placed.promoted_to(record.promotion)
        self.board.set(record.to_square, placed)

        if record.castling_side is not None:
            rule = CASTLING_RULES[(record.player, record.castling_side)]
            self.board.move_piece(rule.rook_from, rule.rook_to)

        self.castling_rights = castling_rights_after(record)
        self.en_passant_target = en_passant_target_after(record)
        self.side_to_move = record.player.opponent

    def _play_backward(self, record: MoveRecord) -> None:
        """Exact inverse of `_play_forward`, using the snapshot stored in the record."""
        opponent = record.player.opponent
        self.board.set(record.from_square, Piece(record.piece, record.player))

        if record.is_en_passant:
            self.board.set(record.to_square, None)
            self.board.set(
                en_passant_square_behind(record.from_square, record.to_square),
                Piece(PieceType.PAWN, opponent),
            )
        elif record.captured is not None:
            self.board.set(record.to_square, Piece(record.captured, opponent))
        else:
            self.board.set(record.to_square, None)

        if record.castling_side is not None:
            rule = CASTLING_RULES[(record.player, record.castling_side)]
            self.board.move_piece(rule.rook_to, rule.rook_from)

        self.castling_rights = record.castling_before
        self.en_passant_target = record.en_passant_before
        self.side_to_move = record.player

    def _finalize(self, record: MoveRecord) -> None:
        """Check / mate evaluation after a freshly committed move. Only then is the notation complete."""
        is_check, is_checkmate = self._evaluate_game_end()
        record.notation = with_check_suffix(record.notation, is_check, is_checkmate)

    def _evaluate_game_end(self) -> tuple[bool, bool]:
        """
        Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already passed: the side to move is the opponent of the player who made the move.
        Returns (is_check, is_checkmate)
        """
        color = self.side_to_move
        is_check = self.is_in_check(color)
        if has_any_legal_move(color, self.board, self.castling_rights, self.en_passant_target):
            return is_check, False

        if is_check:
            winner = color.opponent
            result = Result.WHITE_WINS if winner == Color.WHITE else Result.BLACK_WINS
            self._end_game(Status.CHECKMATE, result, termination="Checkmate")
        else:
            self._end_game(Status.STALEMATE, Result.DRAW, termination="Stalemate")
        return is_check, is_check

    def _end_game(self, status: Status, result: Result, termination: str) -> None:
        self.game_over = True
        self.status = status
        self.result = result
        self.headers.result = result.value
        self.headers.termination = termination
        logger.info("Game over: %s (%s)", status, result)

    def _reopen_game(self) -> None:
        self.game_over = False
        self.status = Status.IN_PROGRESS
        self.result = Result.UNDECIDED
        self.headers.result = Result.UNDECIDED.value
        self.headers.termination = ""


# --- STATE DERIVED FROM A MOVE ---
def castling_rights_after(record: MoveRecord) -> CastlingRights:
    """
    Checks which rights should get revoked
    ----

    1. If you are moving your king (castling included) --> revoke both
    2. If a move starts or ends on a rook's home corner --> that rook moved, or got captured: revoke that right
       (rights only ever turn off, so a rook returning to its corner later changes nothing)
    """
    rights = record.castling_before
    if record.piece == PieceType.KING:
        rights = rights.revoke_all(record.player)

    for square in (record.from_square, record.to_square):
        if square in ROOK_HOME_SQUARES:
            color, side = ROOK_HOME_SQUARES[square]
            rights = rights.revoke(color, side)
    return rights


def en_passant_target_after(record: MoveRecord) -> Optional[Square]:
    """Only a pawn's two-square advance creates a target: the square it skipped over."""
    rows_moved = abs(record.to_square.row - record.from_square.row)
    if record.piece != PieceType.PAWN or rows_moved != 2:
        return None
    return Square(
        (record.from_square.row + record.to_square.row) // 2, record.from_square.col
    )


def _promotion_piece(piece_type: PieceType | str) -> PieceType:
    try:
        promote_to = PieceType(piece_type)
    except ValueError:
        raise IllegalMoveError(f"Unknown piece type: {piece_type!r}") from None
    if promote_to not in PROMOTION_OPTIONS:
        raise IllegalMoveError(
            f"Cannot promote to {promote_to}. Pick one from {', '.join(PROMOTION_OPTIONS)}"
        )
    return promote_to


def _parse_uci(uci: str) -> tuple[Square, Square, Optional[PieceType]]:
    """'e7e8q' -> (e7, e8, queen)"""
    if len(uci) not in (4, 5):
        raise GameStateError(f"Cannot interpret stored move {uci!r}")
    try:
        from_square = Square.from_algebraic(uci[:2])
        to_square = Square.from_algebraic(uci[2:4])
        promote_to = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
    except (ValueError, KeyError):
        raise GameStateError(f"Cannot interpret stored move {uci!r}") from None
    return from_square, to_square, promote_to
