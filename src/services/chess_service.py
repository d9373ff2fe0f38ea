"""
Orchestration of communication from a host (API router, UI, ...) to business logic and persistence layers (and the reverse direction).

The service owns the authoritative Game of one session. Requests are translated into calls on that Game,
the Game is translated back into responses. Persisting is explicit: `save_game()` / `load_game()`.
"""

import logging
from typing import Any, Optional
from uuid import UUID

from src.api.models import (
    AnnotationRequest,
    GameIdRequest,
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    NewGameRequest,
    PromotionRequest,
    TranscriptResponse,
    UpdateHeadersRequest,
)
from src.chess.game import Game
from src.chess.pieces import PROMOTION_OPTIONS
from src.chess.square import Square
from src.core.exceptions import IllegalMoveError, InvalidRequestError, RepositoryError
from src.core.models import GameHeaders, GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository, game: Optional[Game] = None) -> None:
        self.repo = repository
        self.game = game or Game.new_game()
        self.game_id: Optional[UUID] = None

    # -- Game play ---
    def new_game(self, request: NewGameRequest) -> GameResponse:
        """Start over from the initial position. Headers not given fall back to their defaults."""
        headers = GameHeaders(**request.model_dump(exclude_none=True))
        self.game = Game.new_game(headers)
        self.game_id = None
        return self.get_game_state()

    def get_game_state(self) -> GameResponse:
        game = self.game
        latest = game.latest_record
        return GameResponse(
            game_id=self.game_id,
            board=game.board.to_fen(),
            side_to_move=game.side_to_move,
            in_check=game.is_in_check(game.side_to_move),
            game_over=game.is_game_over(),
            status=game.status,
            result=game.result,
            pending_promotion=game.pending_promotion is not None,
            history=[record.display_text() for record in game.history],
            last_move=latest.notation if latest else None,
        )

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves (UCI) of the piece on the requested square. Also marks the square as selected."""
        square = Square.from_algebraic(request.square)
        moves = self.game.select(square)
        return LegalMovesResponse(
            square=request.square,
            legal_moves=[move.to_uci() for move in moves],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.
        ----

        A pawn reaching the last rank suspends the game until the promotion piece is known.
        If the request already carries it (`promote_to`), the promotion is resolved straight away.
        The piece is checked before the move is committed, so a bad piece leaves the game untouched.
        """
        if request.promote_to is not None and request.promote_to not in PROMOTION_OPTIONS:
            logger.warning("Rejected promotion piece %s", request.promote_to)
            raise InvalidRequestError(f"A pawn cannot be promoted to a {request.promote_to}.")

        from_square = Square.from_algebraic(request.from_square)
        to_square = Square.from_algebraic(request.to_square)
        try:
            record = self.game.commit_move(from_square, to_square)
        except IllegalMoveError:
            logger.warning(
                "Rejected move %s%s for %s",
                request.from_square,
                request.to_square,
                self.game.side_to_move,
            )
            raise

        if record is None and request.promote_to is not None:
            self.game.resolve_promotion(request.promote_to)
        return self.get_game_state()

    def resolve_promotion(self, request: PromotionRequest) -> GameResponse:
        self.game.resolve_promotion(request.promote_to)
        return self.get_game_state()

    def undo(self) -> GameResponse:
        self.game.undo()
        return self.get_game_state()

    def redo(self) -> GameResponse:
        self.game.redo()
        return self.get_game_state()

    def annotate(self, request: AnnotationRequest) -> GameResponse:
        if self.game.annotate_last_move(request.annotation) is None:
            logger.warning("Cannot annotate: no move played yet")
        return self.get_game_state()

    def update_headers(self, request: UpdateHeadersRequest) -> GameResponse:
        """Tags can be addressed by their PGN name (WhiteElo) or field name (white_elo)."""
        field_names = {
            info.alias or name: name for name, info in GameHeaders.model_fields.items()
        }
        updates: dict[str, Any] = {}
        for tag, value in request.headers.items():
            name = field_names.get(tag, tag)
            if name not in GameHeaders.model_fields:
                logger.warning("Rejected unknown header %r", tag)
                raise InvalidRequestError(f"Unknown header: {tag!r}")
            updates[name] = value

        self.game.headers = GameHeaders.model_validate(
            self.game.headers.model_dump() | updates
        )
        return self.get_game_state()

    def export_transcript(self) -> TranscriptResponse:
        return TranscriptResponse(
            pgn=self.game.transcript(), filename=self.game.transcript_filename()
        )

    # -- Persistence ---
    def save_game(self) -> UUID:
        """First save creates a record, later saves overwrite it."""
        model = self.game.to_model()
        if self.game_id is not None and self.repo.update_game(self.game_id, model):
            logger.info("Saved game %s", self.game_id)
            return self.game_id

        _, self.game_id = self.repo.create_game(model)
        logger.info("Saved game under new id %s", self.game_id)
        return self.game_id

    def load_game(self, request: GameIdRequest) -> GameResponse:
        """Replace the current game by a stored one (its moves are replayed and re-validated)."""
        stored_model = self._fetch_game(request.game_id)
        self.game = Game.from_model(stored_model)
        self.game_id = request.game_id
        logger.info(
            "Loaded game %s (%d moves)", request.game_id, len(stored_model.moves_uci)
        )
        return self.get_game_state()

    def list_games(self) -> list[UUID]:
        return self.repo.list_game_ids()

    def delete_game(self, request: GameIdRequest) -> None:
        """Handle a request to delete a Game record. The game in play (if it was that one) becomes unsaved."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        if self.game_id == request.game_id:
            self.game_id = None

    # -- Internal helpers --
    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
