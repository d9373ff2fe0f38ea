"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.schema import Base, DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session
        # Ensure all tables are created (no-op when they exist)
        Base.metadata.create_all(bind=db_session.get_bind())

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def list_game_ids(self) -> list[UUID]:
        query = select(DBGame.id).order_by(DBGame.created_at)
        return list(self.db.scalars(query))

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game, game_db)
        self.db.add(game_db)
        self._commit()
        self.db.refresh(game_db)
        logger.info("Stored new game %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite an existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game, game_db)
        self._commit()
        self.db.refresh(game_db)
        logger.info("Updated game %s (%d moves)", game_id, len(game.moves_uci))
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self._commit()
        logger.info("Deleted game %s", game_id)
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as error:
            self.db.rollback()
            raise RepositoryError(f"Could not store game: {error}") from error

    @staticmethod
    def _copy_into(game: GameModel, game_db: DBGame) -> None:
        # JSON columns only notice re-assignment, so always hand over fresh containers
        game_db.headers = dict(game.headers)
        game_db.moves_uci = list(game.moves_uci)
        game_db.annotations = list(game.annotations)
        game_db.pgn = game.pgn
        game_db.status = game.status
        game_db.result = game.result

    @staticmethod
    def _to_model(game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            headers=dict(game_db.headers),
            moves_uci=list(game_db.moves_uci),
            annotations=list(game_db.annotations),
            pgn=game_db.pgn,
            status=game_db.status,
            result=game_db.result,
        )
