"""Requests and Response models"""

import re
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.history import Annotation
from src.chess.pieces import PROMOTION_OPTIONS
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Result, Status

SQUARE_PATTERN = re.compile(r"^[a-h][1-8]$")


def validate_square_name(value: str) -> str:
    if not SQUARE_PATTERN.match(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


def validate_promotion_piece(value: Optional[PieceType]) -> Optional[PieceType]:
    if value is not None and value not in PROMOTION_OPTIONS:
        raise InvalidRequestError(f"A pawn cannot be promoted to a {value}.")
    return value


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    white: Optional[str] = None
    black: Optional[str] = None
    event: Optional[str] = None
    site: Optional[str] = None


class LegalMovesRequest(BaseModel):
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)


class MoveRequest(BaseModel):
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)

    @field_validator("promote_to")
    @classmethod
    def validate_promote_to(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        return validate_promotion_piece(value)


class PromotionRequest(BaseModel):
    promote_to: PieceType

    @field_validator("promote_to")
    @classmethod
    def validate_promote_to(cls, value: PieceType) -> PieceType:
        return validate_promotion_piece(value)


class AnnotationRequest(BaseModel):
    """None removes the annotation of the last move"""

    annotation: Optional[Annotation] = None


class UpdateHeadersRequest(BaseModel):
    """PGN tag name (or python field name) -> new value"""

    headers: dict[str, str]


class GameIdRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: Optional[UUID] = None
    board: str
    side_to_move: Color
    in_check: bool
    game_over: bool
    status: Status
    result: Result
    pending_promotion: bool
    history: list[str]
    last_move: Optional[str] = None


class LegalMovesResponse(BaseModel):
    square: str
    legal_moves: list[str]


class TranscriptResponse(BaseModel):
    pgn: str
    filename: str
