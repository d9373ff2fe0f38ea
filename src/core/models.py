"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal

from src.core.config import get_settings
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Result

# Type aliases to make GameModel easier to read
TagName = str
TagValue = str

PGN_DATE_PATTERN = re.compile(r"^[0-9?]{4}\.[0-9?]{2}\.[0-9?]{2}$")


def today_as_pgn_date() -> str:
    """PGN dates are written as YYYY.MM.DD"""
    return date.today().strftime("%Y.%m.%d")


class GameHeaders(BaseModel):
    """
    The tag pairs written above the moves of a PGN transcript.
    ---

    Python names are snake_case, the PGN tag names are the PascalCase aliases (white_elo <-> WhiteElo).
    Field order is the order in which the tags are written.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal, populate_by_name=True, validate_assignment=True
    )

    event: str = Field(default_factory=lambda: get_settings().default_event)
    site: str = Field(default_factory=lambda: get_settings().default_site)
    date: str = Field(default_factory=today_as_pgn_date)
    round: str = "?"
    white: str = "White"
    black: str = "Black"
    result: str = Result.UNDECIDED.value
    white_elo: str = ""
    black_elo: str = ""
    white_title: str = ""
    black_title: str = ""
    white_url: str = ""
    black_url: str = ""
    white_country: str = ""
    black_country: str = ""
    termination: str = ""

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        """Unknown parts of the date are written with question marks: 2024.??.??"""
        if value and not PGN_DATE_PATTERN.match(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a PGN date (YYYY.MM.DD)."
            )
        return value

    @field_validator("white_elo", "black_elo")
    @classmethod
    def validate_elo(cls, value: str) -> str:
        if value and not value.isdigit():
            raise InvalidRequestError(f"Elo rating must be a number, got {value!r}.")
        return value

    @field_validator("result")
    @classmethod
    def validate_result(cls, value: str) -> str:
        if value not in {result.value for result in Result}:
            raise InvalidRequestError(
                f"Invalid result {value!r}. Pick one from {', '.join(r.value for r in Result)}"
            )
        return value

    def tag_pairs(self) -> list[tuple[TagName, TagValue]]:
        """Only tags with a value end up in the transcript."""
        return [
            (tag, value)
            for tag, value in self.model_dump(by_alias=True).items()
            if value
        ]


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between Service, DB, and Game layers."""

    headers: dict[TagName, TagValue]
    moves_uci: list[str]
    annotations: list[Optional[str]] = field(default_factory=list)
    pgn: str = ""
    status: str = "in progress"
    result: str = Result.UNDECIDED.value
