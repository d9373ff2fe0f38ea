"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    headers: Mapped[dict[str, str]] = mapped_column(JSON)
    moves_uci: Mapped[list[str]] = mapped_column(JSON, default=list)
    annotations: Mapped[list[Optional[str]]] = mapped_column(JSON, default=list)
    pgn: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str]
    result: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
