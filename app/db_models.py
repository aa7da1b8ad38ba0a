"""SQLAlchemy ORM models backing rooms and submitted preferences."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


def _new_room_id() -> str:
    return str(uuid.uuid4())


class Room(Base):
    """A group of participants identified by a short shared code."""

    __tablename__ = "rooms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_room_id)
    code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    preferences: Mapped[list["PreferenceRecord"]] = relationship(
        back_populates="room", cascade="all, delete-orphan", passive_deletes=True
    )

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "code": self.code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class PreferenceRecord(Base):
    """One participant's viewing constraints for a room."""

    __tablename__ = "preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("rooms.id", ondelete="CASCADE"), index=True
    )
    genre: Mapped[str | None] = mapped_column(String(64), nullable=True)
    language: Mapped[str | None] = mapped_column(String(16), nullable=True)
    max_runtime: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_rating: Mapped[float | None] = mapped_column(
        Numeric(4, 2, asdecimal=False), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    room: Mapped[Room] = relationship(back_populates="preferences")
