"""Persistence access for rooms and their submitted preferences."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import PreferenceRecord, Room
from ..errors import RoomCodeExhausted
from ..models import PreferenceSubmission
from ..utils import generate_room_code, normalize_room_code

logger = logging.getLogger(__name__)


class RoomRepository(Protocol):
    """Read and write operations the service needs from the room store."""

    async def lookup_room_by_code(self, code: str) -> Room | None: ...

    async def list_preferences(self, room_id: str) -> Sequence[PreferenceRecord]: ...

    async def create_room(self, code: str) -> Room: ...

    async def add_preference(
        self, room_id: str, submission: PreferenceSubmission
    ) -> PreferenceRecord: ...


class SQLRoomRepository:
    """Room repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def lookup_room_by_code(self, code: str) -> Room | None:
        normalized = normalize_room_code(code)
        if not normalized:
            return None
        async with self._session_factory() as session:
            result = await session.execute(select(Room).where(Room.code == normalized))
            return result.scalar_one_or_none()

    async def list_preferences(self, room_id: str) -> list[PreferenceRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(PreferenceRecord)
                .where(PreferenceRecord.room_id == room_id)
                .order_by(PreferenceRecord.id)
            )
            return list(result.scalars().all())

    async def create_room(self, code: str) -> Room:
        """Insert a room, raising ``IntegrityError`` if the code is taken."""

        async with self._session_factory() as session:
            room = Room(code=normalize_room_code(code))
            session.add(room)
            await session.commit()
            return room

    async def add_preference(
        self, room_id: str, submission: PreferenceSubmission
    ) -> PreferenceRecord:
        async with self._session_factory() as session:
            record = PreferenceRecord(
                room_id=room_id,
                genre=submission.genre,
                language=submission.language,
                max_runtime=submission.max_runtime,
                min_rating=submission.min_rating,
            )
            session.add(record)
            await session.commit()
            return record


async def create_room(repository: RoomRepository, *, attempts: int = 5) -> Room:
    """Create a room with a fresh code, retrying when the code collides."""

    for attempt in range(1, attempts + 1):
        code = generate_room_code()
        try:
            return await repository.create_room(code)
        except IntegrityError:
            logger.info(
                "Room code %s already taken (attempt %s/%s)", code, attempt, attempts
            )
    raise RoomCodeExhausted(f"Failed to allocate a room code after {attempts} attempts")
