"""
Storage access for events, event types and participation records.

``ConflictStore`` is the read-only surface the conflict resolver depends on;
``SQLAlchemyEventStore`` implements it (plus the reads and writes used by the
event service) on top of an async SQLAlchemy session factory.

Every method opens its own ``AsyncSession``, so callers may run several
store calls concurrently.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple
from uuid import uuid4

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from services.common.logging_config import get_logger
from services.events.models import (
    Event,
    EventParticipant,
    EventType,
    EventVisibility,
    ParticipantStatus,
)
from services.events.services.day_window import to_utc

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dialect_insert(session: AsyncSession) -> Any:
    """The dialect INSERT construct, which supports ON CONFLICT DO NOTHING."""
    if session.bind.dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert


class ConflictStore(Protocol):
    async def find_accepted_participations(
        self, user_ids: Sequence[str]
    ) -> List[EventParticipant]: ...

    async def find_events_in_range(
        self,
        start: datetime,
        end: datetime,
        *,
        created_by_id: Optional[str] = None,
        event_ids: Optional[Sequence[str]] = None,
    ) -> List[Event]: ...


class SQLAlchemyEventStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # Conflict detection reads

    async def find_accepted_participations(
        self, user_ids: Sequence[str]
    ) -> List[EventParticipant]:
        """Accepted participation records for any of ``user_ids``, oldest first."""
        if not user_ids:
            return []
        stmt = (
            select(EventParticipant)
            .where(
                EventParticipant.user_id.in_(list(user_ids)),
                EventParticipant.status == ParticipantStatus.accepted,
            )
            .order_by(EventParticipant.created_at, EventParticipant.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def find_events_in_range(
        self,
        start: datetime,
        end: datetime,
        *,
        created_by_id: Optional[str] = None,
        event_ids: Optional[Sequence[str]] = None,
    ) -> List[Event]:
        """
        Events with ``start <= scheduled_time < end``, ascending by time.

        Filters by organizer and/or by identifier. An empty ``event_ids``
        raises ValueError.
        """
        if event_ids is not None and len(event_ids) == 0:
            raise ValueError("event_ids must not be empty")

        stmt = select(Event).where(
            Event.scheduled_time >= to_utc(start),
            Event.scheduled_time < to_utc(end),
        )
        if created_by_id is not None:
            stmt = stmt.where(Event.created_by_id == created_by_id)
        if event_ids is not None:
            stmt = stmt.where(Event.id.in_(list(event_ids)))
        stmt = stmt.order_by(Event.scheduled_time, Event.id)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    # Event reads and writes

    async def get_event(self, event_id: str) -> Optional[Event]:
        async with self._session_factory() as session:
            return await session.get(Event, event_id)

    async def create_event(
        self,
        *,
        title: str,
        scheduled_time: datetime,
        created_by_id: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
        visibility: EventVisibility = EventVisibility.friends,
        event_type_id: Optional[str] = None,
    ) -> Event:
        event = Event(
            title=title,
            description=description,
            scheduled_time=to_utc(scheduled_time),
            location=location,
            visibility=visibility,
            created_by_id=created_by_id,
            event_type_id=event_type_id,
        )
        async with self._session_factory() as session:
            session.add(event)
            await session.commit()
            await session.refresh(event)
        logger.info("Event created", event_id=event.id, created_by_id=created_by_id)
        return event

    async def update_event(self, event_id: str, **changes: Any) -> Optional[Event]:
        """Apply ``changes`` to an event. Returns None if it does not exist."""
        if "scheduled_time" in changes:
            changes["scheduled_time"] = to_utc(changes["scheduled_time"])
        async with self._session_factory() as session:
            event = await session.get(Event, event_id)
            if event is None:
                return None
            for field, value in changes.items():
                setattr(event, field, value)
            await session.commit()
            await session.refresh(event)
        logger.info("Event updated", event_id=event_id, fields=sorted(changes))
        return event

    async def delete_event(self, event_id: str) -> bool:
        """Delete an event and its participation records."""
        async with self._session_factory() as session:
            await session.execute(
                delete(EventParticipant).where(EventParticipant.event_id == event_id)
            )
            result = await session.execute(delete(Event).where(Event.id == event_id))
            await session.commit()
            deleted = bool(result.rowcount)
        if deleted:
            logger.info("Event deleted", event_id=event_id)
        return deleted

    async def list_events_since(
        self,
        since: datetime,
        *,
        created_by_id: Optional[str] = None,
        event_ids: Optional[Sequence[str]] = None,
        limit: int = 100,
    ) -> List[Event]:
        """Events scheduled at or after ``since``, ascending, at most ``limit``."""
        if event_ids is not None and len(event_ids) == 0:
            raise ValueError("event_ids must not be empty")

        stmt = select(Event).where(Event.scheduled_time >= to_utc(since))
        if created_by_id is not None:
            stmt = stmt.where(Event.created_by_id == created_by_id)
        if event_ids is not None:
            stmt = stmt.where(Event.id.in_(list(event_ids)))
        stmt = stmt.order_by(Event.scheduled_time, Event.id).limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    # Event types

    async def list_event_types(self, user_id: str) -> List[EventType]:
        stmt = (
            select(EventType)
            .where(EventType.user_id == user_id)
            .order_by(EventType.created_at, EventType.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_event_type(self, event_type_id: str) -> Optional[EventType]:
        async with self._session_factory() as session:
            return await session.get(EventType, event_type_id)

    async def get_event_types(
        self, event_type_ids: Iterable[str]
    ) -> Dict[str, EventType]:
        """Event types by id; unknown ids are left out."""
        event_type_ids = list(event_type_ids)
        if not event_type_ids:
            return {}
        stmt = select(EventType).where(EventType.id.in_(event_type_ids))
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return {event_type.id: event_type for event_type in result.scalars()}

    async def create_event_type(
        self, *, name: str, color: str, user_id: str
    ) -> EventType:
        event_type = EventType(name=name, color=color, user_id=user_id)
        async with self._session_factory() as session:
            session.add(event_type)
            await session.commit()
            await session.refresh(event_type)
        logger.info("Event type created", event_type_id=event_type.id, user_id=user_id)
        return event_type

    async def update_event_type(
        self, event_type_id: str, **changes: Any
    ) -> Optional[EventType]:
        async with self._session_factory() as session:
            event_type = await session.get(EventType, event_type_id)
            if event_type is None:
                return None
            for field, value in changes.items():
                setattr(event_type, field, value)
            await session.commit()
            await session.refresh(event_type)
        logger.info(
            "Event type updated", event_type_id=event_type_id, fields=sorted(changes)
        )
        return event_type

    async def delete_event_type(self, event_type_id: str) -> bool:
        """Detach the type from its events, then delete it."""
        async with self._session_factory() as session:
            detached = await session.execute(
                update(Event)
                .where(Event.event_type_id == event_type_id)
                .values(event_type_id=None)
            )
            result = await session.execute(
                delete(EventType).where(EventType.id == event_type_id)
            )
            await session.commit()
            deleted = bool(result.rowcount)
        if deleted:
            logger.info(
                "Event type deleted",
                event_type_id=event_type_id,
                detached_events=detached.rowcount,
            )
        return deleted

    # Participation reads and writes

    async def list_participations(
        self, user_id: str, status: ParticipantStatus
    ) -> List[EventParticipant]:
        stmt = (
            select(EventParticipant)
            .where(
                EventParticipant.user_id == user_id,
                EventParticipant.status == status,
            )
            .order_by(EventParticipant.created_at, EventParticipant.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def list_event_participants(self, event_id: str) -> List[EventParticipant]:
        stmt = (
            select(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .order_by(EventParticipant.created_at, EventParticipant.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_participant(
        self, event_id: str, user_id: str
    ) -> Optional[EventParticipant]:
        stmt = select(EventParticipant).where(
            EventParticipant.event_id == event_id,
            EventParticipant.user_id == user_id,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    async def add_pending_participants(
        self, event_id: str, user_ids: Sequence[str]
    ) -> List[EventParticipant]:
        """
        Ensure a participation record exists for each user.

        New records start as ``pending``; existing ones are returned as-is,
        whatever their status. Results follow the order of ``user_ids``.
        Concurrent invites for the same user settle on a single record.
        """
        user_ids = list(dict.fromkeys(user_ids))
        if not user_ids:
            return []
        now = _utcnow()
        rows = [
            {
                "id": str(uuid4()),
                "event_id": event_id,
                "user_id": user_id,
                "status": ParticipantStatus.pending,
                "created_at": now,
            }
            for user_id in user_ids
        ]
        async with self._session_factory() as session:
            insert = _dialect_insert(session)
            result = await session.execute(
                insert(EventParticipant)
                .values(rows)
                .on_conflict_do_nothing(index_elements=["event_id", "user_id"])
            )
            created = result.rowcount
            await session.commit()

            found = await session.execute(
                select(EventParticipant).where(
                    EventParticipant.event_id == event_id,
                    EventParticipant.user_id.in_(user_ids),
                )
            )
            by_user: Dict[str, EventParticipant] = {
                p.user_id: p for p in found.scalars().all()
            }

        records = [by_user[user_id] for user_id in user_ids if user_id in by_user]
        logger.info(
            "Participants invited",
            event_id=event_id,
            invited=len(records),
            created=created,
        )
        return records

    async def update_participant_status(
        self, event_id: str, user_id: str, status: ParticipantStatus
    ) -> Optional[EventParticipant]:
        stmt = select(EventParticipant).where(
            EventParticipant.event_id == event_id,
            EventParticipant.user_id == user_id,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            record = result.scalars().first()
            if record is None:
                return None
            record.status = status
            await session.commit()
            await session.refresh(record)
            return record

    async def delete_participant(self, event_id: str, user_id: str) -> bool:
        stmt = delete(EventParticipant).where(
            EventParticipant.event_id == event_id,
            EventParticipant.user_id == user_id,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            return bool(result.rowcount)

    async def list_pending_invitations(
        self, user_id: str
    ) -> List[Tuple[EventParticipant, Event]]:
        """The user's pending records with their events, newest event first."""
        stmt = (
            select(EventParticipant, Event)
            .join(Event, EventParticipant.event_id == Event.id)
            .where(
                EventParticipant.user_id == user_id,
                EventParticipant.status == ParticipantStatus.pending,
            )
            .order_by(Event.scheduled_time.desc(), Event.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]

    async def count_pending_invitations(self, user_id: str) -> int:
        stmt = (
            select(func.count(EventParticipant.id))
            .join(Event, EventParticipant.event_id == Event.id)
            .where(
                EventParticipant.user_id == user_id,
                EventParticipant.status == ParticipantStatus.pending,
            )
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())
