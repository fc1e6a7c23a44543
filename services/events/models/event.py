import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.events.models.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventVisibility(str, enum.Enum):
    private = "private"
    friends = "friends"
    public = "public"


class ParticipantStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class Event(Base):
    __tablename__ = "events"
    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    # Always written in UTC (see services.events.services.day_window.to_utc)
    scheduled_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(500))
    visibility: Mapped[EventVisibility] = mapped_column(
        Enum(EventVisibility), default=EventVisibility.friends
    )
    created_by_id = Column(String(255), nullable=False)
    event_type_id = Column(
        String(36),
        ForeignKey("event_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    participants = relationship(
        "EventParticipant", back_populates="event", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_events_created_by_time", "created_by_id", "scheduled_time"),
    )


class EventParticipant(Base):
    __tablename__ = "event_participants"
    id = Column(String(36), primary_key=True, default=_new_id)
    event_id = Column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String(255), nullable=False)
    status: Mapped[ParticipantStatus] = mapped_column(
        Enum(ParticipantStatus), default=ParticipantStatus.pending
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    event = relationship("Event", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="_event_user_uc"),
        Index("ix_event_participants_user_status", "user_id", "status"),
    )
