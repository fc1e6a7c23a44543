from sqlalchemy import Column, DateTime, Index, String

from services.events.models.base import Base
from services.events.models.event import _new_id, _utcnow


class EventType(Base):
    """A user-defined label (name and display color) that events can carry."""

    __tablename__ = "event_types"
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    color = Column(String(32), nullable=False)
    user_id = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (Index("ix_event_types_user_created", "user_id", "created_at"),)
