from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from services.events.models import (
    Event,
    EventParticipant,
    EventType,
    EventVisibility,
)
from services.events.services.day_window import as_utc


class CamelModel(BaseModel):
    """Base model using camelCase on the wire while accepting snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Conflict check


class ConflictCheckRequest(CamelModel):
    user_ids: List[str] = Field(default_factory=list)
    date: Optional[str] = None

    @field_validator("user_ids", mode="before")
    @classmethod
    def null_user_ids_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ConflictEventSummary(CamelModel):
    id: str
    title: str
    date: datetime


class ConflictCheckResponse(CamelModel):
    conflicts: Dict[str, List[ConflictEventSummary]] = Field(default_factory=dict)


# Event types


class EventTypeCreate(CamelModel):
    # Required, but checked by the service for the standard error envelope
    name: Optional[str] = None
    color: Optional[str] = None


class EventTypeUpdate(CamelModel):
    name: Optional[str] = None
    color: Optional[str] = None


class EventTypeResponse(CamelModel):
    id: str
    name: str
    color: str
    user_id: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, event_type: EventType) -> "EventTypeResponse":
        return cls(
            id=event_type.id,
            name=event_type.name,
            color=event_type.color,
            user_id=event_type.user_id,
            created_at=as_utc(event_type.created_at),
        )


# Events


class EventCreate(CamelModel):
    # title/date are checked by the service so the error uses the standard envelope
    title: Optional[str] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    location: Optional[str] = None
    visibility: Optional[EventVisibility] = None
    event_type_id: Optional[str] = None


class EventUpdate(CamelModel):
    title: Optional[str] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    location: Optional[str] = None
    visibility: Optional[EventVisibility] = None
    event_type_id: Optional[str] = None


class EventResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    date: datetime
    location: Optional[str] = None
    visibility: EventVisibility
    created_by_id: str
    event_type_id: Optional[str] = None
    event_type: Optional[EventTypeResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(
        cls, event: Event, event_type: Optional[EventType] = None
    ) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            date=as_utc(event.scheduled_time),
            location=event.location,
            visibility=event.visibility or EventVisibility.friends,
            created_by_id=event.created_by_id,
            event_type_id=event.event_type_id,
            event_type=(
                EventTypeResponse.from_model(event_type) if event_type else None
            ),
            created_at=as_utc(event.created_at),
            updated_at=as_utc(event.updated_at),
        )


# Participants and invitations


class ParticipantResponse(CamelModel):
    id: str
    event_id: Optional[str] = None
    user_id: str
    # "creator" marks the organizer in participant listings
    status: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(
        cls, participant: EventParticipant, status: Optional[str] = None
    ) -> "ParticipantResponse":
        return cls(
            id=participant.id,
            event_id=participant.event_id,
            user_id=participant.user_id,
            status=status or participant.status.value,
            created_at=as_utc(participant.created_at),
        )


class InviteRequest(CamelModel):
    user_ids: List[str] = Field(default_factory=list)


class InvitationAction(CamelModel):
    action: str


class SuccessResponse(CamelModel):
    success: bool = True
    deleted: Optional[bool] = None


class InvitationResponse(CamelModel):
    id: str
    event_id: str
    status: str
    type: Literal["event"] = "event"
    event: EventResponse


class InvitationCountResponse(CamelModel):
    count: int = 0
