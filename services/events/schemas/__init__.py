"""
Events service schemas.
"""

from services.events.schemas.events import (
    CamelModel,
    ConflictCheckRequest,
    ConflictCheckResponse,
    ConflictEventSummary,
    EventCreate,
    EventResponse,
    EventTypeCreate,
    EventTypeResponse,
    EventTypeUpdate,
    EventUpdate,
    InvitationAction,
    InvitationCountResponse,
    InvitationResponse,
    InviteRequest,
    ParticipantResponse,
    SuccessResponse,
)

__all__ = [
    "CamelModel",
    "ConflictCheckRequest",
    "ConflictCheckResponse",
    "ConflictEventSummary",
    "EventCreate",
    "EventResponse",
    "EventTypeCreate",
    "EventTypeResponse",
    "EventTypeUpdate",
    "EventUpdate",
    "InvitationAction",
    "InvitationCountResponse",
    "InvitationResponse",
    "InviteRequest",
    "ParticipantResponse",
    "SuccessResponse",
]
