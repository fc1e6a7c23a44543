"""
Event and participation operations behind the events API.

Domain failures are raised as the platform's HTTP error types
(``NotFoundError``, ``AuthError`` with 403, ``ValidationError``) and are
passed through the routers unchanged.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Sequence

from services.common.http_errors import (
    AuthError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from services.common.logging_config import get_logger
from services.events.models import (
    Event,
    EventType,
    EventVisibility,
    ParticipantStatus,
)
from services.events.schemas import (
    EventCreate,
    EventResponse,
    EventUpdate,
    InvitationCountResponse,
    InvitationResponse,
    ParticipantResponse,
    SuccessResponse,
)
from services.events.services.conflict_resolver import merge_unique
from services.events.services.day_window import as_utc
from services.events.services.event_store import SQLAlchemyEventStore

logger = get_logger(__name__)

RECENT_EVENTS_WINDOW = timedelta(days=30)
RECENT_EVENTS_LIMIT = 100
CREATOR_STATUS = "creator"


class EventService:
    def __init__(self, store: SQLAlchemyEventStore):
        self.store = store

    async def _get_event_or_404(self, event_id: str) -> Event:
        event = await self.store.get_event(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    def _require_organizer(self, event: Event, user_id: str, action: str) -> None:
        if event.created_by_id != user_id:
            logger.warning(
                "Organizer-only action refused",
                action=action,
                event_id=event.id,
                user_id=user_id,
            )
            raise AuthError(
                message=f"Only the event organizer can {action}",
                code=ErrorCode.ACCESS_DENIED,
                status_code=403,
            )

    async def _require_own_event_type(
        self, user_id: str, event_type_id: str
    ) -> EventType:
        event_type = await self.store.get_event_type(event_type_id)
        if event_type is None:
            raise NotFoundError("Event type", event_type_id)
        if event_type.user_id != user_id:
            raise AuthError(
                message="Event type belongs to another user",
                code=ErrorCode.ACCESS_DENIED,
                status_code=403,
            )
        return event_type

    async def _event_responses(self, events: Sequence[Event]) -> List[EventResponse]:
        """Build responses with each event's type, fetched in one query."""
        event_types = await self.store.get_event_types(
            {event.event_type_id for event in events if event.event_type_id}
        )
        return [
            EventResponse.from_model(event, event_types.get(event.event_type_id))
            for event in events
        ]

    async def _event_response(self, event: Event) -> EventResponse:
        (response,) = await self._event_responses([event])
        return response

    # Events

    async def list_user_events(self, user_id: str) -> List[EventResponse]:
        """
        Events the user organizes or has accepted, from 30 days ago onwards.

        Each source is capped separately; the merged list is sorted by date.
        """
        since = datetime.now(timezone.utc) - RECENT_EVENTS_WINDOW
        created = await self.store.list_events_since(
            since, created_by_id=user_id, limit=RECENT_EVENTS_LIMIT
        )

        accepted = await self.store.list_participations(
            user_id, ParticipantStatus.accepted
        )
        event_ids = list(
            dict.fromkeys(p.event_id for p in accepted[:RECENT_EVENTS_LIMIT])
        )
        attended = []
        if event_ids:
            attended = await self.store.list_events_since(
                since, event_ids=event_ids, limit=RECENT_EVENTS_LIMIT
            )

        events = merge_unique(created, attended)
        events.sort(key=lambda event: as_utc(event.scheduled_time))
        return await self._event_responses(events)

    async def create_event(self, user_id: str, data: EventCreate) -> EventResponse:
        if not data.title or data.date is None:
            raise ValidationError(
                "Title and date are required",
                field="title" if not data.title else "date",
            )
        event_type_id = data.event_type_id or None
        if event_type_id:
            await self._require_own_event_type(user_id, event_type_id)
        event = await self.store.create_event(
            title=data.title,
            scheduled_time=data.date,
            created_by_id=user_id,
            description=data.description or None,
            location=data.location or None,
            visibility=data.visibility or EventVisibility.friends,
            event_type_id=event_type_id,
        )
        return await self._event_response(event)

    async def get_event(self, event_id: str) -> EventResponse:
        return await self._event_response(await self._get_event_or_404(event_id))

    async def update_event(
        self, user_id: str, event_id: str, data: EventUpdate
    ) -> EventResponse:
        event = await self._get_event_or_404(event_id)
        self._require_organizer(event, user_id, "modify this event")

        changes = data.model_dump(exclude_unset=True)
        if "date" in changes:
            if changes["date"] is None:
                raise ValidationError("Date cannot be empty", field="date")
            changes["scheduled_time"] = changes.pop("date")
        if "title" in changes and not changes["title"]:
            raise ValidationError("Title cannot be empty", field="title")
        for optional_field in ("description", "location"):
            if optional_field in changes:
                changes[optional_field] = changes[optional_field] or None
        if "visibility" in changes and changes["visibility"] is None:
            changes.pop("visibility")
        if "event_type_id" in changes:
            changes["event_type_id"] = changes["event_type_id"] or None
            if changes["event_type_id"]:
                await self._require_own_event_type(user_id, changes["event_type_id"])

        updated = await self.store.update_event(event_id, **changes)
        if updated is None:
            raise NotFoundError("Event", event_id)
        return await self._event_response(updated)

    async def delete_event(self, user_id: str, event_id: str) -> SuccessResponse:
        event = await self._get_event_or_404(event_id)
        self._require_organizer(event, user_id, "delete this event")
        await self.store.delete_event(event_id)
        return SuccessResponse(success=True)

    # Participants

    async def list_participants(self, event_id: str) -> List[ParticipantResponse]:
        """
        Participation records of an event, with the organizer marked ``creator``.

        An organizer without a record of their own gets a synthetic entry
        in first position.
        """
        event = await self._get_event_or_404(event_id)
        records = await self.store.list_event_participants(event_id)

        participants = [
            ParticipantResponse.from_model(
                record,
                status=CREATOR_STATUS if record.user_id == event.created_by_id else None,
            )
            for record in records
        ]
        if not any(record.user_id == event.created_by_id for record in records):
            participants.insert(
                0,
                ParticipantResponse(
                    id=CREATOR_STATUS,
                    event_id=event.id,
                    user_id=event.created_by_id,
                    status=CREATOR_STATUS,
                ),
            )
        return participants

    async def invite_participants(
        self, user_id: str, event_id: str, user_ids: Sequence[str]
    ) -> List[ParticipantResponse]:
        if not user_ids:
            raise ValidationError("User list must not be empty", field="userIds")
        event = await self._get_event_or_404(event_id)
        self._require_organizer(event, user_id, "add participants")

        records = await self.store.add_pending_participants(
            event_id, list(dict.fromkeys(user_ids))
        )
        return [ParticipantResponse.from_model(record) for record in records]

    async def respond_to_invitation(
        self, user_id: str, event_id: str, participant_user_id: str, action: str
    ) -> ParticipantResponse | SuccessResponse:
        if participant_user_id != user_id:
            raise AuthError(
                message="You can only respond to your own invitations",
                code=ErrorCode.ACCESS_DENIED,
                status_code=403,
            )

        participant = await self.store.get_participant(event_id, user_id)
        if participant is None:
            raise NotFoundError("Invitation")

        if action not in ("accept", "decline"):
            raise ValidationError(
                "Invalid action",
                field="action",
                value=action,
                details={"allowed": ["accept", "decline"]},
            )

        if action == "accept":
            updated = await self.store.update_participant_status(
                event_id, user_id, ParticipantStatus.accepted
            )
            if updated is None:
                raise NotFoundError("Invitation")
            logger.info("Invitation accepted", event_id=event_id, user_id=user_id)
            return ParticipantResponse.from_model(updated)

        await self.store.delete_participant(event_id, user_id)
        logger.info("Invitation declined", event_id=event_id, user_id=user_id)
        return SuccessResponse(success=True, deleted=True)

    async def remove_participant(
        self, user_id: str, event_id: str, participant_user_id: str
    ) -> SuccessResponse:
        event = await self._get_event_or_404(event_id)
        self._require_organizer(event, user_id, "remove participants")
        removed = await self.store.delete_participant(event_id, participant_user_id)
        logger.info(
            "Participant removed",
            event_id=event_id,
            participant_user_id=participant_user_id,
            removed=removed,
        )
        return SuccessResponse(success=True)

    # Invitations

    async def list_pending_invitations(
        self, user_id: str
    ) -> List[InvitationResponse]:
        rows = await self.store.list_pending_invitations(user_id)
        return [
            InvitationResponse(
                id=participant.id,
                event_id=participant.event_id,
                status=participant.status.value,
                event=EventResponse.from_model(event),
            )
            for participant, event in rows
        ]

    async def count_pending_invitations(self, user_id: str) -> InvitationCountResponse:
        count = await self.store.count_pending_invitations(user_id)
        return InvitationCountResponse(count=count)
