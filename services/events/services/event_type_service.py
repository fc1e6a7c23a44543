"""
Per-user event types: named, colored labels for events.

Only the owner may change or delete a type. Deleting a type detaches it
from its events; the events themselves are kept.
"""

from typing import List

from services.common.http_errors import (
    AuthError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from services.common.logging_config import get_logger
from services.events.models import EventType
from services.events.schemas import (
    EventTypeCreate,
    EventTypeResponse,
    EventTypeUpdate,
    SuccessResponse,
)
from services.events.services.event_store import SQLAlchemyEventStore

logger = get_logger(__name__)


class EventTypeService:
    def __init__(self, store: SQLAlchemyEventStore):
        self.store = store

    async def _get_owned_or_raise(self, user_id: str, event_type_id: str) -> EventType:
        event_type = await self.store.get_event_type(event_type_id)
        if event_type is None:
            raise NotFoundError("Event type", event_type_id)
        if event_type.user_id != user_id:
            logger.warning(
                "Event type owned by another user",
                event_type_id=event_type_id,
                user_id=user_id,
            )
            raise AuthError(
                message="Not authorized to modify this event type",
                code=ErrorCode.ACCESS_DENIED,
                status_code=403,
            )
        return event_type

    async def list_event_types(self, user_id: str) -> List[EventTypeResponse]:
        """The user's event types, oldest first."""
        event_types = await self.store.list_event_types(user_id)
        return [EventTypeResponse.from_model(event_type) for event_type in event_types]

    async def create_event_type(
        self, user_id: str, data: EventTypeCreate
    ) -> EventTypeResponse:
        if not data.name or not data.color:
            raise ValidationError(
                "Name and color are required",
                field="name" if not data.name else "color",
            )
        event_type = await self.store.create_event_type(
            name=data.name, color=data.color, user_id=user_id
        )
        return EventTypeResponse.from_model(event_type)

    async def update_event_type(
        self, user_id: str, event_type_id: str, data: EventTypeUpdate
    ) -> EventTypeResponse:
        """Rename or recolor a type; empty values leave the field unchanged."""
        event_type = await self._get_owned_or_raise(user_id, event_type_id)

        changes = {
            field: value
            for field, value in (("name", data.name), ("color", data.color))
            if value
        }
        if not changes:
            return EventTypeResponse.from_model(event_type)

        updated = await self.store.update_event_type(event_type_id, **changes)
        if updated is None:
            raise NotFoundError("Event type", event_type_id)
        return EventTypeResponse.from_model(updated)

    async def delete_event_type(
        self, user_id: str, event_type_id: str
    ) -> SuccessResponse:
        await self._get_owned_or_raise(user_id, event_type_id)
        await self.store.delete_event_type(event_type_id)
        return SuccessResponse(success=True)
