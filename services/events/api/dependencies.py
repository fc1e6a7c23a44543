from fastapi import Depends

from services.events.database import get_async_session_factory
from services.events.services.conflict_resolver import ConflictResolver
from services.events.services.event_service import EventService
from services.events.services.event_store import SQLAlchemyEventStore
from services.events.services.event_type_service import EventTypeService
from services.events.settings import get_settings


def get_event_store() -> SQLAlchemyEventStore:
    return SQLAlchemyEventStore(get_async_session_factory())


def get_conflict_resolver(
    store: SQLAlchemyEventStore = Depends(get_event_store),
) -> ConflictResolver:
    settings = get_settings()
    return ConflictResolver(
        store,
        day_boundary_timezone=settings.day_boundary_timezone,
        max_concurrency=settings.conflict_max_concurrency,
    )


def get_event_service(
    store: SQLAlchemyEventStore = Depends(get_event_store),
) -> EventService:
    return EventService(store)


def get_event_type_service(
    store: SQLAlchemyEventStore = Depends(get_event_store),
) -> EventTypeService:
    return EventTypeService(store)
