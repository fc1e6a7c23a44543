from typing import List

from fastapi import APIRouter, Depends

from services.events.api.auth import (
    require_current_user,
    verify_service_authentication,
)
from services.events.api.dependencies import get_event_service
from services.events.schemas import (
    EventCreate,
    EventResponse,
    EventUpdate,
    SuccessResponse,
)
from services.events.services.event_service import EventService

router = APIRouter()


@router.get("", response_model=List[EventResponse])
async def list_events(
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    """Events the user organizes or has accepted, recent and upcoming."""
    return await service.list_user_events(user_id)


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventCreate,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    return await service.create_event(user_id, data)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    return await service.get_event(event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    """Organizer-only partial update; fields absent from the body are kept."""
    return await service.update_event(user_id, event_id, data)


@router.delete(
    "/{event_id}", response_model=SuccessResponse, response_model_exclude_none=True
)
async def delete_event(
    event_id: str,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> SuccessResponse:
    return await service.delete_event(user_id, event_id)
