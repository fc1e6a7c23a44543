from typing import List

from fastapi import APIRouter, Depends

from services.events.api.auth import (
    require_current_user,
    verify_service_authentication,
)
from services.events.api.dependencies import get_event_type_service
from services.events.schemas import (
    EventTypeCreate,
    EventTypeResponse,
    EventTypeUpdate,
    SuccessResponse,
)
from services.events.services.event_type_service import EventTypeService

router = APIRouter()


@router.get("", response_model=List[EventTypeResponse])
async def list_event_types(
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventTypeService = Depends(get_event_type_service),
) -> List[EventTypeResponse]:
    return await service.list_event_types(user_id)


@router.post("", response_model=EventTypeResponse, status_code=201)
async def create_event_type(
    data: EventTypeCreate,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventTypeService = Depends(get_event_type_service),
) -> EventTypeResponse:
    return await service.create_event_type(user_id, data)


@router.put("/{event_type_id}", response_model=EventTypeResponse)
async def update_event_type(
    event_type_id: str,
    data: EventTypeUpdate,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventTypeService = Depends(get_event_type_service),
) -> EventTypeResponse:
    return await service.update_event_type(user_id, event_type_id, data)


@router.delete(
    "/{event_type_id}",
    response_model=SuccessResponse,
    response_model_exclude_none=True,
)
async def delete_event_type(
    event_type_id: str,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventTypeService = Depends(get_event_type_service),
) -> SuccessResponse:
    """Owner-only; events of this type are kept with no type."""
    return await service.delete_event_type(user_id, event_type_id)
