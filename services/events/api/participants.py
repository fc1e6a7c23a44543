from typing import List, Union

from fastapi import APIRouter, Depends

from services.events.api.auth import (
    require_current_user,
    verify_service_authentication,
)
from services.events.api.dependencies import get_event_service
from services.events.schemas import (
    InvitationAction,
    InviteRequest,
    ParticipantResponse,
    SuccessResponse,
)
from services.events.services.event_service import EventService

router = APIRouter()


@router.get("/{event_id}/participants", response_model=List[ParticipantResponse])
async def list_participants(
    event_id: str,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> List[ParticipantResponse]:
    return await service.list_participants(event_id)


@router.post(
    "/{event_id}/participants",
    response_model=List[ParticipantResponse],
    status_code=201,
)
async def invite_participants(
    event_id: str,
    data: InviteRequest,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> List[ParticipantResponse]:
    """Invite users to an event. Existing participants are left untouched."""
    return await service.invite_participants(user_id, event_id, data.user_ids)


@router.put(
    "/{event_id}/participants/{participant_user_id}",
    response_model=Union[ParticipantResponse, SuccessResponse],
    response_model_exclude_none=True,
)
async def respond_to_invitation(
    event_id: str,
    participant_user_id: str,
    data: InvitationAction,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> Union[ParticipantResponse, SuccessResponse]:
    """Accept (status becomes accepted) or decline (record is deleted)."""
    return await service.respond_to_invitation(
        user_id, event_id, participant_user_id, data.action
    )


@router.delete(
    "/{event_id}/participants/{participant_user_id}",
    response_model=SuccessResponse,
    response_model_exclude_none=True,
)
async def remove_participant(
    event_id: str,
    participant_user_id: str,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> SuccessResponse:
    return await service.remove_participant(user_id, event_id, participant_user_id)
