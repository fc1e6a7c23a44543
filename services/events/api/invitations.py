from typing import List, Optional

from fastapi import APIRouter, Depends

from services.events.api.auth import (
    get_current_user_from_gateway_headers,
    require_current_user,
    verify_service_authentication,
)
from services.events.api.dependencies import get_event_service
from services.events.schemas import InvitationCountResponse, InvitationResponse
from services.events.services.event_service import EventService

router = APIRouter()


@router.get("/invitations", response_model=List[InvitationResponse])
async def list_invitations(
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    service: EventService = Depends(get_event_service),
) -> List[InvitationResponse]:
    """Pending event invitations of the current user, newest event first."""
    return await service.list_pending_invitations(user_id)


@router.get("/invitations/count", response_model=InvitationCountResponse)
async def count_invitations(
    service_name: str = Depends(verify_service_authentication),
    user_id: Optional[str] = Depends(get_current_user_from_gateway_headers),
    service: EventService = Depends(get_event_service),
) -> InvitationCountResponse:
    # Badge endpoint: anonymous callers get zero rather than 401
    if not user_id:
        return InvitationCountResponse(count=0)
    return await service.count_pending_invitations(user_id)
