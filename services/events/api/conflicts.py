"""
Scheduling conflict check for a set of users on one day.
"""

from typing import Any

import pydantic
from fastapi import APIRouter, Depends, Request

from services.common.http_errors import ErrorCode, ServiceError, ValidationError
from services.common.logging_config import get_logger
from services.events.api.auth import (
    require_current_user,
    verify_service_authentication,
)
from services.events.api.dependencies import get_conflict_resolver
from services.events.schemas import (
    ConflictCheckRequest,
    ConflictCheckResponse,
    ConflictEventSummary,
)
from services.events.services.conflict_resolver import ConflictResolver

logger = get_logger(__name__)

router = APIRouter()


async def _read_conflict_request(request: Request) -> ConflictCheckRequest:
    # Parsed by hand so authentication is always checked before the payload
    try:
        payload: Any = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")

    if payload is None:
        return ConflictCheckRequest()
    try:
        return ConflictCheckRequest.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid conflict check request",
            details={"errors": e.errors(include_url=False, include_context=False)},
        )


@router.post("/conflicts", response_model=ConflictCheckResponse)
async def check_conflicts(
    request: Request,
    service_name: str = Depends(verify_service_authentication),
    user_id: str = Depends(require_current_user),
    resolver: ConflictResolver = Depends(get_conflict_resolver),
) -> ConflictCheckResponse:
    """
    Return, for each requested user, the events they are committed to on ``date``.

    Users with nothing scheduled map to an empty list. An empty ``userIds``
    or missing ``date`` yields ``{"conflicts": {}}``.
    """
    body = await _read_conflict_request(request)
    if not body.user_ids or not body.date:
        return ConflictCheckResponse(conflicts={})

    try:
        conflicts = await resolver.resolve_conflicts(body.user_ids, body.date)
    except Exception as e:
        logger.error(
            "Failed to check event conflicts",
            requested_by=user_id,
            users=len(body.user_ids),
            date=body.date,
            error=str(e),
            exc_info=True,
        )
        raise ServiceError(
            "Failed to check event conflicts",
            code=ErrorCode.DATABASE_ERROR,
            status_code=500,
        )

    logger.info(
        "Checked event conflicts",
        requested_by=user_id,
        users=len(conflicts),
        conflicting_events=sum(len(events) for events in conflicts.values()),
    )
    return ConflictCheckResponse(
        conflicts={
            uid: [
                ConflictEventSummary(
                    id=event.id, title=event.title, date=event.scheduled_time
                )
                for event in events
            ]
            for uid, events in conflicts.items()
        }
    )
