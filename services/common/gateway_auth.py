"""
User identity resolution from API gateway headers.

The gateway validates the end user's session and forwards the resulting
identity as ``X-User-Id``. Services never see session tokens themselves.
"""

from typing import Optional

from fastapi import Request

from services.common.http_errors import AuthError
from services.common.logging_config import get_logger

logger = get_logger(__name__)

USER_ID_HEADER = "X-User-Id"


async def get_current_user_from_gateway_headers(request: Request) -> Optional[str]:
    """
    Get current user ID from gateway headers.

    Returns:
        User ID from headers, or None if the caller is unauthenticated
    """
    user_id = request.headers.get(USER_ID_HEADER, "").strip()
    if not user_id:
        return None

    logger.debug("User authenticated via gateway headers", user_id=user_id)
    return user_id


async def require_current_user(request: Request) -> str:
    """FastAPI dependency: the authenticated user ID, or a 401 AuthError."""
    user_id = await get_current_user_from_gateway_headers(request)
    if not user_id:
        logger.warning(
            "Unauthenticated request",
            path=request.url.path,
            method=request.method,
        )
        raise AuthError(message="Not authenticated")
    return user_id
