"""
Shared API key authentication helpers for the platform services.

Each service defines its own API_KEY_CONFIGS and get_settings function and
passes them to these helpers.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from fastapi import Request

from services.common.http_errors import AuthError, ErrorCode
from services.common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class APIKeyConfig:
    client: str
    service: str
    settings_key: str  # attribute name on the service settings holding the key


def build_api_key_mapping(
    api_key_configs: Dict[str, APIKeyConfig], get_settings: Callable[[], Any]
) -> Dict[str, APIKeyConfig]:
    """
    Build a mapping from actual API key values to their configurations.
    """
    settings = get_settings()
    api_key_mapping = {}
    for config in api_key_configs.values():
        actual_key_value = getattr(settings, config.settings_key, None)
        if actual_key_value:
            api_key_mapping[actual_key_value] = config
        else:
            logger.warning(f"API key not found in settings: {config.settings_key}")
    return api_key_mapping


def get_api_key_from_request(request: Request) -> Optional[str]:
    """
    Extract API key from request headers (X-API-Key, then Authorization: Bearer).
    """
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return api_key
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:]
    return None


def make_verify_service_authentication(
    api_key_configs: Dict[str, APIKeyConfig], get_settings: Callable[[], Any]
) -> Callable[[Request], str]:
    """Build a FastAPI dependency that authenticates the calling client by API key."""

    def verify_service_authentication(request: Request) -> str:
        api_key = get_api_key_from_request(request)
        if not api_key:
            logger.warning("Missing API key in request headers")
            raise AuthError(message="API key required", status_code=401)

        key_config = build_api_key_mapping(api_key_configs, get_settings).get(api_key)
        if key_config is None:
            logger.warning(f"Invalid API key: {api_key[:8]}...")
            raise AuthError(
                message="Invalid API key",
                code=ErrorCode.TOKEN_INVALID,
                status_code=403,
            )

        logger.debug(
            f"Service authenticated: {key_config.service} (client: {key_config.client})"
        )
        return key_config.service

    return verify_service_authentication
