"""
Authentication for the Events Service.

Callers present the frontend API key; the end user's identity arrives from
the gateway in ``X-User-Id``.
"""

from typing import Dict

from services.common.api_key_auth import (
    APIKeyConfig,
    make_verify_service_authentication,
)
from services.common.gateway_auth import (  # noqa: F401
    get_current_user_from_gateway_headers,
    require_current_user,
)
from services.events.settings import get_settings

# API Key configurations mapped by settings key names
API_KEY_CONFIGS: Dict[str, APIKeyConfig] = {
    "api_frontend_events_key": APIKeyConfig(
        client="frontend",
        service="events-service-access",
        settings_key="api_frontend_events_key",
    ),
}

# FastAPI dependencies
verify_service_authentication = make_verify_service_authentication(
    API_KEY_CONFIGS, get_settings
)
