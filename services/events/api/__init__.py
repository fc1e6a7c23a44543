from services.events.api.conflicts import router as conflicts_router  # noqa: F401
from services.events.api.event_types import router as event_types_router  # noqa: F401
from services.events.api.events import router as events_router  # noqa: F401
from services.events.api.invitations import router as invitations_router  # noqa: F401
from services.events.api.participants import router as participants_router  # noqa: F401
