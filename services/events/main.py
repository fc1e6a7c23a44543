from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from services.common.http_errors import register_exception_handlers
from services.common.logging_config import (
    create_request_logging_middleware,
    get_logger,
    log_service_shutdown,
    log_service_startup,
    setup_service_logging,
)
from services.events.api import (
    conflicts_router,
    event_types_router,
    events_router,
    invitations_router,
    participants_router,
)
from services.events.database import close_db
from services.events.services.day_window import load_timezone
from services.events.settings import get_settings

# Set up centralized logging - will be initialized in lifespan
logger = get_logger(__name__)

API_PREFIX = "/api/v1/events"
EVENT_TYPES_PREFIX = "/api/v1/event-types"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup event logic
    settings = get_settings()

    setup_service_logging(
        service_name="events",
        log_level=settings.log_level,
        log_format=settings.log_format,
    )

    # A bad zone name stops startup
    try:
        load_timezone(settings.day_boundary_timezone)
    except ValueError:
        logger.error(
            "Invalid day boundary timezone",
            day_boundary_timezone=settings.day_boundary_timezone,
        )
        raise

    log_service_startup(
        "events",
        version="0.1.0",
        day_boundary_timezone=settings.day_boundary_timezone or "local",
        conflict_max_concurrency=settings.conflict_max_concurrency,
    )
    yield
    # Shutdown event logic
    await close_db()
    log_service_shutdown("events")


def include_routers(app: FastAPI) -> None:
    """Mount the events routers; fixed paths go before ``/{event_id}``."""
    app.include_router(conflicts_router, prefix=API_PREFIX, tags=["conflicts"])
    app.include_router(invitations_router, prefix=API_PREFIX, tags=["invitations"])
    app.include_router(participants_router, prefix=API_PREFIX, tags=["participants"])
    app.include_router(events_router, prefix=API_PREFIX, tags=["events"])
    app.include_router(
        event_types_router, prefix=EVENT_TYPES_PREFIX, tags=["event-types"]
    )


app = FastAPI(
    title="Events Service",
    version="0.1.0",
    description="Event planning, invitations and scheduling conflict checks.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware
app.middleware("http")(create_request_logging_middleware())

# Register standardized exception handlers
register_exception_handlers(app)

include_routers(app)


@app.get("/")
def root() -> dict:
    logger.info("Root endpoint accessed")
    return {"message": "Welcome to the Events Service"}


@app.get("/health")
def health() -> dict:
    logger.info("Health check endpoint accessed")
    return {"status": "ok"}
