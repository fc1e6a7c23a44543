from services.events.models.base import Base as Base
from services.events.models.event import Event as Event
from services.events.models.event import EventParticipant as EventParticipant
from services.events.models.event import EventVisibility as EventVisibility
from services.events.models.event import ParticipantStatus as ParticipantStatus
from services.events.models.event_type import EventType as EventType
