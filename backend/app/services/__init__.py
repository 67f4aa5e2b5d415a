# Business Services
from app.services.guest_service import GuestService
from app.services.event_bus import EventBus, Event, event_bus

__all__ = ['GuestService', 'EventBus', 'Event', 'event_bus']
