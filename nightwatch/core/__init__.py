"""Core simulation components."""

from .event_bus import EventBus, EventType, Event
from .state import Phase, Side, Subsystems, SimulationState, SimulationSnapshot
from .clock import NightClock, SimulationClock, TickRequest, Driver, format_clock
from .power import PowerSystem
from .simulation import Simulation, CameraFeed

__all__ = [
    "EventBus",
    "EventType",
    "Event",
    "Phase",
    "Side",
    "Subsystems",
    "SimulationState",
    "SimulationSnapshot",
    "NightClock",
    "SimulationClock",
    "TickRequest",
    "Driver",
    "format_clock",
    "PowerSystem",
    "Simulation",
    "CameraFeed",
]
