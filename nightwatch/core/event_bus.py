"""Queued notifications from the simulation to presentation and tooling."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Deque, Dict, List
from threading import Lock
from collections import defaultdict, deque
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Notifications emitted by the simulation."""

    # Lifecycle
    NIGHT_STARTED = auto()
    PHASE_CHANGED = auto()
    NIGHT_WON = auto()
    SIMULATION_RESET = auto()
    TICK = auto()                 # Every in-game minute

    # Player intents
    SUBSYSTEM_TOGGLED = auto()
    CAMERA_SELECTED = auto()

    # Simulation outcomes
    POWER_DEPLETED = auto()
    AGENT_MOVED = auto()
    THREAT_TRIGGERED = auto()     # Jumpscare


@dataclass
class Event:
    """One notification; `data` carries the event-specific payload."""

    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    source: str = ""
    priority: int = 0

    def __lt__(self, other: "Event") -> bool:
        # Sorting puts higher priorities first
        return self.priority > other.priority


Listener = Callable[[Event], None]


class EventBus:
    """
    Collects events published during a transition and delivers them on
    `flush`, after the simulation lock work is done.

    Listeners run outside the bus lock. A listener that raises is logged
    and the remaining listeners still run.
    """

    def __init__(self, history_limit: int = 1000) -> None:
        self._listeners: Dict[EventType, List[Listener]] = defaultdict(list)
        self._queue: List[Event] = []
        self._history: Deque[Event] = deque(maxlen=history_limit)
        self._lock = Lock()

    def subscribe(self, event_type: EventType, listener: Listener) -> None:
        """Register a listener; registering twice has no effect."""
        with self._lock:
            listeners = self._listeners[event_type]
            if listener not in listeners:
                listeners.append(listener)

    def publish(self, event: Event) -> None:
        """Queue an event until the next flush."""
        with self._lock:
            self._queue.append(event)

    def flush(self) -> int:
        """Deliver queued events, highest priority first. Returns how many."""
        with self._lock:
            # Stable sort keeps publish order within a priority
            batch = sorted(self._queue)
            self._queue = []

        for event in batch:
            self._deliver(event)
        return len(batch)

    def _deliver(self, event: Event) -> None:
        with self._lock:
            self._history.append(event)
            listeners = list(self._listeners[event.type])

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener for {event.type.name} failed")

    def get_history(
        self,
        event_type: EventType | None = None,
        limit: int = 100
    ) -> List[Event]:
        """Most recent delivered events, optionally of one type."""
        with self._lock:
            events = [e for e in self._history if event_type is None or e.type is event_type]
        return events[-limit:]
