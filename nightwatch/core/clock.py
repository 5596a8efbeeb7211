"""In-game clock, driver cadences and speed control."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List
import logging

from config import constants as C
from .state import Phase, SimulationState

logger = logging.getLogger(__name__)


def format_clock(elapsed_minutes: int) -> str:
    """Format minutes after midnight as a 12-hour clock, e.g. '1:05 AM'."""
    hours24 = (elapsed_minutes // 60) % 24
    minutes = elapsed_minutes % 60
    suffix = "AM" if hours24 < 12 else "PM"
    hours12 = hours24 % 12 or 12
    return f"{hours12}:{minutes:02d} {suffix}"


@dataclass
class NightClock:
    """Advances in-game minutes and detects the end of the night."""

    night_length_minutes: int = C.NIGHT_LENGTH_MINUTES
    step: int = C.MINUTE_STEP

    def advance(self, state: SimulationState) -> bool:
        """
        Advance one step. Returns True when this step completed the night.

        No-op unless the state is running.
        """
        if state.phase is not Phase.RUNNING:
            return False

        elapsed = state.elapsed_minutes + self.step
        if elapsed >= self.night_length_minutes:
            state.elapsed_minutes = self.night_length_minutes
            state.clock_text = format_clock(self.night_length_minutes)
            state.phase = Phase.WON
            return True

        state.elapsed_minutes = elapsed
        state.clock_text = format_clock(elapsed)
        return False


class Driver(Enum):
    """Periodic drivers, in per-timestamp processing order."""
    MINUTE = 0
    POWER = 1
    MOVEMENT = 2
    THREAT = 3


@dataclass(frozen=True)
class TickRequest:
    """A request from a driver to apply one tick."""
    driver: Driver
    generation: int
    at_ms: int


@dataclass
class CadenceTimer:
    """Fires at a fixed interval of simulated time."""

    interval_ms: int
    _next_fire_ms: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.interval_ms <= 0:
            raise ValueError(f"Cadence interval must be positive, got {self.interval_ms}")
        self._next_fire_ms = float(self.interval_ms)

    def due(self, now_ms: float, max_ticks: int) -> List[int]:
        """Return fire timestamps up to `now_ms`, at most `max_ticks` of them."""
        fired: List[int] = []
        while self._next_fire_ms <= now_ms + 1e-6:
            if len(fired) >= max_ticks:
                skipped = int((now_ms - self._next_fire_ms) // self.interval_ms) + 1
                self._next_fire_ms += skipped * self.interval_ms
                logger.debug(f"Cadence {self.interval_ms}ms dropped {skipped} ticks")
                break
            fired.append(int(round(self._next_fire_ms)))
            self._next_fire_ms += self.interval_ms
        return fired

    def reset(self) -> None:
        self._next_fire_ms = float(self.interval_ms)


class SimulationSpeed(Enum):
    """Preset simulation speeds."""
    PAUSED = 0.0
    SLOW = 0.5
    NORMAL = 1.0
    FAST = 2.0
    VERY_FAST = 5.0
    MAX = 10.0


@dataclass
class SimulationClock:
    """
    Turns real elapsed time into ordered driver tick requests.

    Simulated time is kept separate from real time so the night can be
    sped up, paused or stepped headlessly.
    """

    minute_interval_ms: int = C.MINUTE_INTERVAL_MS
    power_interval_ms: int = C.POWER_INTERVAL_MS
    movement_interval_ms: int = C.MOVEMENT_INTERVAL_MS
    threat_interval_ms: int = C.THREAT_INTERVAL_MS
    max_ticks_per_update: int = C.MAX_TICKS_PER_UPDATE
    speed: float = 1.0

    _now_ms: float = field(default=0.0, init=False)
    _paused: bool = field(default=False, init=False)
    _timers: Dict[Driver, CadenceTimer] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        self._timers = {
            Driver.MINUTE: CadenceTimer(self.minute_interval_ms),
            Driver.POWER: CadenceTimer(self.power_interval_ms),
            Driver.MOVEMENT: CadenceTimer(self.movement_interval_ms),
            Driver.THREAT: CadenceTimer(self.threat_interval_ms),
        }

    @property
    def now_ms(self) -> int:
        """Simulated milliseconds since the last reset."""
        return int(self._now_ms)

    @property
    def is_paused(self) -> bool:
        return self._paused

    def update(self, real_dt: float, generation: int) -> List[TickRequest]:
        """
        Advance simulated time and collect due tick requests.

        Args:
            real_dt: Real elapsed time since last update in seconds
            generation: Orchestrator generation to tag requests with

        Returns:
            Requests ordered by timestamp, then by driver order
        """
        if self._paused or self.speed <= 0 or real_dt <= 0:
            return []

        self._now_ms += real_dt * 1000.0 * self.speed

        requests = [
            TickRequest(driver, generation, at_ms)
            for driver, timer in self._timers.items()
            for at_ms in timer.due(self._now_ms, self.max_ticks_per_update)
        ]
        requests.sort(key=lambda r: (r.at_ms, r.driver.value))
        return requests

    def pause(self) -> None:
        """Pause the clock."""
        self._paused = True

    def resume(self) -> None:
        """Resume the clock."""
        self._paused = False

    def toggle_pause(self) -> bool:
        """Toggle pause state. Returns new pause state."""
        if self._paused:
            self.resume()
        else:
            self.pause()
        return self._paused

    def set_speed(self, speed: float | SimulationSpeed) -> None:
        """Set simulation speed multiplier."""
        if isinstance(speed, SimulationSpeed):
            self.speed = speed.value
        else:
            self.speed = max(0.0, min(speed, SimulationSpeed.MAX.value))

    def reset(self) -> None:
        """Reset simulated time and all cadences."""
        self._now_ms = 0.0
        self._paused = False
        for timer in self._timers.values():
            timer.reset()
