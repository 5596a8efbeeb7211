"""Simulation state container."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import List, Tuple, TYPE_CHECKING
import numpy as np

from config import constants as C

if TYPE_CHECKING:
    from nightwatch.entities.agent import Agent


class Phase(Enum):
    """Lifecycle phase of the simulation."""
    MENU = "menu"
    RUNNING = "running"
    LOST = "lost"
    WON = "won"


class Side(Enum):
    """Office side for doors and lights."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Subsystems:
    """Player-toggleable power consumers."""

    camera_active: bool = False
    left_door_closed: bool = False
    right_door_closed: bool = False
    left_light_on: bool = False
    right_light_on: bool = False

    def door_closed(self, side: Side) -> bool:
        return self.left_door_closed if side is Side.LEFT else self.right_door_closed

    def light_on(self, side: Side) -> bool:
        return self.left_light_on if side is Side.LEFT else self.right_light_on

    def toggled(self, flag: str) -> "Subsystems":
        """Return a copy with one flag inverted."""
        return replace(self, **{flag: not getattr(self, flag)})

    def any_active(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


def door_flag(side: Side) -> str:
    return f"{side.value}_door_closed"


def light_flag(side: Side) -> str:
    return f"{side.value}_light_on"


@dataclass(frozen=True)
class AgentSnapshot:
    """Read-only view of one agent."""
    name: str
    kind: str
    location: str
    aggressiveness: float
    last_move_ms: int
    is_moving: bool


@dataclass(frozen=True)
class SimulationSnapshot:
    """Immutable view of the simulation handed to presentation."""

    phase: Phase
    night_index: int
    elapsed_minutes: int
    clock_text: str
    power: int
    subsystems: Subsystems
    selected_camera: str | None
    agents: Tuple[AgentSnapshot, ...]
    now_ms: int

    def agent(self, name: str) -> AgentSnapshot | None:
        for a in self.agents:
            if a.name == name:
                return a
        return None


@dataclass
class SimulationState:
    """
    Central state container for the simulation.

    Owned by the orchestrator; everything else receives snapshots.
    """

    phase: Phase = Phase.MENU
    night_index: int = 1
    elapsed_minutes: int = 0
    clock_text: str = "12:00 AM"
    power: int = C.MAX_POWER
    subsystems: Subsystems = field(default_factory=Subsystems)
    selected_camera: str | None = None
    agents: List["Agent"] = field(default_factory=list)

    # Simulated milliseconds since the night started
    now_ms: int = 0

    power_history: List[int] = field(default_factory=list)
    power_history_limit: int = C.POWER_HISTORY_LIMIT

    def agents_at(self, location_id: str) -> List[str]:
        """Names of agents at a location."""
        return [a.name for a in self.agents if a.location == location_id]

    def record_power(self) -> None:
        """Append current power to the history."""
        self.power_history.append(self.power)
        if len(self.power_history) > self.power_history_limit:
            self.power_history = self.power_history[-self.power_history_limit:]

    def get_power_array(self, limit: int = 300) -> np.ndarray:
        """Get array of historical power values for graphing."""
        return np.array(self.power_history[-limit:], dtype=int)

    def reset_night(self, max_power: int, spawn_ms: int = 0) -> None:
        """Reset all per-night state and pin agents to their spawns."""
        self.elapsed_minutes = 0
        self.clock_text = "12:00 AM"
        self.power = max_power
        self.subsystems = Subsystems()
        self.selected_camera = None
        self.now_ms = spawn_ms
        self.agents = [a.respawn(spawn_ms) for a in self.agents]
        self.power_history.clear()

    def snapshot(self) -> SimulationSnapshot:
        """Build an immutable snapshot of the current state."""
        return SimulationSnapshot(
            phase=self.phase,
            night_index=self.night_index,
            elapsed_minutes=self.elapsed_minutes,
            clock_text=self.clock_text,
            power=self.power,
            subsystems=self.subsystems,
            selected_camera=self.selected_camera,
            agents=tuple(
                AgentSnapshot(
                    name=a.name,
                    kind=a.kind.value,
                    location=a.location,
                    aggressiveness=a.aggressiveness,
                    last_move_ms=a.last_move_ms,
                    is_moving=a.is_moving,
                )
                for a in self.agents
            ),
            now_ms=self.now_ms,
        )
