"""Night state machine and tick orchestration."""

import logging
import random
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, List, Optional, Tuple, TYPE_CHECKING

from .event_bus import EventBus, Event, EventType
from .state import (
    Phase,
    Side,
    SimulationSnapshot,
    SimulationState,
    door_flag,
    light_flag,
)
from .clock import Driver, NightClock, SimulationClock, TickRequest
from .power import PowerSystem
from config.settings import Settings, get_settings

if TYPE_CHECKING:
    from nightwatch.algorithms.movement import AgentController
    from nightwatch.algorithms.threat import ThreatEvaluator
    from nightwatch.entities.location import LocationGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraFeed:
    """What the selected camera currently shows."""
    location: str
    agents: Tuple[str, ...]


@dataclass
class Simulation:
    """
    Owns the simulation state and applies every transition to it.

    Drivers and player intents never touch the state directly: ticks go
    through `apply`, intents through the public methods below. Both are
    serialized by one re-entrant lock. Each request carries the
    generation it was issued in; leaving Running bumps the generation so
    ticks from a finished night are dropped.
    """

    settings: Settings = field(default_factory=get_settings)
    graph: Optional["LocationGraph"] = None
    rng: random.Random = field(default_factory=random.Random)
    event_bus: EventBus = field(default_factory=EventBus)

    state: SimulationState = field(init=False)
    clock: SimulationClock = field(init=False)
    night_clock: NightClock = field(init=False)
    power: PowerSystem = field(init=False)
    controller: "AgentController" = field(init=False)
    threat: "ThreatEvaluator" = field(init=False)

    dropped_ticks: int = field(default=0, init=False)
    _generation: int = field(default=0, init=False)
    _last_camera: Optional[str] = field(default=None, init=False)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    def __post_init__(self) -> None:
        """Build components from settings and place agents at spawn."""
        from nightwatch.algorithms.movement import AgentController
        from nightwatch.algorithms.threat import ThreatEvaluator
        from nightwatch.entities.agent import AgentKind, build_roster
        from nightwatch.entities.location import LocationGraph

        if self.graph is None:
            self.graph = LocationGraph.create_default()

        night = self.settings.night
        if night.first_night < 1:
            raise ValueError(f"First night must be at least 1, got {night.first_night}")
        agents = build_roster(self.settings.agents.roster)
        for agent in agents:
            if not self.graph.has_location(agent.spawn):
                raise ValueError(f"Agent {agent.name}: unknown spawn {agent.spawn!r}")
            if agent.kind is AgentKind.SCRIPTED and not self.graph.route_for(agent.kind):
                raise ValueError(f"Agent {agent.name}: building has no scripted route")

        self.state = SimulationState(
            agents=agents, power=night.max_power, night_index=night.first_night
        )
        self.clock = SimulationClock(
            minute_interval_ms=night.minute_interval_ms,
            power_interval_ms=night.power_interval_ms,
            movement_interval_ms=night.movement_interval_ms,
            threat_interval_ms=night.threat_interval_ms,
            max_ticks_per_update=night.max_ticks_per_update,
        )
        self.night_clock = NightClock(
            night_length_minutes=night.night_length_minutes,
            step=night.minute_step,
        )
        power = self.settings.power
        self.power = PowerSystem(
            base_usage=power.base_usage,
            camera=power.camera,
            door=power.door,
            light=power.light,
            max_power=night.max_power,
        )
        agent_settings = self.settings.agents
        self.controller = AgentController(
            graph=self.graph,
            move_cooldown_ms=agent_settings.move_cooldown_ms,
            base_rate=agent_settings.base_rate,
            time_rate=agent_settings.time_rate,
        )
        self.threat = ThreatEvaluator(
            graph=self.graph,
            loss_probability=agent_settings.loss_probability,
        )

    def set_seed(self, seed: int) -> None:
        """Reseed the injected random source."""
        self.rng.seed(seed)
        logger.debug(f"Simulation random seed set to {seed}")

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_snapshot(self) -> SimulationSnapshot:
        """Read-only view for rendering."""
        with self._lock:
            return self.state.snapshot()

    def camera_feed(self) -> CameraFeed | None:
        """Selected camera and the agents in view, None when the camera is off."""
        with self._lock:
            camera = self.state.selected_camera
            if not self.state.subsystems.camera_active or camera is None:
                return None
            return CameraFeed(camera, tuple(self.state.agents_at(camera)))

    def visible_at_door(self, side: Side | str) -> List[str]:
        """Agents lit up at a door, empty when that light is off."""
        side = _parse_side(side)
        with self._lock:
            if side is None or not self.state.subsystems.light_on(side):
                return []
            return self.state.agents_at(self.threat.corner_for(side))

    def current_usage(self) -> int:
        """Power drained per power tick with the current subsystems."""
        with self._lock:
            return self.power.usage(self.state.subsystems)

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def start_night(self) -> bool:
        """Menu -> Running at the current night index."""
        with self._lock:
            if self.state.phase is not Phase.MENU:
                return self._reject("start_night")
            self._enter_running()
            self.event_bus.flush()
            return True

    def advance_to_next_night(self) -> bool:
        """Won -> Running with the next night index."""
        with self._lock:
            if self.state.phase is not Phase.WON:
                return self._reject("advance_to_next_night")
            self.state.night_index += 1
            self._enter_running()
            self.event_bus.flush()
            return True

    def exit_to_menu(self) -> bool:
        """Running/Lost/Won -> Menu, keeping the night index."""
        with self._lock:
            if self.state.phase is Phase.MENU:
                return self._reject("exit_to_menu")
            self._enter_menu()
            self.event_bus.flush()
            return True

    def restart(self) -> bool:
        """Lost/Won/Menu -> Menu at the first night."""
        with self._lock:
            if self.state.phase is Phase.RUNNING:
                return self._reject("restart")
            self.state.night_index = self.settings.night.first_night
            self._enter_menu()
            self.event_bus.flush()
            return True

    def _enter_running(self) -> None:
        self._generation += 1
        self.clock.reset()
        self._last_camera = None
        self.state.reset_night(self.settings.night.max_power, self.clock.now_ms)
        self._set_phase(Phase.RUNNING)
        logger.info(f"Night {self.state.night_index} started")
        self.event_bus.publish(Event(
            type=EventType.NIGHT_STARTED,
            data={"night": self.state.night_index},
            source="simulation",
        ))

    def _enter_menu(self) -> None:
        self._generation += 1
        self.clock.reset()
        self._last_camera = None
        self.state.reset_night(self.settings.night.max_power, self.clock.now_ms)
        self._set_phase(Phase.MENU)
        self.event_bus.publish(Event(
            type=EventType.SIMULATION_RESET,
            data={"night": self.state.night_index},
            source="simulation",
        ))

    def _end_night(self, phase: Phase) -> None:
        """Enter a terminal phase and cancel every driver."""
        self._generation += 1
        self._set_phase(phase)

    def _set_phase(self, phase: Phase) -> None:
        previous = self.state.phase
        self.state.phase = phase
        self.event_bus.publish(Event(
            type=EventType.PHASE_CHANGED,
            data={"from": previous, "to": phase},
            source="simulation",
        ))

    # ------------------------------------------------------------------
    # Player intents
    # ------------------------------------------------------------------

    def toggle_door(self, side: Side | str) -> bool:
        """Open or close a door."""
        side = _parse_side(side)
        if side is None:
            return self._reject("toggle_door")
        return self._toggle(door_flag(side))

    def toggle_light(self, side: Side | str) -> bool:
        """Switch a door light."""
        side = _parse_side(side)
        if side is None:
            return self._reject("toggle_light")
        return self._toggle(light_flag(side))

    def toggle_camera_mode(self) -> bool:
        """Enter or leave the camera view."""
        with self._lock:
            if not self._can_operate():
                return self._reject("toggle_camera_mode")
            self._apply_toggle("camera_active")
            if self.state.subsystems.camera_active:
                self.state.selected_camera = self._last_camera or self._default_camera()
            else:
                self._last_camera = self.state.selected_camera
                self.state.selected_camera = None
            self.event_bus.flush()
            return True

    def select_camera(self, location_id: str) -> bool:
        """Point the camera at a location."""
        with self._lock:
            if (
                not self._can_operate()
                or not self.state.subsystems.camera_active
                or not self.graph.has_location(location_id)
            ):
                return self._reject("select_camera")
            self.state.selected_camera = location_id
            self._last_camera = location_id
            self.event_bus.publish(Event(
                type=EventType.CAMERA_SELECTED,
                data={"location": location_id},
                source="simulation",
            ))
            self.event_bus.flush()
            return True

    def _toggle(self, flag: str) -> bool:
        with self._lock:
            if not self._can_operate():
                return self._reject(f"toggle {flag}")
            self._apply_toggle(flag)
            self.event_bus.flush()
            return True

    def _apply_toggle(self, flag: str) -> None:
        self.state.subsystems = self.state.subsystems.toggled(flag)
        self.event_bus.publish(Event(
            type=EventType.SUBSYSTEM_TOGGLED,
            data={"subsystem": flag, "active": getattr(self.state.subsystems, flag)},
            source="player",
        ))

    def _can_operate(self) -> bool:
        return self.state.phase is Phase.RUNNING and self.state.power > 0

    def _default_camera(self) -> str:
        return next(iter(self.graph.locations))

    def _reject(self, intent: str) -> bool:
        logger.debug(
            f"Rejected {intent} (phase={self.state.phase.value}, power={self.state.power})"
        )
        return False

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def update(self, real_dt: float) -> int:
        """
        Advance real time and apply every due driver tick.

        Returns:
            Number of ticks applied
        """
        with self._lock:
            if self.state.phase is not Phase.RUNNING:
                return 0
            requests = self.clock.update(real_dt, self._generation)
            return sum(1 for request in requests if self.apply(request))

    def apply(self, request: TickRequest) -> bool:
        """Apply one tick request. Stale requests are dropped."""
        with self._lock:
            if request.generation != self._generation or self.state.phase is not Phase.RUNNING:
                self.dropped_ticks += 1
                logger.debug(f"Dropped stale {request.driver.name} tick at {request.at_ms}ms")
                return False

            self.state.now_ms = request.at_ms
            handler = self._handlers[request.driver]
            handler(self)
            self.event_bus.flush()
            return True

    def _on_minute(self) -> None:
        won = self.night_clock.advance(self.state)
        self.event_bus.publish(Event(
            type=EventType.TICK,
            data={"minutes": self.state.elapsed_minutes, "clock": self.state.clock_text},
            source="clock",
        ))
        if won:
            logger.info(f"Night {self.state.night_index} survived")
            self._end_night(Phase.WON)
            self.event_bus.publish(Event(
                type=EventType.NIGHT_WON,
                data={"night": self.state.night_index, "power": self.state.power},
                source="clock",
            ))

    def _on_power(self) -> None:
        if self.power.drain(self.state):
            logger.info(f"Power out at {self.state.clock_text}")
            self.event_bus.publish(Event(
                type=EventType.POWER_DEPLETED,
                data={"minutes": self.state.elapsed_minutes},
                source="power",
            ))

    def _on_movement(self) -> None:
        state = self.state
        moved = []
        for agent in state.agents:
            new_agent = self.controller.try_move(
                agent, state.night_index, state.elapsed_minutes, state.now_ms, self.rng
            )
            if new_agent.is_moving:
                self.event_bus.publish(Event(
                    type=EventType.AGENT_MOVED,
                    data={"agent": agent.name, "from": agent.location, "to": new_agent.location},
                    source="movement",
                ))
            moved.append(new_agent)
        state.agents = moved

    def _on_threat(self) -> None:
        lost, breach = self.threat.check_loss(self.state.agents, self.state.subsystems, self.rng)
        if lost:
            logger.info(f"{breach.agent} got in from the {breach.side.value} at {self.state.clock_text}")
            self._end_night(Phase.LOST)
            self.event_bus.publish(Event(
                type=EventType.THREAT_TRIGGERED,
                data={"agent": breach.agent, "side": breach.side.value},
                source="threat",
                priority=1,
            ))

    _handlers = {
        Driver.MINUTE: _on_minute,
        Driver.POWER: _on_power,
        Driver.MOVEMENT: _on_movement,
        Driver.THREAT: _on_threat,
    }

    # ------------------------------------------------------------------
    # Clock controls and headless stepping
    # ------------------------------------------------------------------

    def pause(self) -> None:
        """Pause the drivers."""
        with self._lock:
            self.clock.pause()

    def resume(self) -> None:
        """Resume the drivers."""
        with self._lock:
            self.clock.resume()

    def toggle_pause(self) -> bool:
        """Toggle pause state."""
        with self._lock:
            return self.clock.toggle_pause()

    def set_speed(self, speed: float) -> None:
        """Set simulation speed."""
        with self._lock:
            self.clock.set_speed(speed)

    def run_until_done(
        self,
        dt: float = 0.1,
        max_seconds: float | None = None,
        on_step: Callable[["Simulation"], None] | None = None,
    ) -> Phase:
        """
        Step the night headlessly until it is won or lost.

        Args:
            dt: Real seconds per step
            max_seconds: Stop early after this much stepped time
            on_step: Called after every step, e.g. to issue intents

        Returns:
            Phase when stepping stopped
        """
        if self.state.phase is Phase.MENU:
            self.start_night()

        stepped = 0.0
        while self.state.phase is Phase.RUNNING:
            if max_seconds is not None and stepped >= max_seconds:
                break
            if self.clock.is_paused or self.clock.speed <= 0:
                break
            self.update(dt)
            stepped += dt
            if on_step is not None and self.state.phase is Phase.RUNNING:
                on_step(self)
        return self.state.phase


def _parse_side(side: Side | str) -> Side | None:
    if isinstance(side, Side):
        return side
    try:
        return Side(str(side).lower())
    except ValueError:
        return None
