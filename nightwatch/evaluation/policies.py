"""Scripted defense policies for headless nights."""

from abc import ABC, abstractmethod
from typing import Dict, Type, TYPE_CHECKING

from nightwatch.core.state import Side

if TYPE_CHECKING:
    from nightwatch.core.simulation import Simulation


class DefensePolicy(ABC):
    """Issues player intents after every headless step."""

    name: str = ""

    @abstractmethod
    def act(self, simulation: "Simulation") -> None:
        """Inspect the simulation and issue intents."""

    def __call__(self, simulation: "Simulation") -> None:
        self.act(simulation)


def set_door(simulation: "Simulation", side: Side, closed: bool) -> None:
    """Toggle a door only if it is not already in the wanted position."""
    if simulation.get_snapshot().subsystems.door_closed(side) != closed:
        simulation.toggle_door(side)


class PassivePolicy(DefensePolicy):
    """Never touches anything."""

    name = "passive"

    def act(self, simulation: "Simulation") -> None:
        pass


class ReactivePolicy(DefensePolicy):
    """Closes a door exactly while an agent stands at its corner."""

    name = "reactive"

    def act(self, simulation: "Simulation") -> None:
        snapshot = simulation.get_snapshot()
        occupied = {a.location for a in snapshot.agents}
        for side in (Side.LEFT, Side.RIGHT):
            corner = simulation.threat.corner_for(side)
            set_door(simulation, side, corner in occupied)


class LightsPolicy(DefensePolicy):
    """Keeps both lights on and closes a door when the light shows someone."""

    name = "lights"

    def act(self, simulation: "Simulation") -> None:
        for side in (Side.LEFT, Side.RIGHT):
            if not simulation.get_snapshot().subsystems.light_on(side):
                simulation.toggle_light(side)
            set_door(simulation, side, bool(simulation.visible_at_door(side)))


POLICIES: Dict[str, Type[DefensePolicy]] = {
    PassivePolicy.name: PassivePolicy,
    ReactivePolicy.name: ReactivePolicy,
    LightsPolicy.name: LightsPolicy,
}


def get_policy(name: str) -> DefensePolicy:
    """Instantiate a policy by name."""
    try:
        return POLICIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown policy {name!r}, expected one of {sorted(POLICIES)}"
        ) from None
