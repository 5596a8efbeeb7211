"""Power drain for the office subsystems."""

from dataclasses import dataclass
import logging

from config import constants as C
from .state import Phase, SimulationState, Subsystems

logger = logging.getLogger(__name__)


@dataclass
class PowerSystem:
    """
    Drains power by the weight of every active subsystem.

    Doors cost twice as much as lights or the camera. Reaching zero
    forces every subsystem off for the rest of the night.
    """

    base_usage: int = C.BASE_POWER_USAGE
    camera: int = C.CAMERA_USAGE
    door: int = C.DOOR_USAGE
    light: int = C.LIGHT_USAGE
    max_power: int = C.MAX_POWER

    def usage(self, subsystems: Subsystems) -> int:
        """Power consumed per drain tick."""
        total = self.base_usage
        if subsystems.camera_active:
            total += self.camera
        if subsystems.left_door_closed:
            total += self.door
        if subsystems.right_door_closed:
            total += self.door
        if subsystems.left_light_on:
            total += self.light
        if subsystems.right_light_on:
            total += self.light
        return total

    def drain(self, state: SimulationState) -> bool:
        """
        Apply one drain tick. Returns True when this tick caused the blackout.

        No-op unless running or once power is already out.
        """
        if state.phase is not Phase.RUNNING or state.power <= 0:
            return False

        usage = self.usage(state.subsystems)
        state.power = max(0, min(self.max_power, state.power - usage))
        state.record_power()
        logger.debug(f"Drained {usage} power, {state.power} left")

        if state.power == 0:
            state.subsystems = Subsystems()
            state.selected_camera = None
            return True
        return False
