"""Breach detection and the loss roll."""

from dataclasses import dataclass
from typing import Iterable, List, Tuple
import random

from config import constants as C
from nightwatch.core.state import Side, Subsystems
from nightwatch.entities.agent import Agent
from nightwatch.entities.location import LocationGraph


@dataclass(frozen=True)
class Breach:
    """An agent standing at a corner whose door is open."""
    agent: str
    side: Side


@dataclass
class ThreatEvaluator:
    """
    Checks whether an agent gets into the office.

    A breach does not kill outright: every check while breached rolls
    against `loss_probability` again.
    """

    graph: LocationGraph
    loss_probability: float = C.LOSS_PROBABILITY

    def corner_for(self, side: Side) -> str:
        return self.graph.west_corner if side is Side.LEFT else self.graph.east_corner

    def breaches(self, agents: Iterable[Agent], doors: Subsystems) -> List[Breach]:
        """All current breaches, left side first."""
        agents = list(agents)
        found = []
        for side in (Side.LEFT, Side.RIGHT):
            if doors.door_closed(side):
                continue
            corner = self.corner_for(side)
            found.extend(Breach(a.name, side) for a in agents if a.location == corner)
        return found

    def check_loss(
        self,
        agents: Iterable[Agent],
        doors: Subsystems,
        rng: random.Random,
    ) -> Tuple[bool, Breach | None]:
        """
        Roll for a loss. Returns (lost, breach that caused it).

        Draws from `rng` only when at least one breach exists.
        """
        breaches = self.breaches(agents, doors)
        if not breaches:
            return False, None
        if rng.random() < self.loss_probability:
            return True, breaches[0]
        return False, None
