"""Stochastic agent movement."""

from dataclasses import dataclass, replace
from typing import Callable, Dict
import logging
import random

from config import constants as C
from nightwatch.entities.agent import Agent, AgentKind
from nightwatch.entities.location import LocationGraph

logger = logging.getLogger(__name__)


DestinationPolicy = Callable[[Agent, LocationGraph, random.Random], str]


def _scripted_destination(agent: Agent, graph: LocationGraph, rng: random.Random) -> str:
    # Uniform over the fixed route, current stop included.
    return rng.choice(list(graph.route_for(agent.kind)))


def _roaming_destination(agent: Agent, graph: LocationGraph, rng: random.Random) -> str:
    candidates = sorted(graph.reachable_from(agent.location, agent))
    if not candidates:
        return agent.location
    return rng.choice(candidates)


DESTINATION_POLICIES: Dict[AgentKind, DestinationPolicy] = {
    AgentKind.SCRIPTED: _scripted_destination,
    AgentKind.ROAMER: _roaming_destination,
}


def choose_destination(agent: Agent, graph: LocationGraph, rng: random.Random) -> str:
    """Pick the next location for an agent according to its kind."""
    return DESTINATION_POLICIES[agent.kind](agent, graph, rng)


@dataclass
class AgentController:
    """
    Decides, once per movement tick, whether each agent moves and where.

    move chance = aggressiveness * night * base_rate + minutes * time_rate
    """

    graph: LocationGraph
    move_cooldown_ms: int = C.MOVE_COOLDOWN_MS
    base_rate: float = C.BASE_RATE
    time_rate: float = C.TIME_RATE

    def move_chance(self, agent: Agent, night_index: int, elapsed_minutes: int) -> float:
        return (
            agent.aggressiveness * night_index * self.base_rate
            + elapsed_minutes * self.time_rate
        )

    def try_move(
        self,
        agent: Agent,
        night_index: int,
        elapsed_minutes: int,
        now_ms: int,
        rng: random.Random,
    ) -> Agent:
        """
        Return the agent after one movement attempt.

        The random source is only consulted once the cooldown has passed:
        one draw for the move roll, one more for the destination.
        """
        if now_ms - agent.last_move_ms <= self.move_cooldown_ms:
            return replace(agent, is_moving=False)

        chance = self.move_chance(agent, night_index, elapsed_minutes)
        if rng.random() >= chance:
            return replace(agent, is_moving=False)

        destination = choose_destination(agent, self.graph, rng)
        logger.debug(f"{agent.name} moves {agent.location} -> {destination}")
        return replace(agent, location=destination, last_move_ms=now_ms, is_moving=True)
