"""Animatronic agents that roam the building."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List


class AgentKind(Enum):
    """Movement behaviour family of an agent."""

    ROAMER = "roamer"      # Any location except the current one
    SCRIPTED = "scripted"  # Fixed route subset

    @classmethod
    def parse(cls, value: "str | AgentKind") -> "AgentKind":
        """Parse a kind from its config name."""
        if isinstance(value, AgentKind):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown agent kind: {value!r}") from None


@dataclass
class Agent:
    """
    A non-player agent.

    `location` always refers to a location id in the building graph.
    `is_moving` is only meaningful for the movement tick that set it.
    """

    name: str
    kind: AgentKind
    spawn: str
    location: str
    aggressiveness: float = 1.0
    last_move_ms: int = 0
    is_moving: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Agent":
        """Create from a roster entry. Raises ValueError on a malformed entry."""
        for key in ("name", "spawn"):
            if key not in data:
                raise ValueError(f"Roster entry {data!r}: missing '{key}'")
        aggressiveness = float(data.get("aggressiveness", 1.0))
        if aggressiveness <= 0:
            raise ValueError(
                f"Agent {data.get('name')!r}: aggressiveness must be positive"
            )
        spawn = data["spawn"]
        return cls(
            name=data["name"],
            kind=AgentKind.parse(data.get("kind", AgentKind.ROAMER)),
            spawn=spawn,
            location=spawn,
            aggressiveness=aggressiveness,
        )

    def respawn(self, now_ms: int) -> "Agent":
        """Return this agent pinned back to its spawn location."""
        return replace(self, location=self.spawn, last_move_ms=now_ms, is_moving=False)


def build_roster(entries: Iterable[Dict[str, Any]]) -> List[Agent]:
    """Build agents from roster config entries."""
    agents = [Agent.from_dict(entry) for entry in entries]
    names = [a.name for a in agents]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate agent names in roster: {names}")
    return agents
