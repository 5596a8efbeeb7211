"""Simulation entities."""

from .agent import Agent, AgentKind, build_roster
from .location import Location, LocationGraph

__all__ = [
    "Agent",
    "AgentKind",
    "build_roster",
    "Location",
    "LocationGraph",
]
