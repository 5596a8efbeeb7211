"""Building layout graph with YAML loading."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Tuple
from pathlib import Path
import yaml

from config import constants as C
from .agent import Agent, AgentKind


@dataclass(frozen=True)
class Location:
    """A named room or hallway. Display metadata belongs to presentation."""

    id: str
    name: str = ""
    connections: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        """Create from dictionary."""
        if "id" not in data:
            raise ValueError(f"Location {data!r}: missing 'id'")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            connections=tuple(data.get("connections", [])),
        )


@dataclass
class LocationGraph:
    """
    Static building topology.

    Reachability is agent-specific: scripted agents are confined to a
    named route, every other agent may go anywhere but where it stands.
    """

    name: str = "Default Building"
    locations: Dict[str, Location] = field(default_factory=dict)
    routes: Dict[AgentKind, Tuple[str, ...]] = field(default_factory=dict)
    west_corner: str = C.WEST_HALL_CORNER
    east_corner: str = C.EAST_HALL_CORNER

    def add_location(self, location: Location) -> None:
        """Add a location to the graph."""
        self.locations[location.id] = location

    def all_locations(self) -> FrozenSet[str]:
        """All location ids."""
        return frozenset(self.locations)

    def has_location(self, location_id: str) -> bool:
        return location_id in self.locations

    def route_for(self, kind: AgentKind) -> Tuple[str, ...]:
        """Fixed route for a kind, empty when the kind roams freely."""
        return self.routes.get(kind, ())

    def reachable_from(self, location_id: str, agent: Agent) -> FrozenSet[str]:
        """Destinations an agent standing at `location_id` may move to."""
        route = self.route_for(agent.kind)
        if route:
            return frozenset(route)
        return frozenset(lid for lid in self.locations if lid != location_id)

    def validate(self) -> None:
        """Check internal references. Raises ValueError on a broken layout."""
        for loc in self.locations.values():
            for target in loc.connections:
                if target not in self.locations:
                    raise ValueError(f"{loc.id}: unknown connection {target!r}")
        for kind, route in self.routes.items():
            if not route:
                raise ValueError(f"Route for {kind.value} is empty")
            for lid in route:
                if lid not in self.locations:
                    raise ValueError(f"Route for {kind.value}: unknown location {lid!r}")
        for corner in (self.west_corner, self.east_corner):
            if corner not in self.locations:
                raise ValueError(f"Unknown corner location {corner!r}")

    @classmethod
    def from_yaml(cls, path: Path) -> "LocationGraph":
        """Load a building layout from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "LocationGraph":
        """Create from dictionary."""
        corners = data.get("corners", {})
        graph = cls(
            name=data.get("name", "Custom Building"),
            west_corner=corners.get("west", C.WEST_HALL_CORNER),
            east_corner=corners.get("east", C.EAST_HALL_CORNER),
        )
        for loc_data in data.get("locations", []):
            graph.add_location(Location.from_dict(loc_data))
        for kind_name, route in data.get("routes", {}).items():
            graph.routes[AgentKind.parse(kind_name)] = tuple(route)
        graph.validate()
        return graph

    @classmethod
    def create_default(cls) -> "LocationGraph":
        """Create the reference nine-location building."""
        graph = cls(name="Pizzeria")

        layout = [
            (C.SHOW_STAGE, "Show Stage", (C.DINING_AREA, C.BACKSTAGE)),
            (C.DINING_AREA, "Dining Area", (C.PIRATE_COVE, C.SUPPLY_CLOSET, C.EAST_HALL, C.WEST_HALL)),
            (C.PIRATE_COVE, "Pirate Cove", (C.WEST_HALL,)),
            (C.BACKSTAGE, "Backstage", (C.DINING_AREA,)),
            (C.SUPPLY_CLOSET, "Supply Closet", (C.WEST_HALL,)),
            (C.EAST_HALL, "East Hall", (C.EAST_HALL_CORNER,)),
            (C.WEST_HALL, "West Hall", (C.WEST_HALL_CORNER,)),
            (C.EAST_HALL_CORNER, "East Hall Corner", ()),
            (C.WEST_HALL_CORNER, "West Hall Corner", ()),
        ]
        for lid, name, connections in layout:
            graph.add_location(Location(lid, name, connections))

        graph.routes[AgentKind.SCRIPTED] = C.SCRIPTED_ROUTE
        graph.validate()
        return graph
