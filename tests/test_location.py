"""Tests for the building graph."""

from pathlib import Path

import pytest
import yaml

from config import constants as C
from nightwatch.entities.agent import Agent, AgentKind
from nightwatch.entities.location import LocationGraph

BUILDING_YAML = Path(__file__).parent.parent / "data" / "buildings" / "pizzeria.yaml"


def _agent(kind: AgentKind, location: str) -> Agent:
    return Agent(name="x", kind=kind, spawn=location, location=location)


def test_default_graph_has_nine_locations(graph):
    assert graph.all_locations() == frozenset({
        C.SHOW_STAGE, C.DINING_AREA, C.PIRATE_COVE, C.BACKSTAGE, C.SUPPLY_CLOSET,
        C.EAST_HALL, C.WEST_HALL, C.EAST_HALL_CORNER, C.WEST_HALL_CORNER,
    })


def test_roamer_reaches_everything_but_current(graph):
    reachable = graph.reachable_from(C.SHOW_STAGE, _agent(AgentKind.ROAMER, C.SHOW_STAGE))
    assert C.SHOW_STAGE not in reachable
    assert reachable == graph.all_locations() - {C.SHOW_STAGE}


def test_scripted_agent_confined_to_route(graph):
    reachable = graph.reachable_from(C.DINING_AREA, _agent(AgentKind.SCRIPTED, C.PIRATE_COVE))
    assert reachable == frozenset(C.SCRIPTED_ROUTE)
    assert len(reachable) == 3


def test_location_without_id_is_rejected():
    with pytest.raises(ValueError, match="missing 'id'"):
        LocationGraph.from_dict({"locations": [{"name": "Nowhere"}]})


def test_yaml_layout_matches_default(graph):
    loaded = LocationGraph.from_yaml(BUILDING_YAML)
    assert loaded.all_locations() == graph.all_locations()
    assert loaded.route_for(AgentKind.SCRIPTED) == C.SCRIPTED_ROUTE
    assert loaded.west_corner == C.WEST_HALL_CORNER
    assert loaded.east_corner == C.EAST_HALL_CORNER


def test_yaml_with_unknown_connection_is_rejected(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text(yaml.dump({
        "corners": {"west": "a", "east": "a"},
        "locations": [{"id": "a", "connections": ["nowhere"]}],
    }))
    with pytest.raises(ValueError, match="nowhere"):
        LocationGraph.from_yaml(path)


def test_yaml_with_unknown_corner_is_rejected(tmp_path):
    path = tmp_path / "cornerless.yaml"
    path.write_text(yaml.dump({"locations": [{"id": "a"}]}))
    with pytest.raises(ValueError, match="corner"):
        LocationGraph.from_yaml(path)


def test_unknown_route_kind_is_rejected():
    with pytest.raises(ValueError, match="Unknown agent kind"):
        LocationGraph.from_dict({
            "corners": {"west": "a", "east": "a"},
            "locations": [{"id": "a"}],
            "routes": {"teleporter": ["a"]},
        })
