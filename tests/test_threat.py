"""Tests for breach detection and the loss roll."""

from dataclasses import replace

from config import constants as C
from nightwatch.algorithms.threat import Breach, ThreatEvaluator
from nightwatch.core.clock import Driver, TickRequest
from nightwatch.core.event_bus import EventType
from nightwatch.core.state import Phase, Side, Subsystems
from nightwatch.entities.agent import Agent, AgentKind

from conftest import ExplodingRandom, FixedRandom, SequenceRandom


def _at(location: str, name: str = "Bonnie") -> Agent:
    return Agent(name=name, kind=AgentKind.ROAMER, spawn=C.SHOW_STAGE, location=location)


def test_no_breach_without_agents_at_corners(graph):
    evaluator = ThreatEvaluator(graph)
    lost, breach = evaluator.check_loss([_at(C.EAST_HALL)], Subsystems(), ExplodingRandom())
    assert (lost, breach) == (False, None)


def test_closed_door_prevents_breach(graph):
    evaluator = ThreatEvaluator(graph)
    doors = Subsystems(right_door_closed=True)
    lost, _ = evaluator.check_loss([_at(C.EAST_HALL_CORNER)], doors, ExplodingRandom())
    assert lost is False


def test_doors_guard_their_own_side(graph):
    evaluator = ThreatEvaluator(graph)
    doors = Subsystems(left_door_closed=True)
    breaches = evaluator.breaches([_at(C.WEST_HALL_CORNER), _at(C.EAST_HALL_CORNER, "Chica")], doors)
    assert breaches == [Breach("Chica", Side.RIGHT)]


def test_breach_with_low_roll_loses(graph):
    evaluator = ThreatEvaluator(graph)
    lost, breach = evaluator.check_loss([_at(C.EAST_HALL_CORNER)], Subsystems(), FixedRandom(0.1))
    assert lost is True
    assert breach == Breach("Bonnie", Side.RIGHT)


def test_breach_with_high_roll_survives(graph):
    evaluator = ThreatEvaluator(graph)
    lost, _ = evaluator.check_loss([_at(C.WEST_HALL_CORNER)], Subsystems(), FixedRandom(0.3))
    assert lost is False


def test_breach_rerolls_every_check(running_sim):
    sim = running_sim
    sim.state.agents[0] = replace(sim.state.agents[0], location=C.WEST_HALL_CORNER)
    sim.rng = SequenceRandom([0.9, 0.5, 0.1])

    for at_ms in (1000, 2000):
        sim.apply(TickRequest(Driver.THREAT, sim.generation, at_ms))
        assert sim.state.phase is Phase.RUNNING

    sim.apply(TickRequest(Driver.THREAT, sim.generation, 3000))
    assert sim.state.phase is Phase.LOST


def test_threat_tick_sets_lost_and_emits_jumpscare(running_sim):
    sim = running_sim
    sim.state.agents[1] = replace(sim.state.agents[1], location=C.EAST_HALL_CORNER)
    sim.rng = FixedRandom(0.1)

    assert sim.apply(TickRequest(Driver.THREAT, sim.generation, 1000)) is True

    assert sim.get_snapshot().phase is Phase.LOST
    events = sim.event_bus.get_history(EventType.THREAT_TRIGGERED)
    assert len(events) == 1
    assert events[0].data == {"agent": sim.state.agents[1].name, "side": "right"}
