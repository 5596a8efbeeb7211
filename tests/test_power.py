"""Tests for power drain and blackout."""

from nightwatch.core.clock import Driver, TickRequest
from nightwatch.core.event_bus import EventType
from nightwatch.core.power import PowerSystem
from nightwatch.core.state import Phase, SimulationState, Subsystems


def test_usage_weights():
    power = PowerSystem()
    assert power.usage(Subsystems()) == 1
    assert power.usage(Subsystems(camera_active=True)) == 2
    assert power.usage(Subsystems(left_door_closed=True)) == 3
    assert power.usage(Subsystems(right_light_on=True)) == 2
    everything = Subsystems(True, True, True, True, True)
    assert power.usage(everything) == 1 + 1 + 2 + 2 + 1 + 1


def test_drain_to_zero_forces_blackout():
    state = SimulationState(
        phase=Phase.RUNNING,
        power=2,
        subsystems=Subsystems(left_door_closed=True, left_light_on=True),
    )

    assert PowerSystem().drain(state) is True
    assert state.power == 0
    assert state.subsystems.left_door_closed is False
    assert state.subsystems.left_light_on is False
    assert not state.subsystems.any_active()


def test_drain_is_noop_once_out():
    state = SimulationState(phase=Phase.RUNNING, power=0)
    assert PowerSystem().drain(state) is False
    assert state.power == 0
    assert state.power_history == []


def test_drain_ignored_outside_running():
    state = SimulationState(phase=Phase.WON, power=50)
    assert PowerSystem().drain(state) is False
    assert state.power == 50


def test_drain_records_history():
    state = SimulationState(phase=Phase.RUNNING, power=10)
    power = PowerSystem()
    power.drain(state)
    power.drain(state)
    assert state.power_history == [9, 8]
    assert list(state.get_power_array()) == [9, 8]


def test_toggle_at_zero_power_is_rejected(running_sim):
    running_sim.state.power = 0
    before = running_sim.get_snapshot()

    assert running_sim.toggle_door("left") is False
    assert running_sim.toggle_light("right") is False
    assert running_sim.toggle_camera_mode() is False
    assert running_sim.get_snapshot() == before


def test_blackout_through_power_tick(running_sim):
    sim = running_sim
    sim.toggle_door("left")
    sim.toggle_light("left")
    sim.toggle_camera_mode()
    sim.state.power = 2

    assert sim.apply(TickRequest(Driver.POWER, sim.generation, 1000)) is True

    snapshot = sim.get_snapshot()
    assert snapshot.power == 0
    assert snapshot.subsystems == Subsystems()
    assert snapshot.selected_camera is None
    assert sim.camera_feed() is None
    assert sim.event_bus.get_history(EventType.POWER_DEPLETED)

    # Blackout holds for the rest of the night
    assert sim.toggle_door("left") is False
    sim.apply(TickRequest(Driver.POWER, sim.generation, 2000))
    assert sim.state.power == 0
