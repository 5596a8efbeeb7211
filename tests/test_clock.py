"""Tests for the in-game clock and driver cadences."""

import pytest

from nightwatch.core.clock import (
    CadenceTimer,
    Driver,
    NightClock,
    SimulationClock,
    SimulationSpeed,
    format_clock,
)
from nightwatch.core.state import Phase, SimulationState


@pytest.mark.parametrize(
    "minutes,expected",
    [
        (0, "12:00 AM"),
        (5, "12:05 AM"),
        (65, "1:05 AM"),
        (359, "5:59 AM"),
        (360, "6:00 AM"),
        (720, "12:00 PM"),
        (785, "1:05 PM"),
    ],
)
def test_format_clock(minutes, expected):
    assert format_clock(minutes) == expected


def test_advance_increments_minutes():
    state = SimulationState(phase=Phase.RUNNING)
    clock = NightClock()

    assert clock.advance(state) is False
    assert state.elapsed_minutes == 1
    assert state.clock_text == "12:01 AM"


def test_advance_wins_at_night_length_once():
    state = SimulationState(phase=Phase.RUNNING, elapsed_minutes=359)
    clock = NightClock()

    assert clock.advance(state) is True
    assert state.phase is Phase.WON
    assert state.elapsed_minutes == 360
    assert state.clock_text == "6:00 AM"

    # Terminal: further advances change nothing
    assert clock.advance(state) is False
    assert state.elapsed_minutes == 360
    assert state.phase is Phase.WON


def test_advance_clamps_oversized_step():
    state = SimulationState(phase=Phase.RUNNING, elapsed_minutes=358)
    clock = NightClock(step=5)

    assert clock.advance(state) is True
    assert state.elapsed_minutes == 360


def test_advance_ignored_outside_running():
    state = SimulationState(phase=Phase.MENU)
    assert NightClock().advance(state) is False
    assert state.elapsed_minutes == 0


def test_cadence_timer_fires_on_interval():
    timer = CadenceTimer(100)
    assert timer.due(50, max_ticks=10) == []
    assert timer.due(250, max_ticks=10) == [100, 200]
    assert timer.due(300, max_ticks=10) == [300]


def test_cadence_timer_caps_catch_up():
    timer = CadenceTimer(100)
    assert timer.due(1000, max_ticks=2) == [100, 200]
    # Skipped ticks are not replayed later
    assert timer.due(1000, max_ticks=2) == []
    assert timer.due(1100, max_ticks=2) == [1100]


def test_cadence_timer_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        CadenceTimer(0)


def test_simulation_clock_orders_requests():
    clock = SimulationClock()

    first = clock.update(0.1, generation=3)
    assert [(r.driver, r.at_ms, r.generation) for r in first] == [(Driver.MINUTE, 100, 3)]

    rest = clock.update(0.9, generation=3)
    assert len([r for r in rest if r.driver is Driver.MINUTE]) == 9
    assert [r.driver for r in rest[-4:]] == [
        Driver.MINUTE, Driver.POWER, Driver.MOVEMENT, Driver.THREAT
    ]
    assert all(r.at_ms == 1000 for r in rest[-4:])
    assert clock.now_ms == 1000


def test_simulation_clock_pause_and_speed():
    clock = SimulationClock()
    clock.pause()
    assert clock.update(1.0, generation=1) == []

    clock.resume()
    clock.set_speed(SimulationSpeed.FAST)
    requests = clock.update(0.05, generation=1)
    assert [r.at_ms for r in requests] == [100]


def test_simulation_clock_speed_is_clamped():
    clock = SimulationClock()
    clock.set_speed(50)
    assert clock.speed == SimulationSpeed.MAX.value
    clock.set_speed(-1)
    assert clock.speed == 0.0


def test_simulation_clock_reset():
    clock = SimulationClock()
    clock.update(2.0, generation=1)
    clock.reset()
    assert clock.now_ms == 0
    assert [r.at_ms for r in clock.update(0.1, generation=1)] == [100]
