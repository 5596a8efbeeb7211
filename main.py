#!/usr/bin/env python3
"""
Nightwatch - night-shift survival simulation

Plays nights headlessly with a scripted defense policy and logs what
happens. Presentation layers drive the same `Simulation` through its
intent methods and event bus.

Run with: uv run python main.py --policy reactive --nights 3
"""

import sys
import argparse
import logging
import time
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import Settings, get_settings
from nightwatch.core.simulation import Simulation
from nightwatch.core.state import Phase
from nightwatch.core.event_bus import Event, EventType
from nightwatch.entities.location import LocationGraph
from nightwatch.evaluation.policies import POLICIES, get_policy
from nightwatch.utils.threading_utils import NightRunner

logger = logging.getLogger("nightwatch")


class Application:
    """Main application class."""

    def __init__(self, args: argparse.Namespace) -> None:
        self.args = args
        self.settings = Settings.load(Path(args.config)) if args.config else get_settings()

        graph = LocationGraph.from_yaml(Path(args.building)) if args.building else None
        self.simulation = Simulation(settings=self.settings, graph=graph)
        if args.seed is not None:
            self.simulation.set_seed(args.seed)
        self.simulation.set_speed(args.speed)

        self.policy = get_policy(args.policy)

        bus = self.simulation.event_bus
        bus.subscribe(EventType.AGENT_MOVED, self._on_agent_moved)
        bus.subscribe(EventType.THREAT_TRIGGERED, self._on_threat)
        bus.subscribe(EventType.POWER_DEPLETED, self._on_power_out)

    def run(self) -> int:
        """Play up to the requested number of nights. Returns nights survived."""
        survived = 0
        self.simulation.start_night()

        for _ in range(self.args.nights):
            if self.args.realtime:
                phase = self._run_realtime()
            else:
                phase = self.simulation.run_until_done(on_step=self.policy)

            snapshot = self.simulation.get_snapshot()
            logger.info(
                f"Night {snapshot.night_index}: {phase.value} at {snapshot.clock_text} "
                f"with {snapshot.power}% power"
            )
            if phase is not Phase.WON:
                break
            survived += 1
            self.simulation.advance_to_next_night()

        return survived

    def _run_realtime(self) -> Phase:
        """Drive the night on a background thread, applying the policy here."""
        runner = NightRunner(self.simulation)
        runner.start()
        try:
            while self.simulation.get_snapshot().phase is Phase.RUNNING:
                self.policy(self.simulation)
                time.sleep(0.05)
        finally:
            runner.shutdown()
        return self.simulation.get_snapshot().phase

    def _on_agent_moved(self, event: Event) -> None:
        logger.debug(f"{event.data['agent']}: {event.data['from']} -> {event.data['to']}")

    def _on_threat(self, event: Event) -> None:
        logger.warning(f"JUMPSCARE: {event.data['agent']} ({event.data['side']} door)")

    def _on_power_out(self, event: Event) -> None:
        logger.warning("Power out!")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Nightwatch - night-shift survival simulation"
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to settings YAML file"
    )

    parser.add_argument(
        "-b", "--building",
        type=str,
        help="Path to building layout YAML file"
    )

    parser.add_argument(
        "-p", "--policy",
        choices=sorted(POLICIES),
        default="reactive",
        help="Defense policy to play with"
    )

    parser.add_argument(
        "-n", "--nights",
        type=int,
        default=1,
        help="Maximum number of nights to play"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed"
    )

    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Speed multiplier for real-time play"
    )

    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Run the night in real time on a background thread"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser.parse_args()


def main() -> None:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        app = Application(args)
        survived = app.run()
        logger.info(f"Survived {survived} of {args.nights} night(s)")
    except KeyboardInterrupt:
        print("\nExiting...")
    except (ValueError, OSError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
