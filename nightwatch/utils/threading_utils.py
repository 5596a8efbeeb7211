"""Real-time background driver for the simulation."""

from concurrent.futures import ThreadPoolExecutor, Future
from typing import Callable, TYPE_CHECKING
import logging
import threading
import time

if TYPE_CHECKING:
    from nightwatch.core.simulation import Simulation

logger = logging.getLogger(__name__)


class NightRunner:
    """
    Drives a simulation in real time on one background thread.

    All driver ticks are produced by this single loop and applied through
    `Simulation.update`, so they are serialized with intents issued from
    other threads by the simulation's lock.
    """

    def __init__(
        self,
        simulation: "Simulation",
        frame_interval: float = 0.02,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        self.simulation = simulation
        self.frame_interval = frame_interval
        self._time = time_source
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="night")
        self._stop = threading.Event()
        self._future: Future | None = None

    @property
    def is_running(self) -> bool:
        return self._future is not None and not self._future.done()

    def start(self) -> Future:
        """Start the loop. Returns the future of the loop."""
        if self.is_running:
            return self._future
        self._stop.clear()
        self._future = self._executor.submit(self._loop)
        return self._future

    def stop(self, wait: bool = True) -> None:
        """Ask the loop to stop and optionally wait for it."""
        self._stop.set()
        if wait and self._future is not None:
            self._future.result()

    def shutdown(self) -> None:
        """Stop the loop and release the thread."""
        self.stop(wait=True)
        self._executor.shutdown(wait=True)

    def _loop(self) -> None:
        last = self._time()
        while not self._stop.is_set():
            now = self._time()
            self.simulation.update(now - last)
            last = now
            self._stop.wait(self.frame_interval)
        logger.debug("Night runner stopped")


def run_in_background(
    simulation: "Simulation", frame_interval: float = 0.02
) -> NightRunner:
    """
    Start a simulation's night and drive it on a background thread.

    Args:
        simulation: Simulation to drive
        frame_interval: Real seconds between updates

    Returns:
        The started runner
    """
    simulation.start_night()
    runner = NightRunner(simulation, frame_interval=frame_interval)
    runner.start()
    return runner
