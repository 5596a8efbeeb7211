"""
Experiment configuration and runner for headless nights.

Plays nights with a scripted defense policy under controlled seeds and
collects the outcome of every run.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
from pathlib import Path
import logging
import copy
import random

import numpy as np
import pandas as pd
import yaml

logger = logging.getLogger(__name__)


@dataclass
class ExperimentConfig:
    """Configuration for a single experiment."""

    name: str
    seed: int
    policy: str = "passive"
    night: int = 1
    dt: float = 0.1
    building_path: Optional[str] = None
    settings_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], seed: int) -> "ExperimentConfig":
        """Create config from dictionary with a specific seed."""
        return cls(
            name=data["name"],
            seed=seed,
            policy=data.get("policy", "passive"),
            night=data.get("night", 1),
            dt=data.get("dt", 0.1),
            building_path=data.get("building_path"),
            settings_overrides=data.get("settings", {}),
        )


@dataclass
class ExperimentResult:
    """Result from a single night."""

    config: ExperimentConfig
    outcome: str
    minutes_survived: int
    final_power: int
    agent_moves: int
    power_series: np.ndarray

    @property
    def survived(self) -> bool:
        return self.outcome == "won"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "experiment": self.config.name,
            "seed": self.config.seed,
            "policy": self.config.policy,
            "night": self.config.night,
            "outcome": self.outcome,
            "survived": int(self.survived),
            "minutes_survived": self.minutes_survived,
            "final_power": self.final_power,
            "agent_moves": self.agent_moves,
            "min_power": int(self.power_series.min()) if len(self.power_series) else self.final_power,
        }


class ExperimentRunner:
    """Runs headless nights for benchmarking defense policies."""

    def __init__(self, building_path: Optional[str] = None):
        """
        Initialize experiment runner.

        Args:
            building_path: Optional path to a building layout YAML file
        """
        self.building_path = building_path
        self._results: List[ExperimentResult] = []

    def run(self, config: ExperimentConfig) -> ExperimentResult:
        """
        Play a single night.

        Args:
            config: Experiment configuration

        Returns:
            ExperimentResult for the night
        """
        from nightwatch.core.simulation import Simulation
        from nightwatch.core.event_bus import EventType
        from nightwatch.entities.location import LocationGraph
        from nightwatch.evaluation.policies import get_policy
        from config.settings import get_settings

        logger.info(f"Running experiment: {config.name} (seed={config.seed})")

        settings = copy.deepcopy(get_settings())
        self._apply_overrides(settings, config.settings_overrides)
        settings.night.first_night = config.night

        building_path = config.building_path or self.building_path
        graph = LocationGraph.from_yaml(Path(building_path)) if building_path else None

        sim = Simulation(settings=settings, graph=graph, rng=random.Random(config.seed))

        moves = 0

        def count_move(event) -> None:
            nonlocal moves
            moves += 1

        sim.event_bus.subscribe(EventType.AGENT_MOVED, count_move)

        sim.start_night()
        phase = sim.run_until_done(dt=config.dt, on_step=get_policy(config.policy))

        result = ExperimentResult(
            config=config,
            outcome=phase.value,
            minutes_survived=sim.state.elapsed_minutes,
            final_power=sim.state.power,
            agent_moves=moves,
            power_series=sim.state.get_power_array(limit=sim.state.power_history_limit),
        )
        logger.debug(f"{config.name} seed={config.seed}: {result.outcome} at {result.minutes_survived} min")

        self._results.append(result)
        return result

    def _apply_overrides(self, settings: Any, overrides: Dict[str, Dict[str, Any]]) -> None:
        """Override known settings fields per section."""
        for section, values in overrides.items():
            target = getattr(settings, section, None)
            if target is None:
                logger.warning(f"Unknown settings section '{section}' ignored")
                continue
            for key, value in values.items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Unknown setting '{section}.{key}' ignored")

    def run_comparison(
        self,
        configs: List[Dict[str, Any]],
        n_runs: int = 10,
        base_seed: int = 0,
    ) -> pd.DataFrame:
        """
        Run multiple configs with multiple seeds, return comparison table.

        Args:
            configs: List of experiment configuration dictionaries
            n_runs: Number of runs per configuration (each with different seed)
            base_seed: Starting seed (seeds will be base_seed, base_seed+1, ...)

        Returns:
            DataFrame with one row per run
        """
        all_results: List[Dict[str, Any]] = []

        for config_dict in configs:
            for run_idx in range(n_runs):
                seed = base_seed + run_idx
                config = ExperimentConfig.from_dict(config_dict, seed)

                try:
                    result = self.run(config)
                except Exception as e:
                    logger.error(
                        f"Experiment {config.name} run {run_idx} failed: {e}"
                    )
                    continue

                all_results.append({"run": run_idx, **result.to_dict()})

        return pd.DataFrame(all_results)

    def get_all_results(self) -> List[ExperimentResult]:
        """Get all results from this runner."""
        return self._results


def load_experiment_config(path: str) -> Dict[str, Any]:
    """
    Load experiment configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Configuration dictionary
    """
    with open(path, "r") as f:
        return yaml.safe_load(f)
