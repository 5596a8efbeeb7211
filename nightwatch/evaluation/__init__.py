"""
Evaluation package for headless nights.

Modules:
    experiment: ExperimentConfig, ExperimentResult, ExperimentRunner
    policies: scripted defense policies
    analysis: statistics and export functions
"""

from .experiment import (
    ExperimentConfig,
    ExperimentResult,
    ExperimentRunner,
    load_experiment_config,
)
from .policies import DefensePolicy, POLICIES, get_policy
from .analysis import compute_statistics, survival_rates, export_csv_summary

__all__ = [
    "ExperimentConfig",
    "ExperimentResult",
    "ExperimentRunner",
    "load_experiment_config",
    "DefensePolicy",
    "POLICIES",
    "get_policy",
    "compute_statistics",
    "survival_rates",
    "export_csv_summary",
]
