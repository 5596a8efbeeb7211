#!/usr/bin/env python3
"""
CLI for running nightwatch defense-policy experiments.

Usage:
    python scripts/run_experiments.py --config config/experiments/policy_comparison.yaml --output results/

Outputs:
    results/raw_data.csv         - One row per night played
    results/summary_table.csv    - Aggregated statistics
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def main():
    parser = argparse.ArgumentParser(
        description="Run nightwatch defense-policy experiments"
    )
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to experiment configuration YAML file",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="results/",
        help="Output directory for results (default: results/)",
    )
    parser.add_argument(
        "--n-runs",
        type=int,
        default=None,
        help="Override number of runs per experiment (default: from config)",
    )
    parser.add_argument(
        "--base-seed",
        type=int,
        default=0,
        help="Base seed for random number generation (default: 0)",
    )
    parser.add_argument(
        "--building",
        type=str,
        default=None,
        help="Override building layout path (default: from config)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger(__name__)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    from nightwatch.evaluation.experiment import load_experiment_config, ExperimentRunner
    from nightwatch.evaluation.analysis import (
        compute_statistics,
        export_csv_summary,
        survival_rates,
    )

    logger.info(f"Loading configuration from {args.config}")
    config = load_experiment_config(args.config)

    experiments = config.get("experiments", [])
    settings = config.get("settings", {})

    n_runs = args.n_runs or settings.get("n_runs", 10)

    building_path = args.building or settings.get("building_path")
    runner = ExperimentRunner(building_path=building_path)

    logger.info(f"Running {len(experiments)} experiments, {n_runs} runs each")

    df = runner.run_comparison(
        configs=experiments,
        n_runs=n_runs,
        base_seed=args.base_seed,
    )

    if df.empty:
        logger.error("No experiment produced a result")
        sys.exit(1)

    raw_path = output_dir / "raw_data.csv"
    df.to_csv(raw_path, index=False)
    logger.info(f"Raw data saved to {raw_path}")

    summary_df = compute_statistics(df)
    summary_path = output_dir / "summary_table.csv"
    export_csv_summary(summary_df, str(summary_path))
    logger.info(f"Summary table saved to {summary_path}")

    print("\n" + "=" * 60)
    print("SURVIVAL RATES")
    print("=" * 60)
    print(survival_rates(df).to_string())
    print("=" * 60 + "\n")

    logger.info("Experiments completed successfully!")


if __name__ == "__main__":
    main()
