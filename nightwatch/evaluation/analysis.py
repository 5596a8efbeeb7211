"""
Statistical analysis of experiment results.

Summarizes survival across runs and exports tables to CSV.
"""

from pathlib import Path
import numpy as np
import pandas as pd
from scipy import stats

METADATA_COLUMNS = {"experiment", "run", "seed", "policy", "night", "outcome"}


def compute_statistics(df: pd.DataFrame) -> pd.DataFrame:
    """
    Compute mean, std, 95% CI for each metric grouped by experiment.

    Args:
        df: DataFrame with columns: experiment, run, seed, and metric columns

    Returns:
        DataFrame with aggregated statistics per experiment
    """
    metric_cols = [col for col in df.columns if col not in METADATA_COLUMNS]

    results = []

    for exp_name, group in df.groupby("experiment"):
        row = {"experiment": exp_name, "n_runs": len(group)}

        for metric in metric_cols:
            values = group[metric].dropna().astype(float)

            if len(values) > 0:
                mean = values.mean()
                std = values.std()
                n = len(values)

                if n > 1 and std > 0:
                    ci = stats.t.ppf(0.975, n - 1) * std / np.sqrt(n)
                else:
                    ci = 0.0

                row[f"{metric}_mean"] = mean
                row[f"{metric}_std"] = std if n > 1 else 0.0
                row[f"{metric}_ci95"] = ci
                row[f"{metric}_min"] = values.min()
                row[f"{metric}_max"] = values.max()

        results.append(row)

    return pd.DataFrame(results)


def survival_rates(df: pd.DataFrame) -> pd.Series:
    """Fraction of won nights per experiment."""
    return df.groupby("experiment")["survived"].mean()


def export_csv_summary(summary_df: pd.DataFrame, output_path: str) -> None:
    """Write a statistics table (from compute_statistics) to CSV."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    summary_df.to_csv(path, index=False)
