from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd


def bootstrap_mean_draws(values: np.ndarray, *, n_boot: int, seed: int) -> pd.DataFrame:
    """Resample values with replacement n_boot times and record each resample's mean."""

    if n_boot <= 0:
        return pd.DataFrame(columns=["iter", "mean"])
    x = np.asarray(values, dtype=float)
    x = x[~np.isnan(x)]
    if x.size == 0:
        return pd.DataFrame(columns=["iter", "mean"])
    rng = np.random.default_rng(seed)
    idx = rng.integers(0, x.size, size=(n_boot, x.size), endpoint=False)
    means = x[idx].mean(axis=1)
    return pd.DataFrame({"iter": np.arange(n_boot), "mean": means})


def percentile_interval(draws: pd.DataFrame, *, alpha: float = 0.05, column: str = "mean") -> Tuple[float, float]:
    if draws.empty:
        return np.nan, np.nan
    vals = draws[column].dropna().to_numpy(dtype=float)
    if vals.size == 0:
        return np.nan, np.nan
    lo = float(100.0 * (alpha / 2.0))
    hi = float(100.0 * (1.0 - alpha / 2.0))
    return float(np.percentile(vals, lo)), float(np.percentile(vals, hi))
