from __future__ import annotations

import math
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd

from meanplot.config import BOOTSTRAP_N, CI_METHODS, CONFIDENCE, MIN_GROUP_N, SEED, Z_95
from meanplot.data.coding import group_sort_key, stringify_value
from meanplot.data.validate import assert_numeric_measure, assert_required_columns
from meanplot.stats.adequacy import evaluate_group_adequacy
from meanplot.stats.bootstrap import bootstrap_mean_draws, percentile_interval


SUMMARY_STAT_COLS = [
    "n",
    "mean",
    "sd",
    "se",
    "ci_half_width",
    "ci_low",
    "ci_high",
    "ci_method",
    "confidence",
    "adequate",
    "reason",
]


def _check_method(method: str, confidence: float, n_boot: int = BOOTSTRAP_N) -> None:
    if method not in CI_METHODS:
        raise ValueError(f"Unknown CI method {method!r}; expected one of {CI_METHODS}.")
    if not (0.0 < float(confidence) < 1.0):
        raise ValueError(f"confidence must be in (0, 1), got {confidence}.")
    if method == "bootstrap" and int(n_boot) <= 0:
        raise ValueError(f"n_boot must be a positive integer for bootstrap intervals, got {n_boot}.")


def normal_critical_value(confidence: float = CONFIDENCE) -> float:
    """Two-sided normal critical value; 95% uses the conventional 1.96."""

    if math.isclose(confidence, 0.95):
        return Z_95
    from scipy.stats import norm

    return float(norm.ppf(1.0 - (1.0 - confidence) / 2.0))


def ci_half_width(
    values,
    method: str = "normal",
    confidence: float = CONFIDENCE,
    *,
    n_boot: int = BOOTSTRAP_N,
    seed: int = SEED,
) -> float:
    """Half-width of a two-sided confidence interval for the mean of values.

    - normal: z * sd / sqrt(n), with z = 1.96 at 95%
    - t: Student t interval (n - 1 df) via statsmodels DescrStatsW
    - bootstrap: half the width of the percentile bootstrap interval

    Returns NaN when fewer than two non-missing values are available.
    """

    _check_method(method, confidence, n_boot)
    x = np.asarray(values, dtype=float)
    x = x[~np.isnan(x)]
    n = int(x.size)
    if n < 2:
        return np.nan

    alpha = 1.0 - float(confidence)
    if method == "normal":
        se = float(np.std(x, ddof=1) / np.sqrt(n))
        return normal_critical_value(confidence) * se
    if method == "t":
        from statsmodels.stats.weightstats import DescrStatsW

        ci_low, ci_high = DescrStatsW(x, ddof=1).tconfint_mean(alpha=alpha)
        return float(ci_high - ci_low) / 2.0

    draws = bootstrap_mean_draws(x, n_boot=n_boot, seed=seed)
    ci_low, ci_high = percentile_interval(draws, alpha=alpha)
    return float(ci_high - ci_low) / 2.0


def _group_row(values: np.ndarray, *, method: str, confidence: float, min_group_n: int, n_boot: int, seed: int) -> Dict:
    x = values[~np.isnan(values)]
    n = int(x.size)
    mean = float(x.mean()) if n else np.nan
    sd = float(np.std(x, ddof=1)) if n >= 2 else np.nan
    se = sd / math.sqrt(n) if n >= 2 else np.nan

    adequacy = evaluate_group_adequacy(n, min_group_n=min_group_n)
    half = np.nan
    if adequacy.adequate:
        half = ci_half_width(x, method=method, confidence=confidence, n_boot=n_boot, seed=seed)

    return {
        "n": n,
        "mean": mean,
        "sd": sd,
        "se": se,
        "ci_half_width": half,
        "ci_low": mean - half,
        "ci_high": mean + half,
        "ci_method": method,
        "confidence": float(confidence),
        "adequate": adequacy.adequate,
        "reason": adequacy.reason,
    }


def summarize_groups(
    df: pd.DataFrame,
    measure: str,
    group_cols: Sequence[str],
    *,
    method: str = "normal",
    confidence: float = CONFIDENCE,
    min_group_n: int = MIN_GROUP_N,
    n_boot: int = BOOTSTRAP_N,
    seed: int = SEED,
) -> pd.DataFrame:
    """Mean, sd, se and confidence interval of `measure` per combination of `group_cols`.

    Only observed combinations are reported. Groups below min_group_n keep their
    n and mean but get NaN interval fields and adequate=False. Bootstrap groups
    use seed + group position so reruns are reproducible.
    """

    _check_method(method, confidence, n_boot)
    group_cols = list(group_cols)
    if not group_cols:
        raise ValueError("At least one grouping column is required.")
    assert_required_columns(df, [measure] + group_cols)
    assert_numeric_measure(df, measure)

    rows: List[Dict] = []
    grouped = df.groupby(group_cols, observed=True, sort=True, dropna=False)
    for i, (key, gdf) in enumerate(grouped):
        key = key if isinstance(key, tuple) else (key,)
        values = gdf[measure].astype("Float64").to_numpy(dtype=float, na_value=np.nan)
        stats = _group_row(
            values,
            method=method,
            confidence=confidence,
            min_group_n=min_group_n,
            n_boot=n_boot,
            seed=seed + i,
        )
        if stats["n"] == 0:
            continue
        labels = {col: stringify_value(v) for col, v in zip(group_cols, key)}
        rows.append({**labels, **stats})

    out = pd.DataFrame(rows, columns=group_cols + SUMMARY_STAT_COLS)
    if out.empty:
        return out
    order = sorted(range(len(out)), key=lambda j: tuple(group_sort_key(out.at[j, c]) for c in group_cols))
    return out.iloc[order].reset_index(drop=True)
