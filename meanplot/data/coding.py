from __future__ import annotations

import math
from typing import Dict, Mapping

import numpy as np
import pandas as pd

from meanplot.config import NA_LABEL


def stringify_value(v) -> str:
    """Render a grouping value as a stable label (4.0 -> '4', NaN -> '<NA>')."""

    if pd.isna(v):
        return NA_LABEL
    if isinstance(v, (np.integer, int)) and not isinstance(v, bool):
        return str(int(v))
    if isinstance(v, (np.floating, float)):
        fv = float(v)
        if fv.is_integer():
            return str(int(fv))
        return str(fv)
    return str(v)


def group_sort_key(value: str) -> tuple:
    """Sort key for stringified group labels: numbers numerically, then text, then <NA>."""

    if value == NA_LABEL:
        return (2, 0.0, value)
    try:
        fv = float(value)
    except ValueError:
        return (1, 0.0, value)
    if not math.isfinite(fv):
        # "nan" and "inf" labels are text, not numbers.
        return (1, 0.0, value)
    return (0, fv, value)


def coerce_categorical(series: pd.Series, *, numeric_to_string: bool = True, prefix: str = "") -> pd.Series:
    """Convert a Series to an ordered pandas categorical.

    If numeric_to_string=True and the series is numeric, non-missing values are
    mapped to strings like '4' (or '<prefix>4') so that grouping keys never carry
    float artefacts such as '4.0'. Categories are ordered with group_sort_key
    applied to the unprefixed label, so 4 < 6 < 10 rather than '10' < '4'.
    """

    s = series.copy()

    if numeric_to_string and pd.api.types.is_numeric_dtype(s):

        def _to_cat(v):
            if pd.isna(v):
                return np.nan
            return f"{prefix}{stringify_value(v)}"

        s = s.map(_to_cat)
    else:
        s = s.astype("string")

    observed = [str(v) for v in pd.unique(s.dropna())]
    categories = sorted(observed, key=lambda v: group_sort_key(v[len(prefix):] if v.startswith(prefix) else v))
    return pd.Series(pd.Categorical(s, categories=categories, ordered=True), index=series.index, name=series.name)


def apply_value_labels(df: pd.DataFrame, labels: Mapping[str, Mapping]) -> pd.DataFrame:
    """Return a copy of df with coded values replaced by readable labels.

    Only columns present in df are touched. Codes without a label are kept as-is.
    """

    out = df.copy()
    for col, mapping in labels.items():
        if col not in out.columns:
            continue
        out[col] = out[col].map(lambda v, m=mapping: m.get(v, v) if not pd.isna(v) else v)
    return out


def summarize_missingness(df: pd.DataFrame) -> pd.DataFrame:
    """Return per-column missingness summary in stable column order."""

    n = len(df)
    rows = []
    for col in df.columns.astype(str).tolist():
        n_missing = int(df[col].isna().sum())
        missing_rate = round(n_missing / n, 6) if n else np.nan
        rows.append(
            {
                "column": col,
                "dtype": str(df[col].dtype),
                "n": n,
                "n_missing": n_missing,
                "missing_rate": missing_rate,
                "n_unique": int(df[col].nunique(dropna=True)),
            }
        )
    return pd.DataFrame(rows)


def level_counts(series: pd.Series) -> Dict[str, int]:
    labels = series.map(stringify_value)
    counts = labels.value_counts(dropna=False)
    return {k: int(counts[k]) for k in sorted(counts.index, key=group_sort_key)}
