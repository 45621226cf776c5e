from typing import Iterable

import pandas as pd


def assert_required_columns(df, required: Iterable[str]) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def assert_numeric_measure(df, col: str) -> None:
    if not pd.api.types.is_numeric_dtype(df[col]):
        raise ValueError(f"Measure column {col!r} must be numeric but has dtype {df[col].dtype}.")
