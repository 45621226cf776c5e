from typing import Iterable, Optional, Sequence, Tuple

import pandas as pd

from .coding import coerce_categorical, stringify_value
from .validate import assert_numeric_measure, assert_required_columns


def build_summary_input(
    df: pd.DataFrame,
    measure: str,
    group_cols: Sequence[str],
    extra_cols: Optional[Iterable[str]] = None,
) -> Tuple[pd.DataFrame, dict]:
    """Select, validate and clean the columns needed for a grouped summary.

    Grouping columns become ordered categoricals of stringified labels, with
    missing values kept as an explicit '<NA>' level. Rows with a missing measure
    are dropped and the drop is recorded in the returned decisions dict.
    """

    group_cols = list(group_cols)
    if not group_cols:
        raise ValueError("At least one grouping column is required.")
    if measure in group_cols:
        raise ValueError(f"Measure column {measure!r} cannot also be a grouping column.")

    assert_required_columns(df, [measure] + group_cols)
    assert_numeric_measure(df, measure)

    extra = [c for c in (extra_cols or []) if c in df.columns and c not in group_cols and c != measure]
    out = df[group_cols + [measure] + extra].copy()

    for col in group_cols:
        out[col] = coerce_categorical(out[col].map(stringify_value), numeric_to_string=False)

    n_before = len(out)
    out = out.loc[out[measure].notna()].reset_index(drop=True)
    n_after = len(out)

    decisions = {
        "measure": measure,
        "group_cols": group_cols,
        "row_filters": [
            {
                "rule": "drop_missing_measure",
                "column": measure,
                "dropped_rows": n_before - n_after,
            }
        ],
        "input_rows": n_before,
        "summary_rows": n_after,
    }
    return out, decisions
