from pathlib import Path
from typing import Optional

import pandas as pd

from meanplot.config import EXAMPLE_DATASET


def load_records(path: Path, nrows: Optional[int] = None) -> pd.DataFrame:
    """Read a records table, dispatching on the file suffix.

    nrows keeps only the first N rows (deterministic head) for every format.
    """

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, nrows=nrows)
    if suffix == ".xlsx":
        return pd.read_excel(path, nrows=nrows)
    if suffix == ".parquet":
        df = pd.read_parquet(path)
        return df.head(nrows).copy() if nrows is not None else df
    raise ValueError(f"Unsupported input format {suffix!r} for {path}; expected .csv, .parquet or .xlsx.")


def load_example_dataset(nrows: Optional[int] = None) -> pd.DataFrame:
    return load_records(EXAMPLE_DATASET, nrows=nrows)
