from pathlib import Path

import pandas as pd


def write_table(df: pd.DataFrame, path: Path, float_decimals: int = 6) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.round(float_decimals).to_csv(path, index=False)


def read_summary_table(path: Path) -> pd.DataFrame:
    # keep_default_na=False keeps the literal '<NA>' group label.
    return pd.read_csv(path, keep_default_na=False, na_values=[""])
