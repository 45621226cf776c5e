import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from meanplot.config import VALUE_LABELS
from meanplot.data.build import build_summary_input
from meanplot.data.coding import apply_value_labels
from meanplot.data.ingest import load_example_dataset


@pytest.fixture
def mtcars() -> pd.DataFrame:
    return load_example_dataset()


@pytest.fixture
def hp_records(mtcars) -> pd.DataFrame:
    records, _ = build_summary_input(apply_value_labels(mtcars, VALUE_LABELS), "hp", ["cyl", "am"])
    return records
