import numpy as np
import pandas as pd
import pytest

from meanplot.data.build import build_summary_input
from meanplot.data.coding import (
    apply_value_labels,
    coerce_categorical,
    group_sort_key,
    level_counts,
    stringify_value,
)
from meanplot.data.ingest import load_records


def test_example_dataset_shape(mtcars):
    assert mtcars.shape == (32, 12)
    assert mtcars["hp"].sum() == 4694
    assert sorted(mtcars["cyl"].unique().tolist()) == [4, 6, 8]
    assert sorted(mtcars["am"].unique().tolist()) == [0, 1]


def test_load_records_rejects_unknown_suffix(tmp_path):
    path = tmp_path / "records.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported input format"):
        load_records(path)


def test_load_records_parquet_honours_nrows(tmp_path, mtcars):
    path = tmp_path / "mtcars.parquet"
    mtcars.to_parquet(path, index=False)
    df = load_records(path, nrows=5)
    assert len(df) == 5
    assert df["model"].tolist() == mtcars["model"].head(5).tolist()


def test_stringify_value_drops_float_artefacts():
    assert stringify_value(4.0) == "4"
    assert stringify_value(np.int64(6)) == "6"
    assert stringify_value(2.5) == "2.5"
    assert stringify_value(np.nan) == "<NA>"
    assert stringify_value("manual") == "manual"


def test_coerce_categorical_orders_numeric_labels():
    s = coerce_categorical(pd.Series([10, 4, 6, 4, np.nan]))
    assert s.cat.ordered
    assert s.cat.categories.tolist() == ["4", "6", "10"]
    assert s.isna().sum() == 1


def test_apply_value_labels_only_touches_known_codes():
    df = pd.DataFrame({"am": [0, 1, 2, np.nan], "cyl": [4, 6, 8, 8]})
    out = apply_value_labels(df, {"am": {0: "automatic", 1: "manual"}, "gear": {3: "three"}})
    assert out["am"].iloc[:3].tolist() == ["automatic", "manual", 2]
    assert pd.isna(out["am"].iloc[3])
    assert out["cyl"].tolist() == [4, 6, 8, 8]
    assert df["am"].iloc[0] == 0


def test_build_summary_input_drops_missing_measure():
    df = pd.DataFrame(
        {
            "hp": [100.0, np.nan, 150.0, 120.0],
            "cyl": [4, 4, 8, np.nan],
            "am": [0, 1, 1, 0],
            "model": ["a", "b", "c", "d"],
        }
    )
    out, decisions = build_summary_input(df, "hp", ["cyl", "am"])
    assert out.columns.tolist() == ["cyl", "am", "hp"]
    assert len(out) == 3
    assert decisions["row_filters"][0]["dropped_rows"] == 1
    assert decisions["input_rows"] == 4
    # Missing grouping values stay as an explicit level, ordered last.
    assert out["cyl"].cat.categories.tolist() == ["4", "8", "<NA>"]


def test_build_summary_input_validates_columns():
    df = pd.DataFrame({"hp": [1.0, 2.0], "cyl": [4, 6]})
    with pytest.raises(ValueError, match="Missing required columns"):
        build_summary_input(df, "hp", ["cyl", "am"])

    df = pd.DataFrame({"hp": ["fast", "slow"], "cyl": [4, 6], "am": [0, 1]})
    with pytest.raises(ValueError, match="must be numeric"):
        build_summary_input(df, "hp", ["cyl", "am"])

    with pytest.raises(ValueError, match="cannot also be a grouping column"):
        build_summary_input(df, "cyl", ["cyl", "am"])


def test_level_counts_are_sorted(hp_records):
    assert level_counts(hp_records["cyl"].astype(str)) == {"4": 11, "6": 7, "8": 14}
    assert level_counts(hp_records["am"].astype(str)) == {"automatic": 19, "manual": 13}


def test_group_sort_key_treats_non_finite_labels_as_text():
    labels = ["b", "nan", "10", "<NA>", "inf", "2", "a"]
    assert sorted(labels, key=group_sort_key) == ["2", "10", "a", "b", "inf", "nan", "<NA>"]


def test_load_records_xlsx_honours_nrows(tmp_path, mtcars):
    path = tmp_path / "mtcars.xlsx"
    mtcars.to_excel(path, index=False)
    df = load_records(path, nrows=4)
    assert df.columns.tolist() == mtcars.columns.tolist()
    assert df["hp"].tolist() == mtcars["hp"].head(4).tolist()


def test_load_records_rejects_legacy_xls(tmp_path):
    path = tmp_path / "records.xls"
    path.write_bytes(b"")
    with pytest.raises(ValueError, match="Unsupported input format '.xls'"):
        load_records(path)
