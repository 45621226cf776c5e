import json
import subprocess
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(script: str, *args: str, check: bool = True) -> subprocess.CompletedProcess:
    cmd = [sys.executable, str(REPO_ROOT / "scripts" / script), *args]
    return subprocess.run(cmd, cwd=REPO_ROOT, check=check, capture_output=True, text=True)


def test_validate_environment_smoke(tmp_path: Path):
    _run("00_validate_environment.py", "--logs-dir", str(tmp_path))

    payload = json.loads((tmp_path / "environment_check.json").read_text(encoding="utf-8"))
    assert payload["example_dataset_exists"] is True
    assert "pandas" in payload["packages"]


def test_summary_then_plot_smoke(tmp_path: Path):
    _run("01_group_summary.py", "--outdir", str(tmp_path))

    summary_csv = tmp_path / "tables" / "group_summary.csv"
    assert summary_csv.exists()
    assert (tmp_path / "tables" / "missingness_input.csv").exists()

    summary = pd.read_csv(summary_csv)
    assert summary["n"].sum() == 32
    assert summary["am"].tolist() == ["automatic", "manual"] * 3
    assert summary["cyl"].tolist() == [4, 4, 6, 6, 8, 8]
    np.testing.assert_allclose(summary["ci_high"] - summary["mean"], summary["ci_half_width"], atol=1e-5)

    meta = json.loads((tmp_path / "logs" / "summary_run_metadata.json").read_text(encoding="utf-8"))
    assert meta["ci_method"] == "normal"
    assert meta["group_cols"] == ["cyl", "am"]
    assert meta["decisions"]["row_filters"][0]["dropped_rows"] == 0
    assert meta["groups_without_interval"] == []

    _run("02_plot_means.py", "--outdir", str(tmp_path), "--dpi", "50")

    for rel in [
        "figures/means_by_cyl_am.png",
        "figures/means_by_cyl_ungrouped.png",
        "figures/bars_by_cyl_am.png",
        "logs/plot_run_metadata.json",
    ]:
        assert (tmp_path / rel).exists(), f"Missing expected artifact: {rel}"

    plot_meta = json.loads((tmp_path / "logs" / "plot_run_metadata.json").read_text(encoding="utf-8"))
    assert plot_meta["group_levels"] == ["automatic", "manual"]
    assert plot_meta["n_points"] == 6


def test_summary_with_custom_input_and_method(tmp_path: Path):
    records = pd.DataFrame(
        {
            "dose": [0.5, 0.5, 1, 1, 2, 2, 0.5, 0.5, 1, 1, 2, 2],
            "supp": ["OJ"] * 6 + ["VC"] * 6,
            "len": [15.2, 21.5, 19.7, 23.3, 23.6, 26.4, 4.2, 11.5, 16.5, 18.5, 23.6, 26.7],
        }
    )
    in_path = tmp_path / "tooth.csv"
    records.to_csv(in_path, index=False)

    _run(
        "01_group_summary.py",
        "--input",
        str(in_path),
        "--measure",
        "len",
        "--x",
        "dose",
        "--group",
        "supp",
        "--method",
        "t",
        "--outdir",
        str(tmp_path),
    )
    summary = pd.read_csv(tmp_path / "tables" / "group_summary.csv")
    assert summary["dose"].tolist() == [0.5, 0.5, 1, 1, 2, 2]
    assert summary["supp"].tolist() == ["OJ", "VC"] * 3
    assert set(summary["ci_method"]) == {"t"}
    assert summary["n"].tolist() == [2] * 6


@pytest.mark.parametrize(
    "args, message",
    [
        (["--nrows", "0"], "--nrows must be a positive integer"),
        (["--group", "gear_ratio"], "Missing required columns"),
        (["--x", "am"], "--x and --group must differ"),
        (["--method", "bootstrap", "--n-boot", "0"], "--n-boot must be a positive integer"),
    ],
)
def test_summary_rejects_bad_arguments(tmp_path: Path, args, message):
    result = _run("01_group_summary.py", "--outdir", str(tmp_path), *args, check=False)
    assert result.returncode != 0
    assert message in result.stderr


def test_plot_requires_summary_table(tmp_path: Path):
    result = _run("02_plot_means.py", "--outdir", str(tmp_path), check=False)
    assert result.returncode != 0
    assert "Summary table not found" in result.stderr
