from __future__ import annotations

import argparse
import os
import sys
import tempfile
from pathlib import Path

_mpl_cache_dir = Path(tempfile.gettempdir()) / "matplotlib"
_mpl_cache_dir.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", str(_mpl_cache_dir))

import matplotlib

matplotlib.use("Agg")


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from meanplot.config import DODGE_WIDTH, FIGURE_DPI, GROUP_COL, MEASURE_COL, OUTPUTS_DIR, X_COL  # noqa: E402
from meanplot.data.coding import stringify_value  # noqa: E402
from meanplot.reporting.figures import (  # noqa: E402
    plot_group_bars,
    plot_group_means,
    plot_ungrouped_means,
    save_figure,
)
from meanplot.reporting.tables import read_summary_table  # noqa: E402
from meanplot.utils.logging import run_metadata, write_json  # noqa: E402


def _safe_filename(name: str) -> str:
    return "".join(ch if (ch.isalnum() or ch in {"_", "-", "."}) else "_" for ch in name)


def main() -> None:
    parser = argparse.ArgumentParser(description="Draw group means with confidence intervals from a summary table.")
    parser.add_argument("--summary", type=Path, default=None, help="group_summary.csv (default: <outdir>/tables/).")
    parser.add_argument("--measure", default=MEASURE_COL, help="Measure name used in axis labels.")
    parser.add_argument("--x", default=X_COL, help="Summary column drawn on the x axis.")
    parser.add_argument("--group", default=GROUP_COL, help="Summary column drawn as separate lines.")
    parser.add_argument("--dodge", type=float, default=DODGE_WIDTH, help="Horizontal shift between groups.")
    parser.add_argument("--dpi", type=int, default=FIGURE_DPI, help="Figure resolution.")
    parser.add_argument("--outdir", type=Path, default=OUTPUTS_DIR, help="Output directory (default: outputs/).")
    args = parser.parse_args()

    summary_path = args.summary or (args.outdir / "tables" / "group_summary.csv")
    if not summary_path.exists():
        raise SystemExit(f"Summary table not found: {summary_path}. Run scripts/01_group_summary.py first.")
    if args.dodge < 0:
        raise SystemExit("--dodge must be non-negative.")

    summary = read_summary_table(summary_path)
    missing_required = [c for c in [args.x, args.group, "mean", "ci_half_width"] if c not in summary.columns]
    if missing_required:
        raise SystemExit(f"Missing required columns in summary table: {missing_required}")
    if summary.empty:
        raise SystemExit(f"Summary table is empty: {summary_path}")

    figures_dir = args.outdir / "figures"
    logs_dir = args.outdir / "logs"
    x_name = _safe_filename(args.x)
    g_name = _safe_filename(args.group)

    outputs = []

    fig, _ = plot_group_means(summary, args.x, args.group, args.measure, dodge=args.dodge)
    path = figures_dir / f"means_by_{x_name}_{g_name}.png"
    save_figure(fig, path, dpi=args.dpi)
    outputs.append(path)

    fig, _ = plot_ungrouped_means(summary, args.x, args.measure, group=args.group)
    path = figures_dir / f"means_by_{x_name}_ungrouped.png"
    save_figure(fig, path, dpi=args.dpi)
    outputs.append(path)

    fig, _ = plot_group_bars(summary, args.x, args.group, args.measure)
    path = figures_dir / f"bars_by_{x_name}_{g_name}.png"
    save_figure(fig, path, dpi=args.dpi)
    outputs.append(path)

    meta = run_metadata(
        summary_table=str(summary_path),
        x=args.x,
        group=args.group,
        measure=args.measure,
        dodge=args.dodge,
        dpi=args.dpi,
        n_points=int(len(summary)),
        group_levels=sorted({stringify_value(v) for v in summary[args.group]}),
        outputs=[str(p) for p in outputs],
    )
    meta_path = logs_dir / "plot_run_metadata.json"
    write_json(meta_path, meta)

    for p in outputs:
        print(f"Wrote {p}")
    print(f"Wrote {meta_path}")


if __name__ == "__main__":
    main()
