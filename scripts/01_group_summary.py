from __future__ import annotations

import argparse
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from meanplot.config import (  # noqa: E402
    BOOTSTRAP_N,
    CI_METHOD,
    CI_METHODS,
    CONFIDENCE,
    EXAMPLE_DATASET,
    GROUP_COL,
    MEASURE_COL,
    MIN_GROUP_N,
    OUTPUTS_DIR,
    SEED,
    VALUE_LABELS,
    X_COL,
)
from meanplot.data.build import build_summary_input  # noqa: E402
from meanplot.data.coding import apply_value_labels, level_counts, summarize_missingness  # noqa: E402
from meanplot.data.ingest import load_records  # noqa: E402
from meanplot.reporting.tables import write_table  # noqa: E402
from meanplot.stats.summary import summarize_groups  # noqa: E402
from meanplot.utils.logging import run_metadata, write_json  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Group means with confidence intervals for one numeric measure.")
    parser.add_argument("--input", type=Path, default=EXAMPLE_DATASET, help="Records file (.csv, .parquet, .xlsx).")
    parser.add_argument("--measure", default=MEASURE_COL, help="Numeric column to average.")
    parser.add_argument("--x", default=X_COL, help="Grouping column drawn on the x axis.")
    parser.add_argument("--group", default=GROUP_COL, help="Grouping column drawn as separate lines.")
    parser.add_argument("--method", choices=CI_METHODS, default=CI_METHOD, help="Confidence interval method.")
    parser.add_argument("--confidence", type=float, default=CONFIDENCE, help="Interval coverage (default: 0.95).")
    parser.add_argument("--min-group-n", type=int, default=MIN_GROUP_N, help="Smallest group that gets an interval.")
    parser.add_argument("--n-boot", type=int, default=BOOTSTRAP_N, help="Bootstrap resamples (method=bootstrap).")
    parser.add_argument("--seed", type=int, default=SEED, help="Random seed for bootstrap resampling.")
    parser.add_argument("--nrows", type=int, default=None, help="Use only the first N rows (deterministic head).")
    parser.add_argument("--no-labels", action="store_true", help="Keep coded grouping values (e.g. am=0/1).")
    parser.add_argument("--outdir", type=Path, default=OUTPUTS_DIR, help="Output directory (default: outputs/).")
    args = parser.parse_args()

    if not args.input.exists():
        raise SystemExit(f"Input file not found: {args.input}")
    if args.nrows is not None and args.nrows <= 0:
        raise SystemExit("--nrows must be a positive integer.")
    if args.n_boot <= 0:
        raise SystemExit("--n-boot must be a positive integer.")
    if args.x == args.group:
        raise SystemExit(f"--x and --group must differ (both are {args.x!r}).")
    if not (0.0 < args.confidence < 1.0):
        raise SystemExit("--confidence must be between 0 and 1.")

    df = load_records(args.input, nrows=args.nrows)
    group_cols = [args.x, args.group]
    missing_required = [c for c in [args.measure] + group_cols if c not in df.columns]
    if missing_required:
        raise SystemExit(f"Missing required columns in input: {missing_required}")

    if not args.no_labels:
        df = apply_value_labels(df, VALUE_LABELS)

    try:
        records, decisions = build_summary_input(df, args.measure, group_cols)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    tables_dir = args.outdir / "tables"
    logs_dir = args.outdir / "logs"

    miss = summarize_missingness(df[[args.measure] + group_cols])
    miss_path = tables_dir / "missingness_input.csv"
    write_table(miss, miss_path)

    summary = summarize_groups(
        records,
        args.measure,
        group_cols,
        method=args.method,
        confidence=args.confidence,
        min_group_n=args.min_group_n,
        n_boot=args.n_boot,
        seed=args.seed,
    )
    summary_path = tables_dir / "group_summary.csv"
    write_table(summary, summary_path)

    inadequate = summary.loc[summary["adequate"].eq(False), group_cols + ["n", "reason"]]
    meta = run_metadata(
        input=str(args.input),
        nrows=args.nrows,
        measure=args.measure,
        group_cols=group_cols,
        ci_method=args.method,
        confidence=args.confidence,
        min_group_n=args.min_group_n,
        n_boot=args.n_boot if args.method == "bootstrap" else None,
        seed=args.seed,
        value_labels_applied=not args.no_labels,
        decisions=decisions,
        level_counts={col: level_counts(records[col].astype(str)) for col in group_cols},
        n_groups=int(len(summary)),
        groups_without_interval=inadequate.to_dict(orient="records"),
        outputs=[str(summary_path), str(miss_path)],
    )
    meta_path = logs_dir / "summary_run_metadata.json"
    write_json(meta_path, meta)

    print(f"Wrote {summary_path}")
    print(f"Wrote {miss_path}")
    print(f"Wrote {meta_path}")


if __name__ == "__main__":
    main()
