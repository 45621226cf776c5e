import argparse
import sys

from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from meanplot.config import EXAMPLE_DATASET, LOGS_DIR  # noqa: E402
from meanplot.utils.logging import run_metadata, write_json  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Record interpreter, platform and package versions.")
    parser.add_argument("--logs-dir", type=Path, default=LOGS_DIR, help="Directory for environment_check.json.")
    args = parser.parse_args()

    info = run_metadata(example_dataset=str(EXAMPLE_DATASET), example_dataset_exists=EXAMPLE_DATASET.exists())
    out_path = args.logs_dir / "environment_check.json"
    write_json(out_path, info)
    print(f"Wrote {out_path}")


if __name__ == "__main__":
    main()
