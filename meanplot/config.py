from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DIR = Path(__file__).resolve().parent

RESOURCES_DIR = PACKAGE_DIR / "resources"
EXAMPLE_DATASET = RESOURCES_DIR / "mtcars.csv"

OUTPUTS_DIR = PROJECT_ROOT / "outputs"
FIGURES_DIR = OUTPUTS_DIR / "figures"
TABLES_DIR = OUTPUTS_DIR / "tables"
LOGS_DIR = OUTPUTS_DIR / "logs"

SUMMARY_TABLE = TABLES_DIR / "group_summary.csv"

# Example analysis: horsepower by cylinder count, one line per transmission type.
MEASURE_COL = "hp"
X_COL = "cyl"
GROUP_COL = "am"
GROUP_COLS = [X_COL, GROUP_COL]

# Readable labels for coded grouping values (applied before summarizing).
VALUE_LABELS = {
    "am": {0: "automatic", 1: "manual"},
}

# Interval defaults
CONFIDENCE = 0.95
Z_95 = 1.96  # fixed critical value for 95% normal intervals
CI_METHODS = ["normal", "t", "bootstrap"]
CI_METHOD = "normal"
MIN_GROUP_N = 2
BOOTSTRAP_N = 2000
SEED = 2026

# Figures
DODGE_WIDTH = 0.1
FIGURE_DPI = 300
FIGURE_SIZE = (7, 5)
NA_LABEL = "<NA>"
