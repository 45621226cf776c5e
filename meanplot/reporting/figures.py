from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from meanplot.config import DODGE_WIDTH, FIGURE_DPI, FIGURE_SIZE
from meanplot.data.coding import group_sort_key, stringify_value
from meanplot.data.validate import assert_required_columns


def save_figure(fig, path: Path, dpi: int = FIGURE_DPI) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)


def _levels(series: pd.Series) -> List[str]:
    return sorted(series.map(stringify_value).unique().tolist(), key=group_sort_key)


def _prepare(summary: pd.DataFrame, cols: List[str]) -> pd.DataFrame:
    assert_required_columns(summary, cols + ["mean", "ci_half_width"])
    if len(set(cols)) != len(cols):
        raise ValueError(f"Chart columns must be distinct, got {cols}.")
    out = summary.copy()
    for col in cols:
        out[col] = out[col].map(stringify_value)
    return out


def _error_half_widths(frame: pd.DataFrame) -> np.ndarray:
    # Groups without an interval are drawn as a bare point.
    return np.nan_to_num(frame["ci_half_width"].to_numpy(dtype=float), nan=0.0)


def _new_axes(ax):
    if ax is None:
        fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    else:
        fig = ax.figure
    return fig, ax


def _ci_label(summary: pd.DataFrame) -> str:
    if "confidence" in summary.columns and summary["confidence"].notna().any():
        pct = 100.0 * float(summary["confidence"].dropna().iloc[0])
        return f"{pct:g}% CI"
    return "CI"


def plot_group_means(
    summary: pd.DataFrame,
    x: str,
    group: str,
    measure: Optional[str] = None,
    *,
    dodge: float = DODGE_WIDTH,
    ax=None,
    title: Optional[str] = None,
) -> Tuple[plt.Figure, plt.Axes]:
    """Interaction chart: one line per `group` level across the `x` categories.

    Each mean is a marker with a symmetric error bar of +/- ci_half_width. A
    positive `dodge` shifts the groups apart horizontally so that error bars
    sharing an x category do not overlap.
    """

    data = _prepare(summary, [x, group])
    x_levels = _levels(data[x])
    g_levels = _levels(data[group])
    positions = {lvl: float(i) for i, lvl in enumerate(x_levels)}
    center = (len(g_levels) - 1) / 2.0

    fig, ax = _new_axes(ax)
    for j, g in enumerate(g_levels):
        sub = data.loc[data[group] == g]
        sub = sub.iloc[sorted(range(len(sub)), key=lambda k: group_sort_key(sub[x].iloc[k]))]
        offset = (j - center) * dodge
        xs = np.array([positions[v] for v in sub[x]]) + offset
        ax.errorbar(
            xs,
            sub["mean"].to_numpy(dtype=float),
            yerr=_error_half_widths(sub),
            fmt="-o",
            capsize=3,
            markersize=5,
            label=g,
        )

    ax.set_xticks(range(len(x_levels)))
    ax.set_xticklabels(x_levels)
    ax.set_xlabel(x)
    ax.set_ylabel(f"Mean {measure}" if measure else "Mean")
    ax.set_title(title or f"Mean {measure or 'value'} by {x} and {group} ({_ci_label(summary)})")
    ax.legend(title=group)
    fig.tight_layout()
    return fig, ax


def plot_ungrouped_means(
    summary: pd.DataFrame,
    x: str,
    measure: Optional[str] = None,
    *,
    group: Optional[str] = None,
    ax=None,
    title: Optional[str] = None,
) -> Tuple[plt.Figure, plt.Axes]:
    """The same means with the grouping aesthetic left out.

    Every point goes through a single line in x order, so the line zig-zags
    between subgroups that share an x category. Kept to show why the group
    column has to be mapped.
    """

    cols = [x] + ([group] if group else [])
    data = _prepare(summary, cols)
    x_levels = _levels(data[x])
    positions = {lvl: float(i) for i, lvl in enumerate(x_levels)}

    order = sorted(range(len(data)), key=lambda k: tuple(group_sort_key(data[c].iloc[k]) for c in cols))
    data = data.iloc[order]

    fig, ax = _new_axes(ax)
    ax.errorbar(
        np.array([positions[v] for v in data[x]]),
        data["mean"].to_numpy(dtype=float),
        yerr=_error_half_widths(data),
        fmt="-o",
        capsize=3,
        markersize=5,
    )
    ax.set_xticks(range(len(x_levels)))
    ax.set_xticklabels(x_levels)
    ax.set_xlabel(x)
    ax.set_ylabel(f"Mean {measure}" if measure else "Mean")
    ax.set_title(title or f"Mean {measure or 'value'} by {x}, group not mapped")
    fig.tight_layout()
    return fig, ax


def plot_group_bars(
    summary: pd.DataFrame,
    x: str,
    group: str,
    measure: Optional[str] = None,
    *,
    ax=None,
    title: Optional[str] = None,
) -> Tuple[plt.Figure, plt.Axes]:
    """Grouped bar chart of the means with +/- ci_half_width error bars."""

    data = _prepare(summary, [x, group])
    x_levels = _levels(data[x])
    g_levels = _levels(data[group])
    positions = {lvl: float(i) for i, lvl in enumerate(x_levels)}
    width = 0.8 / max(len(g_levels), 1)
    center = (len(g_levels) - 1) / 2.0

    fig, ax = _new_axes(ax)
    for j, g in enumerate(g_levels):
        sub = data.loc[data[group] == g]
        xs = np.array([positions[v] for v in sub[x]]) + (j - center) * width
        ax.bar(
            xs,
            sub["mean"].to_numpy(dtype=float),
            width,
            yerr=_error_half_widths(sub),
            capsize=3,
            label=g,
        )

    ax.set_xticks(range(len(x_levels)))
    ax.set_xticklabels(x_levels)
    ax.set_xlabel(x)
    ax.set_ylabel(f"Mean {measure}" if measure else "Mean")
    ax.set_title(title or f"Mean {measure or 'value'} by {x} and {group} ({_ci_label(summary)})")
    ax.legend(title=group)
    fig.tight_layout()
    return fig, ax
