from __future__ import annotations
import stylesheet
import os
import subprocess
import sys
from typing import Iterable, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib import rcParams as rc


_MARKERS = stylesheet.Markers
_MARKERS_SCALES = stylesheet.MarkerScales


def _ensure_dir_for(path: str) -> str:
    directory = os.path.dirname(os.path.abspath(path))
    if directory:
        os.makedirs(directory, exist_ok=True)
    return path


def default_benchmark_script() -> str:
    here = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(here, "..", "scripts", "run_tridiag_benchmark.py")


def run_benchmark(script: str, csv_path: str, bench_args: Iterable[str]) -> None:
    """Run the benchmark script with the current interpreter, writing results to csv_path."""
    _ensure_dir_for(csv_path)
    cmd = [sys.executable, script, f"--output={csv_path}", *bench_args]
    print(f"Running benchmark: {' '.join(cmd)}")
    subprocess.run(cmd, check=True)


def load_results(csv_path: str) -> pd.DataFrame:
    if not os.path.isfile(csv_path):
        raise FileNotFoundError(f"CSV not found: {csv_path}")
    return pd.read_csv(csv_path)


def save_figure(fig: plt.Figure, path: str) -> None:
    _ensure_dir_for(path)
    fig.savefig(path)
    print(f"Saved plot to {path}")


def plot_metric(
    df: pd.DataFrame,
    metric: str,
    *,
    x_field: str,
    group_by: str,
    metric_std: Optional[str] = None,
    group_filter: Optional[Sequence] = None,
    label_fmt: str = "{group}",
    xlabel: str = "X",
    ylabel: Optional[str] = None,
    title: Optional[str] = None,
    logy: bool = False,
    ax: Optional[plt.Axes] = None,
) -> Tuple[plt.Figure, plt.Axes]:
    if df.empty:
        raise ValueError("No data to plot")

    if group_filter is not None:
        df = df[df[group_by].isin(group_filter)]
    if df.empty:
        raise ValueError("No data after filtering")
    if metric not in df.columns:
        raise ValueError(f"Missing column '{metric}'. Available: {list(df.columns)}")

    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    for idx, (group_value, g) in enumerate(df.groupby(group_by)):
        g_sorted = g.sort_values(x_field)
        yerr = g_sorted[metric_std] if metric_std and metric_std in g_sorted else None
        ax.plot(
            g_sorted[x_field],
            g_sorted[metric],
            marker=_MARKERS[idx % len(_MARKERS)],
            markersize=_MARKERS_SCALES[idx % len(_MARKERS_SCALES)]*rc["lines.markersize"],
            linestyle=":",
            label=label_fmt.format(group=group_value),
        )
        if yerr is not None:
            ax.fill_between(
                g_sorted[x_field],
                g_sorted[metric] - yerr,
                g_sorted[metric] + yerr,
                alpha=0.15,
            )

    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel or metric)
    ax.set_xscale("log", base=2)
    if logy:
        ax.set_yscale("log")
    if title:
        ax.set_title(title)
    ax.legend()
    ax.grid(True)
    return fig, ax
