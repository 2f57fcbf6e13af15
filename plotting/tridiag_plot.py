from __future__ import annotations
import argparse
import os
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd

from bench_common import default_benchmark_script, load_results, plot_metric, run_benchmark, save_figure


def _default_csv_path() -> str:
    here = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(here, "..", "output", "tridiag_results.csv")


def _default_plot_path() -> str:
    here = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(here, "..", "output", "plots", "tridiag.png")


def plot_tridiag_benchmark(df: pd.DataFrame, savepath: Optional[str] = None) -> None:
    """Time, reconstruction error and orthogonality against N, one line per dtype."""
    fig, axes = plt.subplots(1, 3, figsize=(24, 7))

    plot_metric(
        df,
        "avg_ms",
        x_field="n",
        group_by="dtype",
        metric_std="stddev_ms",
        xlabel="Matrix Size (N)",
        ylabel="Time (ms)",
        title="Tridiagonalization time",
        logy=True,
        ax=axes[0],
    )
    plot_metric(
        df,
        "reconstruction",
        x_field="n",
        group_by="dtype",
        xlabel="Matrix Size (N)",
        ylabel=r"$\|QTQ^H - A\| / (N\|A\|)$",
        title="Reconstruction error",
        logy=True,
        ax=axes[1],
    )
    plot_metric(
        df,
        "orthogonality",
        x_field="n",
        group_by="dtype",
        xlabel="Matrix Size (N)",
        ylabel=r"$\|Q^HQ - I\| / N$",
        title="Loss of orthogonality",
        logy=True,
        ax=axes[2],
    )

    target_path = savepath or _default_plot_path()
    save_figure(fig, target_path)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the tridiagonalization benchmark and plot results")
    parser.add_argument("--run", action="store_true", help="run benchmark before plotting")
    parser.add_argument("--bench-script", default=default_benchmark_script(), help="path to run_tridiag_benchmark.py")
    parser.add_argument("--csv", default=_default_csv_path(), help="CSV output path")
    parser.add_argument("--output", default=None, help="optional path to save the plot (default: output/plots/tridiag.png)")
    parser.add_argument("--sizes", default="16,32,64,128,256", help="comma-separated sizes passed to the benchmark")
    parser.add_argument("--dtypes", default="double,complex<double>", help="comma-separated dtypes passed to the benchmark")
    args = parser.parse_args()

    if args.run:
        run_benchmark(args.bench_script, args.csv, [f"--sizes={args.sizes}", f"--dtypes={args.dtypes}"])

    df = load_results(args.csv)
    plot_tridiag_benchmark(df, args.output)


if __name__ == "__main__":
    main()
