#!/usr/bin/env python3
"""
Benchmark Householder tridiagonalization over a set of sizes and dtypes.

For every (n, dtype) the script times ``Tridiagonalization.compute`` on a
seeded random symmetric/Hermitian matrix, checks the decomposition and
writes one CSV row with time, effective GFLOP/s (model=4/3*n^3), the
relative reconstruction error and the loss of orthogonality of Q.
"""

from __future__ import annotations

import argparse
import csv
import os
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import List

import numpy as np

from tridiagonalization import Tridiagonalization


DTYPES = {
    "float": np.float32,
    "double": np.float64,
    "complex<float>": np.complex64,
    "complex<double>": np.complex128,
}


@dataclass
class Measurement:
    n: int
    dtype: str
    reps: int
    avg_ms: float
    stddev_ms: float
    gflops: float
    reconstruction: float
    orthogonality: float


def parse_args():
    parser = argparse.ArgumentParser(description="Run tridiagonalization benchmarks")
    parser.add_argument("--sizes", "-s", type=str, default="16,32,64,128,256",
                        help="Comma-separated matrix sizes (default: 16,32,64,128,256)")
    parser.add_argument("--dtypes", "-t", type=str, default="double,complex<double>",
                        help=f"Comma-separated dtypes from {sorted(DTYPES)} (default: double,complex<double>)")
    parser.add_argument("--reps", "-r", type=int, default=3,
                        help="Timed repetitions per case (default: 3)")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--output", "-o", type=str, default="",
                        help="CSV output file path (default: tridiag_results_YYYY-MM-DD_HH-MM-SS.csv)")
    return parser.parse_args()


def _parse_sizes(value: str) -> List[int]:
    sizes = [int(s) for s in value.split(",") if s.strip()]
    if not sizes or any(n < 1 for n in sizes):
        raise ValueError(f"--sizes must be positive integers, got '{value}'")
    return sizes


def _parse_dtypes(value: str) -> List[str]:
    names = [s.strip() for s in value.split(",") if s.strip()]
    for name in names:
        if name not in DTYPES:
            raise ValueError(f"Invalid dtype '{name}'. Must be one of: {', '.join(sorted(DTYPES))}")
    return names


def random_hermitian(n: int, dtype, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((n, n))
    if np.issubdtype(np.dtype(dtype), np.complexfloating):
        A = A + 1j * rng.standard_normal((n, n))
    A = 0.5 * (A + A.conj().T)
    return A.astype(dtype)


def eff_gflops_sytrd(n: int, ms: float) -> float:
    flops = (4.0 / 3.0) * (float(n) ** 3)
    return flops / (ms * 1e-3) / 1e9


def measure(n: int, dtype_name: str, reps: int, seed: int) -> Measurement:
    A = random_hermitian(n, DTYPES[dtype_name], seed)
    tri = Tridiagonalization(size=n)

    # warm once
    tri.compute(A)
    times = []
    for _ in range(reps):
        t0 = time.perf_counter()
        tri.compute(A)
        times.append((time.perf_counter() - t0) * 1e3)

    Q = tri.matrix_q().materialize()
    T = tri.matrix_t()
    norm_a = max(float(np.linalg.norm(A)), np.finfo(float).tiny)
    reconstruction = float(np.linalg.norm(Q @ T @ Q.conj().T - A)) / (n * norm_a)
    orthogonality = float(np.linalg.norm(Q.conj().T @ Q - np.eye(n))) / n

    avg_ms = float(np.mean(times))
    return Measurement(
        n=n,
        dtype=dtype_name,
        reps=reps,
        avg_ms=avg_ms,
        stddev_ms=float(np.std(times)),
        gflops=eff_gflops_sytrd(n, avg_ms),
        reconstruction=reconstruction,
        orthogonality=orthogonality,
    )


def main() -> int:
    args = parse_args()
    sizes = _parse_sizes(args.sizes)
    dtype_names = _parse_dtypes(args.dtypes)

    if not args.output:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        args.output = f"tridiag_results_{timestamp}.csv"
    output_dir = os.path.dirname(os.path.abspath(args.output))
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    print("n,dtype,avg_ms,GFLOP/s(model=4/3*n^3),reconstruction,orthogonality")
    rows = []
    for dtype_name in dtype_names:
        for n in sizes:
            m = measure(n, dtype_name, args.reps, args.seed + n)
            rows.append(m)
            print(f"{m.n},{m.dtype},{m.avg_ms:.3f},{m.gflops:.3f},{m.reconstruction:.3e},{m.orthogonality:.3e}")

    with open(args.output, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(asdict(rows[0]).keys()))
        writer.writeheader()
        for m in rows:
            writer.writerow(asdict(m))
    print(f"Results saved to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
