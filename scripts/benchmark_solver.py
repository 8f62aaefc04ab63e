#!/usr/bin/env python3
"""Benchmark iterative-first dispatch against the dense solver on k-NN affinity matrices."""

import argparse
import sys
import time
from pathlib import Path

import numpy as np
from joblib import Parallel, delayed
from tqdm import tqdm

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from spectral_eigen.matrices import knn_affinity_matrix
from spectral_eigen.solver import EigenSolver


def run_trial(n, k, trial, n_neighbors, options):
    """Solve one random affinity matrix with both policies. Returns a dict or None."""
    rng = np.random.RandomState(trial)
    W = knn_affinity_matrix(rng.randn(n, 3), n_neighbors=n_neighbors)

    auto = EigenSolver().solve(W, k, **options)
    dense = EigenSolver().solve(W, k, **dict(options, method="dense"))
    if not auto.ok or not dense.ok:
        failure = auto if not auto.ok else dense
        print(f"  Trial {trial} (N={n}) failed: {failure.message}")
        return None

    return {
        'n': n,
        'fell_back': auto.report.fell_back,
        'auto_time': auto.report.elapsed,
        'dense_time': dense.report.elapsed,
        'max_abs_err': float(np.max(np.abs(auto.eigenvalues - dense.eigenvalues))),
    }


def summarize(results):
    """Group trial results by N into summary rows."""
    rows = []
    for n in sorted({r['n'] for r in results}):
        group = [r for r in results if r['n'] == n]
        rows.append({
            'n': n,
            'trials': len(group),
            'fallback_rate': float(np.mean([r['fell_back'] for r in group])),
            'auto_time': float(np.mean([r['auto_time'] for r in group])),
            'dense_time': float(np.mean([r['dense_time'] for r in group])),
            'max_abs_err': float(np.max([r['max_abs_err'] for r in group])),
        })
    return rows


def write_summary_table(rows, path, k):
    """Write a markdown table of the benchmark rows."""
    with open(path, 'w') as f:
        f.write("# Eigensolver Benchmark\n\n")
        f.write(f"Top k = {k} eigenpairs of Gaussian k-NN affinity matrices\n\n")
        f.write("| N | Trials | Fallback Rate | Auto (s) | Dense (s) | Max Abs Err |\n")
        f.write("|--:|-------:|--------------:|---------:|----------:|----------:|\n")
        for r in rows:
            f.write(f"| {r['n']} | {r['trials']} | {r['fallback_rate']:.2f} "
                    f"| {r['auto_time']:.4f} | {r['dense_time']:.4f} | {r['max_abs_err']:.2e} |\n")


def main():
    parser = argparse.ArgumentParser(description="Eigensolver dispatch benchmark")
    parser.add_argument('--sizes', type=int, nargs='+', default=[200, 500, 1000, 2000])
    parser.add_argument('--k', type=int, default=10, help='Eigenpairs per solve')
    parser.add_argument('--trials', type=int, default=5, help='Matrices per size')
    parser.add_argument('--n-neighbors', type=int, default=12)
    parser.add_argument('--tolerance', type=float, default=None)
    parser.add_argument('--max-iter', type=int, default=None)
    parser.add_argument('--subspace-factor', type=int, default=None)
    parser.add_argument('--n-jobs', type=int, default=1,
                        help='Parallel workers (1=sequential)')
    parser.add_argument('--output', type=str, default=None,
                        help='Optional markdown summary path')
    args = parser.parse_args()

    options = {
        'tolerance': args.tolerance,
        'max_iter': args.max_iter,
        'subspace_factor': args.subspace_factor,
    }
    jobs = [(n, trial) for n in args.sizes for trial in range(args.trials)]

    start = time.perf_counter()
    if args.n_jobs == 1:
        results = [run_trial(n, args.k, trial, args.n_neighbors, options)
                   for n, trial in tqdm(jobs, desc="trials")]
    else:
        results = Parallel(n_jobs=args.n_jobs, backend='loky')(
            delayed(run_trial)(n, args.k, trial, args.n_neighbors, options)
            for n, trial in tqdm(jobs, desc="trials")
        )
    results = [r for r in results if r is not None]
    rows = summarize(results)

    print(f"\n=== k={args.k}, {len(results)}/{len(jobs)} trials in "
          f"{time.perf_counter() - start:.1f}s ===")
    for r in rows:
        speedup = r['dense_time'] / r['auto_time'] if r['auto_time'] > 0 else float('nan')
        print(f"  N={r['n']:>6d}  auto {r['auto_time']:.4f}s  dense {r['dense_time']:.4f}s  "
              f"speedup {speedup:5.1f}x  fallback {r['fallback_rate']:.2f}  "
              f"max|err| {r['max_abs_err']:.2e}")

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        write_summary_table(rows, out, args.k)
        print(f"\nSummary: {out}")


if __name__ == '__main__':
    main()
