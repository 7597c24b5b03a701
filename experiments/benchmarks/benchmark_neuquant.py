"""Benchmark: NeuQuant contest pruning and indexed lookup.

Compares execution time and result between:
1. Training with the partial-distance filter (default)
2. Training with every distance computed in full
3. Indexed nearest-color search vs. a linear scan over the colormap
"""

import sys
import time
from pathlib import Path

import numpy as np

# Add paths for imports
sys.path.insert(0, str(Path(__file__).parents[2] / "python"))
sys.path.insert(0, str(Path(__file__).parents[2] / "data" / "images"))
sys.path.insert(0, str(Path(__file__).parents[2] / "algorithms" / "neuquant" / "python"))

from model import NeuQuant, NeuQuantParams
from neuquant.core.utils import find_nearest_color
from generate_image import generate_gradient
from surface import image_to_surface


def run_training(
    surface: np.ndarray, netsize: int, use_pruning: bool
) -> tuple[float, NeuQuant]:
    """Train once and return (time, model)."""
    params = NeuQuantParams(netsize=netsize, use_pruning=use_pruning)
    nq = NeuQuant(params)

    start_time = time.perf_counter()
    nq.fit(surface)
    elapsed = time.perf_counter() - start_time

    return elapsed, nq


def run_lookup(nq: NeuQuant, queries: np.ndarray) -> tuple[float, float]:
    """Time indexed search and linear scan over the same queries."""
    cmap = nq.colormap()

    start_time = time.perf_counter()
    for r, g, b, a in queries.tolist():
        nq.nearest((r, g, b, a))
    indexed = time.perf_counter() - start_time

    start_time = time.perf_counter()
    for r, g, b, a in queries.tolist():
        find_nearest_color(np.array([b, g, r, a]), cmap)
    linear = time.perf_counter() - start_time

    return indexed, linear


def run_benchmark(
    netsize_list: list[int],
    width: int = 96,
    height: int = 64,
    n_queries: int = 5000,
    seed: int = 42,
) -> dict:
    """Run benchmark for different netsize values."""
    print(f"Generating {width}x{height} gradient image...")
    surface = image_to_surface(generate_gradient(width=width, height=height))
    rng = np.random.default_rng(seed)
    queries = rng.integers(0, 1 << 16, size=(n_queries, 4))

    results = {
        "netsize": [],
        "pruned": [],
        "full": [],
        "identical": [],
        "indexed": [],
        "linear": [],
    }

    for netsize in netsize_list:
        print(f"\n{'='*60}")
        print(f"netsize={netsize}")
        print("=" * 60)

        results["netsize"].append(netsize)

        print("Running with pruning...", end=" ", flush=True)
        t_pruned, pruned = run_training(surface, netsize, use_pruning=True)
        results["pruned"].append(t_pruned)
        print(f"{t_pruned:.3f}s")

        print("Running without pruning...", end=" ", flush=True)
        t_full, full = run_training(surface, netsize, use_pruning=False)
        results["full"].append(t_full)
        print(f"{t_full:.3f}s")

        identical = np.array_equal(pruned.colormap(), full.colormap())
        results["identical"].append(identical)
        print(f"Identical palettes: {identical}")

        print(f"Running {n_queries} lookups...", end=" ", flush=True)
        t_indexed, t_linear = run_lookup(pruned, queries)
        results["indexed"].append(t_indexed)
        results["linear"].append(t_linear)
        print(f"indexed {t_indexed:.3f}s, linear {t_linear:.3f}s")

    return results


def print_summary(results: dict) -> None:
    """Print benchmark summary table."""
    print("\n" + "=" * 80)
    print("BENCHMARK SUMMARY")
    print("=" * 80)

    print(f"{'netsize':>8} | {'Pruned':>8} | {'Full':>8} | {'Same':>5} | {'Indexed':>8} | {'Linear':>8}")
    print("-" * 60)

    for i, netsize in enumerate(results["netsize"]):
        print(
            f"{netsize:>8} | {results['pruned'][i]:>8.3f} | {results['full'][i]:>8.3f} | "
            f"{str(results['identical'][i]):>5} | {results['indexed'][i]:>8.3f} | "
            f"{results['linear'][i]:>8.3f}"
        )


if __name__ == "__main__":
    results = run_benchmark([32, 64, 128, 256])
    print_summary(results)
