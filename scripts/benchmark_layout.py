#!/usr/bin/env python3
"""
Benchmark compute_layout on generated workflow graphs.

Usage:
    python scripts/benchmark_layout.py [--sizes N,...] [--directions DIR,...]

Examples:
    python scripts/benchmark_layout.py
    python scripts/benchmark_layout.py --sizes 50,200 --directions TB,LR
    python scripts/benchmark_layout.py --iterations 0 --output results.json
"""

from __future__ import annotations

import argparse
import json
import random
import time
from typing import Any

from workflow_layout import compute_layout, count_crossings


def generate_workflow(num_nodes: int, seed: int = 42) -> tuple[list[dict], list[dict]]:
    """
    Generate a workflow-like graph.

    Mostly forward transitions between nearby steps, a few send-back
    transitions (cycles) and some steps without transitions.
    """
    rng = random.Random(seed)
    nodes = [{"id": f"step_{i}", "label": f"Step {i}"} for i in range(num_nodes)]
    edges = []
    connected = max(1, int(num_nodes * 0.9))
    for i in range(1, connected):
        source = rng.randrange(max(0, i - 4), i)
        edges.append({"source": f"step_{source}", "target": f"step_{i}"})
    for _ in range(num_nodes // 10):
        a = rng.randrange(connected)
        b = rng.randrange(connected)
        edges.append({"source": f"step_{max(a, b)}", "target": f"step_{min(a, b)}"})
    return nodes, edges


def benchmark_layout(nodes: list[dict], edges: list[dict], **options: Any) -> dict[str, Any]:
    """
    Benchmark a single layout computation.

    Returns:
        Dict with timing and result info
    """
    start = time.perf_counter()
    result = compute_layout(nodes, edges, **options)
    elapsed = time.perf_counter() - start

    layers: dict[int, list[Any]] = {}
    for node in sorted(result.nodes, key=lambda n: (n.rank, n.order)):
        layers.setdefault(node.rank, []).append(node.id)
    forward = [(e.source, e.target) for e in result.edges if not e.feedback]

    return {
        "time_seconds": elapsed,
        "num_nodes": len(nodes),
        "num_edges": len(edges),
        "direction": result.direction.value,
        "layers": len(layers),
        "feedback_edges": sum(1 for e in result.edges if e.feedback),
        "crossings": count_crossings([layers[r] for r in sorted(layers)], forward),
        "width": result.width,
        "height": result.height,
    }


def run_benchmarks(
    sizes: list[int],
    directions: list[str],
    iterations: int = 24,
    seed: int = 42,
) -> list[dict]:
    """Run benchmarks for every size and direction."""
    results = []

    print(f"\nBenchmarking {len(sizes)} graph sizes in {len(directions)} directions")
    print(f"Crossing iterations: {iterations}, seed: {seed}")
    print("=" * 80)

    for size in sizes:
        nodes, edges = generate_workflow(size, seed)
        print(f"\nworkflow_{size}: {len(nodes)} nodes, {len(edges)} edges")
        print("-" * 60)

        for direction in directions:
            result = benchmark_layout(
                nodes, edges, direction=direction, crossing_iterations=iterations
            )
            print(
                f"  {direction:4s}: {result['time_seconds']:.4f}s  "
                f"layers={result['layers']:<4d} feedback={result['feedback_edges']:<4d} "
                f"crossings={result['crossings']}"
            )
            results.append({"graph": f"workflow_{size}", **result})

    # Summary
    print("\n" + "=" * 80)
    print("SUMMARY (times in seconds)")
    print("=" * 80)

    print(f"{'Graph':<25s}", end="")
    for direction in directions:
        print(f"{direction:>10s}", end="")
    print()
    print("-" * (25 + 10 * len(directions)))

    for size in sizes:
        graph = f"workflow_{size}"
        print(f"{graph:<25s}", end="")
        for direction in directions:
            matching = [r for r in results if r["graph"] == graph and r["direction"] == direction]
            print(f"{matching[0]['time_seconds']:>10.4f}", end="")
        print()

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark workflow layout")
    parser.add_argument("--sizes", default="10,50,200,1000", help="Comma-separated node counts")
    parser.add_argument("--directions", default="TB,LR", help="Comma-separated directions")
    parser.add_argument("--iterations", type=int, default=24, help="Crossing minimization sweeps")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for graph generation")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    results = run_benchmarks(
        sizes=[int(s) for s in args.sizes.split(",")],
        directions=[d.strip().upper() for d in args.directions.split(",")],
        iterations=args.iterations,
        seed=args.seed,
    )

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
