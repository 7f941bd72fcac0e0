#!/usr/bin/env python3
"""
TagMap Micro-benchmark Harness.

Benchmarks `TagMap.matching()` under synthetic workloads using
deterministic entry and rule generation.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import datetime, timezone
import json
import math
from pathlib import Path
import random
import statistics
import sys
import time
import tracemalloc
from typing import Any, Optional

# Ensure repository root is importable when executing this file directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tagmap.core import AnyRule, AnyTag, MatchRule, NotRules, NotTags, Rules, TagMap, Tags


TAG_POOL = tuple(f"tag_{index:02d}" for index in range(40))


@dataclass(frozen=True)
class ScenarioConfig:
    """Benchmark scenario configuration."""

    entry_count: int
    tags_per_entry: int
    key_order: str
    warmup_runs: int
    measured_runs: int
    seed: int


def build_synthetic_map(
    entry_count: int,
    tags_per_entry: int,
    seed: int,
    key_order: str = "insertion",
) -> TagMap[int, str]:
    """
    Build a deterministic container with random tags per key.

    Keys are inserted in shuffled order so that sorted and insertion walks
    differ.
    """
    rng = random.Random(seed)
    keys = list(range(entry_count))
    rng.shuffle(keys)

    tag_map: TagMap[int, str] = TagMap(key_order=key_order)
    for key in keys:
        tag_map.insert(key, rng.sample(TAG_POOL, k=min(tags_per_entry, len(TAG_POOL))))
    return tag_map


def build_rule_suite() -> dict[str, MatchRule]:
    """Fixed rules covering every variant and a few nesting depths."""
    return {
        "tags": Tags(["tag_00", "tag_01"]),
        "not_tags": NotTags(["tag_02", "tag_03", "tag_04"]),
        "any_tag": AnyTag(["tag_05", "tag_06", "tag_07"]),
        "rules": Rules([Tags(["tag_08"]), NotTags(["tag_09"])]),
        "not_rules": NotRules([Tags(["tag_10"]), AnyTag(["tag_11", "tag_12"])]),
        "nested": AnyRule([
            Rules([Tags(["tag_13"]), NotTags(["tag_14"])]),
            Rules([AnyTag(["tag_15", "tag_16"]), NotRules([Tags(["tag_17", "tag_18"])])]),
        ]),
    }


def percentile(values: list[float], percentile_rank: float) -> float:
    """Compute percentile with linear interpolation."""
    if not values:
        return 0.0
    ordered = sorted(values)
    if len(ordered) == 1:
        return ordered[0]

    position = (len(ordered) - 1) * percentile_rank
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return ordered[lower]

    fraction = position - lower
    return ordered[lower] + (ordered[upper] - ordered[lower]) * fraction


def _summarize(values: list[float]) -> dict[str, float]:
    return {
        "min": min(values),
        "max": max(values),
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "p95": percentile(values, 0.95),
    }


def run_scenario(config: ScenarioConfig) -> dict[str, Any]:
    """Run one benchmark scenario and return structured metrics."""
    tag_map = build_synthetic_map(
        entry_count=config.entry_count,
        tags_per_entry=config.tags_per_entry,
        seed=config.seed,
        key_order=config.key_order,
    )
    rules = build_rule_suite()

    per_rule: dict[str, Any] = {}
    for name, rule in rules.items():
        for _ in range(config.warmup_runs):
            tag_map.count_matching(rule)

        latencies_ms: list[float] = []
        peak_memory_kib: list[float] = []
        matched = 0

        for _ in range(config.measured_runs):
            tracemalloc.start()
            started = time.perf_counter()
            matched = tag_map.count_matching(rule)
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            _, peak_bytes = tracemalloc.get_traced_memory()
            tracemalloc.stop()

            latencies_ms.append(elapsed_ms)
            peak_memory_kib.append(peak_bytes / 1024.0)

        per_rule[name] = {
            "depth": rule.depth(),
            "matched": matched,
            "latency_ms": _summarize(latencies_ms),
            "peak_memory_kib": _summarize(peak_memory_kib),
        }

    return {
        "scenario": {
            "entries": config.entry_count,
            "tags_per_entry": config.tags_per_entry,
            "key_order": config.key_order,
            "seed": config.seed,
            "warmup_runs": config.warmup_runs,
            "measured_runs": config.measured_runs,
        },
        "rules": per_rule,
    }


def print_human_summary(result: dict[str, Any]) -> None:
    """Print compact human-readable summary for CLI runs."""
    scenario = result["scenario"]

    print(
        f"[Scenario] entries={scenario['entries']}, tags/entry={scenario['tags_per_entry']}, "
        f"order={scenario['key_order']}, runs={scenario['measured_runs']}"
    )
    for name, metrics in result["rules"].items():
        latency = metrics["latency_ms"]
        memory = metrics["peak_memory_kib"]
        print(
            f"  {name:<10} matched={metrics['matched']:<7} "
            f"mean={latency['mean']:.2f}ms p95={latency['p95']:.2f}ms "
            f"peak={memory['p95']:.1f}KiB"
        )


def evaluate_threshold_warnings(
    result: dict[str, Any],
    warn_mean_latency_ms: Optional[float],
    warn_peak_memory_kib: Optional[float],
) -> list[str]:
    """Evaluate optional warning thresholds for one scenario."""
    warnings: list[str] = []
    entries = result["scenario"]["entries"]

    for name, metrics in result["rules"].items():
        latency = metrics["latency_ms"]
        memory = metrics["peak_memory_kib"]

        if warn_mean_latency_ms is not None and latency["mean"] > warn_mean_latency_ms:
            warnings.append(
                f"entries={entries} rule={name}: mean latency {latency['mean']:.2f} ms "
                f"exceeds {warn_mean_latency_ms:.2f} ms"
            )

        if warn_peak_memory_kib is not None and memory["p95"] > warn_peak_memory_kib:
            warnings.append(
                f"entries={entries} rule={name}: p95 peak memory {memory['p95']:.1f} KiB "
                f"exceeds {warn_peak_memory_kib:.1f} KiB"
            )

    return warnings


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark TagMap rule matching.")
    parser.add_argument(
        "--entry-counts",
        nargs="+",
        type=int,
        default=[1000, 100000],
        help="Container sizes to benchmark.",
    )
    parser.add_argument(
        "--tags-per-entry",
        type=int,
        default=6,
        help="Tags stored per key.",
    )
    parser.add_argument(
        "--key-order",
        choices=("insertion", "sorted"),
        default="insertion",
        help="Walk order used by the container.",
    )
    parser.add_argument(
        "--warmup-runs",
        type=int,
        default=1,
        help="Warmup iterations per rule.",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=5,
        help="Measured iterations per rule.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=7,
        help="Random seed for deterministic fixture generation.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="",
        help="Optional path to write JSON results.",
    )
    parser.add_argument(
        "--warn-mean-latency-ms",
        type=float,
        default=None,
        help="Optional warning threshold for mean latency per rule.",
    )
    parser.add_argument(
        "--warn-peak-memory-kib",
        type=float,
        default=None,
        help="Optional warning threshold for p95 peak traced memory per rule.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when any warning threshold is exceeded.",
    )
    args = parser.parse_args()

    started_at = datetime.now(timezone.utc).isoformat()
    results: list[dict[str, Any]] = []
    warnings: list[str] = []

    for entry_count in args.entry_counts:
        scenario = ScenarioConfig(
            entry_count=entry_count,
            tags_per_entry=args.tags_per_entry,
            key_order=args.key_order,
            warmup_runs=args.warmup_runs,
            measured_runs=args.runs,
            seed=args.seed,
        )
        result = run_scenario(scenario)
        results.append(result)
        print_human_summary(result)
        warnings.extend(
            evaluate_threshold_warnings(
                result=result,
                warn_mean_latency_ms=args.warn_mean_latency_ms,
                warn_peak_memory_kib=args.warn_peak_memory_kib,
            )
        )

    if warnings:
        print("[Warnings]")
        for warning in warnings:
            print(f"  - {warning}")

    payload = {
        "benchmark": "tagmap_microbench",
        "started_at": started_at,
        "python": {
            "version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        },
        "thresholds": {
            "warn_mean_latency_ms": args.warn_mean_latency_ms,
            "warn_peak_memory_kib": args.warn_peak_memory_kib,
            "strict": args.strict,
        },
        "results": results,
        "warnings": warnings,
    }

    if args.output:
        with open(args.output, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        print(f"[Output] wrote JSON results to {args.output}")
    else:
        print(json.dumps(payload, indent=2))

    if args.strict and warnings:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
