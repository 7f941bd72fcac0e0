"""
Benchmark harness tests: deterministic fixtures and result shape.
"""

from benchmarks.tagmap_microbench import (
    ScenarioConfig,
    build_rule_suite,
    build_synthetic_map,
    evaluate_threshold_warnings,
    percentile,
    run_scenario,
)
from tagmap.core import tags_satisfy


class TestSyntheticMap:
    """Tests for synthetic container generation."""

    def test_same_seed_same_entries(self):
        first = build_synthetic_map(entry_count=50, tags_per_entry=4, seed=3)
        second = build_synthetic_map(entry_count=50, tags_per_entry=4, seed=3)
        assert first.entries == second.entries
        assert list(first) == list(second)

    def test_sorted_walk(self):
        tag_map = build_synthetic_map(entry_count=20, tags_per_entry=3, seed=1, key_order="sorted")
        assert list(tag_map) == list(range(20))


class TestRunScenario:
    """Tests for scenario execution."""

    def test_result_shape_and_counts(self):
        config = ScenarioConfig(
            entry_count=200,
            tags_per_entry=5,
            key_order="insertion",
            warmup_runs=0,
            measured_runs=2,
            seed=11,
        )
        result = run_scenario(config)
        tag_map = build_synthetic_map(200, 5, 11)

        assert result["scenario"]["entries"] == 200
        for name, rule in build_rule_suite().items():
            expected = sum(1 for tags in tag_map.entries.values() if tags_satisfy(tags, rule))
            assert result["rules"][name]["matched"] == expected
            assert result["rules"][name]["depth"] == rule.depth()

    def test_threshold_warnings(self):
        result = {
            "scenario": {"entries": 10},
            "rules": {
                "tags": {
                    "latency_ms": {"mean": 5.0},
                    "peak_memory_kib": {"p95": 2.0},
                },
            },
        }
        assert evaluate_threshold_warnings(result, 10.0, 4.0) == []
        assert len(evaluate_threshold_warnings(result, 1.0, 1.0)) == 2


def test_percentile_interpolates():
    assert percentile([], 0.95) == 0.0
    assert percentile([3.0], 0.5) == 3.0
    assert percentile([1.0, 2.0, 3.0, 4.0], 0.5) == 2.5
