#!/usr/bin/env python3
"""
Compare the current build against the baseline for every configuration of a
scenario results cache.

Usage:
    compare-builds startup.cache --baseline R-3.0-200406251208 --current I20040103
    compare-builds startup.cache --format markdown --prefixes N I
    compare-builds startup.cache --annotations failures.json --threshold 10
"""

import os
import sys
import json
import math
import argparse
from pathlib import Path
from tabulate import tabulate

from perf_regression_tracker.dimension_registry import get_registry
from perf_regression_tracker.results import JsonResultsQuery, ResultsFormatError
from perf_regression_tracker.results.cache import read_scenario_cache


def _number(value):
    """JSON friendly number: NaN and infinities become None."""
    if value is None or not math.isfinite(value):
        return None
    return value


def _pct(value):
    if value is None or math.isnan(value):
        return "-"
    return f"{value * 100:+.1f}%"


def summarize_config(config, dim_id, prefixes=None, threshold=None, nightlies=3):
    """Collect the figures reported for one updated configuration."""
    deviation, stderr = config.get_current_build_deviation()
    count, mean, stddev, variation = config.get_statistics(prefixes, dim_id)
    current = config.get_current_build_results()
    regression = (
        threshold is not None
        and not math.isnan(deviation)
        and deviation * 100 > threshold
    )
    return {
        "config": config.name,
        "baseline": config.get_baseline_build_name(),
        "current": config.get_current_build_name(),
        "baselined": config.is_baselined(),
        "valid": config.is_valid(),
        "deviation": deviation,
        "stderr": stderr,
        "regression": regression,
        "failure": current.failure,
        "comment": current.comment,
        "statistics": {
            "count": count,
            "mean": mean,
            "stddev": stddev,
            "variation": variation,
        },
        "last_nightly_builds": config.last_nightly_build_names(nightlies),
    }


def display_table(rows, tablefmt="grid"):
    """Display configuration summaries as a table."""

    headers = [
        "Config",
        "Baseline",
        "Current",
        "Deviation",
        "Std Error",
        "Builds",
        "Mean",
        "Std Dev",
        "CV (%)",
        "Failure",
        "Last Nightlies",
    ]
    table = []

    for row in rows:
        stats = row["statistics"]
        baseline = row["baseline"] if row["baselined"] else f"{row['baseline']} (fallback)"
        current = row["current"] if row["valid"] else f"{row['current']} (fallback)"
        deviation = _pct(row["deviation"])
        if row["regression"]:
            deviation += " !"
        table.append(
            [
                row["config"],
                baseline,
                current,
                deviation,
                _pct(row["stderr"]),
                stats["count"],
                f"{stats['mean']:.2f}",
                f"{stats['stddev']:.2f}",
                stats["variation"],
                row["failure"] or "-",
                ", ".join(row["last_nightly_builds"]) or "-",
            ]
        )

    print(tabulate(table, headers=headers, tablefmt=tablefmt))


def display_json(scenario_name, rows):
    report = {
        "scenario": scenario_name,
        "configs": [
            {
                **row,
                "deviation": _number(row["deviation"]),
                "stderr": _number(row["stderr"]),
                "statistics": {
                    key: _number(value) for key, value in row["statistics"].items()
                },
            }
            for row in rows
        ],
    }
    print(json.dumps(report, indent=2))


def main():
    parser = argparse.ArgumentParser(
        description="Compare current and baseline builds from a results cache"
    )
    parser.add_argument("cache", help="Scenario results cache file")
    parser.add_argument(
        "--baseline",
        default=os.environ.get("PERF_BASELINE_BUILD"),
        help="Baseline build name (default: $PERF_BASELINE_BUILD, else first build)",
    )
    parser.add_argument(
        "--current",
        default=os.environ.get("PERF_CURRENT_BUILD"),
        help="Current build name (default: $PERF_CURRENT_BUILD, else last build)",
    )
    parser.add_argument(
        "--annotations", default=None,
        help="JSON file with failures, comments and summaries per configuration"
    )
    parser.add_argument(
        "--dimension", default=None,
        help="Dimension for build statistics (default: the default dimension)"
    )
    parser.add_argument(
        "--prefixes", nargs="*", default=None,
        help="Build name prefixes used for statistics (default: all builds)"
    )
    parser.add_argument(
        "--threshold", type=float, default=None,
        help="Flag configurations whose deviation exceeds this percentage"
    )
    parser.add_argument(
        "--nightlies", type=int, default=3,
        help="Number of last nightly builds to list"
    )
    parser.add_argument(
        "--format",
        default="table",
        choices=["table", "json", "markdown"],
        help="Output format",
    )

    args = parser.parse_args()

    cache_path = Path(args.cache)
    if not cache_path.exists():
        print(f"Error: File not found: {cache_path}", file=sys.stderr)
        return 1

    registry = get_registry()
    try:
        dimension = (
            registry.find(args.dimension) if args.dimension else registry.default_dimension()
        )
    except KeyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    query = None
    if args.annotations:
        annotations_path = Path(args.annotations)
        if not annotations_path.exists():
            print(f"Error: Annotations file not found: {annotations_path}", file=sys.stderr)
            return 1
        query = JsonResultsQuery.load(annotations_path)

    try:
        scenario_name, configs = read_scenario_cache(
            cache_path, args.baseline, args.current, query
        )
    except ResultsFormatError as e:
        print(f"Error loading {cache_path}: {e}", file=sys.stderr)
        return 1

    rows = []
    for config in configs:
        if not len(config):
            continue
        config.update()
        rows.append(
            summarize_config(
                config, dimension.id, args.prefixes, args.threshold, args.nightlies
            )
        )

    if args.format == "json":
        display_json(scenario_name, rows)
        return 0

    print(f"\n=== {scenario_name} ({dimension.name}, {len(rows)} configurations) ===\n")
    display_table(rows, "github" if args.format == "markdown" else "grid")

    regressions = [row["config"] for row in rows if row["regression"]]
    if regressions:
        print(f"\nDeviation above {args.threshold}%: {', '.join(regressions)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
