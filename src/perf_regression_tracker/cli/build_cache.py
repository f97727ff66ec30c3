#!/usr/bin/env python3
"""
Collect JSON sample files of one scenario into a binary results cache.

Each sample file describes one run of a scenario on a configuration:

    {"scenario": "...", "config": "...", "build": "N20040101", "date": "2004-01-01",
     "samples": [{"dimension": "elapsed", "step": 0, "value": 1234}]}

Usage:
    build-cache --scenario startup --results-dir output/results -o startup.cache
"""

import sys
import json
import argparse
from pathlib import Path

from perf_regression_tracker.dimension_registry import get_registry
from perf_regression_tracker.results import ConfigResults
from perf_regression_tracker.results.cache import write_scenario_cache
from perf_regression_tracker.results.stream import INT_MAX, INT_MIN


def resolve_dimension(dimension):
    """Map a dimension short name (or numeric id) to its id."""
    if isinstance(dimension, int):
        return dimension
    if isinstance(dimension, str) and dimension.isdigit():
        return int(dimension)
    return get_registry().find(dimension).id


def collect_configs(runs):
    """
    Group runs into ConfigResults, in chronological order.

    Runs are ordered by date, then by their position in `runs`.
    """
    configs = {}
    ordered = sorted(enumerate(runs), key=lambda item: (item[1].get("date") or "", item[0]))
    for _, run in ordered:
        config_name = run["config"]
        config = configs.get(config_name)
        if config is None:
            config = ConfigResults(len(configs), config_name, run.get("scenario"))
            configs[config_name] = config
        for sample in run.get("samples", []):
            step = int(sample.get("step", 0))
            if not INT_MIN <= step <= INT_MAX:
                raise ValueError(f"Step out of range: {step}")
            config.set_value(
                run["build"],
                resolve_dimension(sample["dimension"]),
                step,
                float(sample["value"]),
            )
    return list(configs.values())


def main():
    parser = argparse.ArgumentParser(
        description="Collect performance sample files into a binary results cache"
    )
    parser.add_argument("--scenario", required=True, help="Scenario name")
    parser.add_argument(
        "--results-dir", required=True, help="Directory containing sample files"
    )
    parser.add_argument(
        "-o", "--output", help="Output cache file (default: <scenario>.cache)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()

    results_dir = Path(args.results_dir)

    if not results_dir.exists():
        print(f"Error: Results directory not found: {results_dir}", file=sys.stderr)
        return 1

    output_path = Path(args.output or f"{args.scenario}.cache")

    print(f"Collecting results for scenario: {args.scenario}")
    print(f"Results directory: {results_dir}")
    print(f"Output file: {output_path}")

    runs = []
    for json_file in sorted(results_dir.glob("**/*.json")):
        try:
            with open(json_file, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Warning: Failed to read {json_file}: {e}", file=sys.stderr)
            continue

        if data.get("scenario") != args.scenario:
            continue
        if "config" not in data or "build" not in data:
            print(
                f"Warning: Missing config or build in {json_file}", file=sys.stderr
            )
            continue

        runs.append(data)
        if args.verbose:
            print(f"  Processed: {data['config']} / {data['build']}")

    if not runs:
        print(f"Warning: No sample files found for {args.scenario}", file=sys.stderr)

    try:
        configs = collect_configs(runs)
    except (KeyError, ValueError, TypeError, OverflowError) as e:
        print(f"Error: Invalid sample: {e}", file=sys.stderr)
        return 1

    write_scenario_cache(output_path, args.scenario, configs)

    builds = sum(len(config) for config in configs)
    print(f"\nCollected {len(configs)} configurations, {builds} build results")
    print(f"Cache written to: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
