"""
Scenario cache files.

A cache file holds every configuration of one scenario:

    utf scenario, int32 configCount, (utf configName, ConfigurationRecord) x configCount
"""

import io
from pathlib import Path

from perf_regression_tracker.results.config_results import ConfigResults
from perf_regression_tracker.results.stream import (
    read_count,
    read_utf,
    write_int,
    write_utf,
)


def write_scenario_cache(path, scenario_name, configs):
    """Write the configurations of a scenario into a cache file."""
    for index, config in enumerate(configs):
        if config.id != index:
            raise ValueError(
                f"Configuration {config.name!r} has id {config.id}, expected {index}"
            )
    # Nothing reaches the file until the whole cache is serialized
    buffer = io.BytesIO()
    write_utf(buffer, scenario_name)
    write_int(buffer, len(configs))
    for config in configs:
        write_utf(buffer, config.name)
        config.write(buffer)
    with open(Path(path), "wb") as f:
        f.write(buffer.getvalue())


def read_scenario_cache(path, baseline_name=None, current_name=None, query=None):
    """
    Read a cache file. Returns (scenario_name, configs); the configurations
    are loaded but not updated.
    """
    with open(Path(path), "rb") as f:
        scenario_name = read_utf(f)
        configs = []
        for config_id in range(read_count(f, "configuration")):
            config = ConfigResults(
                config_id,
                read_utf(f),
                scenario_name=scenario_name,
                baseline_name=baseline_name,
                current_name=current_name,
                query=query,
            )
            config.read_data(f)
            configs.append(config)
    return scenario_name, configs
