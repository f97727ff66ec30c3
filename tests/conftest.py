import pytest

from perf_regression_tracker.dimension_registry import CPU_TIME, ELAPSED_PROCESS
from perf_regression_tracker.results import ConfigResults


def make_config(build_values, dim_id=ELAPSED_PROCESS, **kwargs):
    """Build a ConfigResults from {build name: [samples]} in insertion order."""
    config_id = kwargs.pop("config_id", 0)
    name = kwargs.pop("name", "linux")
    config = ConfigResults(config_id, name, **kwargs)
    for build_name, samples in build_values.items():
        for step, value in enumerate(samples):
            config.set_value(build_name, dim_id, step, value)
    return config


class RecordingQuery:
    """Query service remembering the calls it received."""

    def __init__(self):
        self.calls = []

    def query_scenario_failures(self, scenario_name, config_name, current, baseline):
        self.calls.append(("failures", scenario_name, config_name, current.name, baseline.name))
        current.failure = "regressed"

    def query_scenario_summaries(self, scenario_name, config_name, current, baseline):
        self.calls.append(("summaries", scenario_name, config_name, current.name, baseline.name))
        baseline.summary_kind = 0


@pytest.fixture
def recording_query():
    return RecordingQuery()


@pytest.fixture
def nightly_config():
    config = make_config(
        {
            "N20040101": [100, 102, 98],
            "N20040102": [110, 108, 112],
            "I20040103": [120, 118, 122],
        },
        baseline_name="N20040101",
        current_name="I20040103",
    )
    for build_name in config.build_names():
        config.set_value(build_name, CPU_TIME, 0, 50)
    return config


@pytest.fixture
def config_factory():
    return make_config
