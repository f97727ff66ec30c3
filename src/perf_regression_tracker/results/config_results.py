"""
Results of all builds for one configuration (a performance test box).

A ConfigResults owns the BuildResults of every build the configuration was
run on, in chronological order. After update() it knows the baseline and the
current build and can compute the deviation between them.
"""

import math
from typing import Iterator, List, Optional, Sequence, Tuple

from perf_regression_tracker.dimension_registry import get_registry
from perf_regression_tracker.results.build_results import BuildResults, NIGHTLY_PREFIX
from perf_regression_tracker.results.stream import (
    ResultsFormatError,
    read_count,
    read_int,
    write_int,
)


def _divide(numerator, denominator):
    """Float division following IEEE 754 rules instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _round_half_up(value):
    if not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


class ConfigResults:
    """Build results of one configuration, with baseline and current selection."""

    def __init__(
        self,
        config_id: int,
        name: str,
        scenario_name: Optional[str] = None,
        baseline_name: Optional[str] = None,
        current_name: Optional[str] = None,
        query=None,
    ):
        self.id = config_id
        self.name = name
        # Only the scenario name is kept, the scenario owns this object
        self.scenario_name = scenario_name
        self.baseline_name = baseline_name
        self.current_name = current_name
        self.query = query
        self.builds: List[BuildResults] = []
        self.baseline: Optional[BuildResults] = None
        self.current: Optional[BuildResults] = None
        self.baselined = False
        self.valid = False

    def __repr__(self):
        return f"ConfigResults({self.id}, {self.name!r}, builds={len(self.builds)})"

    def __len__(self):
        return len(self.builds)

    def __iter__(self) -> Iterator[BuildResults]:
        return iter(self.builds)

    def size(self) -> int:
        return len(self.builds)

    def build_names(self) -> List[str]:
        return [build.get_name() for build in self.builds]

    def get_build(self, name: str) -> Optional[BuildResults]:
        for build in self.builds:
            if build.get_name() == name:
                return build
        return None

    def get_baseline_build_results(self) -> Optional[BuildResults]:
        return self.baseline

    def get_baseline_build_name(self) -> Optional[str]:
        return self.baseline.get_name() if self.baseline is not None else None

    def get_current_build_results(self) -> Optional[BuildResults]:
        return self.current

    def get_current_build_name(self) -> Optional[str]:
        return self.current.get_name() if self.current is not None else None

    def is_baselined(self) -> bool:
        """Whether the configured baseline build was found by name."""
        return self.baselined

    def is_valid(self) -> bool:
        """Whether the configured current build was found by name."""
        return self.valid

    def get_builds(self, build_pattern: Optional[str]) -> List[BuildResults]:
        """Builds whose name matches the pattern, in chronological order."""
        return [build for build in self.builds if build.match(build_pattern)]

    def get_builds_matching_prefixes(self, prefixes: Sequence[str]) -> List[BuildResults]:
        """
        Builds whose name starts with one of the prefixes.

        A build matching several prefixes is listed once per matching prefix.
        """
        builds = []
        for build in self.builds:
            for prefix in prefixes:
                if build.get_name().startswith(prefix):
                    builds.append(build)
        return builds

    def get_current_build_deviation(self) -> Tuple[float, float]:
        """
        Deviation of the current build from the baseline on the default
        dimension, with its standard error.

        Returns (deviation, stderr). Both are NaN when the deviation is
        undefined; stderr alone is NaN when either build has a single sample.

        Requires update() to have selected the builds; raises RuntimeError
        before that or when the configuration has no build.
        """
        if self.baseline is None or self.current is None:
            raise RuntimeError(
                f"No baseline and current builds selected for {self.name!r}, call update() first"
            )
        dim_id = get_registry().default_dimension().id
        baseline_value = self.baseline.get_value(dim_id)
        current_value = self.current.get_value(dim_id)
        deviation = _divide(current_value - baseline_value, baseline_value)
        if math.isnan(deviation):
            return math.nan, math.nan
        if self.baseline.get_count(dim_id) == 1 or self.current.get_count(dim_id) == 1:
            return deviation, math.nan
        baseline_error = self.baseline.get_error(dim_id)
        current_error = self.current.get_error(dim_id)
        if math.isnan(baseline_error):
            stderr = _divide(current_error, baseline_value)
        else:
            stderr = _divide(math.hypot(baseline_error, current_error), baseline_value)
        return deviation, stderr

    def get_statistics(
        self, prefixes: Optional[Sequence[str]] = None, dim_id: Optional[int] = None
    ) -> Tuple[int, float, float, float]:
        """
        Statistics of a dimension across builds.

        Returns (count, mean, stddev, coefficient of variation in percent,
        rounded to two decimals). All builds are used when prefixes is empty.
        """
        if dim_id is None:
            dim_id = get_registry().default_dimension().id
        if prefixes:
            builds = self.get_builds_matching_prefixes(prefixes)
        else:
            builds = self.builds
        values = [build.get_value(dim_id) for build in builds]
        count = len(values)
        if count == 0:
            return 0, math.nan, math.nan, math.nan
        mean = sum(values) / count
        if count < 2:
            stddev = math.nan
        else:
            stddev = math.sqrt(sum((v - mean) * (v - mean) for v in values) / (count - 1))
        variation = _round_half_up(_divide(stddev, mean) * 100 * 100) / 100
        return count, mean, stddev, variation

    def last_nightly_build_names(self, n: int) -> List[str]:
        """The n last nightly build names preceding the current build, most recent first."""
        if self.current is not None:
            start = self.builds.index(self.current) - 1
        else:
            start = len(self.builds) - 2
        labels = []
        for i in range(start, -1, -1):
            if len(labels) >= n:
                break
            name = self.builds[i].get_name()
            if name.startswith(NIGHTLY_PREFIX):
                labels.append(name)
        return labels

    def set_value(self, build_name: str, dim_id: int, step: int, value: float):
        """Record a sample, creating the build on first sighting."""
        build = self.get_build(build_name)
        if build is None:
            build = BuildResults(build_name)
            self.builds.append(build)
        build.set_value(dim_id, step, value)

    def update(self):
        """
        Clean the builds values, select the baseline and current builds and
        let the query service annotate them.

        Builds are selected by exact name; when no build has the configured
        name the first build is used as baseline and the last one as current.
        """
        self.baseline = None
        self.current = None
        self.baselined = False
        self.valid = False
        for build in self.builds:
            if build.values:
                build.clean_values()
            if build.get_name() == self.baseline_name:
                self.baseline = build
                self.baselined = True
            elif build.get_name() == self.current_name:
                self.current = build
                self.valid = True
        if not self.builds:
            return
        if self.baseline is None:
            self.baseline = self.builds[0]
        if self.current is None:
            self.current = self.builds[-1]

        if self.query is not None:
            self.query.query_scenario_failures(
                self.scenario_name, self.name, self.current, self.baseline
            )
            self.query.query_scenario_summaries(
                self.scenario_name, self.name, self.current, self.baseline
            )

    def read_data(self, stream):
        """Read all builds of this configuration from a binary stream."""
        config_id = read_int(stream)
        if config_id != self.id:
            raise ResultsFormatError(
                f"Configuration id mismatch: expected {self.id}, got {config_id}"
            )
        builds = [BuildResults.read(stream) for _ in range(read_count(stream, "build"))]
        self.builds.extend(builds)

    def write(self, stream):
        """Write all builds of this configuration into a binary stream."""
        write_int(stream, self.id)
        write_int(stream, len(self.builds))
        for build in self.builds:
            build.write(stream)
