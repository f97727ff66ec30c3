"""
Results of one build for one configuration.

Samples are grouped by dimension. The value of a dimension is the mean of
its samples, the count is the number of samples and the error is the
standard error of that mean.
"""

import math
import re
import fnmatch
from typing import Dict, List, Optional, Tuple

from perf_regression_tracker.results.stream import (
    read_count,
    read_double,
    read_int,
    read_utf,
    write_double,
    write_int,
    write_utf,
)

# Build names starting with this marker are nightly builds
NIGHTLY_PREFIX = "N"


def _compile_pattern(pattern):
    # Anchored at the start, open at the end: "N2004" is a prefix match
    # and "*0101" a substring match.
    return re.compile(fnmatch.translate(pattern + "*"), re.DOTALL)


class BuildResults:
    """All samples recorded for one (configuration, build) pair."""

    def __init__(self, name: str):
        self.name = name
        self.values: Dict[int, List[Tuple[int, float]]] = {}
        # Annotations filled in by the results query service
        self.failure: Optional[str] = None
        self.comment: Optional[str] = None
        self.summary_kind: int = -1

    def __repr__(self):
        return f"BuildResults({self.name!r}, dimensions={self.dimensions()})"

    def get_name(self) -> str:
        return self.name

    def set_value(self, dim_id: int, step: int, value: float):
        """Append a sample for the given dimension."""
        self.values.setdefault(dim_id, []).append((step, float(value)))

    def dimensions(self) -> List[int]:
        """Ids of the dimensions holding samples, ascending."""
        return sorted(dim_id for dim_id, samples in self.values.items() if samples)

    def get_samples(self, dim_id: int) -> List[float]:
        return [value for _, value in self.values.get(dim_id, [])]

    def get_count(self, dim_id: int) -> int:
        return len(self.values.get(dim_id, []))

    def get_value(self, dim_id: int) -> float:
        samples = self.get_samples(dim_id)
        if not samples:
            return math.nan
        return sum(samples) / len(samples)

    def get_stddev(self, dim_id: int) -> float:
        """Sample standard deviation, NaN with fewer than two samples."""
        samples = self.get_samples(dim_id)
        count = len(samples)
        if count < 2:
            return math.nan
        mean = sum(samples) / count
        return math.sqrt(sum((v - mean) * (v - mean) for v in samples) / (count - 1))

    def get_error(self, dim_id: int) -> float:
        """Standard error of the mean, NaN with fewer than two samples."""
        count = self.get_count(dim_id)
        if count < 2:
            return math.nan
        return self.get_stddev(dim_id) / math.sqrt(count)

    def clean_values(self):
        """Drop non finite samples and dimensions left without samples."""
        cleaned = {}
        for dim_id, samples in self.values.items():
            kept = [(step, v) for step, v in samples if math.isfinite(v)]
            if kept:
                cleaned[dim_id] = kept
        self.values = cleaned

    def match(self, pattern: Optional[str]) -> bool:
        """Whether the build name matches a glob-like pattern."""
        if not pattern:
            return True
        return _compile_pattern(pattern).match(self.name) is not None

    def is_nightly(self) -> bool:
        return self.name.startswith(NIGHTLY_PREFIX)

    def write(self, stream):
        """Write this build record to a binary stream."""
        write_utf(stream, self.name)
        dim_ids = self.dimensions()
        write_int(stream, len(dim_ids))
        for dim_id in dim_ids:
            samples = self.values[dim_id]
            write_int(stream, dim_id)
            write_int(stream, len(samples))
            for step, value in samples:
                write_int(stream, step)
                write_double(stream, value)

    @classmethod
    def read(cls, stream) -> "BuildResults":
        """Read a build record written by write()."""
        build = cls(read_utf(stream))
        for _ in range(read_count(stream, "dimension")):
            dim_id = read_int(stream)
            for _ in range(read_count(stream, "sample")):
                step = read_int(stream)
                build.set_value(dim_id, step, read_double(stream))
        return build
