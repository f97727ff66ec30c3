"""
Performance results tree.

This module contains the per configuration results engine:
- build_results: Samples of one build, with mean, count and standard error
- config_results: Builds of one configuration, baseline/current selection,
  deviation and statistics
- query: Services annotating baseline and current builds
- cache: Scenario cache files
- stream: Binary cache primitives
"""

from perf_regression_tracker.results.build_results import BuildResults
from perf_regression_tracker.results.config_results import ConfigResults
from perf_regression_tracker.results.query import JsonResultsQuery, ResultsQuery
from perf_regression_tracker.results.stream import ResultsFormatError

__all__ = [
    "BuildResults",
    "ConfigResults",
    "JsonResultsQuery",
    "ResultsQuery",
    "ResultsFormatError",
]
