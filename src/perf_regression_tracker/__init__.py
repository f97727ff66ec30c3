"""
Perf Regression Tracker - performance results history and regression checks.

Structure:
- results/: Per configuration build results, statistics and binary cache I/O
- cli/: Command line tools (build_cache, compare_builds)
- dimension_registry: Registry of supported measurement dimensions
- monitor: Operating system counter collection
"""

__version__ = "0.1.0"
